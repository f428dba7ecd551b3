"""Pytest configuration and fixtures for bibcapture tests."""

from typing import Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from bibcapture.buffer import BufferResolver
from bibcapture.errors import FetchError
from bibcapture.model.capture import CaptureContext, FieldStore
from bibcapture.model.feed import FeedEntry
from bibcapture.session import CaptureSession


def make_fetcher(html: Optional[str] = None) -> AsyncMock:
    """Fetcher mock returning ``html`` or failing when it is None."""
    fetcher = AsyncMock()
    if html is None:
        fetcher.fetch.side_effect = FetchError("offline")
    else:
        fetcher.fetch.return_value = html.encode("utf-8")
    return fetcher


def make_session(link: str, html: Optional[str] = None, title: str = "", query: Optional[dict] = None,
                 fields: Optional[FieldStore] = None) -> CaptureSession:
    context = CaptureContext(link=link, title=title, query=query or {})
    fields = fields if fields is not None else FieldStore()
    reader = AsyncMock()
    reader.read.side_effect = FetchError("no local file")
    return CaptureSession(
        context=context,
        fields=fields,
        buffers=BufferResolver(context, reader, make_fetcher(html), fields),
        notifier=MagicMock(),
        feed_entry=FeedEntry.coerce(context.feed_entry),
    )


@pytest.fixture
def session_factory():
    return make_session


@pytest.fixture
def github_html() -> str:
    return """<html><head>
<title>GitHub - acme/foo: A tool</title>
<meta name="description" content="A tool">
</head><body>
<a href="/topics/python" class="topic-tag topic-tag-link">
  python
</a>
<a href="/topics/cli" class="topic-tag topic-tag-link">cli</a>
</body></html>"""


@pytest.fixture
def generic_html() -> str:
    return """<html><head>
<title>Example Page</title>
<meta name="author" content="Jane Doe">
</head><body><p>Hello</p></body></html>"""
