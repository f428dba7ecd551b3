"""Tests for the site-specific extractors."""

import pytest

from bibcapture.model.capture import FieldStore
from bibcapture.steps.extraction.sites import (
    SITE_EXTRACTORS,
    ForgeExtractor,
    HabrExtractor,
    TelegramExtractor,
    YoutubeExtractor,
)

YOUTUBE_HTML = """<html><head>
<title>Great Talk - YouTube</title>
<meta name="title" content="Great Talk">
<meta itemprop="datePublished" content="2019-07-14">
</head><body><script>var data = {"ownerChannelName":"PyCon"};</script></body></html>"""

HABR_HTML = """<html><head>
<meta property="og:title" content="Разбор парсера">
<meta name="author" content="ivanov">
<meta property="article:published_time" content="2022-11-03T10:00:00.000Z">
<meta name="keywords" content="python, regex">
<title>Разбор парсера / Хабр</title>
</head></html>"""

TELEGRAM_HTML = """<html><head>
<meta property="og:title" content="Channel Name">
<meta property="og:description" content="First line of the post
second line">
</head><body><time datetime="2023-01-02T10:00:00+00:00">Jan 2</time></body></html>"""


def site_session(session_factory, link, html=None, **kwargs):
    session = session_factory(link, html=html, **kwargs)
    session.fields.set("url", link)
    return session


def test_registry():
    assert list(SITE_EXTRACTORS) == ["forge", "youtube", "habr", "telegram"]


class TestForgeExtractor:
    """Test cases for ForgeExtractor."""

    @pytest.mark.parametrize("url,expected", [
        ("https://github.com/acme/foo", "https://github.com/acme/foo"),
        ("https://github.com/acme/foo/", "https://github.com/acme/foo"),
        ("https://www.github.com/acme/foo.git", "https://github.com/acme/foo"),
        ("https://github.com/acme/foo/tree/main", "https://github.com/acme/foo"),
        ("https://gitlab.com/acme/foo/-/tree/main/", "https://gitlab.com/acme/foo"),
        ("https://github.com/acme/foo/blob/main/README.md", "https://github.com/acme/foo/blob/main/README.md"),
    ])
    def test_canonical_url(self, url, expected):
        extractor = ForgeExtractor()
        assert extractor.canonical_url(extractor.match(url)) == expected

    @pytest.mark.parametrize("url", [
        "https://github.com/topics/python",
        "https://github.com/acme",
        "https://example.com/acme/foo",
        None,
    ])
    def test_no_match(self, url):
        assert ForgeExtractor().match(url) is None

    @pytest.mark.asyncio
    async def test_repository(self, session_factory, github_html):
        session = site_session(session_factory, "https://github.com/acme/foo", github_html)

        outcome = await ForgeExtractor()(session)

        fields = session.fields
        assert not outcome.is_failed
        assert fields.get("url") == "https://github.com/acme/foo"
        assert fields.get("author") == "acme"
        assert fields.get("title") == "acme/foo: A tool"
        assert fields.get("keywords") == "python, cli"
        assert fields.is_placeholder("doi")
        assert fields.is_placeholder("year")

    @pytest.mark.asyncio
    async def test_title_fallbacks(self, session_factory):
        session = site_session(session_factory, "https://github.com/acme/foo", "<html></html>", title="Captured")

        await ForgeExtractor()(session)

        assert session.fields.get("title") == "Captured"
        assert not session.fields.is_defined("keywords")

        session = site_session(session_factory, "https://github.com/acme/foo", "<html></html>")
        await ForgeExtractor()(session)

        assert session.fields.get("title") == "acme/foo"

    @pytest.mark.asyncio
    async def test_defined_fields_kept(self, session_factory, github_html):
        fields = FieldStore({"author": "Acme Corp", "title": "Foo", "keywords": "tools", "year": "2020"})
        session = session_factory("https://github.com/acme/foo", html=github_html, fields=fields)
        fields.set("url", "https://github.com/acme/foo")

        await ForgeExtractor()(session)

        assert fields.get("author") == "Acme Corp"
        assert fields.get("title") == "Foo"
        assert fields.get("year") == "2020"
        assert not session.buffers.loaded

    @pytest.mark.asyncio
    async def test_other_sites_untouched(self, session_factory):
        session = site_session(session_factory, "https://example.com/page")

        await ForgeExtractor()(session)

        assert not session.fields.is_defined("doi")


class TestYoutubeExtractor:
    """Test cases for YoutubeExtractor."""

    @pytest.mark.parametrize("url", [
        "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        "https://youtube.com/watch?feature=share&v=dQw4w9WgXcQ",
        "https://www.youtube.com/shorts/dQw4w9WgXcQ",
        "https://youtu.be/dQw4w9WgXcQ",
    ])
    @pytest.mark.asyncio
    async def test_canonical_url(self, session_factory, url):
        session = site_session(session_factory, url, YOUTUBE_HTML)

        await YoutubeExtractor()(session)

        assert session.fields.get("url") == "https://www.youtube.com/watch?v=dQw4w9WgXcQ"

    @pytest.mark.asyncio
    async def test_fields(self, session_factory):
        session = site_session(session_factory, "https://youtu.be/dQw4w9WgXcQ", YOUTUBE_HTML)

        await YoutubeExtractor()(session)

        fields = session.fields
        assert fields.get("howpublished") == "YouTube"
        assert fields.get("type") == "video"
        assert fields.get("author") == "PyCon"
        assert fields.get("title") == "Great Talk"
        assert fields.get("year") == "2019"
        assert fields.is_placeholder("doi")

    @pytest.mark.asyncio
    async def test_title_from_page_title(self, session_factory):
        html = "<html><head><title>Only Title - YouTube</title></head></html>"
        session = site_session(session_factory, "https://youtu.be/dQw4w9WgXcQ", html)

        await YoutubeExtractor()(session)

        assert session.fields.get("title") == "Only Title"
        assert not session.fields.is_defined("author")


class TestHabrExtractor:
    """Test cases for HabrExtractor."""

    @pytest.mark.parametrize("url,expected", [
        ("https://habr.com/ru/post/123456/", "https://habr.com/ru/articles/123456/"),
        ("https://habr.com/en/articles/123456", "https://habr.com/en/articles/123456/"),
        ("https://habr.com/company/acme/blog/123456/", "https://habr.com/ru/articles/123456/"),
        ("https://habr.com/ru/companies/acme/articles/123456/", "https://habr.com/ru/articles/123456/"),
    ])
    @pytest.mark.asyncio
    async def test_canonical_url(self, session_factory, url, expected):
        session = site_session(session_factory, url, HABR_HTML)

        await HabrExtractor()(session)

        assert session.fields.get("url") == expected

    @pytest.mark.asyncio
    async def test_fields(self, session_factory):
        session = site_session(session_factory, "https://habr.com/ru/articles/123456/", HABR_HTML)

        await HabrExtractor()(session)

        fields = session.fields
        assert fields.get("type") == "article"
        assert fields.get("author") == "ivanov"
        assert fields.get("title") == "Разбор парсера"
        assert fields.get("year") == "2022"
        assert fields.get("keywords") == "python, regex"


class TestTelegramExtractor:
    """Test cases for TelegramExtractor."""

    @pytest.mark.asyncio
    async def test_fields(self, session_factory):
        session = site_session(session_factory, "https://t.me/s/somechannel/42", TELEGRAM_HTML)

        await TelegramExtractor()(session)

        fields = session.fields
        assert fields.get("url") == "https://t.me/somechannel/42"
        assert fields.get("howpublished") == "Telegram"
        assert fields.get("author") == "Channel Name"
        assert fields.get("title") == "First line of the post second line"
        assert fields.get("year") == "2023"

    @pytest.mark.asyncio
    async def test_fallbacks(self, session_factory):
        session = site_session(session_factory, "https://telegram.me/somechannel/42", "<html></html>")

        await TelegramExtractor()(session)

        assert session.fields.get("author") == "somechannel"
        assert session.fields.get("title") == "somechannel post 42"
        assert not session.fields.is_defined("year")

    def test_long_description_is_truncated(self):
        title = TelegramExtractor._title_from_description("word " * 40)

        assert title.endswith("...")
        assert len(title) <= 83
