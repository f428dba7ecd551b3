"""Tests for the default collaborator implementations."""

from unittest.mock import AsyncMock, patch

import pytest

from bibcapture.collaborators import (
    ContentReader,
    DoiOrgResolver,
    DoiResolver,
    Fetcher,
    FileReader,
    HttpFetcher,
    LoggerNotifier,
    Notifier,
)
from bibcapture.common.http_utils import get_doi_bibtex
from bibcapture.errors import DoiResolutionFailure, FetchError


def test_protocols():
    assert isinstance(HttpFetcher(), Fetcher)
    assert isinstance(FileReader(), ContentReader)
    assert isinstance(DoiOrgResolver(), DoiResolver)
    assert isinstance(LoggerNotifier(), Notifier)


class TestHttpFetcher:
    """Test cases for HttpFetcher."""

    @pytest.mark.asyncio
    async def test_fetch(self):
        with patch("bibcapture.collaborators.get_request", new=AsyncMock(return_value=b"<html>")) as get_request:
            content = await HttpFetcher(timeout=5, user_agent="agent").fetch("https://example.com")

        assert content == b"<html>"
        get_request.assert_awaited_once_with("https://example.com", headers={"User-Agent": "agent"}, timeout=5)

    @pytest.mark.asyncio
    async def test_fetch_failure(self):
        with patch("bibcapture.collaborators.get_request", new=AsyncMock(return_value=None)):
            with pytest.raises(FetchError):
                await HttpFetcher().fetch("https://example.com")


class TestFileReader:
    """Test cases for FileReader."""

    @pytest.mark.asyncio
    async def test_read(self, tmp_path):
        page = tmp_path / "page.html"
        page.write_bytes(b"<html>saved</html>")

        assert await FileReader().read(str(page)) == b"<html>saved</html>"

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        with pytest.raises(FetchError):
            await FileReader().read(str(tmp_path / "missing.html"))

    @pytest.mark.asyncio
    async def test_empty_file(self, tmp_path):
        page = tmp_path / "page.html"
        page.write_bytes(b"")

        with pytest.raises(FetchError):
            await FileReader().read(str(page))


class TestDoiResolution:
    """Test cases for DOI resolution over doi.org."""

    @pytest.mark.asyncio
    async def test_content_negotiation(self):
        body = b" @article{x,\n  title = {T}\n}\n"
        with patch("bibcapture.common.http_utils.get_request", new=AsyncMock(return_value=body)) as get_request:
            record = await get_doi_bibtex("10.1000/xyz", user_agent="agent")

        assert record == "@article{x,\n  title = {T}\n}"
        url = get_request.await_args[0][0]
        headers = get_request.await_args[1]["headers"]
        assert url == "https://doi.org/10.1000/xyz"
        assert headers["Accept"].startswith("application/x-bibtex")
        assert headers["User-Agent"] == "agent"

    @pytest.mark.asyncio
    async def test_not_bibtex(self):
        with patch("bibcapture.common.http_utils.get_request", new=AsyncMock(return_value=b"<html></html>")):
            assert await get_doi_bibtex("10.1000/xyz") is None

    @pytest.mark.asyncio
    async def test_resolver_failure(self):
        with patch("bibcapture.collaborators.get_doi_bibtex", new=AsyncMock(return_value=None)):
            with pytest.raises(DoiResolutionFailure) as exc_info:
                await DoiOrgResolver().resolve("10.1000/xyz")

        assert exc_info.value.doi == "10.1000/xyz"
        assert not exc_info.value.fatal


def test_logger_notifier():
    notifier = LoggerNotifier()
    with patch.object(notifier, "logger") as logger:
        notifier.notify("Duplicate found", "warning")
        notifier.notify("Something", "unknown")

    assert logger.log.call_args_list[0][0] == ("WARNING", "Duplicate found")
    assert logger.log.call_args_list[1][0] == ("INFO", "Something")
