"""
Interfaces the pipeline calls and their default implementations.

These are the only seams between the capture pipeline and the outside
world: fetching pages, reading pre-fetched content, resolving DOIs,
searching the persisted corpus and notifying the user.
"""

from pathlib import Path
from typing import List, Optional, Protocol, runtime_checkable

from bibcapture.common.http_utils import get_doi_bibtex, get_request
from bibcapture.enums import Severity
from bibcapture.errors import DoiResolutionFailure, FetchError
from bibcapture.logging import get_logger
from bibcapture.model.capture import MatchReference
from bibcapture.utils import read_file


@runtime_checkable
class Fetcher(Protocol):
    async def fetch(self, url: str) -> bytes: ...


@runtime_checkable
class ContentReader(Protocol):
    async def read(self, path: str) -> bytes: ...


@runtime_checkable
class DoiResolver(Protocol):
    async def resolve(self, doi: str) -> str: ...


@runtime_checkable
class Search(Protocol):
    async def search(self, pattern: str) -> List[MatchReference]: ...


@runtime_checkable
class Notifier(Protocol):
    def notify(self, message: str, severity: str = "info") -> None: ...


class HttpFetcher:
    """Fetch page content over HTTP with aiohttp."""

    def __init__(self, timeout: Optional[float] = None, user_agent: Optional[str] = None):
        self.timeout = timeout
        self.user_agent = user_agent

    async def fetch(self, url: str) -> bytes:
        headers = {"User-Agent": self.user_agent} if self.user_agent else {}
        body = await get_request(url, headers=headers, timeout=self.timeout)
        if not body:
            raise FetchError(f"Could not download {url}")
        return body


class FileReader:
    """Read pre-fetched page content from the local file system."""

    async def read(self, path: str) -> bytes:
        file_path = Path(path).expanduser()
        if not file_path.is_file():
            raise FetchError(f"Pre-fetched content not found: {file_path}")
        content = await read_file(file_path, 'rb')
        if not content:
            raise FetchError(f"Pre-fetched content is empty: {file_path}")
        return content


class DoiOrgResolver:
    """Resolve DOIs to BibTeX through doi.org content negotiation."""

    def __init__(self, timeout: Optional[float] = None, user_agent: Optional[str] = None):
        self.timeout = timeout
        self.user_agent = user_agent

    async def resolve(self, doi: str) -> str:
        record = await get_doi_bibtex(doi, timeout=self.timeout, user_agent=self.user_agent)
        if not record:
            raise DoiResolutionFailure(doi, "no BibTeX returned by doi.org")
        return record


class LoggerNotifier:
    """Report capture messages through the log."""

    _levels = {
        Severity.INFO.value: "INFO",
        Severity.WARNING.value: "WARNING",
        Severity.ERROR.value: "ERROR",
    }

    def __init__(self, name: str = "bibcapture"):
        self.logger = get_logger(name)

    def notify(self, message: str, severity: str = "info") -> None:
        self.logger.log(self._levels.get(severity, "INFO"), message)
