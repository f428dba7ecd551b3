"""Page content for the captured link."""

from dataclasses import dataclass
from typing import Optional

from bibcapture.collaborators import ContentReader, Fetcher
from bibcapture.errors import FetchError
from bibcapture.logging import get_logger
from bibcapture.model.capture import CaptureContext, FieldStore


@dataclass
class Buffer:
    """
    Raw page content owned by one capture.

    Content is kept as bytes; each consumer decodes it with the encoding it
    declares.
    """

    content: bytes
    source: str
    location: str
    released: bool = False

    def text(self, encoding: str = "utf-8") -> str:
        if self.released:
            raise FetchError(f"Buffer for {self.location} was already released")
        return self.content.decode(encoding, errors="replace")

    def release(self) -> None:
        self.content = b""
        self.released = True

    def __len__(self) -> int:
        return len(self.content)


class BufferResolver:
    """
    Obtain the page content of a capture through an ordered provider chain.

    1. local pre-fetched content named by the capture's ``html_path``
    2. network fetch of the (canonical if already known) URL

    The first non-empty result is cached for the rest of the capture.
    """

    def __init__(self, context: CaptureContext, reader: ContentReader, fetcher: Fetcher,
                 fields: Optional[FieldStore] = None):
        self.context = context
        self.reader = reader
        self.fetcher = fetcher
        self.fields = fields
        self.logger = get_logger(self.__class__.__name__)
        self._buffer: Optional[Buffer] = None

    @property
    def loaded(self) -> bool:
        return self._buffer is not None

    async def _from_file(self) -> Optional[Buffer]:
        path = self.context.html_path
        if not path:
            return None
        try:
            content = await self.reader.read(path)
        except FetchError as e:
            self.logger.warning(f"Local content unavailable: {str(e)}")
            return None
        if not content:
            return None
        return Buffer(content=content, source="file", location=str(path))

    async def _from_network(self) -> Optional[Buffer]:
        url = self.fields.get("url") if self.fields is not None else None
        url = url or self.context.link
        try:
            content = await self.fetcher.fetch(url)
        except FetchError as e:
            self.logger.warning(f"Network fetch failed: {str(e)}")
            return None
        if not content:
            return None
        return Buffer(content=content, source="network", location=url)

    async def get_buffer(self) -> Buffer:
        """Return the capture's content, fetching it on first use."""
        if self._buffer is not None:
            return self._buffer

        for provider in (self._from_file, self._from_network):
            buffer = await provider()
            if buffer is not None:
                self.logger.debug(f"Loaded {len(buffer)} bytes from {buffer.source}: {buffer.location}")
                self._buffer = buffer
                return buffer

        raise FetchError(f"No content could be retrieved for {self.context.link}")

    def release(self) -> None:
        """Release the cached content. Safe to call when nothing was loaded."""
        if self._buffer is not None:
            self._buffer.release()
            self.logger.debug(f"Released buffer for {self._buffer.location}")
        self._buffer = None
