"""State owned by a single capture."""

from dataclasses import dataclass, field
from typing import Optional

from bibcapture.buffer import Buffer, BufferResolver
from bibcapture.collaborators import Notifier
from bibcapture.model.capture import CaptureContext, FieldStore
from bibcapture.model.feed import FeedEntry


@dataclass
class CaptureSession:
    """
    Everything one capture reads and mutates, passed by reference to every step.

    Nothing in here is shared between captures.
    """

    context: CaptureContext
    fields: FieldStore
    buffers: BufferResolver
    notifier: Notifier
    feed_entry: Optional[FeedEntry] = None
    # BibTeX returned by DOI resolution, used as-is in verbatim mode
    resolved_record: Optional[str] = None
    finished_by: Optional[str] = None
    executed_steps: list = field(default_factory=list)

    async def get_buffer(self) -> Buffer:
        return await self.buffers.get_buffer()

    async def get_text(self, encoding: str = "utf-8") -> str:
        buffer = await self.buffers.get_buffer()
        return buffer.text(encoding)

    def notify(self, message: str, severity: str = "info") -> None:
        self.notifier.notify(message, severity)

    @property
    def url(self) -> Optional[str]:
        return self.fields.get("url")
