"""Error taxonomy for a capture.

Fatal errors abort the capture and propagate to the caller of
``CapturePipeline.process_capture``. Non-fatal ones are absorbed by the
step that detected them.
"""

from typing import List, Optional

from bibcapture.model.capture import MatchReference


class CaptureError(Exception):
    """Base class for every error raised while processing a capture."""

    fatal = True


class FetchError(CaptureError):
    """No page content could be obtained for the captured link."""


class ParseMiss(CaptureError):
    """All configured patterns for a field failed to match."""

    fatal = False

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        super().__init__(message or f"Could not extract '{field}' from page content")


class DoiResolutionFailure(CaptureError):
    """The external DOI lookup did not return a record."""

    fatal = False

    def __init__(self, doi: str, reason: str = ""):
        self.doi = doi
        self.reason = reason
        message = f"DOI resolution failed for {doi}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class KeyGenerationError(CaptureError):
    """Neither a DOI nor a URL is available to derive the record key."""


class DuplicateFound(CaptureError):
    """The persisted corpus already contains a record for this capture."""

    def __init__(self, matches: List[MatchReference], check: str = ""):
        self.matches = list(matches)
        self.check = check
        where = f" ({check})" if check else ""
        super().__init__(f"Duplicate record found{where}: {self.matches[0]}" if self.matches else "Duplicate record found")

    @property
    def first(self) -> Optional[MatchReference]:
        return self.matches[0] if self.matches else None
