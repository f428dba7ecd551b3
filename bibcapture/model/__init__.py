from bibcapture.model.capture import (
    PLACEHOLDER,
    BibRecord,
    CaptureContext,
    FieldStore,
    MatchReference,
    StepOutcome,
    StepStatus,
)
from bibcapture.model.feed import FeedEntry

__all__ = [
    "PLACEHOLDER",
    "BibRecord",
    "CaptureContext",
    "FeedEntry",
    "FieldStore",
    "MatchReference",
    "StepOutcome",
    "StepStatus",
]
