"""Turn captured web links into deduplicated BibTeX records."""

from bibcapture.model.capture import PLACEHOLDER, BibRecord, CaptureContext, FieldStore, MatchReference
from bibcapture.pipeline import CapturePipeline

__version__ = "0.1.0"

__all__ = [
    "PLACEHOLDER",
    "BibRecord",
    "CaptureContext",
    "CapturePipeline",
    "FieldStore",
    "MatchReference",
]
