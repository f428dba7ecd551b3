"""Core enums for bibcapture."""

from enum import Enum


class HashAlgorithm(Enum):
    """Supported hash algorithms for key generation."""
    MD5 = "md5"
    SHA1 = "sha1"
    SHA256 = "sha256"


class DoiRecordMode(Enum):
    """How a record returned by DOI resolution is turned into output."""
    VERBATIM = "verbatim"
    REFORMAT = "reformat"


class SearchBackend(Enum):
    """Duplicate search backends."""
    INDEX = "index"
    RIPGREP = "ripgrep"


class Severity(Enum):
    """Notification severities."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
