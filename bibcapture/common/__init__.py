"""Common utilities for bibcapture."""

from . import http_utils
from . import regex_patterns

__all__ = ["http_utils", "regex_patterns"]
