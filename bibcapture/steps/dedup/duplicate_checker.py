import re
from typing import List, Optional

from bibcapture.collaborators import Search
from bibcapture.errors import DuplicateFound
from bibcapture.logging import get_logger
from bibcapture.model.capture import MatchReference
from bibcapture.session import CaptureSession

# characters that may continue a key or a URL; a match must not be followed
# (or preceded) by one of them, so a value never matches as a prefix
KEY_CHARS = r"\w-"
URL_CHARS = r"\w/.?#&=%~+:@-"


def bounded_pattern(value: str, chars: str) -> str:
    """Pattern matching ``value`` as a whole token, usable by re and ripgrep."""
    return rf"(^|[^{chars}]){re.escape(value)}([^{chars}]|$)"


class DuplicateCheck:
    """A single check against the corpus."""

    name = "check"
    chars = KEY_CHARS

    def value(self, session: CaptureSession) -> Optional[str]:
        raise NotImplementedError

    def pattern(self, value: str) -> str:
        return bounded_pattern(value, self.chars)

    async def run(self, session: CaptureSession, search: Search) -> List[MatchReference]:
        value = self.value(session)
        if not value:
            return []
        return await search.search(self.pattern(value))


class KeyCheck(DuplicateCheck):
    name = "key"

    def value(self, session: CaptureSession) -> Optional[str]:
        return session.fields.get("key")


class UrlCheck(DuplicateCheck):
    name = "url"
    chars = URL_CHARS

    def value(self, session: CaptureSession) -> Optional[str]:
        return session.fields.get("url")


class LinkCheck(DuplicateCheck):
    """The link as captured, before any canonicalization."""

    name = "link"
    chars = URL_CHARS

    def value(self, session: CaptureSession) -> Optional[str]:
        return session.context.link.strip() or None


class DuplicateChecker:
    """
    Run the duplicate checks in order.

    The first check that finds anything aborts the capture with
    DuplicateFound carrying that check's matches; later checks do not run.
    Unless the capture is silent, the first match is reported before raising.
    """

    def __init__(self, search: Search, checks: Optional[List[DuplicateCheck]] = None, silent: bool = False):
        self.search = search
        self.checks = checks if checks is not None else [KeyCheck(), UrlCheck(), LinkCheck()]
        self.silent = silent
        self.logger = get_logger(self.__class__.__name__)

    async def check(self, session: CaptureSession) -> None:
        for check in self.checks:
            matches = await check.run(session, self.search)
            self.logger.debug(f"{check.name} check: {len(matches)} matches")
            if not matches:
                continue

            if not (self.silent or session.context.silent):
                first = matches[0]
                session.notify(f"Duplicate found at {first}: {first.text}", "warning")
            raise DuplicateFound(matches, check=check.name)
