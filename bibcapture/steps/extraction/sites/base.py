import re
from typing import List, Optional, Pattern, Tuple

from bibcapture.base_step import PipelineStep
from bibcapture.common.regex_patterns import first_match
from bibcapture.model.capture import StepOutcome
from bibcapture.session import CaptureSession


class SiteExtractor(PipelineStep):
    """
    Base class for extractors specialised to one site.

    Subclasses declare the URL patterns they handle and the encoding of the
    pages they scrape, then implement :meth:`extract`.
    """

    url_patterns: Tuple[str, ...] = ()
    encoding: str = "utf-8"
    # fields that make no sense for this kind of content
    placeholders: Tuple[str, ...] = ("doi",)

    def __init__(self, config=None, name: Optional[str] = None):
        super().__init__(config, name)
        self._compiled: List[Pattern[str]] = [re.compile(p, re.IGNORECASE) for p in self.url_patterns]

    def match(self, url: Optional[str]) -> Optional[re.Match]:
        if not url:
            return None
        for pattern in self._compiled:
            match = pattern.search(url)
            if match:
                return match
        return None

    async def extract(self, session: CaptureSession, match: re.Match) -> None:
        raise NotImplementedError

    async def page_text(self, session: CaptureSession) -> str:
        return await session.get_text(self.encoding)

    async def scrape(self, session: CaptureSession, field: str, patterns: List[str]) -> bool:
        """Fill ``field`` from the page with the first matching pattern."""
        if session.fields.is_defined(field):
            return False
        value = first_match(patterns, await self.page_text(session))
        return session.fields.fill(field, value)

    async def run(self, session: CaptureSession) -> StepOutcome:
        match = self.match(session.fields.get("url"))
        if match is None:
            return StepOutcome.proceed()

        self.logger.info(f"{self.name} handles {session.fields.get('url')}")
        for field in self.placeholders:
            if not session.fields.is_defined(field):
                session.fields.set_placeholder(field)

        await self.extract(session, match)
        return StepOutcome.proceed()
