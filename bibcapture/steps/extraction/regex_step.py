"""Catch-all extraction of still-missing fields from page content."""

import re
from typing import Dict, List, Optional, Pattern

from bibcapture.base_step import PipelineStep
from bibcapture.common.regex_patterns import FIELD_PATTERNS, clean_html_value
from bibcapture.errors import ParseMiss
from bibcapture.model.capture import StepOutcome
from bibcapture.session import CaptureSession

# misses on these fields are worth telling the user about
REPORTED_FIELDS = ("author", "title", "year")


class RegexFieldStep(PipelineStep):
    """
    Generic regex extractor.

    Configured with a mapping of field name -> ordered list of patterns. For
    every field that is still undefined, the first pattern whose first group
    matches the page wins. Defined fields (concrete or placeholder) are never
    touched, and when all configured fields are defined the page is not even
    loaded.
    """

    encoding = "utf-8"

    def __init__(self, config=None, name: Optional[str] = None,
                 field_patterns: Optional[Dict[str, List[str]]] = None):
        super().__init__(config, name)
        patterns = field_patterns if field_patterns is not None else self.option("field_patterns", FIELD_PATTERNS)
        self.field_patterns: Dict[str, List[Pattern[str]]] = {
            field: [re.compile(p, re.IGNORECASE | re.DOTALL) for p in field_list]
            for field, field_list in patterns.items()
        }
        self.warn_on_parse_miss = self.option("warn_on_parse_miss", True)

    def _extract_field(self, field: str, text: str) -> str:
        """Return the first match for ``field`` or raise ParseMiss."""
        for pattern in self.field_patterns[field]:
            match = pattern.search(text)
            if match and match.groups():
                value = clean_html_value(match.group(1))
                if value:
                    if self.debug:
                        self.logger.debug(f"{field} matched by {pattern.pattern[:60]}")
                    return value
        raise ParseMiss(field)

    async def run(self, session: CaptureSession) -> StepOutcome:
        missing = session.fields.undefined(self.field_patterns)
        if not missing:
            self.logger.debug("All configured fields already defined, skipping")
            return StepOutcome.proceed()

        text = await session.get_text(self.encoding)

        for field in missing:
            try:
                session.fields.fill(field, self._extract_field(field, text))
            except ParseMiss as e:
                if field in REPORTED_FIELDS:
                    self.logger.warning(f"{session.context.link} - {str(e)}")
                    if self.warn_on_parse_miss:
                        session.notify(str(e), "warning")
                else:
                    self.logger.debug(f"{session.context.link} - {str(e)}")

        return StepOutcome.proceed()
