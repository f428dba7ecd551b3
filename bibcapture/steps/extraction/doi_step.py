"""DOI extraction and resolution."""

import re
from typing import List, Optional, Tuple
from urllib.parse import unquote

from bibcapture.base_step import PipelineStep
from bibcapture.collaborators import DoiResolver
from bibcapture.common.bibtex import parse_bibtex_entry
from bibcapture.common.regex_patterns import DOI_URL_PATTERNS
from bibcapture.enums import DoiRecordMode
from bibcapture.errors import DoiResolutionFailure
from bibcapture.model.capture import StepOutcome
from bibcapture.session import CaptureSession


def extract_doi_from_url(url: str, patterns: Optional[List[Tuple[str, str, str]]] = None) -> Optional[Tuple[str, str]]:
    """
    Find a DOI embedded in a publisher or DOI resolver URL.

    Returns:
        (publisher name, DOI) or None if the URL has no known DOI shape
    """
    for name, pattern, template in patterns or DOI_URL_PATTERNS:
        match = re.search(pattern, url, re.IGNORECASE)
        if match:
            doi = template.format(unquote(match.group(1)))
            return name, doi.rstrip("/.")
    return None


class DoiStep(PipelineStep):
    """
    Extract the DOI from known URL shapes and resolve it.

    A resolved record is adopted wholesale and finishes the extraction chain.
    Resolution failures are logged and the remaining steps still run.
    """

    def __init__(self, config=None, name: Optional[str] = None, resolver: Optional[DoiResolver] = None):
        super().__init__(config, name)
        self.resolver = resolver

    async def run(self, session: CaptureSession) -> StepOutcome:
        url = session.fields.get("url") or session.context.link
        found = extract_doi_from_url(url)
        if found is None:
            return StepOutcome.proceed()

        publisher, doi = found
        self.logger.info(f"Found DOI {doi} in {publisher} URL")
        session.fields.fill("doi", doi)
        doi = session.fields.get("doi") or doi

        if self.resolver is None:
            self.logger.warning("No DOI resolver configured, continuing with page extraction")
            return StepOutcome.proceed()

        try:
            record, fields = await self._resolve(doi)
        except DoiResolutionFailure as e:
            self.logger.warning(f"{str(e)} - falling back to page extraction")
            return StepOutcome.proceed()

        self._adopt(session, record, fields, doi)
        return StepOutcome.finish()

    async def _resolve(self, doi: str) -> Tuple[str, dict]:
        """Resolve ``doi`` and parse the record; every failure is a DoiResolutionFailure."""
        try:
            record = await self.resolver.resolve(doi)
        except DoiResolutionFailure:
            raise
        except Exception as e:
            # timeouts and transport errors of the resolver
            raise DoiResolutionFailure(doi, str(e) or e.__class__.__name__) from e

        fields = parse_bibtex_entry(record) if record else None
        if not fields:
            raise DoiResolutionFailure(doi, "resolver returned no parsable BibTeX entry")
        return record, fields

    def _adopt(self, session: CaptureSession, record: str, fields: dict, doi: str) -> None:
        fields.pop("key", None)
        session.fields.update(fields)
        # keep the DOI as found in the URL, the key is derived from it
        session.fields.set("doi", doi)

        mode = self.option("doi_record_mode", DoiRecordMode.VERBATIM.value)
        if mode == DoiRecordMode.VERBATIM.value:
            session.resolved_record = record.strip()
        self.logger.info(f"Adopted DOI record for {doi} ({mode})")
