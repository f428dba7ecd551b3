"""First steps of every capture: the URL and default field values."""

from datetime import date
from typing import Optional
from urllib.parse import urlparse

from bibcapture.base_step import PipelineStep
from bibcapture.common.regex_patterns import SCHEME_PATTERN, WWW_PATTERN
from bibcapture.model.capture import StepOutcome
from bibcapture.session import CaptureSession


def normalize_link(link: str) -> str:
    """Strip the link and add a scheme when it has none."""
    link = link.strip()
    if link and not SCHEME_PATTERN.match(link):
        link = f"http://{link}"
    return link


def howpublished_from_url(url: str) -> Optional[str]:
    """
    Derive a publisher name from the URL's domain.

    ``https://www.github.com/acme/foo`` -> ``Github``
    """
    host = urlparse(url).hostname or ""
    host = WWW_PATTERN.sub("", host)
    label = host.split(".")[0]
    return label.capitalize() if label else None


class UrlStep(PipelineStep):
    """Set ``url`` from the captured link and ``howpublished`` from its domain."""

    async def run(self, session: CaptureSession) -> StepOutcome:
        url = normalize_link(session.context.link)
        if not url:
            self.logger.warning("Capture has an empty link")
            return StepOutcome.proceed()

        session.fields.fill("url", url)
        session.fields.fill("howpublished", howpublished_from_url(session.fields.get("url") or url))
        self.logger.debug(f"url={session.fields.get('url')} howpublished={session.fields.get('howpublished')}")
        return StepOutcome.proceed()


class DefaultsStep(PipelineStep):
    """Set the default entry ``type`` and ``urldate`` (today)."""

    def __init__(self, config=None, name=None, today=None):
        super().__init__(config, name)
        self.today = today or date.today

    async def run(self, session: CaptureSession) -> StepOutcome:
        default_type = self.option("default_type") or "misc"
        session.fields.fill("type", default_type)
        session.fields.fill("urldate", self.today().isoformat())
        return StepOutcome.proceed()
