import re

from bibcapture.common.regex_patterns import extract_meta
from bibcapture.session import CaptureSession
from bibcapture.steps.extraction.sites.base import SiteExtractor

TITLE_LENGTH = 80


class TelegramExtractor(SiteExtractor):
    """Public Telegram channel posts."""

    url_patterns = (r'^https?://(?:www\.)?(?:t\.me|telegram\.me)/(?:s/)?(\w{4,})/(\d+)',)

    year_patterns = [
        r'<time[^>]*datetime=["\'](\d{4})',
    ]

    @staticmethod
    def _title_from_description(description: str) -> str:
        line = description.strip().splitlines()[0].strip()
        if len(line) > TITLE_LENGTH:
            line = line[:TITLE_LENGTH].rsplit(" ", 1)[0] + "..."
        return line

    async def extract(self, session: CaptureSession, match: re.Match) -> None:
        fields = session.fields
        channel, post = match.group(1), match.group(2)
        fields.set("url", f"https://t.me/{channel}/{post}")
        fields.set("howpublished", "Telegram")

        page = await self.page_text(session)
        if not fields.is_defined("author"):
            fields.fill("author", extract_meta(page, "og:title", "property") or channel)
        if not fields.is_defined("title"):
            description = extract_meta(page, "og:description", "property")
            title = self._title_from_description(description) if description else None
            fields.fill("title", title or f"{channel} post {post}")
        await self.scrape(session, "year", self.year_patterns)
