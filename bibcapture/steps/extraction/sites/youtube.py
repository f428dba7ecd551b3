import re

from bibcapture.common.regex_patterns import meta_patterns
from bibcapture.session import CaptureSession
from bibcapture.steps.extraction.sites.base import SiteExtractor


class YoutubeExtractor(SiteExtractor):
    """YouTube watch pages, shorts and youtu.be links."""

    url_patterns = (
        r'^https?://(?:www\.|m\.)?youtube\.com/watch\?(?:[^#]*&)?v=([\w-]{6,})',
        r'^https?://(?:www\.|m\.)?youtube\.com/shorts/([\w-]{6,})',
        r'^https?://youtu\.be/([\w-]{6,})',
    )

    author_patterns = [
        r'"ownerChannelName"\s*:\s*"([^"]+)"',
        r'<link[^>]*itemprop=["\']name["\'][^>]*content=["\']([^"\']+)["\']',
        r'"author"\s*:\s*"([^"]+)"',
    ]
    title_patterns = [
        *meta_patterns("title"),
        *meta_patterns("og:title", "property"),
        r'<title[^>]*>(.*?)(?:\s+-\s+YouTube)?</title>',
    ]
    year_patterns = [
        r'<meta[^>]*itemprop=["\'](?:datePublished|uploadDate)["\'][^>]*content=["\'](\d{4})',
        r'"(?:publishDate|uploadDate)"\s*:\s*"(\d{4})',
    ]

    async def extract(self, session: CaptureSession, match: re.Match) -> None:
        fields = session.fields
        fields.set("url", f"https://www.youtube.com/watch?v={match.group(1)}")
        fields.set("howpublished", "YouTube")
        fields.set("type", "video")

        await self.scrape(session, "author", self.author_patterns)
        await self.scrape(session, "title", self.title_patterns)
        await self.scrape(session, "year", self.year_patterns)
