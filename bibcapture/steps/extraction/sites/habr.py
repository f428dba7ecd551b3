import re

from bibcapture.common.regex_patterns import meta_patterns, meta_year_patterns
from bibcapture.session import CaptureSession
from bibcapture.steps.extraction.sites.base import SiteExtractor


class HabrExtractor(SiteExtractor):
    """Articles on the habr.com blog platform."""

    url_patterns = (
        r'^https?://(?:www\.|m\.)?habr\.com/(?:(\w\w)/)?(?:post|articles|company/[^/]+/blog|companies/[^/]+/articles|news)/(\d+)',
    )

    author_patterns = [
        *meta_patterns("author"),
        *meta_patterns("article:author", "property"),
        r'<a[^>]*class="[^"]*tm-user-info__username[^"]*"[^>]*>(.*?)</a>',
    ]
    title_patterns = [
        *meta_patterns("og:title", "property"),
        r'<h1[^>]*class="[^"]*tm-title[^"]*"[^>]*>(.*?)</h1>',
        r'<title[^>]*>(.*?)(?:\s+/\s+Хабр)?</title>',
    ]
    year_patterns = [
        *meta_year_patterns("article:published_time", "property"),
        r'<time[^>]*datetime=["\'](\d{4})',
    ]
    keyword_patterns = [
        *meta_patterns("keywords"),
    ]

    async def extract(self, session: CaptureSession, match: re.Match) -> None:
        language = (match.group(1) or "ru").lower()
        session.fields.set("url", f"https://habr.com/{language}/articles/{match.group(2)}/")
        session.fields.set("type", "article")

        await self.scrape(session, "author", self.author_patterns)
        await self.scrape(session, "title", self.title_patterns)
        await self.scrape(session, "year", self.year_patterns)
        await self.scrape(session, "keywords", self.keyword_patterns)
