import re
from typing import Optional

from bibcapture.common.regex_patterns import clean_html_value, extract_html_title
from bibcapture.session import CaptureSession
from bibcapture.steps.extraction.sites.base import SiteExtractor

TOPIC_PATTERN = re.compile(r'<a[^>]*class="[^"]*topic-tag[^"]*"[^>]*>(.*?)</a>', re.IGNORECASE | re.DOTALL)
TREE_VIEW_PATTERN = re.compile(r'^/(?:-/)?tree/[^/]+/?$')

# first path segments that are not repository owners
RESERVED_OWNERS = {
    "about", "collections", "explore", "features", "login", "marketplace",
    "orgs", "pricing", "search", "settings", "sponsors", "topics", "users",
}

TITLE_AFFIXES = [
    re.compile(r'^GitHub\s+-\s+'),
    re.compile(r'\s+·\s+GitLab$'),
]


class ForgeExtractor(SiteExtractor):
    """Code repositories on GitHub and GitLab."""

    url_patterns = (r'^https?://(?:www\.)?(github\.com|gitlab\.com)/([^/?#]+)/([^/?#]+)(/[^?#]*)?',)
    placeholders = ("doi", "year")

    def match(self, url: Optional[str]) -> Optional[re.Match]:
        match = super().match(url)
        if match and match.group(2).lower() in RESERVED_OWNERS:
            return None
        return match

    @staticmethod
    def canonical_url(match: re.Match) -> str:
        host, owner, repo, rest = match.group(1).lower(), match.group(2), match.group(3), match.group(4) or ""
        if repo.endswith(".git"):
            repo = repo[:-4]
        base = f"https://{host}/{owner}/{repo}"
        if not rest or rest == "/" or TREE_VIEW_PATTERN.match(rest):
            return base
        return base + rest.rstrip("/")

    @staticmethod
    def _clean_title(title: Optional[str]) -> Optional[str]:
        if not title:
            return None
        for affix in TITLE_AFFIXES:
            title = affix.sub("", title)
        return title.strip() or None

    async def extract(self, session: CaptureSession, match: re.Match) -> None:
        fields = session.fields
        owner, repo = match.group(2), match.group(3)
        if repo.endswith(".git"):
            repo = repo[:-4]

        fields.set("url", self.canonical_url(match))
        fields.fill("author", owner)

        if not fields.is_defined("title"):
            page = await self.page_text(session)
            title = self._clean_title(extract_html_title(page)) or session.context.title or f"{owner}/{repo}"
            fields.fill("title", title)

        if not fields.is_defined("keywords"):
            page = await self.page_text(session)
            topics = [clean_html_value(t) for t in TOPIC_PATTERN.findall(page)]
            topics = [t for t in topics if t]
            if topics:
                fields.fill("keywords", ", ".join(dict.fromkeys(topics)))
