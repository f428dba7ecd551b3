"""Common regex patterns used across the pipeline."""

import html
import re
from typing import Dict, List, Optional, Pattern, Tuple


# HTML metadata extraction patterns
HTML_TITLE_PATTERN: Pattern[str] = re.compile(r'<title[^>]*>(.*?)</title>', re.IGNORECASE | re.DOTALL)
HTML_TAG_PATTERN: Pattern[str] = re.compile(r'<[^>]+>')
WHITESPACE_PATTERN: Pattern[str] = re.compile(r'\s+')

# URL helpers
SCHEME_PATTERN: Pattern[str] = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.-]*://')
WWW_PATTERN: Pattern[str] = re.compile(r'^www\.', re.IGNORECASE)
KEY_UNSAFE_CHARS_PATTERN: Pattern[str] = re.compile(r'[^A-Za-z0-9/.]')

DOI_PATTERN = r'10\.\d{4,9}/[^?#\s"<>]+'


def meta_patterns(name: str, attribute: str = "name") -> List[str]:
    """
    Build the patterns matching the ``content`` of a ``<meta>`` tag.

    Both attribute orders and both quote styles are covered, so each
    returned pattern has the value in its first group.
    """
    key = rf'{attribute}=["\']{re.escape(name)}["\']'
    patterns = []
    for quoted in (r'"([^"]*)"', r"'([^']*)'"):
        patterns.append(rf'<meta[^>]*?{key}[^>]*?content={quoted}')
        patterns.append(rf'<meta[^>]*?content={quoted}[^>]*?{key}')
    return patterns


def meta_year_patterns(name: str, attribute: str = "name") -> List[str]:
    """Like :func:`meta_patterns` but capturing only a leading four-digit year."""
    key = rf'{attribute}=["\']{re.escape(name)}["\']'
    return [
        rf'<meta[^>]*?{key}[^>]*?content=["\'][^"\']*?(\d{{4}})',
        rf'<meta[^>]*?content=["\'][^"\']*?(\d{{4}})[^"\']*["\'][^>]*?{key}',
    ]


# field -> ordered pattern list for the generic extractor. First group wins.
FIELD_PATTERNS: Dict[str, List[str]] = {
    "title": [
        *meta_patterns("citation_title"),
        *meta_patterns("og:title", "property"),
        *meta_patterns("twitter:title"),
        r'<title[^>]*>(.*?)</title>',
    ],
    "author": [
        *meta_patterns("citation_author"),
        *meta_patterns("author"),
        *meta_patterns("article:author", "property"),
        r'"author"\s*:\s*\{[^{}]*?"name"\s*:\s*"([^"]+)"',
        r'<a[^>]*rel=["\']author["\'][^>]*>(.*?)</a>',
    ],
    "year": [
        *meta_year_patterns("citation_publication_date"),
        *meta_year_patterns("citation_date"),
        *meta_year_patterns("article:published_time", "property"),
        *meta_year_patterns("date"),
        r'"datePublished"\s*:\s*"(\d{4})',
        r'<time[^>]*datetime=["\'](\d{4})',
    ],
    "journal": [
        *meta_patterns("citation_journal_title"),
    ],
    "keywords": [
        *meta_patterns("keywords"),
        *meta_patterns("citation_keywords"),
    ],
}

# publisher URL shape -> (pattern, DOI template). The pattern's first group
# is substituted into the template.
DOI_URL_PATTERNS: List[Tuple[str, str, str]] = [
    ("doi.org", rf'^https?://(?:dx\.)?doi\.org/({DOI_PATTERN})', "{0}"),
    ("aps", rf'journals\.aps\.org/[a-z]+/(?:abstract|pdf|fulltext)/({DOI_PATTERN})', "{0}"),
    ("wiley", rf'onlinelibrary\.wiley\.com/doi/(?:abs/|full/|pdf/|epdf/)?({DOI_PATTERN})', "{0}"),
    ("springer", rf'link\.springer\.com/(?:article|chapter)/({DOI_PATTERN})', "{0}"),
    ("tandfonline", rf'tandfonline\.com/doi/(?:abs/|full/|pdf/)?({DOI_PATTERN})', "{0}"),
    ("acs", rf'pubs\.acs\.org/doi/(?:abs/|full/|pdf/)?({DOI_PATTERN})', "{0}"),
    ("pnas", rf'pnas\.org/doi/(?:abs/|full/|pdf/)?({DOI_PATTERN})', "{0}"),
    ("sage", rf'journals\.sagepub\.com/doi/(?:abs/|full/|pdf/)?({DOI_PATTERN})', "{0}"),
    ("science", rf'science\.org/doi/(?:abs/|full/|pdf/)?({DOI_PATTERN})', "{0}"),
    ("iop", r'iopscience\.iop\.org/article/(10\.\d{4,9}/[^?#\s"<>]+?)(?:/pdf|/meta)?(?:[?#]|$)', "{0}"),
    ("plos", r'journals\.plos\.org/[a-z]+/article\?id=(10\.\d{4,9}/[^&#\s"<>]+)', "{0}"),
    ("nature", r'nature\.com/articles/([a-z]+[0-9][^?#/\s"<>]*)', "10.1038/{0}"),
]


def clean_html_value(value: Optional[str]) -> Optional[str]:
    """
    Turn a raw regex capture from HTML into a field value.

    Tags are dropped, entities decoded and whitespace collapsed.

    Returns:
        Cleaned value, or None if nothing is left
    """
    if value is None:
        return None
    value = HTML_TAG_PATTERN.sub('', value)
    value = html.unescape(value)
    value = WHITESPACE_PATTERN.sub(' ', value).strip()
    return value or None


def extract_html_title(html_content: str) -> Optional[str]:
    """
    Extract title from HTML content.

    Args:
        html_content: HTML content as string

    Returns:
        Extracted and cleaned title, or None if not found
    """
    if not html_content:
        return None

    title_match = HTML_TITLE_PATTERN.search(html_content)
    if title_match:
        return clean_html_value(title_match.group(1))
    return None


def extract_meta(html_content: str, name: str, attribute: str = "name") -> Optional[str]:
    """Return the cleaned content of the first matching ``<meta>`` tag."""
    if not html_content:
        return None
    for pattern in meta_patterns(name, attribute):
        match = re.search(pattern, html_content, re.IGNORECASE | re.DOTALL)
        if match:
            value = clean_html_value(match.group(1))
            if value:
                return value
    return None


def first_match(patterns: List[str], text: str) -> Optional[str]:
    """Try patterns in order; return the first cleaned, non-empty group 1."""
    for pattern in patterns:
        match = re.search(pattern, text, re.IGNORECASE | re.DOTALL)
        if match:
            value = clean_html_value(match.group(1))
            if value:
                return value
    return None


def strip_scheme(url: str) -> str:
    """Drop the protocol and a leading ``www.``."""
    return WWW_PATTERN.sub('', SCHEME_PATTERN.sub('', url.strip()))
