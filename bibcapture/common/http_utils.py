"""Common HTTP utilities for fetching pages and resolving DOIs."""

import aiohttp
from typing import Dict, Optional
from bibcapture.logging import get_logger

logger = get_logger(__name__)


async def get_request(
    url: str,
    headers: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None
) -> Optional[bytes]:
    """
    Make an async GET request and return the raw response body.

    Redirects are followed.

    Args:
        url: The URL to make the request to
        headers: Request headers
        timeout: Request timeout in seconds, None for no timeout

    Returns:
        Response body or None if request failed
    """
    try:
        async with aiohttp.ClientSession() as session:
            async with session.get(
                url,
                headers=headers or {},
                allow_redirects=True,
                timeout=aiohttp.ClientTimeout(total=timeout)
            ) as response:
                if response.status == 200:
                    return await response.read()
                else:
                    logger.error(f"GET {url} failed with status {response.status}")
                    return None
    except Exception as e:
        logger.error(f"GET {url} failed: {str(e)}")
        return None


async def get_doi_bibtex(
    doi: str,
    timeout: Optional[float] = None,
    user_agent: Optional[str] = None
) -> Optional[str]:
    """
    Resolve a DOI to a BibTeX record through doi.org content negotiation.

    Args:
        doi: DOI without the resolver prefix, e.g. ``10.1000/xyz``
        timeout: Request timeout in seconds
        user_agent: Optional User-Agent header

    Returns:
        BibTeX record or None if the DOI could not be resolved
    """
    headers = {"Accept": "application/x-bibtex; charset=utf-8"}
    if user_agent:
        headers["User-Agent"] = user_agent

    body = await get_request(f"https://doi.org/{doi}", headers=headers, timeout=timeout)
    if not body:
        return None

    record = body.decode("utf-8", errors="replace").strip()
    if not record.startswith("@"):
        logger.error(f"doi.org did not return BibTeX for {doi}")
        return None
    return record
