"""
Site-specific extractors.

Each extractor guards itself on the captured URL, so the order in which
they are registered only matters when a URL matches more than one site.
"""

from bibcapture.steps.extraction.sites.base import SiteExtractor
from bibcapture.steps.extraction.sites.forge import ForgeExtractor
from bibcapture.steps.extraction.sites.habr import HabrExtractor
from bibcapture.steps.extraction.sites.telegram import TelegramExtractor
from bibcapture.steps.extraction.sites.youtube import YoutubeExtractor

SITE_EXTRACTORS = {
    "forge": ForgeExtractor,
    "youtube": YoutubeExtractor,
    "habr": HabrExtractor,
    "telegram": TelegramExtractor,
}

__all__ = [
    "SITE_EXTRACTORS",
    "ForgeExtractor",
    "HabrExtractor",
    "SiteExtractor",
    "TelegramExtractor",
    "YoutubeExtractor",
]
