"""
Extraction steps.

Default order of a capture's extraction chain:

1. UrlStep: ``url`` and ``howpublished`` from the captured link
2. DefaultsStep: entry ``type`` and ``urldate``
3. FeedStep: feed reader metadata, when present
4. DoiStep: DOI from publisher URLs; a resolved DOI finishes the chain
5. site extractors, each guarded by its URL patterns
6. RegexFieldStep: generic patterns for whatever is still missing
"""

from typing import List, Optional

from bibcapture.base_step import PipelineStep
from bibcapture.collaborators import DoiResolver
from bibcapture.steps.extraction.doi_step import DoiStep
from bibcapture.steps.extraction.feed_step import FeedStep
from bibcapture.steps.extraction.regex_step import RegexFieldStep
from bibcapture.steps.extraction.sites import SITE_EXTRACTORS
from bibcapture.steps.extraction.url_step import DefaultsStep, UrlStep


def build_extraction_steps(config, resolver: Optional[DoiResolver] = None) -> List[PipelineStep]:
    """Create the default extraction chain for ``config``."""
    site_names = getattr(config, "site_extractors", None)
    if site_names is None:
        site_names = list(SITE_EXTRACTORS)

    steps: List[PipelineStep] = [
        UrlStep(config),
        DefaultsStep(config),
        FeedStep(config),
        DoiStep(config, resolver=resolver),
    ]
    steps.extend(SITE_EXTRACTORS[name](config) for name in site_names)
    steps.append(RegexFieldStep(config))
    return steps


__all__ = [
    "DefaultsStep",
    "DoiStep",
    "FeedStep",
    "RegexFieldStep",
    "UrlStep",
    "build_extraction_steps",
]
