"""Fields taken from feed reader metadata."""

import re
from typing import List, Optional

from bibcapture.base_step import PipelineStep, run_steps
from bibcapture.model.capture import StepOutcome
from bibcapture.model.feed import FeedEntry
from bibcapture.session import CaptureSession


class FeedExtractor(PipelineStep):
    """Base class of the feed sub-chain. Sub-steps may overwrite earlier ones."""

    def applies_to(self, entry: FeedEntry) -> bool:
        return True

    def extract(self, entry: FeedEntry, session: CaptureSession) -> None:
        raise NotImplementedError

    async def run(self, session: CaptureSession) -> StepOutcome:
        entry = session.feed_entry
        if entry is not None and self.applies_to(entry):
            self.extract(entry, session)
        return StepOutcome.proceed()


class GenericFeedExtractor(FeedExtractor):
    """Map the common feed entry fields onto the record."""

    def extract(self, entry: FeedEntry, session: CaptureSession) -> None:
        fields = session.fields
        if entry.title:
            fields.set("title", entry.title)
        if entry.authors:
            fields.set("author", " and ".join(entry.authors))
        if entry.published is not None:
            fields.set("year", str(entry.published.year))
        if entry.feed_title:
            fields.set("howpublished", entry.feed_title)
        if entry.tags:
            fields.set("keywords", ", ".join(entry.tags))


class RedditFeedExtractor(FeedExtractor):
    """Reddit reports authors as ``/u/name``."""

    USER_PREFIX = re.compile(r"^/?u/")

    def applies_to(self, entry: FeedEntry) -> bool:
        return "reddit.com" in entry.feed_url or "reddit.com" in entry.link

    def extract(self, entry: FeedEntry, session: CaptureSession) -> None:
        authors = [self.USER_PREFIX.sub("", author) for author in entry.authors]
        if authors:
            session.fields.set("author", " and ".join(authors))
        session.fields.set("howpublished", "Reddit")


class YoutubeFeedExtractor(FeedExtractor):
    """Channel feeds: the channel is the author, not the publisher."""

    def applies_to(self, entry: FeedEntry) -> bool:
        return "youtube.com/feeds" in entry.feed_url

    def extract(self, entry: FeedEntry, session: CaptureSession) -> None:
        channel = entry.feed_title or (entry.authors[0] if entry.authors else None)
        if channel:
            session.fields.set("author", channel)
        session.fields.set("howpublished", "YouTube")
        session.fields.set("type", "video")


class FeedStep(PipelineStep):
    """
    Run the feed sub-chain when the capture carries feed metadata.

    Order matters: the generic mapping runs first, source-specific
    corrections are layered on top of it.
    """

    def __init__(self, config=None, name: Optional[str] = None,
                 extractors: Optional[List[FeedExtractor]] = None):
        super().__init__(config, name)
        self.extractors = extractors if extractors is not None else [
            GenericFeedExtractor(config),
            RedditFeedExtractor(config),
            YoutubeFeedExtractor(config),
        ]

    async def run(self, session: CaptureSession) -> StepOutcome:
        if session.feed_entry is None:
            return StepOutcome.proceed()

        self.logger.info(f"Using feed metadata for {session.context.link}")
        await run_steps(self.extractors, session)
        return StepOutcome.proceed()
