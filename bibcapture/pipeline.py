import time
from typing import List, Optional, Tuple

from bibcapture.buffer import BufferResolver
from bibcapture.collaborators import (
    ContentReader,
    DoiOrgResolver,
    DoiResolver,
    Fetcher,
    FileReader,
    HttpFetcher,
    LoggerNotifier,
    Notifier,
    Search,
)
from bibcapture.base_step import PipelineStep, run_steps
from bibcapture.config import CaptureConfig
from bibcapture.enums import SearchBackend
from bibcapture.errors import CaptureError, DuplicateFound
from bibcapture.logging import get_logger
from bibcapture.model.capture import BibRecord, CaptureContext, FieldStore
from bibcapture.model.feed import FeedEntry
from bibcapture.session import CaptureSession
from bibcapture.steps.dedup.duplicate_checker import DuplicateChecker
from bibcapture.steps.dedup.search import CorpusSearch, RipgrepSearch
from bibcapture.steps.extraction import build_extraction_steps
from bibcapture.steps.formatting.formatter import BibFormatter
from bibcapture.steps.keys.key_generator import KeyGenerator

CaptureResult = Tuple[CaptureContext, Optional[BibRecord], Optional[CaptureError]]


def build_search(config: CaptureConfig) -> Search:
    """Create the duplicate search backend configured in ``config.corpus``."""
    paths = config.corpus.get_paths()
    if config.corpus.backend == SearchBackend.RIPGREP.value:
        return RipgrepSearch(paths, config.corpus.suffixes)
    return CorpusSearch(paths, config.corpus.suffixes)


class CapturePipeline:
    """
    Turn one captured link into a deduplicated BibTeX record.

    Per capture: extraction steps -> key -> format and clean -> duplicate
    checks. The page buffer is released on every exit path.
    """

    def __init__(
        self,
        config: Optional[CaptureConfig] = None,
        fetcher: Optional[Fetcher] = None,
        reader: Optional[ContentReader] = None,
        resolver: Optional[DoiResolver] = None,
        search: Optional[Search] = None,
        notifier: Optional[Notifier] = None,
        steps: Optional[List[PipelineStep]] = None,
    ):
        self.config = config or CaptureConfig()
        self.logger = get_logger("pipeline")

        fetch_config = self.config.fetch
        self.fetcher = fetcher or HttpFetcher(timeout=fetch_config.timeout, user_agent=fetch_config.user_agent)
        self.reader = reader or FileReader()
        self.resolver = resolver or DoiOrgResolver(timeout=fetch_config.timeout, user_agent=fetch_config.user_agent)
        self.search = search or build_search(self.config)
        self.notifier = notifier or LoggerNotifier()

        self.steps = steps if steps is not None else build_extraction_steps(self.config, self.resolver)
        self.key_generator = KeyGenerator(self.config.key_hash)
        self.formatter = BibFormatter(debug=self.config.debug)
        self.duplicate_checker = DuplicateChecker(self.search, silent=self.config.silent)

    def _feed_entry(self, context: CaptureContext) -> Optional[FeedEntry]:
        try:
            return FeedEntry.coerce(context.feed_entry)
        except (TypeError, ValueError) as e:
            # pydantic validation errors are ValueErrors
            self.logger.warning(f"Ignoring unusable feed entry for {context.link}: {str(e)}")
            return None

    def _new_session(self, context: CaptureContext) -> CaptureSession:
        fields = FieldStore()
        notifier = context.notify_channel if hasattr(context.notify_channel, "notify") else self.notifier
        return CaptureSession(
            context=context,
            fields=fields,
            buffers=BufferResolver(context, self.reader, self.fetcher, fields),
            notifier=notifier,
            feed_entry=self._feed_entry(context),
        )

    def _format(self, session: CaptureSession, key: str) -> str:
        if session.resolved_record:
            return self.formatter.format_verbatim(session.resolved_record, key)
        return self.formatter.format(session.fields)

    async def process_capture(self, context: CaptureContext) -> BibRecord:
        """Run the whole pipeline for ``context``.

        Raises:
            CaptureError: any fatal error (FetchError, KeyGenerationError,
                DuplicateFound), after the buffer has been released.
        """
        start_time = time.perf_counter()
        session = self._new_session(context)
        self.logger.info(f"Starting capture of {context.link}")
        # records persisted by earlier captures must be visible
        refresh = getattr(self.search, "refresh", None)
        if callable(refresh):
            refresh()

        try:
            await run_steps(self.steps, session)
            key = self.key_generator.generate(session.fields)
            text = self._format(session, key)
            await self.duplicate_checker.check(session)
        except CaptureError as e:
            self.logger.error(f"Capture of {context.link} failed: {str(e)}")
            # duplicates were already reported by the checker
            if not (self.config.silent or context.silent or isinstance(e, DuplicateFound)):
                session.notify(str(e), "error")
            raise
        finally:
            session.buffers.release()

        elapsed_time = time.perf_counter() - start_time
        self.logger.info(f"Captured {context.link} as {key} in {elapsed_time:.2f} seconds")
        return BibRecord(key=key, text=text)

    async def process_many(self, contexts: List[CaptureContext]) -> List[CaptureResult]:
        """Capture several links one after another; failures do not stop the batch."""
        results = []
        for context in contexts:
            try:
                record = await self.process_capture(context)
                results.append((context, record, None))
            except CaptureError as e:
                results.append((context, None, e))
        return results
