"""
Background scrape runs for the HTTP API

Only one run may hold the output file at a time; a second request while a
run is active is rejected with ScrapeRunBusyError.
"""

import logging
import threading
from collections.abc import Callable, Iterator

from jobs.yc_job_scraper import YCJobScraper
from models import ScrapeFilters, ScrapeSummary
from utils.progress import CallbackProgressReporter, ProgressReporter, SSEProgressReporter

logger = logging.getLogger(__name__)

# Seconds between keep-alive comments on an idle stream
STREAM_KEEPALIVE_SECONDS = 15.0


class ScrapeRunBusyError(Exception):
    """A scrape run is already in progress"""


class ScrapeRunManager:
    """Starts scrape runs on a worker thread, one at a time"""

    def __init__(
        self, scraper_factory: Callable[[ProgressReporter], YCJobScraper] | None = None
    ) -> None:
        self._lock = threading.Lock()
        self._scraper_factory = scraper_factory or (
            lambda reporter: YCJobScraper(reporter=reporter)
        )
        self.last_summary: ScrapeSummary | None = None

    @property
    def is_running(self) -> bool:
        return self._lock.locked()

    def submit(self, filters: ScrapeFilters) -> threading.Thread:
        """
        Start a run and return immediately without waiting for its outcome

        Progress goes to the application log.

        Raises:
            ScrapeRunBusyError: If another run is active
        """
        self._acquire()
        reporter = CallbackProgressReporter(on_message=logger.info)
        return self._start(filters, reporter, cancel_event=None)

    def stream(self, filters: ScrapeFilters) -> "ScrapeStream":
        """
        Start a run and return its SSE frames as a ScrapeStream

        Raises:
            ScrapeRunBusyError: If another run is active
        """
        self._acquire()
        reporter = SSEProgressReporter()
        cancel_event = threading.Event()
        thread = self._start(filters, reporter, cancel_event)
        return ScrapeStream(reporter, cancel_event, thread)

    def _acquire(self) -> None:
        if not self._lock.acquire(blocking=False):
            raise ScrapeRunBusyError("A scrape run is already in progress")

    def _start(
        self,
        filters: ScrapeFilters,
        reporter: ProgressReporter,
        cancel_event: threading.Event | None,
    ) -> threading.Thread:
        thread = threading.Thread(
            target=self._run,
            args=(filters, reporter, cancel_event),
            name="yc-job-scraper",
            daemon=True,
        )
        try:
            thread.start()
        except RuntimeError:
            self._lock.release()
            raise
        return thread

    def _run(
        self,
        filters: ScrapeFilters,
        reporter: ProgressReporter,
        cancel_event: threading.Event | None,
    ) -> None:
        try:
            scraper = self._scraper_factory(reporter)
            self.last_summary = scraper.run(filters, cancel_event=cancel_event)
        except Exception as e:
            logger.error("Background scrape run failed: %s", e, exc_info=True)
            if not reporter.closed:
                reporter.error(str(e))
        finally:
            self._lock.release()


class ScrapeStream:
    """
    Iterable of SSE frames for one streamed run

    close() asks the run to stop before its next company; the company in
    flight is still finished and saved. It works whether or not any frame
    has been read, so it is safe to call from a response close callback.
    """

    def __init__(
        self,
        reporter: SSEProgressReporter,
        cancel_event: threading.Event,
        thread: threading.Thread,
    ) -> None:
        self.reporter = reporter
        self.cancel_event = cancel_event
        self.thread = thread

    def __iter__(self) -> Iterator[str]:
        try:
            yield from self.reporter.iter_frames(poll_interval=STREAM_KEEPALIVE_SECONDS)
        finally:
            self.cancel_event.set()

    def close(self) -> None:
        self.cancel_event.set()
