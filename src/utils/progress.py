"""
Progress reporting for scrape runs

A run emits a sequence of status lines followed by exactly one terminal
event (complete or error). The scraper only talks to ProgressReporter;
adapters decide where the events go:

- CallbackProgressReporter: synchronous callbacks (CLI, tests)
- SSEProgressReporter: Server-Sent Events frames on a thread-safe queue,
  drained by a streaming HTTP response
"""

import json
import logging
import queue
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from typing import Any

from models import ScrapeSummary

logger = logging.getLogger(__name__)


def format_sse_event(payload: dict[str, Any]) -> str:
    """Frame a payload as one SSE message"""
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n"


class ProgressReporter(ABC):
    """Receives progress lines and one terminal event from a scrape run"""

    def __init__(self) -> None:
        self.closed = False

    def report(self, message: str) -> None:
        """Deliver one human-readable status line"""
        logger.debug(message)
        self._emit_message(message)

    def complete(self, summary: ScrapeSummary) -> None:
        """Terminal event for a run that reached the end (or was cancelled)"""
        if self._close():
            self._emit_complete(summary)

    def error(self, message: str) -> None:
        """Terminal event for a run that failed"""
        logger.error("Scrape run failed: %s", message)
        if self._close():
            self._emit_error(message)

    def _close(self) -> bool:
        if self.closed:
            logger.warning("Ignoring terminal event: reporter already closed")
            return False
        self.closed = True
        return True

    @abstractmethod
    def _emit_message(self, message: str) -> None: ...

    @abstractmethod
    def _emit_complete(self, summary: ScrapeSummary) -> None: ...

    @abstractmethod
    def _emit_error(self, message: str) -> None: ...


class CallbackProgressReporter(ProgressReporter):
    """Invoke callbacks synchronously from the scraping thread"""

    def __init__(
        self,
        on_message: Callable[[str], None] = print,
        on_complete: Callable[[ScrapeSummary], None] | None = None,
        on_error: Callable[[str], None] | None = None,
    ) -> None:
        super().__init__()
        self.on_message = on_message
        self.on_complete = on_complete
        self.on_error = on_error

    def _emit_message(self, message: str) -> None:
        self.on_message(message)

    def _emit_complete(self, summary: ScrapeSummary) -> None:
        if self.on_complete:
            self.on_complete(summary)

    def _emit_error(self, message: str) -> None:
        if self.on_error:
            self.on_error(message)


class SSEProgressReporter(ProgressReporter):
    """
    Queue SSE frames for a streaming response

    Every event is framed as soon as it is reported. iter_frames() yields
    frames in order and stops right after the terminal event.
    """

    _END = object()

    def __init__(self) -> None:
        super().__init__()
        self._frames: queue.Queue[Any] = queue.Queue()

    def _emit_message(self, message: str) -> None:
        self._frames.put(format_sse_event({"message": message}))

    def _emit_complete(self, summary: ScrapeSummary) -> None:
        self._frames.put(format_sse_event({"type": "complete", **summary.to_dict()}))
        self._frames.put(self._END)

    def _emit_error(self, message: str) -> None:
        self._frames.put(format_sse_event({"type": "error", "message": message}))
        self._frames.put(self._END)

    def iter_frames(self, poll_interval: float | None = None) -> Iterator[str]:
        """
        Yield frames until the terminal event

        Args:
            poll_interval: If set, yield an SSE comment (": keep-alive") when
                no frame arrives within this many seconds
        """
        while True:
            try:
                frame = self._frames.get(timeout=poll_interval)
            except queue.Empty:
                yield ": keep-alive\n\n"
                continue
            if frame is self._END:
                return
            yield frame
