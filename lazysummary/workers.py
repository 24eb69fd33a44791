"""Background execution for listings, summaries and directory previews.

Work runs on a bounded thread pool. Results are never applied from a
worker thread: they land on a queue the event loop drains. Each channel
tracks its newest request; older requests still queued when a newer one
arrives are skipped before they start.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from queue import Empty, Queue

logger = logging.getLogger(__name__)

CHANNEL_LISTING = "listing"
CHANNEL_SUMMARY = "summary"
CHANNEL_PREVIEW = "preview"


@dataclass(frozen=True)
class TaskRequest:
    """One submitted background job.

    ``tag`` identifies what the result is for (a directory or a selection
    key); the controller compares it with its own state when draining.
    """

    request_id: int
    channel: str
    tag: str


@dataclass(frozen=True)
class TaskResult:
    request: TaskRequest
    payload: object


class BackgroundScheduler:
    """Thread-pool scheduler with per-channel latest-request tracking."""

    def __init__(self, max_workers: int = 4) -> None:
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, max_workers),
            thread_name_prefix="lazysummary-worker",
        )
        self._lock = threading.Lock()
        self._latest_by_channel: dict[str, int] = {}
        self._next_request_id = 1
        self._results: Queue[TaskResult] = Queue()

    def submit(self, channel: str, tag: str, work: Callable[[], object]) -> TaskRequest:
        """Queue ``work`` and make it the newest request on ``channel``."""
        with self._lock:
            request = TaskRequest(request_id=self._next_request_id, channel=channel, tag=tag)
            self._next_request_id += 1
            self._latest_by_channel[channel] = request.request_id
        self._executor.submit(self._run, request, work)
        return request

    def is_latest(self, request: TaskRequest) -> bool:
        with self._lock:
            return self._latest_by_channel.get(request.channel) == request.request_id

    def _run(self, request: TaskRequest, work: Callable[[], object]) -> None:
        if not self.is_latest(request):
            logger.debug("skipping superseded %s request %d for %s", request.channel, request.request_id, request.tag)
            return
        try:
            payload = work()
        except Exception:
            logger.exception("background %s task for %s failed", request.channel, request.tag)
            return
        self._results.put(TaskResult(request=request, payload=payload))

    def drain_results(self, timeout_seconds: float = 0.0) -> list[TaskResult]:
        """Return every completed result, waiting up to ``timeout_seconds`` for the first."""
        out: list[TaskResult] = []
        if timeout_seconds > 0:
            try:
                out.append(self._results.get(timeout=timeout_seconds))
            except Empty:
                return out
        while True:
            try:
                out.append(self._results.get_nowait())
            except Empty:
                break
        return out

    def shutdown(self) -> None:
        """Stop accepting work and drop jobs that have not started."""
        self._executor.shutdown(wait=False, cancel_futures=True)


__all__ = [
    "BackgroundScheduler",
    "CHANNEL_LISTING",
    "CHANNEL_PREVIEW",
    "CHANNEL_SUMMARY",
    "TaskRequest",
    "TaskResult",
]
