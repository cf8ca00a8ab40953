"""Cooperative cancellation tokens for ingestion runs.

A token is created per run and passed in explicitly; the run polls it once
per file, between files.
"""
import logging
import threading

from hoa_intake.services.progress_store import ProgressStore

logger = logging.getLogger(__name__)


class CancellationToken:
    """Thread-safe cancel flag owned by a single run."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()
        logger.info("Cancellation requested")

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()


class StoreCancellationToken(CancellationToken):
    """Token that also honors cancel requests recorded in a progress store.

    Reading `is_cancelled` makes a synchronous store call.
    """

    def __init__(self, store: ProgressStore, job_id: str):
        super().__init__()
        self.store = store
        self.job_id = job_id

    def cancel(self) -> None:
        self.store.request_cancel(self.job_id)
        super().cancel()

    @property
    def is_cancelled(self) -> bool:
        if self._event.is_set():
            return True
        if self.store.is_cancel_requested(self.job_id):
            self._event.set()
        return self._event.is_set()
