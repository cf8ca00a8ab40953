"""
Progress Store

Key-value slot holding the last-known progress snapshot of an ingestion
run, plus per-job cancellation requests. The API process reads it while a
Celery worker writes it.

Calls are synchronous and block the event loop. The intake loop makes one
save and one cancel check per file, between files.
"""

import json
import logging
import threading
from typing import Dict, Optional, Set

import redis

from hoa_intake.core.config import settings
from hoa_intake.services.intake_types import ProcessingProgress

logger = logging.getLogger(__name__)

CANCEL_KEY_PREFIX = "documentImportCancel"
# Stale snapshots and cancel flags expire after a day
KEY_TTL_SECONDS = 24 * 60 * 60


def progress_key(job_id: Optional[str] = None) -> str:
    """Storage key for a run's progress, e.g. "documentImportProgress:<job>"."""
    if job_id:
        return f"{settings.PROGRESS_KEY}:{job_id}"
    return settings.PROGRESS_KEY


class ProgressStore:
    """Interface for progress snapshot persistence."""

    def save(self, key: str, progress: ProcessingProgress) -> None:
        raise NotImplementedError

    def load(self, key: str) -> Optional[ProcessingProgress]:
        raise NotImplementedError

    def request_cancel(self, job_id: str) -> None:
        raise NotImplementedError

    def is_cancel_requested(self, job_id: str) -> bool:
        raise NotImplementedError

    def clear_cancel(self, job_id: str) -> None:
        raise NotImplementedError


class InMemoryProgressStore(ProgressStore):
    """Process-local store, used when API and run share a process and in tests."""

    def __init__(self):
        self._snapshots: Dict[str, str] = {}
        self._cancelled: Set[str] = set()
        self._lock = threading.Lock()

    def save(self, key: str, progress: ProcessingProgress) -> None:
        with self._lock:
            self._snapshots[key] = progress.model_dump_json()

    def load(self, key: str) -> Optional[ProcessingProgress]:
        with self._lock:
            raw = self._snapshots.get(key)
        return ProcessingProgress.model_validate_json(raw) if raw else None

    def request_cancel(self, job_id: str) -> None:
        with self._lock:
            self._cancelled.add(job_id)

    def is_cancel_requested(self, job_id: str) -> bool:
        with self._lock:
            return job_id in self._cancelled

    def clear_cancel(self, job_id: str) -> None:
        with self._lock:
            self._cancelled.discard(job_id)


class RedisProgressStore(ProgressStore):
    """Redis-backed store shared by the API and Celery workers."""

    def __init__(self, client: redis.Redis):
        self.client = client

    @classmethod
    def from_settings(cls) -> "RedisProgressStore":
        return cls(redis.Redis.from_url(settings.REDIS_URL, decode_responses=True))

    def save(self, key: str, progress: ProcessingProgress) -> None:
        self.client.set(key, progress.model_dump_json(), ex=KEY_TTL_SECONDS)

    def load(self, key: str) -> Optional[ProcessingProgress]:
        raw = self.client.get(key)
        if raw is None:
            return None
        try:
            return ProcessingProgress.model_validate(json.loads(raw))
        except (ValueError, TypeError) as e:
            logger.warning(f"Ignoring unreadable progress snapshot at {key}: {str(e)}")
            return None

    def request_cancel(self, job_id: str) -> None:
        self.client.set(f"{CANCEL_KEY_PREFIX}:{job_id}", "1", ex=KEY_TTL_SECONDS)

    def is_cancel_requested(self, job_id: str) -> bool:
        return bool(self.client.exists(f"{CANCEL_KEY_PREFIX}:{job_id}"))

    def clear_cancel(self, job_id: str) -> None:
        self.client.delete(f"{CANCEL_KEY_PREFIX}:{job_id}")
