"""Shared API dependencies."""
from functools import lru_cache

from hoa_intake.services.progress_store import ProgressStore, RedisProgressStore


@lru_cache()
def get_progress_store() -> ProgressStore:
    """Progress store shared with Celery workers."""
    return RedisProgressStore.from_settings()
