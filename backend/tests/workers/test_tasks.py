"""Tests for the Celery intake task body."""
from unittest.mock import AsyncMock, MagicMock

import pytest

from hoa_intake.core.config import settings
from hoa_intake.services.progress_store import InMemoryProgressStore
from hoa_intake.workers import tasks


@pytest.fixture
def worker_env(session_factory, tmp_path, monkeypatch):
    monkeypatch.setattr(tasks, "AsyncSessionLocal", session_factory)
    monkeypatch.setattr(tasks, "engine", MagicMock(dispose=AsyncMock()))
    monkeypatch.setattr(settings, "STORAGE_ROOT", str(tmp_path / "worker-storage"))
    return tmp_path / "worker-storage"


async def test_run_archive_intake_returns_json_result(worker_env, make_zip):
    store = InMemoryProgressStore()
    snapshots = []

    result = await tasks.run_archive_intake(
        make_zip({"AcmeHOA/Unit 5/lease.pdf": b"x"}),
        job_id="job-1",
        user_id="user-1",
        store=store,
        progress_callback=snapshots.append,
    )

    assert result["success"] is True
    assert result["documents_imported"] == 1
    assert isinstance(result["association_id"], str)
    assert snapshots[-1].stage == "complete"
    assert store.load("documentImportProgress:job-1").progress == 100
    assert any(worker_env.rglob("*lease.pdf"))


async def test_cancel_requested_before_start(worker_env, make_zip):
    store = InMemoryProgressStore()
    store.request_cancel("job-2")

    result = await tasks.run_archive_intake(
        make_zip({"AcmeHOA/Unit 5/lease.pdf": b"x"}),
        job_id="job-2",
        user_id=None,
        store=store,
    )

    assert result["documents_imported"] == 0
    assert any("cancelled" in w.lower() for w in result["warnings"])
    # flag is cleared so a resume can run
    assert not store.is_cancel_requested("job-2")


async def test_resume_flag_restarts_archive(worker_env, make_zip):
    store = InMemoryProgressStore()
    archive = make_zip({"AcmeHOA/Unit 5/lease.pdf": b"x"})

    await tasks.run_archive_intake(archive, "job-3", None, store)
    result = await tasks.run_archive_intake(archive, "job-3", None, store, resume=True)

    assert result["documents_imported"] == 1
    assert result["created_properties"] == []


async def test_engine_disposed_after_each_run(worker_env, make_zip):
    store = InMemoryProgressStore()

    await tasks.run_archive_intake(make_zip({"AcmeHOA/Unit 5/lease.pdf": b"x"}), "job-4", None, store)

    tasks.engine.dispose.assert_awaited_once()


async def test_engine_disposed_when_run_raises(worker_env, make_zip, monkeypatch):
    async def broken_run(self, *args, **kwargs):
        raise RuntimeError("database went away")

    monkeypatch.setattr(tasks.DocumentStorageProcessor, "process_hierarchical_zip", broken_run)

    with pytest.raises(RuntimeError):
        await tasks.run_archive_intake(make_zip({"AcmeHOA/a.pdf": b"x"}), "job-5", None, InMemoryProgressStore())

    tasks.engine.dispose.assert_awaited_once()
