"""
Celery Tasks for Asynchronous Processing

Runs document archive intake in a Celery worker. Progress is reported both
through the task state (for AsyncResult polling) and the shared progress
store (last-known snapshot, survives after the result expires).
"""

import asyncio
import base64
import logging
from typing import Any, Dict, Optional

from hoa_intake.core.celery_app import celery_app
from hoa_intake.db.session import AsyncSessionLocal, engine
from hoa_intake.services.cancellation import StoreCancellationToken
from hoa_intake.services.document_storage import LocalDocumentStorage
from hoa_intake.services.document_storage_processor import DocumentStorageProcessor
from hoa_intake.services.intake_types import ProcessingProgress
from hoa_intake.services.progress_store import RedisProgressStore

logger = logging.getLogger(__name__)


async def run_archive_intake(
    archive: bytes,
    job_id: str,
    user_id: Optional[str],
    store,
    progress_callback=None,
    resume: bool = False,
) -> Dict[str, Any]:
    """
    Run one ingestion with a fresh database session.

    Args:
        archive: ZIP bytes
        job_id: Job identifier (progress key suffix and cancel scope)
        user_id: Uploading user
        store: Progress store shared with the API
        progress_callback: Optional per-snapshot callback
        resume: Restart a previous job instead of starting a new one

    Returns:
        DocumentStorageResult as a JSON-serializable dict
    """
    token = StoreCancellationToken(store, job_id)

    try:
        async with AsyncSessionLocal() as session:
            processor = DocumentStorageProcessor(
                session,
                storage=LocalDocumentStorage.from_settings(),
                progress_store=store,
                job_id=job_id,
            )
            run = processor.resume_processing if resume else processor.process_hierarchical_zip
            result = await run(
                archive,
                cancel_token=token,
                progress_callback=progress_callback,
                uploaded_by=user_id,
            )
    finally:
        # Each task runs in its own event loop; pooled connections must not outlive it
        await engine.dispose()

    store.clear_cancel(job_id)
    return result.model_dump(mode="json")


@celery_app.task(bind=True, name="process_document_archive")
def process_document_archive_task(
    self,
    job_id: str,
    user_id: str,
    filename: str,
    content_b64: str,
    resume: bool = False,
) -> Dict[str, Any]:
    """
    Ingest an uploaded document archive.

    This task:
    1. Decodes the archive (sent base64-encoded for JSON serialization)
    2. Resolves or creates the association named by the archive root folder
    3. Matches or creates a property per file and stores each document
    4. Returns the DocumentStorageResult

    Args:
        job_id: Job identifier, also used as the Celery task ID
        user_id: ID of the uploading user (from JWT)
        filename: Original archive filename, for logging
        content_b64: Base64-encoded ZIP bytes
        resume: Whether this run restarts an earlier job

    Returns:
        Dictionary with intake results
    """
    logger.info(f"Starting archive intake {job_id} ({filename}) for user {user_id}")

    archive = base64.b64decode(content_b64)
    store = RedisProgressStore.from_settings()

    def report(progress: ProcessingProgress) -> None:
        self.update_state(state="PROCESSING", meta=progress.model_dump())

    result = asyncio.run(
        run_archive_intake(archive, job_id, user_id, store, progress_callback=report, resume=resume)
    )

    logger.info(
        f"Archive intake {job_id} finished: {result['documents_imported']} imported, "
        f"{result['documents_skipped']} skipped"
    )
    return result
