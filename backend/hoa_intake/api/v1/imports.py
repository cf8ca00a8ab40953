"""
Document Import API Endpoints

Submit a document archive for intake, poll its progress, cancel it, or
restart it from scratch.
"""

import base64
import logging
import uuid
from typing import Optional

from celery.result import AsyncResult
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from pydantic import BaseModel

from hoa_intake.api.dependencies import get_progress_store
from hoa_intake.core.auth import get_current_user_id
from hoa_intake.core.config import settings
from hoa_intake.services.intake_types import ProcessingProgress
from hoa_intake.services.progress_store import ProgressStore, progress_key
from hoa_intake.workers.tasks import process_document_archive_task

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/imports/documents", tags=["imports"])

ZIP_CONTENT_TYPES = {
    "application/zip",
    "application/x-zip-compressed",
    "application/octet-stream",
}


class ImportStartedResponse(BaseModel):
    """Response when an archive intake is queued."""

    job_id: str
    """Job ID (also the Celery task ID)"""

    archive_name: str
    """Uploaded archive filename"""

    message: str
    """Human-readable message"""

    status: str = "started"


class ImportStatusResponse(BaseModel):
    """Current state of an archive intake."""

    job_id: str
    state: str
    """Celery state: PENDING, STARTED, PROCESSING, SUCCESS, FAILURE"""

    progress: Optional[ProcessingProgress] = None
    """Last-known progress snapshot"""

    result: Optional[dict] = None
    """DocumentStorageResult once the job completes"""

    error: Optional[str] = None


async def _read_archive_upload(archive: UploadFile) -> bytes:
    content = await archive.read()

    if archive.content_type not in ZIP_CONTENT_TYPES and not (archive.filename or "").lower().endswith(".zip"):
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=f"File type '{archive.content_type}' is not supported. Upload a ZIP archive.",
        )

    if not content:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Uploaded archive is empty",
        )

    if len(content) > settings.MAX_ARCHIVE_SIZE_MB * 1024 * 1024:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Archive '{archive.filename}' exceeds maximum size of {settings.MAX_ARCHIVE_SIZE_MB} MB",
        )

    return content


def _dispatch(job_id: str, user_id: str, filename: str, content: bytes, resume: bool) -> None:
    process_document_archive_task.apply_async(
        kwargs={
            "job_id": job_id,
            "user_id": user_id,
            "filename": filename,
            "content_b64": base64.b64encode(content).decode("utf-8"),
            "resume": resume,
        },
        task_id=job_id,
    )


@router.post("", response_model=ImportStartedResponse, status_code=status.HTTP_202_ACCEPTED)
async def start_import(
    archive: UploadFile = File(...),
    user_id: str = Depends(get_current_user_id),
    store: ProgressStore = Depends(get_progress_store),
) -> ImportStartedResponse:
    """
    Upload a ZIP archive of association documents and start intake.

    The archive's root folder names the association; unit folders such as
    "100 Main St. Unit 5" are matched to (or create) properties.

    Args:
        archive: ZIP archive upload
        user_id: Authenticated user ID (from JWT)

    Returns:
        Job ID and status message
    """
    content = await _read_archive_upload(archive)
    job_id = uuid.uuid4().hex
    filename = archive.filename or "archive.zip"

    store.save(
        progress_key(job_id),
        ProcessingProgress(stage="analyzing", message="Queued for processing...", progress=0),
    )
    _dispatch(job_id, user_id, filename, content, resume=False)

    logger.info(f"Queued archive intake {job_id} ({filename}, {len(content)} bytes) for user {user_id}")
    return ImportStartedResponse(
        job_id=job_id,
        archive_name=filename,
        message=f"Started processing {filename}",
    )


@router.get("/{job_id}", response_model=ImportStatusResponse)
async def get_import_status(
    job_id: str,
    user_id: str = Depends(get_current_user_id),
    store: ProgressStore = Depends(get_progress_store),
) -> ImportStatusResponse:
    """
    Check the status of an archive intake.

    Args:
        job_id: Job ID returned from the upload
        user_id: Authenticated user ID (from JWT)

    Returns:
        Celery state, last-known progress and the final result when done
    """
    task_result = AsyncResult(job_id)
    response = ImportStatusResponse(
        job_id=job_id,
        state=task_result.state,
        progress=store.load(progress_key(job_id)),
    )

    if task_result.state == "SUCCESS":
        response.result = task_result.result
    elif task_result.state == "FAILURE":
        response.error = str(task_result.info)

    return response


@router.delete("/{job_id}")
async def cancel_import(
    job_id: str,
    user_id: str = Depends(get_current_user_id),
    store: ProgressStore = Depends(get_progress_store),
) -> dict:
    """
    Request cancellation of a running intake.

    Cancellation is cooperative: the run stops before its next file and
    keeps everything imported so far.
    """
    store.request_cancel(job_id)
    logger.info(f"Intake {job_id} cancellation requested by user {user_id}")

    return {
        "job_id": job_id,
        "message": "Import cancellation requested",
        "status": "cancelling",
    }


@router.post("/{job_id}/resume", response_model=ImportStartedResponse, status_code=status.HTTP_202_ACCEPTED)
async def resume_import(
    job_id: str,
    archive: UploadFile = File(...),
    user_id: str = Depends(get_current_user_id),
    store: ProgressStore = Depends(get_progress_store),
) -> ImportStartedResponse:
    """
    Restart an intake with the same archive.

    The whole archive is processed again from the start under the same job
    ID; files already matched reuse their properties.
    """
    content = await _read_archive_upload(archive)
    filename = archive.filename or "archive.zip"

    store.clear_cancel(job_id)
    store.save(
        progress_key(job_id),
        ProcessingProgress(stage="analyzing", message="Queued for restart...", progress=0),
    )
    _dispatch(job_id, user_id, filename, content, resume=True)

    logger.info(f"Restarted archive intake {job_id} ({filename}) for user {user_id}")
    return ImportStartedResponse(
        job_id=job_id,
        archive_name=filename,
        message=f"Restarted processing {filename}",
    )
