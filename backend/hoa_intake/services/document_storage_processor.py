"""
Document Storage Processor

Ingests a hierarchical ZIP archive of association documents:

    AcmeHOA/100 Main St. Unit 5/lease.pdf
    AcmeHOA/100 Main St. Unit 5/invoice.pdf

The run moves through the stages analyzing -> creating_properties ->
uploading -> complete (or error). Files are processed one at a time so the
in-memory property list the matcher grows stays consistent across files.
Per-file failures are recorded and skipped; nothing is retried or rolled
back.

Usage:
    processor = DocumentStorageProcessor(session, storage, progress_store)
    result = await processor.process_hierarchical_zip(archive_bytes)
"""

import logging
import math
import time
from typing import BinaryIO, Callable, Dict, List, Optional, Union
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hoa_intake.core.config import settings
from hoa_intake.core.exceptions import IntakeError, StorageError
from hoa_intake.repositories.association_repository import AssociationRepository
from hoa_intake.repositories.document_repository import DocumentRepository
from hoa_intake.repositories.property_repository import PropertyRepository
from hoa_intake.services.archive_reader import ArchiveEntry, read_archive
from hoa_intake.services.cancellation import CancellationToken
from hoa_intake.services.document_categories import categorize_document, get_file_extension
from hoa_intake.services.document_storage import LocalDocumentStorage
from hoa_intake.services.intake_types import (
    CreatedProperty,
    DocumentStorageResult,
    ProcessingProgress,
    PropertyMatchResult,
)
from hoa_intake.services.progress_store import ProgressStore, progress_key
from hoa_intake.services.property_matcher import PropertyMatcher
from hoa_intake.services.unit_parser import extract_association_name

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProcessingProgress], None]

MATCH_TYPES = ("exact", "fuzzy", "created", "failed")


class DocumentStorageProcessor:
    """Drives the parser and matcher over every file of one archive."""

    def __init__(
        self,
        session: AsyncSession,
        storage: LocalDocumentStorage,
        progress_store: Optional[ProgressStore] = None,
        job_id: Optional[str] = None,
        max_document_size_mb: Optional[int] = None,
    ):
        """
        Initialize the processor.

        Args:
            session: Async database session used for all writes of the run
            storage: Where document bytes are stored
            progress_store: Optional key-value slot mirroring progress snapshots
            job_id: Optional job identifier; suffixes the progress key
            max_document_size_mb: Per-document size limit (defaults to settings)
        """
        self.associations = AssociationRepository(session)
        self.properties = PropertyRepository(session)
        self.documents = DocumentRepository(session)
        self.matcher = PropertyMatcher(self.properties)
        self.storage = storage
        self.progress_store = progress_store
        self.progress_key = progress_key(job_id)
        self.max_document_size_mb = max_document_size_mb or settings.MAX_DOCUMENT_SIZE_MB

    def _report(self, progress: ProcessingProgress, callback: Optional[ProgressCallback]) -> None:
        if callback is not None:
            callback(progress)
        if self.progress_store is not None:
            self.progress_store.save(self.progress_key, progress)

    def _report_during_upload(
        self,
        progress: ProcessingProgress,
        callback: Optional[ProgressCallback],
        warnings: List[str],
    ) -> None:
        """Report progress once files are being stored; a failed report never stops the run."""
        try:
            self._report(progress, callback)
        except Exception as e:
            logger.warning(f"Progress update failed at {progress.files_processed}/{progress.total_files}: {str(e)}")
            warnings.append(f"Progress update failed after {progress.files_processed} files: {str(e)}")

    @staticmethod
    def _cancel_requested(cancel_token: CancellationToken) -> bool:
        try:
            return cancel_token.is_cancelled
        except Exception as e:
            logger.warning(f"Could not read cancellation state, continuing: {str(e)}")
            return False

    async def process_hierarchical_zip(
        self,
        archive: Union[bytes, BinaryIO],
        cancel_token: Optional[CancellationToken] = None,
        progress_callback: Optional[ProgressCallback] = None,
        uploaded_by: Optional[str] = None,
    ) -> DocumentStorageResult:
        """
        Run one ingestion over an archive.

        Args:
            archive: ZIP archive bytes or binary file object
            cancel_token: Checked once per file; cancelling keeps prior imports
            progress_callback: Receives a snapshot at each stage and after each file
            uploaded_by: User ID recorded on created documents

        Returns:
            DocumentStorageResult. Top-level failures come back with
            success=False and a single error instead of raising.
        """
        start_time = time.monotonic()
        cancel_token = cancel_token or CancellationToken()

        try:
            self._report(
                ProcessingProgress(stage="analyzing", message="Analyzing ZIP file structure...", progress=5),
                progress_callback,
            )

            entries = read_archive(archive)
            association_name = extract_association_name(entries[0].path) or settings.DEFAULT_ASSOCIATION_NAME
            logger.info(f"Starting intake of {len(entries)} files for association '{association_name}'")

            self._report(
                ProcessingProgress(
                    stage="analyzing",
                    message=f"Found {len(entries)} files. Creating association: {association_name}",
                    progress=15,
                    total_files=len(entries),
                ),
                progress_callback,
            )

            association = await self.associations.get_or_create_by_name(association_name)
            # Plain values: a rollback after a failed write expires ORM instances
            association_id = association.id
            association_name = association.name

            self._report(
                ProcessingProgress(
                    stage="creating_properties",
                    message="Analyzing file structure and matching properties...",
                    progress=20,
                    total_files=len(entries),
                ),
                progress_callback,
            )

            result = await self._upload_entries(
                entries, association_id, association_name, cancel_token, progress_callback, uploaded_by
            )

        except Exception as e:
            if isinstance(e, IntakeError):
                logger.error(f"Document intake failed: {str(e)}")
            else:
                logger.exception(f"Document intake failed unexpectedly: {str(e)}")
            self._report(
                ProcessingProgress(
                    stage="error",
                    message=f"Import failed: {str(e)}",
                    progress=0,
                    can_resume=True,
                ),
                progress_callback,
            )
            return DocumentStorageResult(
                success=False,
                association_name="Unknown",
                errors=[str(e)],
                processing_time=self._elapsed_ms(start_time),
            )

        result.processing_time = self._elapsed_ms(start_time)
        logger.info(
            f"Intake finished: {result.documents_imported} imported, "
            f"{result.documents_skipped} skipped in {result.processing_time} ms"
        )
        return result

    async def resume_processing(
        self,
        archive: Union[bytes, BinaryIO],
        cancel_token: Optional[CancellationToken] = None,
        progress_callback: Optional[ProgressCallback] = None,
        uploaded_by: Optional[str] = None,
    ) -> DocumentStorageResult:
        """Restart the whole archive from scratch; no partial state is reused."""
        logger.info("Resuming document intake by restarting the archive")
        return await self.process_hierarchical_zip(
            archive,
            cancel_token=cancel_token,
            progress_callback=progress_callback,
            uploaded_by=uploaded_by,
        )

    async def _upload_entries(
        self,
        entries: List[ArchiveEntry],
        association_id: UUID,
        association_name: str,
        cancel_token: CancellationToken,
        progress_callback: Optional[ProgressCallback],
        uploaded_by: Optional[str],
    ) -> DocumentStorageResult:
        total_files = len(entries)
        existing_properties = await self.matcher.load_existing_properties(association_id)

        imported = 0
        skipped = 0
        files_processed = 0
        errors: List[str] = []
        warnings: List[str] = []
        created_properties: List[CreatedProperty] = []
        match_stats: Dict[str, int] = {match_type: 0 for match_type in MATCH_TYPES}

        self._report_during_upload(
            ProcessingProgress(
                stage="uploading",
                message="Uploading documents to storage...",
                progress=20,
                total_files=total_files,
                units_processed=len(existing_properties),
                total_units=len(existing_properties),
            ),
            progress_callback,
            warnings,
        )

        for entry in entries:
            if self._cancel_requested(cancel_token):
                warnings.append(f"Import cancelled after {files_processed} of {total_files} files")
                logger.warning(f"Intake cancelled at {files_processed}/{total_files}")
                break

            try:
                match = await self.matcher.find_or_create_property(
                    entry.path, association_id, existing_properties
                )
                match_stats[match.match_type] += 1

                if match.property_record is None:
                    errors.append(f"Skipped {entry.path}: {match.reason}")
                    skipped += 1
                elif match.property_record.association_id != association_id:
                    errors.append(f"Skipped {entry.path}: matched property belongs to another association")
                    skipped += 1
                else:
                    if match.created:
                        created_properties.append(
                            CreatedProperty(
                                id=match.property_record.id,
                                address=match.property_record.address,
                                unit_number=match.property_record.unit_number,
                            )
                        )
                    warning = await self._store_document(entry, match, association_id, uploaded_by)
                    if warning:
                        warnings.append(warning)
                        skipped += 1
                    else:
                        imported += 1

            except Exception as e:
                logger.error(f"  ✗ Failed to process {entry.path}: {str(e)}")
                await self.properties.rollback()
                errors.append(f"Processing failed for {entry.filename}: {str(e)}")
                skipped += 1

            files_processed += 1
            self._report_during_upload(
                ProcessingProgress(
                    stage="uploading",
                    message=f"Processed {files_processed}/{total_files} files...",
                    progress=20 + math.floor(files_processed / total_files * 70),
                    files_processed=files_processed,
                    total_files=total_files,
                    units_processed=len(existing_properties),
                    total_units=len(existing_properties),
                ),
                progress_callback,
                warnings,
            )

        warnings.append(
            "Match summary: "
            + ", ".join(f"{match_type}={match_stats[match_type]}" for match_type in MATCH_TYPES)
        )

        finished = files_processed == total_files
        self._report_during_upload(
            ProcessingProgress(
                stage="complete",
                message=(
                    f"Import completed: {imported} imported, {skipped} skipped"
                    if finished
                    else f"Import cancelled: {imported} imported before stopping"
                ),
                progress=100 if finished else 20 + math.floor(files_processed / total_files * 70),
                files_processed=files_processed,
                total_files=total_files,
                units_processed=len(existing_properties),
                total_units=len(existing_properties),
            ),
            progress_callback,
            warnings,
        )

        return DocumentStorageResult(
            success=imported > 0,
            association_id=association_id,
            association_name=association_name,
            documents_imported=imported,
            documents_skipped=skipped,
            total_files=total_files,
            created_properties=created_properties,
            errors=errors,
            warnings=warnings,
        )

    async def _store_document(
        self,
        entry: ArchiveEntry,
        match: PropertyMatchResult,
        association_id: UUID,
        uploaded_by: Optional[str],
    ) -> Optional[str]:
        """Upload one file and insert its document row.

        Returns:
            None on success, otherwise a warning naming the skipped file
        """
        max_bytes = self.max_document_size_mb * 1024 * 1024
        if entry.size > max_bytes:
            size_mb = entry.size / 1024 / 1024
            return (
                f"Skipped {entry.path}: file size ({size_mb:.2f} MB) exceeds "
                f"maximum allowed size of {self.max_document_size_mb} MB"
            )

        try:
            stored = self.storage.upload(association_id, entry.path, entry.content)
        except StorageError as e:
            return f"Upload failed for {entry.path}: {str(e)}"

        try:
            await self.documents.create_document(
                association_id=association_id,
                property_id=match.property_record.id,
                name=entry.filename,
                url=stored.url,
                storage_path=stored.path,
                file_type=get_file_extension(entry.filename),
                file_size=entry.size,
                category=categorize_document(entry.filename),
                folder_path=entry.folder_path,
                is_public=False,
                uploaded_by=uploaded_by,
            )
        except SQLAlchemyError as e:
            await self.documents.rollback()
            self.storage.delete(stored.path)
            return f"Database save failed for {entry.path}: {str(e)}"

        logger.info(f"  ✓ Imported {entry.path} -> unit {match.property_record.unit_number} ({match.match_type})")
        return None

    @staticmethod
    def _elapsed_ms(start_time: float) -> int:
        return int((time.monotonic() - start_time) * 1000)
