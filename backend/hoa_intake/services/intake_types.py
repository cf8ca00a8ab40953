"""Transient data shapes passed between intake pipeline stages."""
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ParsedUnitInfo(BaseModel):
    """Best-guess unit/address parsed from one archive path."""

    unit_number: str
    street_address: str = ""
    full_address: str
    """Raw path segment the match came from"""
    confidence: float = Field(ge=0.0, le=1.0)
    pattern: str
    """Name of the strategy that produced the match"""


class PropertyRecord(BaseModel):
    """In-memory snapshot of a property row used by the matcher."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    association_id: UUID
    unit_number: str
    address: Optional[str] = None
    property_type: str = "unit"


class PropertyMatchResult(BaseModel):
    """Outcome of matching one path against known properties."""

    property_record: Optional[PropertyRecord] = None
    match_type: str
    """exact, fuzzy, created or failed"""
    confidence: float = 0.0
    reason: str
    parsed: Optional[ParsedUnitInfo] = None

    @property
    def created(self) -> bool:
        return self.match_type == "created"


class ProcessingProgress(BaseModel):
    """Progress snapshot reported during an ingestion run."""

    stage: str
    """analyzing, creating_properties, uploading, complete or error"""
    message: str
    progress: int = 0
    files_processed: int = 0
    total_files: int = 0
    units_processed: int = 0
    total_units: int = 0
    can_resume: bool = False


class CreatedProperty(BaseModel):
    id: UUID
    address: Optional[str] = None
    unit_number: str


class DocumentStorageResult(BaseModel):
    """Aggregate result of one ingestion run."""

    success: bool
    association_id: Optional[UUID] = None
    association_name: str
    documents_imported: int = 0
    documents_skipped: int = 0
    total_files: int = 0
    created_properties: List[CreatedProperty] = Field(default_factory=list)
    created_owners: List[dict] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    processing_time: int = 0
    """Wall-clock milliseconds"""
