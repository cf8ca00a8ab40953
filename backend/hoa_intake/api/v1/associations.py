"""Association browsing endpoints for intake results."""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict
from sqlalchemy.ext.asyncio import AsyncSession

from hoa_intake.core.auth import get_current_user_id
from hoa_intake.db.session import get_session
from hoa_intake.repositories.association_repository import AssociationRepository
from hoa_intake.repositories.document_repository import DocumentRepository
from hoa_intake.repositories.property_repository import PropertyRepository

router = APIRouter(prefix="/associations", tags=["associations"])


class PropertyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    unit_number: str
    address: Optional[str]
    property_type: str
    created_at: datetime


class DocumentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    property_id: UUID
    name: str
    url: str
    file_type: Optional[str]
    file_size: Optional[int]
    category: str
    folder_path: Optional[str]
    is_public: bool
    created_at: datetime


async def _require_association(association_id: UUID, session: AsyncSession) -> None:
    association = await AssociationRepository(session).get_by_id(association_id)
    if association is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Association not found: {association_id}",
        )


@router.get("/{association_id}/properties", response_model=List[PropertyResponse])
async def list_properties(
    association_id: UUID,
    session: AsyncSession = Depends(get_session),
    user_id: str = Depends(get_current_user_id),
):
    """List the properties of an association."""
    await _require_association(association_id, session)
    return await PropertyRepository(session).list_by_association(association_id)


@router.get("/{association_id}/documents", response_model=List[DocumentResponse])
async def list_documents(
    association_id: UUID,
    property_id: Optional[UUID] = None,
    session: AsyncSession = Depends(get_session),
    user_id: str = Depends(get_current_user_id),
):
    """List the documents of an association, optionally for one property."""
    await _require_association(association_id, session)
    return await DocumentRepository(session).list_by_association(association_id, property_id)
