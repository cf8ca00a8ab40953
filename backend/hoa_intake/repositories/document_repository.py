"""Document repository."""
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hoa_intake.db.models.document import Document
from hoa_intake.repositories.base_repository import BaseRepository


class DocumentRepository(BaseRepository[Document]):
    """Repository for Document model operations."""

    def __init__(self, session: AsyncSession):
        """Initialize document repository.

        Args:
            session: Async database session
        """
        super().__init__(Document, session)

    async def list_by_association(
        self, association_id: UUID, property_id: Optional[UUID] = None
    ) -> List[Document]:
        """List documents of an association, optionally for one property.

        Args:
            association_id: Association UUID for tenant isolation
            property_id: Optional property filter

        Returns:
            List of Document instances
        """
        query = select(Document).filter(Document.association_id == association_id)

        if property_id is not None:
            query = query.filter(Document.property_id == property_id)

        result = await self.session.execute(query.order_by(Document.created_at))
        return list(result.scalars().all())

    async def create_document(
        self,
        association_id: UUID,
        property_id: UUID,
        name: str,
        url: str,
        storage_path: str,
        file_type: str,
        file_size: int,
        category: str,
        folder_path: str,
        is_public: bool = False,
        uploaded_by: Optional[str] = None,
    ) -> Document:
        """Insert a document row.

        Returns:
            Created Document
        """
        return await self.create(
            Document(
                association_id=association_id,
                property_id=property_id,
                name=name,
                url=url,
                storage_path=storage_path,
                file_type=file_type,
                file_size=file_size,
                category=category,
                folder_path=folder_path,
                is_public=is_public,
                uploaded_by=uploaded_by,
            )
        )
