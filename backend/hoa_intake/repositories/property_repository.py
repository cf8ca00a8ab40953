"""Property repository."""
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hoa_intake.db.models.property import Property
from hoa_intake.repositories.base_repository import BaseRepository


class PropertyRepository(BaseRepository[Property]):
    """Repository for Property model operations."""

    def __init__(self, session: AsyncSession):
        """Initialize property repository.

        Args:
            session: Async database session
        """
        super().__init__(Property, session)

    async def list_by_association(self, association_id: UUID) -> List[Property]:
        """List all properties of an association, oldest first.

        Args:
            association_id: Association UUID

        Returns:
            List of Property instances
        """
        result = await self.session.execute(
            select(Property)
            .filter(Property.association_id == association_id)
            .order_by(Property.created_at)
        )
        return list(result.scalars().all())

    async def create_property(
        self,
        association_id: UUID,
        unit_number: str,
        address: Optional[str],
        property_type: str = "unit",
    ) -> Property:
        """Insert a new property row.

        Args:
            association_id: Owning association
            unit_number: Unit number (may be alphanumeric)
            address: Street address or display address
            property_type: Property type label

        Returns:
            Created Property
        """
        return await self.create(
            Property(
                association_id=association_id,
                unit_number=unit_number,
                address=address,
                property_type=property_type,
            )
        )
