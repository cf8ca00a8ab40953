"""Association repository."""
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hoa_intake.core.exceptions import AssociationResolutionError
from hoa_intake.db.models.association import Association
from hoa_intake.repositories.base_repository import BaseRepository

logger = logging.getLogger(__name__)


class AssociationRepository(BaseRepository[Association]):
    """Repository for Association model operations."""

    def __init__(self, session: AsyncSession):
        """Initialize association repository.

        Args:
            session: Async database session
        """
        super().__init__(Association, session)

    async def get_by_name(self, name: str) -> Optional[Association]:
        """Get association by exact name.

        Args:
            name: Association name

        Returns:
            Association instance or None if not found
        """
        result = await self.session.execute(
            select(Association).filter(Association.name == name)
        )
        return result.scalar_one_or_none()

    async def get_or_create_by_name(self, name: str) -> Association:
        """Find an association by name or create it with status 'active'.

        The name column is unique. When a concurrent run inserts the same
        name first, the insert conflicts and the winner's row is re-fetched.

        Args:
            name: Association name

        Returns:
            Existing or newly created Association

        Raises:
            AssociationResolutionError: If the row can neither be created nor found
        """
        existing = await self.get_by_name(name)
        if existing:
            logger.info(f"Found existing association: {name} ({existing.id})")
            return existing

        try:
            association = await self.create(Association(name=name, status="active"))
        except IntegrityError as e:
            await self.rollback()
            logger.warning(f"Association '{name}' was created concurrently, re-fetching")
            existing = await self.get_by_name(name)
            if existing is None:
                raise AssociationResolutionError(name, str(e.orig)) from e
            return existing

        logger.info(f"Created new association: {name} ({association.id})")
        return association
