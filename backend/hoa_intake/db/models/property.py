"""Property (unit) model."""
import uuid as uuid_pkg
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import relationship

from hoa_intake.db.base import Base


class Property(Base):
    """A unit/address record within an association."""

    __tablename__ = "properties"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid_pkg.uuid4)
    association_id = Column(Uuid(as_uuid=True), ForeignKey("associations.id", ondelete="CASCADE"), nullable=False)
    unit_number = Column(String(50), nullable=False)  # May be alphanumeric, e.g. "12B"
    address = Column(String(500), nullable=True)
    property_type = Column(String(50), nullable=False, default="unit")
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    association = relationship("Association", back_populates="properties")
    documents = relationship("Document", back_populates="property")

    __table_args__ = (
        Index("idx_properties_association_unit", "association_id", "unit_number"),
    )
