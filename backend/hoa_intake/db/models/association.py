"""Association model (tenant root)."""
import uuid as uuid_pkg
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String, Uuid
from sqlalchemy.orm import relationship

from hoa_intake.db.base import Base


class Association(Base):
    """A tenant organization, e.g. one HOA."""

    __tablename__ = "associations"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid_pkg.uuid4)
    # Unique so concurrent intake runs cannot create the same association twice
    name = Column(String(255), unique=True, nullable=False, index=True)
    status = Column(String(50), nullable=False, default="active")
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    properties = relationship("Property", back_populates="association", cascade="all, delete-orphan")
    documents = relationship("Document", back_populates="association", cascade="all, delete-orphan")
