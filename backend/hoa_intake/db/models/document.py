"""Document model for files ingested from archives."""
import uuid as uuid_pkg
from datetime import datetime, timezone

from sqlalchemy import BigInteger, Boolean, Column, DateTime, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import relationship

from hoa_intake.db.base import Base


class Document(Base):
    """One stored file linked to a property of an association."""

    __tablename__ = "documents"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid_pkg.uuid4)
    association_id = Column(Uuid(as_uuid=True), ForeignKey("associations.id", ondelete="CASCADE"), nullable=False)
    property_id = Column(Uuid(as_uuid=True), ForeignKey("properties.id", ondelete="CASCADE"), nullable=False)

    # File metadata
    name = Column(String(500), nullable=False)
    url = Column(String(1000), nullable=False)
    storage_path = Column(String(1000), nullable=False)
    file_type = Column(String(50))
    file_size = Column(BigInteger)
    category = Column(String(100), nullable=False, default="general")
    folder_path = Column(String(1000))  # Folder inside the archive, "General" for top-level files
    is_public = Column(Boolean, nullable=False, default=False)
    uploaded_by = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    association = relationship("Association", back_populates="documents")
    property = relationship("Property", back_populates="documents")

    __table_args__ = (
        Index("idx_documents_association_property", "association_id", "property_id"),
    )
