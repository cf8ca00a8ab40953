"""Database models package."""
from hoa_intake.db.models.association import Association
from hoa_intake.db.models.document import Document
from hoa_intake.db.models.property import Property

__all__ = [
    "Association",
    "Property",
    "Document",
]
