"""Repository exports."""
from hoa_intake.repositories.association_repository import AssociationRepository
from hoa_intake.repositories.document_repository import DocumentRepository
from hoa_intake.repositories.property_repository import PropertyRepository

__all__ = [
    "AssociationRepository",
    "PropertyRepository",
    "DocumentRepository",
]
