"""Services package for the document intake pipeline."""

from hoa_intake.services.document_storage_processor import DocumentStorageProcessor
from hoa_intake.services.property_matcher import PropertyMatcher
from hoa_intake.services.unit_parser import extract_association_name, parse_unit_from_path

__all__ = [
    "DocumentStorageProcessor",
    "PropertyMatcher",
    "extract_association_name",
    "parse_unit_from_path",
]
