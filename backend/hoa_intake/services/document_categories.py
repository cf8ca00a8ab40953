"""Filename-based document categorization and file type helpers."""
from pathlib import PurePosixPath
from typing import List, Tuple

# Checked in order; first keyword hit decides the category
CATEGORY_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    ("lease", ("lease",)),
    ("insurance", ("insurance",)),
    ("maintenance", ("maintenance", "repair")),
    ("inspection", ("inspection",)),
    ("legal", ("legal", "contract")),
    ("financial", ("financial", "invoice")),
    ("governing_documents", ("bylaw", "rule")),
]


def categorize_document(filename: str) -> str:
    """Derive a document category from keywords in the filename."""
    name = filename.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in name for keyword in keywords):
            return category
    return "general"


def get_file_extension(filename: str) -> str:
    suffix = PurePosixPath(filename).suffix.lower().lstrip(".")
    return suffix or "unknown"
