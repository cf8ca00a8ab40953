"""
Unit/Address Parser

Turns an archive path such as "AcmeHOA/1490 Rusk Rd. Unit 301/lease.pdf"
into a best-guess unit number and street address.

Each path segment is tried in order against an ordered list of regex
strategies; the first segment/strategy pair that matches wins, even if a
later one would have scored higher.
"""

import logging
import re
from typing import Callable, List, Optional, Tuple

from hoa_intake.services.intake_types import ParsedUnitInfo

logger = logging.getLogger(__name__)

KNOWN_EXTENSIONS = re.compile(
    r"\.(pdf|docx?|xlsx?|csv|txt|rtf|jpe?g|png|gif|tiff?|heic|msg|eml|zip)$",
    re.IGNORECASE,
)
PATH_SEPARATORS = re.compile(r"[\\/]+")
BARE_FILENAME = re.compile(r"^[^.]+\.[A-Za-z0-9]{1,5}$")

KEYWORD_GAP = r"(?:\s*#\s*|\s+|(?=\d))"
UNIT_TOKEN = r"([A-Za-z0-9][A-Za-z0-9-]*)"
# A lone "Unit ..." label must contain a digit ("Unit Owners" is not a unit)
LABELLED_UNIT_TOKEN = r"([A-Za-z0-9-]*\d[A-Za-z0-9-]*)"
# A street address starts with a street number
STREET = r"(\d+[A-Za-z]?\s+[^/\\]*?)"

ADDRESS_UNIT = re.compile(rf"^{STREET},?\s+unit{KEYWORD_GAP}{UNIT_TOKEN}$", re.IGNORECASE)
ADDRESS_APARTMENT = re.compile(rf"^{STREET},?\s+(?:apt\.?|apartment){KEYWORD_GAP}{UNIT_TOKEN}$", re.IGNORECASE)
UNIT_LABEL = re.compile(rf"^unit{KEYWORD_GAP}{LABELLED_UNIT_TOKEN}$", re.IGNORECASE)
BARE_UNIT = re.compile(r"^#?([A-Za-z]{0,2}\d+[A-Za-z]?)$")
BUILDING_UNIT = re.compile(rf"\bbuilding\s+([A-Za-z0-9-]+)\b.*?\bunit{KEYWORD_GAP}{UNIT_TOKEN}", re.IGNORECASE)


def _address_unit(segment: str) -> Optional[Tuple[str, str]]:
    match = ADDRESS_UNIT.match(segment)
    if match:
        return match.group(2), match.group(1).strip(" ,")
    return None


def _address_apartment(segment: str) -> Optional[Tuple[str, str]]:
    match = ADDRESS_APARTMENT.match(segment)
    if match:
        return match.group(2), match.group(1).strip(" ,")
    return None


def _unit_only(segment: str) -> Optional[Tuple[str, str]]:
    match = UNIT_LABEL.match(segment) or BARE_UNIT.match(segment)
    if match:
        return match.group(1), ""
    return None


def _building_unit(segment: str) -> Optional[Tuple[str, str]]:
    match = BUILDING_UNIT.search(segment)
    if match:
        return match.group(2), f"Building {match.group(1)}"
    return None


# (name, confidence, matcher) in the order they are tried
STRATEGIES: List[Tuple[str, float, Callable[[str], Optional[Tuple[str, str]]]]] = [
    ("address_unit", 0.95, _address_unit),
    ("address_apartment", 0.90, _address_apartment),
    ("unit_only", 0.60, _unit_only),
    ("building_unit", 0.70, _building_unit),
]


def split_path(path: str) -> List[str]:
    """Strip a known file extension and split a path into non-empty segments."""
    stripped = KNOWN_EXTENSIONS.sub("", path.strip())
    return [segment.strip() for segment in PATH_SEPARATORS.split(stripped) if segment.strip()]


def parse_unit_from_path(path: str) -> Optional[ParsedUnitInfo]:
    """
    Parse a unit number and street address out of a file path.

    Args:
        path: Archive entry path, e.g. "AcmeHOA/100 Main St. Unit 5/lease.pdf"

    Returns:
        ParsedUnitInfo for the first matching segment, or None when no
        segment matches any strategy
    """
    for segment in split_path(path or ""):
        for name, confidence, strategy in STRATEGIES:
            hit = strategy(segment)
            if hit is None:
                continue

            unit_number, street_address = hit
            logger.debug(f"Parsed unit '{unit_number}' from '{segment}' via {name}")
            return ParsedUnitInfo(
                unit_number=unit_number,
                street_address=street_address,
                full_address=segment,
                confidence=confidence,
                pattern=name,
            )

    logger.debug(f"No unit found in path: {path}")
    return None


def extract_association_name(path: str) -> Optional[str]:
    """
    Take the first path segment as the association name.

    Returns None when the first segment looks like a bare filename
    (e.g. "readme.txt" at the archive root).
    """
    segments = [segment.strip() for segment in PATH_SEPARATORS.split(path or "") if segment.strip()]
    if not segments:
        return None

    first = segments[0]
    if BARE_FILENAME.match(first):
        return None
    return first
