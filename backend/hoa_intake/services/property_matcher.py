"""
Property Matcher

Links a parsed archive path to an existing property of an association,
or creates a new property row when nothing matches.

The list of known properties is owned by the caller and grows in place as
properties are created, so later files of the same ingestion run match
the rows created for earlier files. Runs are strictly sequential; the list
is never touched by two coroutines at once.
"""

import logging
import re
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from hoa_intake.repositories.property_repository import PropertyRepository
from hoa_intake.services.intake_types import ParsedUnitInfo, PropertyMatchResult, PropertyRecord
from hoa_intake.services.unit_parser import parse_unit_from_path

logger = logging.getLogger(__name__)

CREATED_CONFIDENCE = 0.8

STREET_SUFFIXES = {
    "street", "st", "road", "rd", "avenue", "ave", "av", "drive", "dr",
    "lane", "ln", "boulevard", "blvd", "court", "ct", "place", "pl",
    "circle", "cir", "way", "parkway", "pkwy", "terrace", "ter", "trail",
    "trl", "highway", "hwy",
}
PUNCTUATION = re.compile(r"[^\w\s]")


def normalize_address(address: Optional[str]) -> str:
    """Lowercase, drop punctuation and street-suffix words, collapse spaces."""
    if not address:
        return ""
    words = PUNCTUATION.sub(" ", address.lower()).split()
    return " ".join(word for word in words if word not in STREET_SUFFIXES)


def fuzzy_match_property(
    parsed: ParsedUnitInfo, properties: List[PropertyRecord]
) -> Optional[Tuple[PropertyRecord, str]]:
    """
    Find the first property matching the parsed unit.

    Rules are tried in order, and within a rule the first candidate wins:
    1. case-insensitive unit number equality -> "exact"
    2. normalized street address containment (either direction) ->
       "exact" if the unit numbers agree, otherwise "fuzzy"
    3. unit number substring containment (either direction) -> "fuzzy"

    Args:
        parsed: Parsed unit info
        properties: Candidate properties

    Returns:
        (property, match_type) or None if nothing matches
    """
    unit = parsed.unit_number.strip().lower()

    if unit:
        for candidate in properties:
            if candidate.unit_number.strip().lower() == unit:
                return candidate, "exact"

    street = normalize_address(parsed.street_address)
    if street:
        for candidate in properties:
            candidate_street = normalize_address(candidate.address)
            if candidate_street and (street in candidate_street or candidate_street in street):
                same_unit = candidate.unit_number.strip().lower() == unit
                return candidate, "exact" if same_unit else "fuzzy"

    if unit:
        for candidate in properties:
            candidate_unit = candidate.unit_number.strip().lower()
            if candidate_unit and (unit in candidate_unit or candidate_unit in unit):
                return candidate, "fuzzy"

    return None


class PropertyMatcher:
    """Resolve archive paths to property rows of one association."""

    def __init__(self, property_repository: PropertyRepository):
        """
        Initialize the matcher.

        Args:
            property_repository: Repository used to load and create properties
        """
        self.properties = property_repository

    async def load_existing_properties(self, association_id: UUID) -> List[PropertyRecord]:
        """Snapshot the association's properties for in-memory matching."""
        rows = await self.properties.list_by_association(association_id)
        logger.info(f"Loaded {len(rows)} existing properties for association {association_id}")
        return [PropertyRecord.model_validate(row) for row in rows]

    async def find_or_create_property(
        self,
        path: str,
        association_id: UUID,
        existing_properties: List[PropertyRecord],
    ) -> PropertyMatchResult:
        """
        Match a path to a property, creating the property when needed.

        Newly created properties are appended to ``existing_properties``.

        Args:
            path: Archive entry path
            association_id: Association the property must belong to
            existing_properties: Known properties of the association (mutated)

        Returns:
            PropertyMatchResult describing the outcome
        """
        parsed = parse_unit_from_path(path)
        if parsed is None:
            return PropertyMatchResult(
                match_type="failed",
                confidence=0.0,
                reason=f"Could not parse unit information from path: {path}",
            )

        match = fuzzy_match_property(parsed, existing_properties)
        if match is not None:
            candidate, match_type = match
            logger.debug(f"Matched '{path}' to unit {candidate.unit_number} ({match_type})")
            return PropertyMatchResult(
                property_record=candidate,
                match_type=match_type,
                confidence=parsed.confidence,
                reason=f"Matched unit {candidate.unit_number} via {parsed.pattern}",
                parsed=parsed,
            )

        if parsed.unit_number:
            address = parsed.street_address or f"Unit {parsed.unit_number}"
            try:
                row = await self.properties.create_property(
                    association_id=association_id,
                    unit_number=parsed.unit_number,
                    address=address,
                    property_type="unit",
                )
            except SQLAlchemyError as e:
                await self.properties.rollback()
                logger.error(f"Failed to create property for unit {parsed.unit_number}: {str(e)}")
            else:
                record = PropertyRecord.model_validate(row)
                existing_properties.append(record)
                logger.info(f"Created property: unit {record.unit_number} ({record.address})")
                return PropertyMatchResult(
                    property_record=record,
                    match_type="created",
                    confidence=CREATED_CONFIDENCE,
                    reason=f"Created new property for unit {record.unit_number}",
                    parsed=parsed,
                )

        return PropertyMatchResult(
            match_type="failed",
            confidence=0.0,
            reason=(
                f"No property matched or created for unit '{parsed.unit_number}' "
                f"(address='{parsed.street_address}', segment='{parsed.full_address}', "
                f"pattern={parsed.pattern})"
            ),
            parsed=parsed,
        )
