"""Tests for the property matcher."""
import uuid

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from hoa_intake.db.models.association import Association
from hoa_intake.db.models.property import Property
from hoa_intake.repositories.property_repository import PropertyRepository
from hoa_intake.services.intake_types import ParsedUnitInfo, PropertyRecord
from hoa_intake.services.property_matcher import (
    PropertyMatcher,
    fuzzy_match_property,
    normalize_address,
)

ASSOCIATION_ID = uuid.uuid4()


def make_record(unit_number: str, address: str = None) -> PropertyRecord:
    return PropertyRecord(
        id=uuid.uuid4(),
        association_id=ASSOCIATION_ID,
        unit_number=unit_number,
        address=address,
    )


def make_parsed(unit_number: str, street_address: str = "") -> ParsedUnitInfo:
    return ParsedUnitInfo(
        unit_number=unit_number,
        street_address=street_address,
        full_address=f"{street_address} Unit {unit_number}".strip(),
        confidence=0.95,
        pattern="address_unit",
    )


@pytest.fixture
async def association(session) -> Association:
    association = Association(name="AcmeHOA", status="active")
    session.add(association)
    await session.commit()
    return association


class TestNormalizeAddress:
    """Test address normalization."""

    def test_strips_suffixes_and_punctuation(self):
        assert normalize_address("100 Main St.") == "100 main"
        assert normalize_address("1490 Rusk Road") == "1490 rusk"

    def test_empty(self):
        assert normalize_address(None) == ""
        assert normalize_address("") == ""


class TestFuzzyMatchProperty:
    """Test the in-memory matching rules."""

    def test_exact_unit_match_is_case_insensitive(self):
        target = make_record("12b")
        properties = [make_record("7"), target]

        assert fuzzy_match_property(make_parsed("12B"), properties) == (target, "exact")

    def test_address_containment_with_other_unit_is_fuzzy(self):
        target = make_record("6", "100 Main Street")

        match = fuzzy_match_property(make_parsed("5", "100 Main St."), [target])

        assert match == (target, "fuzzy")

    def test_unit_substring_is_fuzzy(self):
        target = make_record("301A")

        match = fuzzy_match_property(make_parsed("301"), [target])

        assert match == (target, "fuzzy")

    def test_exact_rule_beats_earlier_fuzzy_candidate(self):
        fuzzy_candidate = make_record("1501")
        exact_candidate = make_record("501")

        match = fuzzy_match_property(make_parsed("501"), [fuzzy_candidate, exact_candidate])

        assert match == (exact_candidate, "exact")

    def test_no_match(self):
        assert fuzzy_match_property(make_parsed("9"), [make_record("4", "22 Oak Lane")]) is None
        assert fuzzy_match_property(make_parsed("9"), []) is None

    def test_idempotent(self):
        properties = [make_record("3"), make_record("12", "100 Main St")]
        parsed = make_parsed("12")

        first = fuzzy_match_property(parsed, properties)
        second = fuzzy_match_property(parsed, properties)

        assert first == second
        assert len(properties) == 2


class TestFindOrCreateProperty:
    """Test matching against the database-backed repository."""

    async def test_unparsable_path_fails(self, session, association):
        matcher = PropertyMatcher(PropertyRepository(session))
        existing = []

        result = await matcher.find_or_create_property("readme.txt", association.id, existing)

        assert result.match_type == "failed"
        assert result.confidence == 0
        assert result.property_record is None
        assert "Could not parse" in result.reason
        assert existing == []

    async def test_creates_then_matches_exact(self, session, association):
        matcher = PropertyMatcher(PropertyRepository(session))
        existing = []

        created = await matcher.find_or_create_property(
            "AcmeHOA/100 Main St. Unit 5/lease.pdf", association.id, existing
        )
        again = await matcher.find_or_create_property(
            "AcmeHOA/100 Main St. Unit 5/invoice.pdf", association.id, existing
        )

        assert created.match_type == "created"
        assert created.created
        assert created.confidence == 0.8
        assert created.property_record.unit_number == "5"
        assert created.property_record.address == "100 Main St."
        assert created.property_record.association_id == association.id

        assert again.match_type == "exact"
        assert again.property_record.id == created.property_record.id
        assert existing == [created.property_record]

        count = await session.scalar(select(func.count()).select_from(Property))
        assert count == 1

    async def test_created_address_defaults_to_unit_label(self, session, association):
        matcher = PropertyMatcher(PropertyRepository(session))

        result = await matcher.find_or_create_property("AcmeHOA/Unit 9/a.pdf", association.id, [])

        assert result.property_record.address == "Unit 9"
        assert result.property_record.property_type == "unit"

    async def test_load_existing_properties(self, session, association):
        session.add(Property(association_id=association.id, unit_number="4", address="4 Elm St"))
        other = Association(name="Other HOA")
        session.add(other)
        await session.commit()
        session.add(Property(association_id=other.id, unit_number="4"))
        await session.commit()

        records = await PropertyMatcher(PropertyRepository(session)).load_existing_properties(association.id)

        assert [record.unit_number for record in records] == ["4"]
        assert records[0].association_id == association.id

    async def test_creation_failure_returns_failed(self):
        class FailingRepository:
            rolled_back = False

            async def create_property(self, **kwargs):
                raise SQLAlchemyError("insert rejected")

            async def rollback(self):
                self.rolled_back = True

        repository = FailingRepository()
        matcher = PropertyMatcher(repository)
        existing = []

        result = await matcher.find_or_create_property("AcmeHOA/Unit 3/a.pdf", ASSOCIATION_ID, existing)

        assert result.match_type == "failed"
        assert result.confidence == 0
        assert "unit '3'" in result.reason
        assert "pattern=unit_only" in result.reason
        assert repository.rolled_back
        assert existing == []
