"""
Tests for the Property Repository

Tests covering:
1. CRUD with copy isolation
2. Filtering by type and status
3. Transaction rollback
4. Singleton access and seed data
"""

from __future__ import annotations

import pytest

from core.onboarding.repository import (
    PropertyRepository,
    get_property_repository,
    reset_property_repository,
)
from core.onboarding.schema import (
    Building,
    Property,
    PropertyStatus,
    PropertyType,
    Unit,
)
from core.onboarding.seed import build_seed_properties
from core.onboarding.validation import validate_submission_data


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def repository():
    """Create a fresh, empty repository for each test."""
    return PropertyRepository()


@pytest.fixture
def stored_property(repository):
    """A WEG property with one building and one unit."""
    prop = Property(
        id="PROP-TEST",
        name="Sonnenhof",
        type=PropertyType.WEG,
        address="Sonnenallee 12, 12045 Berlin",
        buildings=[Building(street_name="Sonnenallee", units=[Unit(unit_number="1")])],
    )
    return repository.create(prop)


@pytest.fixture(autouse=True)
def clean_singleton():
    """Keep the module singleton isolated between tests."""
    reset_property_repository()
    yield
    reset_property_repository()


# =============================================================================
# CRUD Tests
# =============================================================================


class TestCrud:
    """Tests for basic storage operations."""

    def test_create_and_find(self, repository, stored_property):
        """A created property can be fetched by ID."""
        found = repository.find_by_id("PROP-TEST")
        assert found is not None
        assert found.name == "Sonnenhof"
        assert repository.count() == 1

    def test_find_missing_returns_none(self, repository):
        assert repository.find_by_id("nope") is None

    def test_duplicate_id_rejected(self, repository, stored_property):
        """IDs are unique."""
        with pytest.raises(ValueError):
            repository.create(Property(id="PROP-TEST"))

    def test_update_replaces(self, repository, stored_property):
        stored_property.name = "Sonnenhof II"
        repository.update("PROP-TEST", stored_property)
        assert repository.find_by_id("PROP-TEST").name == "Sonnenhof II"

    def test_update_missing_returns_none(self, repository):
        assert repository.update("nope", Property(id="nope")) is None
        assert repository.count() == 0

    def test_delete(self, repository, stored_property):
        """Delete reports whether something was removed."""
        assert repository.delete("PROP-TEST") is True
        assert repository.delete("PROP-TEST") is False
        assert repository.find_by_id("PROP-TEST") is None

    def test_find_all_preserves_insertion_order(self, repository):
        for prop_id in ("b", "a", "c"):
            repository.create(Property(id=prop_id))
        assert [p.id for p in repository.find_all()] == ["b", "a", "c"]


class TestCopyIsolation:
    """Stored state only changes through explicit writes."""

    def test_mutating_fetched_property(self, repository, stored_property):
        """Changing a fetched record leaves the stored one untouched."""
        fetched = repository.find_by_id("PROP-TEST")
        fetched.name = "Changed"
        fetched.buildings[0].units[0].unit_number = "99"

        again = repository.find_by_id("PROP-TEST")
        assert again.name == "Sonnenhof"
        assert again.buildings[0].units[0].unit_number == "1"

    def test_mutating_created_input(self, repository):
        """The caller's object is copied on create."""
        prop = Property(id="PROP-IN", name="Original")
        repository.create(prop)
        prop.name = "Changed"
        assert repository.find_by_id("PROP-IN").name == "Original"

    def test_mutating_find_all_result(self, repository, stored_property):
        repository.find_all()[0].name = "Changed"
        assert repository.find_by_id("PROP-TEST").name == "Sonnenhof"


# =============================================================================
# Query Tests
# =============================================================================


class TestQueries:
    """Tests for filtered queries."""

    def test_find_by_type(self, repository):
        repository.create(Property(id="w", type=PropertyType.WEG))
        repository.create(Property(id="m", type=PropertyType.MV))
        assert [p.id for p in repository.find_by_type(PropertyType.WEG)] == ["w"]
        assert [p.id for p in repository.find_by_type("MV")] == ["m"]

    def test_find_by_status(self, repository):
        repository.create(Property(id="a"))
        repository.create(Property(id="x", status=PropertyStatus.ARCHIVED))
        assert [p.id for p in repository.find_by_status("archived")] == ["x"]
        assert [p.id for p in repository.find_by_status(PropertyStatus.ACTIVE)] == ["a"]


# =============================================================================
# Transaction Tests
# =============================================================================


class TestTransactions:
    """Tests for snapshot and rollback."""

    def test_returns_operation_result(self, repository):
        assert repository.execute_transaction(lambda: 42) == 42

    def test_rollback_on_failure(self, repository, stored_property):
        """All writes of a failed operation are undone."""

        def operation():
            repository.create(Property(id="PROP-NEW"))
            repository.delete("PROP-TEST")
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            repository.execute_transaction(operation)

        assert repository.find_by_id("PROP-TEST") is not None
        assert repository.find_by_id("PROP-NEW") is None
        assert repository.count() == 1

    def test_commit_on_success(self, repository):
        repository.execute_transaction(lambda: repository.create(Property(id="PROP-OK")))
        assert repository.find_by_id("PROP-OK") is not None


# =============================================================================
# Singleton and Seed Tests
# =============================================================================


class TestSingleton:
    """Tests for the module singleton."""

    def test_same_instance(self):
        assert get_property_repository() is get_property_repository()

    def test_reset_creates_new_instance(self):
        first = get_property_repository()
        reset_property_repository()
        assert get_property_repository() is not first

    def test_unseeded_is_empty(self):
        assert get_property_repository().count() == 0

    def test_seeded(self):
        assert get_property_repository(seed=True).count() == 5


class TestSeedData:
    """Tests for the sample portfolio."""

    @pytest.fixture
    def seeded(self):
        return {p.id: p for p in build_seed_properties()}

    def test_complete_properties(self, seeded):
        """Three properties are fully onboarded."""
        assert [seeded[i].unit_count for i in ("1", "2", "3")] == [12, 48, 8]
        assert all(seeded[i].completed for i in ("1", "2", "3"))

    def test_complete_properties_pass_strict_validation(self, seeded):
        for prop_id in ("1", "2", "3"):
            assert validate_submission_data(seeded[prop_id]).is_valid, prop_id

    def test_drafts(self, seeded):
        """The two drafts have no address and no buildings."""
        for prop_id in ("4", "5"):
            assert seeded[prop_id].is_draft
            assert seeded[prop_id].completion_percentage == 0
            assert seeded[prop_id].current_step == 1

    def test_timestamps_kept(self, seeded):
        assert seeded["1"].updated_at.isoformat() == "2025-01-20T14:30:00+00:00"
        assert seeded["1"].created_at.isoformat() == "2025-01-15T09:00:00+00:00"
