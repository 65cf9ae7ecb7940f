"""
Tests for Onboarding Schema

Tests covering:
1. Partial-to-full conversion defaults
2. Serialisation round trip of the property aggregate
3. General information merge rules
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from core.onboarding.schema import (
    Building,
    BuildingType,
    Property,
    PropertyStatus,
    PropertyType,
    Unit,
    UnitType,
    building_from_partial,
    count_units,
    generate_property_id,
    is_number,
    max_construction_year,
    round_half_up,
    unit_from_partial,
)
from core.onboarding.exceptions import InvalidStepNumberError


# =============================================================================
# Partial Conversion Tests
# =============================================================================


class TestPartialDefaults:
    """Tests for defaults applied to partial wizard data."""

    def test_unit_defaults(self):
        unit = unit_from_partial({})
        assert unit.unit_number == ""
        assert unit.type == UnitType.APARTMENT
        assert unit.rooms == 1
        assert unit.size == 50
        assert unit.floor == 0
        assert unit.ownership_share is None
        assert unit.rent is None

    def test_unit_explicit_values_kept(self):
        unit = unit_from_partial({"type": "parking", "rooms": 0, "floor": 3, "rent": 80})
        assert unit.type == UnitType.PARKING
        assert unit.rooms == 0
        assert unit.floor == 3
        assert unit.rent == 80

    def test_building_defaults(self):
        building = building_from_partial({"units": [{}, {}]})
        assert building.building_type == BuildingType.ALTBAU
        assert building.floors == 1
        assert building.units_per_floor == 1
        assert building.street_name == ""
        assert len(building.units) == 2

    def test_unknown_enum_value_raises(self):
        with pytest.raises(ValueError):
            unit_from_partial({"type": "castle"})

    def test_expected_unit_count(self):
        assert Building(floors=4, units_per_floor=3).expected_unit_count == 12

    def test_count_units(self):
        buildings = [Building(units=[Unit(), Unit()]), Building(units=[Unit()])]
        assert count_units(buildings) == 3


# =============================================================================
# Property Tests
# =============================================================================


class TestProperty:
    """Tests for the property aggregate."""

    def test_generated_id(self):
        prop_id = generate_property_id()
        assert prop_id.startswith("PROP-")
        assert len(prop_id) == 17  # PROP- + 12 hex chars

    def test_new_property_is_draft(self):
        prop = Property()
        assert prop.is_draft
        assert prop.status == PropertyStatus.ACTIVE
        assert prop.current_step == 1

    def test_apply_general_info_merges_present_keys(self):
        prop = Property(name="Old", address="Old Street 1")
        prop.apply_general_info({"name": "New", "type": "MV"})
        assert prop.name == "New"
        assert prop.type == PropertyType.MV
        assert prop.address == "Old Street 1"

    def test_apply_general_info_none_becomes_empty(self):
        """Required strings never become None."""
        prop = Property(name="Old")
        prop.apply_general_info({"name": None, "management_company": None})
        assert prop.name == ""
        assert prop.management_company is None

    def test_apply_general_info_ignores_other_keys(self):
        prop = Property()
        prop.apply_general_info({"unit_count": 10, "status": "archived"})
        assert prop.unit_count == 0
        assert prop.status == PropertyStatus.ACTIVE

    def test_replace_buildings_updates_unit_count(self):
        prop = Property()
        prop.replace_buildings([{"units": [{}, {}]}, {"units": [{}]}])
        assert prop.unit_count == 3

    def test_round_trip(self):
        created = datetime(2025, 1, 15, 9, 0, tzinfo=timezone.utc)
        prop = Property(
            id="1",
            name="Berliner Straße 42",
            type=PropertyType.WEG,
            property_number="WEG-2025-001",
            address="Berliner Straße 42, 10115 Berlin",
            created_at=created,
            buildings=[Building(street_name="Berliner Straße", units=[Unit(unit_number="1.1")])],
            unit_count=1,
            current_step=3,
        )
        restored = Property.from_dict(prop.to_dict())
        assert restored.to_dict() == prop.to_dict()
        assert restored.created_at == created

    @pytest.mark.parametrize("step", [7, -1, "2", True])
    def test_from_dict_rejects_invalid_step(self, step):
        """A stored current_step outside 1-3 is not restored silently."""
        with pytest.raises(InvalidStepNumberError):
            Property.from_dict({"name": "Sonnenhof", "current_step": step})

    def test_from_dict_missing_step_defaults_to_first(self):
        assert Property.from_dict({"name": "Sonnenhof"}).current_step == 1
        assert Property.from_dict({"current_step": 0}).current_step == 1

    def test_to_dict_uses_raw_enum_values(self):
        data = Property(type=PropertyType.MV).to_dict()
        assert data["type"] == "MV"
        assert data["status"] == "active"


class TestHelpers:
    def test_round_half_up(self):
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3
        assert round_half_up(42.857) == 43

    def test_is_number_excludes_bool(self):
        assert is_number(0)
        assert is_number(1.5)
        assert not is_number(True)
        assert not is_number("3")

    def test_max_construction_year(self):
        assert max_construction_year(datetime(2026, 1, 1)) == 2036
