"""
Tests for Cross-Field Invariants

Tests covering:
1. Ownership shares sum to 100% (±0.1%) for WEG buildings
2. Every MV unit carries a valid rent
3. Unit numbers are unique within a building
4. Property-level aggregation with building prefixes
"""

from __future__ import annotations

import math

import pytest

from core.onboarding.invariants import (
    RENT_PRESENCE_MESSAGE,
    UNIQUE_UNIT_NUMBERS_MESSAGE,
    check_building_invariants,
    check_ownership_share_sum,
    check_property_invariants,
    check_rent_presence,
    check_unique_unit_numbers,
    find_duplicate_unit_numbers,
    is_within_share_tolerance,
    sum_ownership_shares,
)
from core.onboarding.schema import PropertyType, Unit


def shares(*values):
    return [
        {"unit_number": str(i + 1), "ownership_share": value}
        for i, value in enumerate(values)
    ]


def rents(*values):
    return [{"unit_number": str(i + 1), "rent": value} for i, value in enumerate(values)]


# =============================================================================
# Ownership Share Tests
# =============================================================================


class TestOwnershipShareSum:
    """Tests for the WEG ownership share rule."""

    def test_even_split_passes(self):
        """Two units at 50% each sum to exactly 100%."""
        assert check_ownership_share_sum(shares(50, 50)).passed

    def test_overallocation_fails_with_total_in_message(self):
        """60/60 reports the actual total with two decimals."""
        result = check_ownership_share_sum(shares(60, 60))
        assert not result.passed
        assert result.message == (
            "Total ownership shares (120.00%) must sum to 100% (±0.1% tolerance)"
        )

    @pytest.mark.parametrize("second", [49.9, 50.1])
    def test_tolerance_boundary_is_inclusive(self, second):
        """Totals of 99.9 and 100.1 are still accepted."""
        assert check_ownership_share_sum(shares(50, second)).passed

    @pytest.mark.parametrize("second", [49.89, 50.11])
    def test_just_outside_tolerance_fails(self, second):
        """Totals of 99.89 and 100.11 are rejected."""
        assert not check_ownership_share_sum(shares(50, second)).passed

    def test_twelve_units_rounded_shares_pass(self):
        """12 x 8.33% = 99.96% is within tolerance."""
        assert check_ownership_share_sum(shares(*[8.33] * 12)).passed

    def test_missing_share_invalidates_sum(self):
        """A missing share makes the sum NaN, even if the rest add up."""
        units = shares(50, 50) + [{"unit_number": "3"}]
        assert math.isnan(sum_ownership_shares(units))
        assert not check_ownership_share_sum(units).passed

    def test_missing_share_counts_as_zero_in_message(self):
        """The displayed total ignores invalid shares."""
        result = check_ownership_share_sum(shares(50, None))
        assert "(50.00%)" in result.message

    def test_non_positive_share_invalidates_sum(self):
        """Zero and negative shares are invalid."""
        assert math.isnan(sum_ownership_shares(shares(100, 0)))
        assert math.isnan(sum_ownership_shares(shares(110, -10)))

    def test_nan_is_never_within_tolerance(self):
        """NaN fails the tolerance check."""
        assert not is_within_share_tolerance(math.nan)

    def test_accepts_unit_records(self):
        """Unit dataclasses work the same as dictionaries."""
        units = [
            Unit(unit_number="1", ownership_share=50),
            Unit(unit_number="2", ownership_share=50),
        ]
        assert check_ownership_share_sum(units).passed


# =============================================================================
# Rent Tests
# =============================================================================


class TestRentPresence:
    """Tests for the MV rent rule."""

    def test_all_rents_present_passes(self):
        """Every unit with a rent passes."""
        assert check_rent_presence(rents(950, 1250, 1100)).passed

    def test_zero_rent_is_valid(self):
        """Rent of 0 is allowed (e.g. caretaker flat)."""
        assert check_rent_presence(rents(0)).passed

    def test_missing_rent_fails(self):
        """One unit without rent fails the whole building."""
        result = check_rent_presence(rents(950, None))
        assert not result.passed
        assert result.message == RENT_PRESENCE_MESSAGE

    def test_negative_rent_fails(self):
        """Negative rent is invalid."""
        assert not check_rent_presence(rents(-1)).passed


# =============================================================================
# Unit Number Tests
# =============================================================================


class TestUniqueUnitNumbers:
    """Tests for unit number uniqueness."""

    def test_distinct_numbers_pass(self):
        """Distinct unit numbers pass."""
        units = [{"unit_number": "1.1"}, {"unit_number": "1.2"}]
        assert check_unique_unit_numbers(units).passed

    def test_duplicate_numbers_fail(self):
        """A repeated unit number fails."""
        units = [{"unit_number": "1.1"}, {"unit_number": "1.1"}, {"unit_number": "1.2"}]
        result = check_unique_unit_numbers(units)
        assert not result.passed
        assert result.message == UNIQUE_UNIT_NUMBERS_MESSAGE
        assert find_duplicate_unit_numbers(units) == ["1.1"]

    def test_comparison_is_exact(self):
        """Numbers differing only in case are distinct."""
        units = [{"unit_number": "1a"}, {"unit_number": "1A"}]
        assert check_unique_unit_numbers(units).passed

    def test_blank_numbers_are_ignored(self):
        """Blank numbers are reported by field validation, not here."""
        units = [{"unit_number": ""}, {"unit_number": ""}, {"unit_number": None}]
        assert check_unique_unit_numbers(units).passed


# =============================================================================
# Aggregation Tests
# =============================================================================


class TestAggregation:
    """Tests for building and property level aggregation."""

    def test_weg_building_checks_shares_not_rent(self):
        """WEG buildings run uniqueness and share sum."""
        building = {"units": shares(50, 50)}
        results = check_building_invariants(building, PropertyType.WEG)
        assert len(results) == 2
        assert all(r.passed for r in results)

    def test_mv_building_checks_rent_not_shares(self):
        """MV buildings run uniqueness and rent presence."""
        building = {"units": rents(900, 1000)}
        results = check_building_invariants(building, "MV")
        assert all(r.passed for r in results)

    def test_untyped_building_only_checks_uniqueness(self):
        """Without a type only uniqueness applies."""
        building = {"units": [{"unit_number": "1"}]}
        results = check_building_invariants(building, None)
        assert len(results) == 1

    def test_property_messages_are_prefixed(self):
        """Failures carry the 1-based building index."""
        data = {
            "type": "WEG",
            "buildings": [
                {"units": shares(50, 50)},
                {"units": [
                    {"unit_number": "1", "ownership_share": 50},
                    {"unit_number": "1", "ownership_share": 50},
                ]},
            ],
        }
        assert check_property_invariants(data) == [
            f"Building 2: {UNIQUE_UNIT_NUMBERS_MESSAGE}"
        ]

    def test_buildings_without_units_are_skipped(self):
        """An empty building does not fail the share sum."""
        data = {"type": "WEG", "buildings": [{"units": []}]}
        assert check_property_invariants(data) == []
