"""
Cross-Field Invariants - Rules Spanning Several Units

Three rules are evaluated per building:
- Ownership shares of a WEG building sum to 100% (±0.1%)
- Every unit of an MV building carries a valid rent
- Unit numbers are unique within a building

Checks never raise. They return an InvariantResult; callers decide whether a
failure blocks the operation (strict creation) or is only reported
(field validation during autosave).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional

from core.onboarding.schema import (
    OWNERSHIP_SHARE_TOLERANCE,
    OWNERSHIP_SHARE_TOTAL,
    PropertyType,
    as_dict,
    enum_value,
    is_number,
)
from utils.formatting import format_percent


# Absorbs float noise when comparing against the tolerance boundary
_FLOAT_EPSILON = 1e-9

RENT_PRESENCE_MESSAGE = "For MV properties, all units must have valid rent values (≥ 0)"
UNIQUE_UNIT_NUMBERS_MESSAGE = "Unit numbers must be unique within the building"


# =============================================================================
# Result
# =============================================================================


@dataclass(frozen=True)
class InvariantResult:
    """Outcome of a single cross-field check."""

    passed: bool
    message: Optional[str] = None

    @classmethod
    def ok(cls) -> "InvariantResult":
        return cls(passed=True)

    @classmethod
    def failed(cls, message: str) -> "InvariantResult":
        return cls(passed=False, message=message)


# =============================================================================
# Ownership Shares
# =============================================================================


def sum_ownership_shares(units: list[Any]) -> float:
    """
    Sum the ownership shares of a building's units.

    Returns NaN if any share is missing, non-numeric or not positive, so an
    invalid share always fails the tolerance check.
    """
    total = 0.0
    for unit in units:
        share = as_dict(unit).get("ownership_share")
        if not is_number(share) or share <= 0:
            return math.nan
        total += share
    return total


def _displayed_share_total(units: list[Any]) -> float:
    """Sum used in messages: invalid shares count as 0."""
    total = 0.0
    for unit in units:
        share = as_dict(unit).get("ownership_share")
        if is_number(share) and share > 0:
            total += share
    return total


def is_within_share_tolerance(total: float) -> bool:
    """True if total is a number within ±0.1 of 100 (inclusive)."""
    if math.isnan(total):
        return False
    deviation = abs(total - OWNERSHIP_SHARE_TOTAL)
    return deviation <= OWNERSHIP_SHARE_TOLERANCE + _FLOAT_EPSILON


def ownership_share_message(total: float) -> str:
    return (
        f"Total ownership shares ({format_percent(total, decimals=2)}) "
        f"must sum to 100% (±0.1% tolerance)"
    )


def check_ownership_share_sum(units: list[Any]) -> InvariantResult:
    """Check that a WEG building's ownership shares sum to 100%."""
    if is_within_share_tolerance(sum_ownership_shares(units)):
        return InvariantResult.ok()
    return InvariantResult.failed(ownership_share_message(_displayed_share_total(units)))


# =============================================================================
# Rent
# =============================================================================


def check_rent_presence(units: list[Any]) -> InvariantResult:
    """Check that every unit of an MV building has a numeric rent >= 0."""
    for unit in units:
        rent = as_dict(unit).get("rent")
        if not is_number(rent) or rent < 0:
            return InvariantResult.failed(RENT_PRESENCE_MESSAGE)
    return InvariantResult.ok()


# =============================================================================
# Unit Numbers
# =============================================================================


def find_duplicate_unit_numbers(units: list[Any]) -> list[str]:
    """Unit numbers used more than once. Blank and non-string values are ignored."""
    seen: set[str] = set()
    duplicates: list[str] = []
    for unit in units:
        number = as_dict(unit).get("unit_number")
        if not isinstance(number, str) or not number:
            continue
        if number in seen and number not in duplicates:
            duplicates.append(number)
        seen.add(number)
    return duplicates


def check_unique_unit_numbers(units: list[Any]) -> InvariantResult:
    """Check that no two units in a building share a unit number."""
    if find_duplicate_unit_numbers(units):
        return InvariantResult.failed(UNIQUE_UNIT_NUMBERS_MESSAGE)
    return InvariantResult.ok()


# =============================================================================
# Aggregation
# =============================================================================


def check_building_invariants(building: Any, property_type: Any) -> list[InvariantResult]:
    """Run every cross-field rule that applies to one building."""
    units = as_dict(building).get("units") or []
    property_type = enum_value(property_type)

    results = [check_unique_unit_numbers(units)]
    if property_type == PropertyType.WEG.value:
        results.append(check_ownership_share_sum(units))
    elif property_type == PropertyType.MV.value:
        results.append(check_rent_presence(units))
    return results


def check_property_invariants(data: Any) -> list[str]:
    """
    Run the cross-field rules over every building of a property.

    Buildings without units are skipped. Returns failure messages prefixed
    with the 1-based building index; an empty list means all rules passed.
    """
    data = as_dict(data)
    errors: list[str] = []
    for index, building in enumerate(data.get("buildings") or [], start=1):
        if not as_dict(building).get("units"):
            continue
        for result in check_building_invariants(building, data.get("type")):
            if not result.passed:
                errors.append(f"Building {index}: {result.message}")
    return errors
