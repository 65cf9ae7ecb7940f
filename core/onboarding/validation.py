"""
Onboarding Validation - Field Rules for Properties, Buildings and Units

One ruleset, two strictness levels:
- validate_property / validate_building / validate_units report errors and
  warnings without blocking anything (autosave, UI pre-checks)
- validate_submission_data adds length/range limits and is used by the
  strict creation path, where any error rejects the submission
- validate_draft is the minimum (name and type) for persisting a draft

Validators never raise. Inputs may be records or partial dictionaries.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Final, Optional

from core.onboarding.invariants import check_building_invariants, check_property_invariants
from core.onboarding.schema import (
    ADDRESS_MAX,
    ADDRESS_MIN,
    CITY_MAX,
    CONSTRUCTION_YEAR_MIN,
    FLOORS_MAX,
    HOUSE_NUMBER_MAX,
    MANAGEMENT_COMPANY_MAX,
    OWNERSHIP_SHARE_MAX,
    OWNERSHIP_SHARE_MIN,
    PERSON_NAME_MAX,
    POSTAL_CODE_MAX,
    POSTAL_CODE_MIN,
    PROPERTY_NAME_MAX,
    PROPERTY_NUMBER_MAX,
    RENT_MAX,
    RENT_WARNING,
    STREET_NAME_MAX,
    UNIT_FLOOR_MAX,
    UNIT_NUMBER_MAX,
    UNIT_ROOMS_MAX,
    UNIT_SIZE_MAX,
    UNIT_SIZE_MIN,
    UNIT_SIZE_WARNING,
    UNITS_PER_FLOOR_MAX,
    BuildingType,
    PropertyType,
    UnitType,
    as_dict,
    enum_value,
    has_text,
    is_number,
    max_construction_year,
)
from utils.formatting import format_area, format_currency


POSTAL_CODE_REGEX: Final = re.compile(r"^\d{4,10}$")


# =============================================================================
# Validation Result
# =============================================================================


@dataclass(frozen=True)
class ValidationResult:
    """
    Result of a validation pass.

    Errors make the result invalid; warnings never do.
    """

    is_valid: bool
    errors: tuple[str, ...] = field(default_factory=tuple)
    warnings: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_messages(cls, errors: list[str], warnings: list[str]) -> "ValidationResult":
        return cls(is_valid=not errors, errors=tuple(errors), warnings=tuple(warnings))

    def to_dict(self) -> dict:
        """Convert result to dictionary."""
        return {
            "is_valid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


# =============================================================================
# Units
# =============================================================================


def validate_units(units: list[Any], property_type: Any) -> ValidationResult:
    """
    Validate a building's units.

    Messages are labelled with the 1-based unit index. WEG units need an
    ownership share, MV units need a rent.

    Args:
        units: Unit records or dictionaries
        property_type: PropertyType (or its value) of the owning property

    Returns:
        ValidationResult with per-unit errors and warnings
    """
    errors: list[str] = []
    warnings: list[str] = []
    property_type = enum_value(property_type)

    for index, unit in enumerate(units, start=1):
        unit = as_dict(unit)
        label = f"Unit {index}"

        if not has_text(unit.get("unit_number")):
            errors.append(f"{label}: Unit number is required")

        floor = unit.get("floor")
        if not is_number(floor) or floor < 0:
            errors.append(f"{label}: Valid floor number is required")

        if not unit.get("type"):
            errors.append(f"{label}: Unit type is required")

        rooms = unit.get("rooms")
        if not is_number(rooms) or rooms < 0:
            errors.append(f"{label}: Valid number of rooms is required")

        size = unit.get("size")
        if not is_number(size) or size <= 0:
            errors.append(f"{label}: Valid size is required")
        elif size > UNIT_SIZE_WARNING:
            warnings.append(f"{label}: Size {format_area(size)} is unusually large")

        share = unit.get("ownership_share")
        rent = unit.get("rent")

        if property_type == PropertyType.WEG.value:
            if not is_number(share) or share <= 0:
                errors.append(f"{label}: Ownership share is required for WEG properties")
            elif share > OWNERSHIP_SHARE_MAX:
                errors.append(f"{label}: Ownership share cannot exceed 100%")

            if rent is not None:
                warnings.append(f"{label}: Rent value is not typically used for WEG properties")

        elif property_type == PropertyType.MV.value:
            if not is_number(rent) or rent < 0:
                errors.append(f"{label}: Valid rent is required for MV properties")
            elif rent > RENT_WARNING:
                warnings.append(f"{label}: Rent {format_currency(rent)} is unusually high")

            if share is not None:
                warnings.append(
                    f"{label}: Ownership share is not typically used for MV properties"
                )

    return ValidationResult.from_messages(errors, warnings)


# =============================================================================
# Buildings
# =============================================================================


def validate_building(building: Any, property_type: Any) -> ValidationResult:
    """
    Validate a single building and its units.

    Address fields and structure are required; the construction year and
    the floors x units-per-floor count only raise warnings. Cross-field
    rules (ownership sum, rent presence, unique unit numbers) are reported
    as errors.
    """
    errors: list[str] = []
    warnings: list[str] = []
    building = as_dict(building)

    # === Address ===
    if not has_text(building.get("street_name")):
        errors.append("Street name is required")

    if not has_text(building.get("house_number")):
        errors.append("House number is required")

    postal_code = building.get("postal_code")
    if not has_text(postal_code):
        errors.append("Postal code is required")
    elif not POSTAL_CODE_REGEX.match(postal_code.strip()):
        warnings.append("Postal code format may be invalid")

    if not has_text(building.get("city")):
        errors.append("City is required")

    # === Structure ===
    floors = building.get("floors")
    if not is_number(floors) or floors < 1:
        errors.append("Number of floors must be at least 1")

    units_per_floor = building.get("units_per_floor")
    if not is_number(units_per_floor) or units_per_floor < 1:
        errors.append("Units per floor must be at least 1")

    year = building.get("construction_year")
    if year and is_number(year):
        if year < CONSTRUCTION_YEAR_MIN or year > max_construction_year():
            warnings.append(f"Construction year {year} seems unusual")

    # === Units ===
    units = building.get("units") or []
    if not units:
        warnings.append("Building has no units defined")
        return ValidationResult.from_messages(errors, warnings)

    if is_number(floors) and is_number(units_per_floor):
        expected = floors * units_per_floor
        if len(units) != expected:
            warnings.append(
                f"Expected {expected} units ({floors} floors × {units_per_floor} "
                f"units/floor) but found {len(units)}"
            )

    unit_result = validate_units(units, property_type)
    errors.extend(unit_result.errors)
    warnings.extend(unit_result.warnings)

    for invariant in check_building_invariants(building, property_type):
        if not invariant.passed:
            errors.append(invariant.message)

    return ValidationResult.from_messages(errors, warnings)


# =============================================================================
# Properties
# =============================================================================


def validate_property(data: Any) -> ValidationResult:
    """
    Validate a complete property.

    Building messages are prefixed with the 1-based building index.

    Args:
        data: Property record or dictionary (may be partial)

    Returns:
        ValidationResult with validation outcome
    """
    errors: list[str] = []
    warnings: list[str] = []
    data = as_dict(data)

    if not has_text(data.get("name")):
        errors.append("Property name is required")

    if not has_text(data.get("address")):
        errors.append("Property address is required")

    if not has_text(data.get("property_number")):
        errors.append("Property number is required")

    buildings = data.get("buildings") or []
    if not buildings:
        warnings.append("Property has no buildings defined")
    else:
        for index, building in enumerate(buildings, start=1):
            result = validate_building(building, data.get("type"))
            errors.extend(f"Building {index}: {e}" for e in result.errors)
            warnings.extend(f"Building {index}: {w}" for w in result.warnings)

    return ValidationResult.from_messages(errors, warnings)


def validate_draft(data: Any) -> ValidationResult:
    """
    Minimum a draft needs before it is persisted: a name and a property type.

    Everything else may still be missing.
    """
    data = as_dict(data)
    errors: list[str] = []

    if not has_text(data.get("name")):
        errors.append("Property name is required")
    if not data.get("type"):
        errors.append("Property type is required")

    return ValidationResult.from_messages(errors, [])


# =============================================================================
# Strict Submission
# =============================================================================


def _check_length(
    errors: list[str],
    label: str,
    value: Any,
    max_length: int,
    min_length: int = 0,
) -> None:
    if value is None or value == "":
        return
    if not isinstance(value, str):
        errors.append(f"{label} must be text")
    elif not min_length <= len(value.strip()) <= max_length:
        if min_length:
            errors.append(f"{label} must be between {min_length} and {max_length} characters")
        else:
            errors.append(f"{label} must be at most {max_length} characters")


def _check_range(
    errors: list[str],
    label: str,
    value: Any,
    minimum: Optional[float],
    maximum: float,
) -> None:
    if not is_number(value):
        return
    if minimum is not None and value < minimum:
        errors.append(f"{label} must be at least {minimum:g}")
    elif value > maximum:
        errors.append(f"{label} must be at most {maximum:g}")


def _check_enum(errors: list[str], label: str, value: Any, enum_cls: type) -> None:
    if value is None:
        return
    if enum_value(value) not in {member.value for member in enum_cls}:
        errors.append(f"{label} must be one of: {', '.join(m.value for m in enum_cls)}")


def _limit_errors(data: dict[str, Any]) -> list[str]:
    """Length, range and enum limits checked only on full submission."""
    errors: list[str] = []

    if data.get("type") is None:
        errors.append("Property type is required")
    _check_enum(errors, "Property type", data.get("type"), PropertyType)

    _check_length(errors, "Property name", data.get("name"), PROPERTY_NAME_MAX, 1)
    _check_length(errors, "Property number", data.get("property_number"), PROPERTY_NUMBER_MAX, 1)
    _check_length(errors, "Property address", data.get("address"), ADDRESS_MAX, ADDRESS_MIN)
    _check_length(
        errors, "Management company", data.get("management_company"), MANAGEMENT_COMPANY_MAX
    )
    _check_length(errors, "Property manager", data.get("property_manager"), PERSON_NAME_MAX)
    _check_length(errors, "Accountant", data.get("accountant"), PERSON_NAME_MAX)

    for b_index, building in enumerate(data.get("buildings") or [], start=1):
        building = as_dict(building)
        prefix = f"Building {b_index}"
        _check_length(errors, f"{prefix}: Street name", building.get("street_name"), STREET_NAME_MAX, 1)
        _check_length(errors, f"{prefix}: House number", building.get("house_number"), HOUSE_NUMBER_MAX, 1)
        _check_length(
            errors,
            f"{prefix}: Postal code",
            building.get("postal_code"),
            POSTAL_CODE_MAX,
            POSTAL_CODE_MIN,
        )
        _check_length(errors, f"{prefix}: City", building.get("city"), CITY_MAX, 1)
        _check_enum(errors, f"{prefix}: Building type", building.get("building_type"), BuildingType)
        _check_range(errors, f"{prefix}: Number of floors", building.get("floors"), None, FLOORS_MAX)
        _check_range(
            errors, f"{prefix}: Units per floor", building.get("units_per_floor"), None, UNITS_PER_FLOOR_MAX
        )

        for u_index, unit in enumerate(building.get("units") or [], start=1):
            unit = as_dict(unit)
            label = f"{prefix}: Unit {u_index}"
            _check_length(errors, f"{label}: Unit number", unit.get("unit_number"), UNIT_NUMBER_MAX, 1)
            _check_enum(errors, f"{label}: Unit type", unit.get("type"), UnitType)
            _check_range(errors, f"{label}: Floor", unit.get("floor"), None, UNIT_FLOOR_MAX)
            _check_range(errors, f"{label}: Rooms", unit.get("rooms"), None, UNIT_ROOMS_MAX)
            _check_range(errors, f"{label}: Size", unit.get("size"), UNIT_SIZE_MIN, UNIT_SIZE_MAX)
            _check_range(
                errors,
                f"{label}: Ownership share",
                unit.get("ownership_share"),
                OWNERSHIP_SHARE_MIN,
                OWNERSHIP_SHARE_MAX,
            )
            _check_range(errors, f"{label}: Rent", unit.get("rent"), None, RENT_MAX)
            _check_length(errors, f"{label}: Owner", unit.get("owner"), PERSON_NAME_MAX)
            _check_length(errors, f"{label}: Tenant", unit.get("tenant"), PERSON_NAME_MAX)

    return errors


def validate_submission_data(data: Any) -> ValidationResult:
    """
    Validate a full property submission (strict creation path).

    Combines the field rules, the length/range limits and the cross-field
    invariants. Any error blocks creation; warnings are passed through.

    Args:
        data: Raw submission data (record or dictionary)

    Returns:
        ValidationResult with validation outcome
    """
    data = as_dict(data)
    field_result = validate_property(data)

    errors = list(field_result.errors)
    errors.extend(_limit_errors(data))
    errors.extend(check_property_invariants(data))

    # Field rules and the cross-field pass both report invariant failures
    errors = list(dict.fromkeys(errors))

    return ValidationResult.from_messages(errors, list(field_result.warnings))
