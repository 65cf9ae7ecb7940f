"""
Completion Tracking - Step Predicates and Onboarding Progress

The wizard has three equally weighted sections:
1. General information
2. Buildings
3. Units

Each predicate accepts the currently known (possibly partial) data and
answers whether its section is fully filled. The completion percentage is
round(completed_sections / 3 * 100), i.e. 0, 33, 67 or 100.

The units predicate only requires an ownership share (WEG) or rent (MV and
untyped data) on every unit. Shares summing to 100% is enforced at creation
time only, so autosaved drafts can reach 100% before the shares are balanced.

get_progress_summary is the finer-grained view for progress bars: filled
versus total fields per step.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from core.onboarding.schema import (
    GENERAL_INFO_FIELDS,
    STEP_BUILDINGS,
    STEP_GENERAL_INFO,
    STEP_UNITS,
    TOTAL_STEPS,
    Property,
    PropertyType,
    as_dict,
    count_units,
    enum_value,
    has_text,
    is_number,
    round_half_up,
    utc_now,
)


# =============================================================================
# Step Predicates
# =============================================================================


def is_step1_complete(data: Any) -> bool:
    """General information: name, type and address are filled."""
    data = as_dict(data)
    return bool(has_text(data.get("name")) and data.get("type") and has_text(data.get("address")))


def _is_building_complete(building: Any) -> bool:
    building = as_dict(building)
    floors = building.get("floors")
    units_per_floor = building.get("units_per_floor")
    return bool(
        has_text(building.get("street_name"))
        and has_text(building.get("house_number"))
        and has_text(building.get("postal_code"))
        and has_text(building.get("city"))
        and building.get("building_type")
        and is_number(floors)
        and floors > 0
        and is_number(units_per_floor)
        and units_per_floor > 0
    )


def is_step2_complete(data: Any) -> bool:
    """Buildings: at least one, and every building's address and structure filled."""
    buildings = as_dict(data).get("buildings") or []
    return bool(buildings) and all(_is_building_complete(b) for b in buildings)


def _is_unit_complete(unit: Any, property_type: Optional[str]) -> bool:
    unit = as_dict(unit)
    rooms = unit.get("rooms")
    size = unit.get("size")
    basic = (
        has_text(unit.get("unit_number"))
        and bool(unit.get("type"))
        and is_number(rooms)
        and rooms >= 0
        and is_number(size)
        and size > 0
    )
    if not basic:
        return False

    if property_type == PropertyType.WEG.value:
        share = unit.get("ownership_share")
        return is_number(share) and share > 0
    # MV and untyped data both need a rent
    rent = unit.get("rent")
    return is_number(rent) and rent >= 0


def is_step3_complete(data: Any, property_type: Any = None) -> bool:
    """
    Units: every building has at least one unit and every unit is filled.

    Args:
        data: Property record or dictionary with `buildings`
        property_type: Overrides the type found in data (step payloads
            carry only buildings)
    """
    data = as_dict(data)
    property_type = enum_value(property_type if property_type is not None else data.get("type"))
    buildings = data.get("buildings") or []
    if not buildings:
        return False

    for building in buildings:
        units = as_dict(building).get("units") or []
        if not units:
            return False
        if not all(_is_unit_complete(unit, property_type) for unit in units):
            return False
    return True


def is_step_complete(step_number: int, data: Any, property_type: Any = None) -> bool:
    """Dispatch to the predicate of a 1-based step."""
    if step_number == STEP_GENERAL_INFO:
        return is_step1_complete(data)
    if step_number == STEP_BUILDINGS:
        return is_step2_complete(data)
    if step_number == STEP_UNITS:
        return is_step3_complete(data, property_type)
    return False


# =============================================================================
# Progress
# =============================================================================


@dataclass(frozen=True)
class StepStatus:
    """Completion state of the three wizard sections."""

    step1_complete: bool
    step2_complete: bool
    step3_complete: bool

    @property
    def completed_sections(self) -> int:
        return sum((self.step1_complete, self.step2_complete, self.step3_complete))

    @property
    def completion_percentage(self) -> int:
        return round(self.completed_sections / TOTAL_STEPS * 100)

    @property
    def completed(self) -> bool:
        return self.completion_percentage == 100

    def to_dict(self) -> dict:
        return {
            "step1_complete": self.step1_complete,
            "step2_complete": self.step2_complete,
            "step3_complete": self.step3_complete,
            "completion_percentage": self.completion_percentage,
            "completed": self.completed,
        }


def get_step_status(data: Any) -> StepStatus:
    """Evaluate all three step predicates."""
    data = as_dict(data)
    return StepStatus(
        step1_complete=is_step1_complete(data),
        step2_complete=is_step2_complete(data),
        step3_complete=is_step3_complete(data),
    )


def calculate_completion_percentage(data: Any) -> int:
    """Share of completed sections, rounded to 0, 33, 67 or 100."""
    return get_step_status(data).completion_percentage


def apply_progress_tracking(prop: Property, now: Optional[datetime] = None) -> Property:
    """
    Recompute every derived field of a property in place.

    Runs as the final step of each mutation: unit count, step flags,
    completion percentage and completed flag are derived from the current
    data, and updated_at/last_modified are refreshed.

    Returns:
        The same property, for chaining
    """
    prop.unit_count = count_units(prop.buildings)

    status = get_step_status(prop)
    prop.step1_complete = status.step1_complete
    prop.step2_complete = status.step2_complete
    prop.step3_complete = status.step3_complete
    prop.completion_percentage = status.completion_percentage
    prop.completed = status.completed

    timestamp = now or utc_now()
    prop.updated_at = timestamp
    prop.last_modified = timestamp
    return prop


# =============================================================================
# Field Progress
# =============================================================================


@dataclass(frozen=True)
class FieldProgress:
    """Filled versus total fields of one wizard step."""

    filled_fields: int
    total_fields: int

    @property
    def ratio(self) -> float:
        if self.total_fields <= 0:
            return 0.0
        return self.filled_fields / self.total_fields * 100

    @property
    def percentage(self) -> int:
        return round_half_up(self.ratio)

    def to_dict(self) -> dict:
        return {
            "filled_fields": self.filled_fields,
            "total_fields": self.total_fields,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class ProgressSummary:
    """Field progress of all three steps, for the wizard's progress bars."""

    step1: FieldProgress
    step2: FieldProgress
    step3: FieldProgress

    @property
    def overall_percentage(self) -> int:
        """Mean of the unrounded step ratios, rounded once."""
        return round_half_up((self.step1.ratio + self.step2.ratio + self.step3.ratio) / TOTAL_STEPS)

    def to_dict(self) -> dict:
        return {
            "step1": self.step1.to_dict(),
            "step2": self.step2.to_dict(),
            "step3": self.step3.to_dict(),
            "overall_percentage": self.overall_percentage,
        }


def _general_info_progress(data: dict) -> FieldProgress:
    filled = 0
    for key in GENERAL_INFO_FIELDS:
        value = data.get(key)
        if has_text(value) or (key == "type" and value):
            filled += 1
    return FieldProgress(filled, len(GENERAL_INFO_FIELDS))


def _buildings_progress(data: dict) -> FieldProgress:
    """Per building: address, floors, building type, construction year."""
    buildings = data.get("buildings") or []
    if not buildings:
        return FieldProgress(0, 1)

    filled = 0
    for building in buildings:
        building = as_dict(building)
        floors = building.get("floors")
        checks = (
            all(
                has_text(building.get(key))
                for key in ("street_name", "house_number", "postal_code", "city")
            ),
            is_number(floors) and floors > 0,
            bool(building.get("building_type")),
            is_number(building.get("construction_year")),
        )
        filled += sum(checks)
    return FieldProgress(filled, len(buildings) * 4)


def _units_progress(data: dict) -> FieldProgress:
    """Per unit: number, floor, size, rooms, and the share (WEG) or rent."""
    property_type = enum_value(data.get("type"))
    units = [
        as_dict(unit)
        for building in data.get("buildings") or []
        for unit in as_dict(building).get("units") or []
    ]
    if not units:
        return FieldProgress(0, 1)

    filled = 0
    for unit in units:
        floor = unit.get("floor")
        size = unit.get("size")
        rooms = unit.get("rooms")
        if property_type == PropertyType.WEG.value:
            share = unit.get("ownership_share")
            type_specific = is_number(share) and share > 0
        else:
            rent = unit.get("rent")
            type_specific = is_number(rent) and rent >= 0
        checks = (
            has_text(unit.get("unit_number")),
            is_number(floor) and floor >= 0,
            is_number(size) and size > 0,
            is_number(rooms) and rooms >= 0,
            type_specific,
        )
        filled += sum(checks)
    return FieldProgress(filled, len(units) * 5)


def get_progress_summary(data: Any) -> ProgressSummary:
    """
    Count filled fields per step.

    Steps without anything to count (no buildings, no units) report 0 of 1.
    Unlike the step predicates this also counts optional fields, so a step
    can be complete while its bar is below 100%.
    """
    data = as_dict(data)
    return ProgressSummary(
        step1=_general_info_progress(data),
        step2=_buildings_progress(data),
        step3=_units_progress(data),
    )


# =============================================================================
# Navigation Gate
# =============================================================================


def can_navigate_to_step(current_step: int, target_step: int, data: Any) -> bool:
    """
    Decide whether the wizard may move from current_step to target_step.

    Going back is always allowed. Going forward requires the current step
    to be complete.
    """
    if target_step < STEP_GENERAL_INFO or target_step > TOTAL_STEPS:
        return False
    if target_step <= current_step:
        return True
    return is_step_complete(current_step, data)
