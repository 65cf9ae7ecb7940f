"""
Property Onboarding Service

Entry point for every property mutation. The same ruleset is applied with
different strictness depending on the path:
- create: strict, any validation error rejects the submission
- create_draft / autosave / update_step: lenient, partial data accepted
- finalize: strict check of a draft before it leaves the wizard

Every mutation runs inside a repository transaction and recomputes the
derived progress fields as its final step.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from core.onboarding.completion import apply_progress_tracking
from core.onboarding.exceptions import (
    PropertyNotFoundError,
    PropertyValidationError,
)
from core.onboarding.repository import PropertyRepository, get_property_repository
from core.onboarding.schema import (
    STEP_GENERAL_INFO,
    STEP_UNITS,
    Property,
    PropertyStatus,
    PropertyType,
    check_step_number,
    parse_enum,
    round_half_up,
    utc_now,
)
from core.onboarding.validation import validate_draft, validate_submission_data


logger = logging.getLogger(__name__)


# =============================================================================
# Statistics
# =============================================================================


@dataclass(frozen=True)
class PropertyStats:
    """Portfolio summary for the dashboard."""

    total_properties: int
    weg_properties: int
    mv_properties: int
    total_units: int
    active_properties: int
    archived_properties: int
    average_units_per_property: int
    completed_properties: int
    in_progress_properties: int
    not_started_properties: int
    average_completion_percentage: int

    def to_dict(self) -> dict:
        """Convert stats to dictionary."""
        return {
            "total_properties": self.total_properties,
            "weg_properties": self.weg_properties,
            "mv_properties": self.mv_properties,
            "total_units": self.total_units,
            "active_properties": self.active_properties,
            "archived_properties": self.archived_properties,
            "average_units_per_property": self.average_units_per_property,
            "completed_properties": self.completed_properties,
            "in_progress_properties": self.in_progress_properties,
            "not_started_properties": self.not_started_properties,
            "average_completion_percentage": self.average_completion_percentage,
        }


def compute_stats(properties: list[Property]) -> PropertyStats:
    """
    Summarise a list of properties.

    Every stored property carries a type, so the WEG and MV counts
    partition the total.
    """
    total = len(properties)
    total_units = sum(p.unit_count for p in properties)
    completed = sum(1 for p in properties if p.completion_percentage == 100)
    in_progress = sum(1 for p in properties if 0 < p.completion_percentage < 100)
    completion_sum = sum(p.completion_percentage for p in properties)

    return PropertyStats(
        total_properties=total,
        weg_properties=sum(1 for p in properties if p.type == PropertyType.WEG),
        mv_properties=sum(1 for p in properties if p.type == PropertyType.MV),
        total_units=total_units,
        active_properties=sum(1 for p in properties if p.status == PropertyStatus.ACTIVE),
        archived_properties=sum(1 for p in properties if p.status == PropertyStatus.ARCHIVED),
        average_units_per_property=round_half_up(total_units / total) if total else 0,
        completed_properties=completed,
        in_progress_properties=in_progress,
        not_started_properties=total - completed - in_progress,
        average_completion_percentage=round_half_up(completion_sum / total) if total else 0,
    )


# =============================================================================
# Service
# =============================================================================


class PropertyService:
    """
    Onboarding operations over a property repository.

    Usage:
        service = PropertyService()
        draft = service.create_draft({"name": "Berliner Straße 42", "type": "WEG"})
        service.update_step(draft.id, 2, {"buildings": [...]})
        service.finalize(draft.id)
    """

    def __init__(self, repository: Optional[PropertyRepository] = None):
        """
        Initialise the service.

        Args:
            repository: Store to operate on (defaults to the singleton)
        """
        self._repository = repository or get_property_repository()

    @property
    def repository(self) -> PropertyRepository:
        return self._repository

    # =========================================================================
    # Queries
    # =========================================================================

    def find_all(self) -> list[Property]:
        return self._repository.find_all()

    def find_one(self, property_id: str) -> Optional[Property]:
        return self._repository.find_by_id(property_id)

    def find_drafts(self) -> list[Property]:
        """Properties whose onboarding is below 100%."""
        return [p for p in self._repository.find_all() if p.is_draft]

    def find_by_type(self, property_type: PropertyType) -> list[Property]:
        return self._repository.find_by_type(property_type)

    def find_by_status(self, status: PropertyStatus) -> list[Property]:
        return self._repository.find_by_status(status)

    def get_stats(self) -> PropertyStats:
        return compute_stats(self._repository.find_all())

    def _require(self, property_id: str) -> Property:
        prop = self._repository.find_by_id(property_id)
        if prop is None:
            logger.warning("Property %s not found", property_id)
            raise PropertyNotFoundError(property_id)
        return prop

    # =========================================================================
    # Strict Creation
    # =========================================================================

    def create(self, data: dict) -> Property:
        """
        Create a fully onboarded property.

        Raises:
            PropertyValidationError: If any field rule, limit or
                cross-field invariant fails
        """
        result = validate_submission_data(data)
        if not result.is_valid:
            logger.warning("Rejected property submission with %d errors", len(result.errors))
            raise PropertyValidationError(result.errors)

        def operation() -> Property:
            now = utc_now()
            prop = Property(created_at=now, status=PropertyStatus.ACTIVE, current_step=STEP_UNITS)
            prop.apply_general_info(data)
            prop.replace_buildings(data.get("buildings") or [])
            apply_progress_tracking(prop, now=now)
            return self._repository.create(prop)

        prop = self._repository.execute_transaction(operation)
        logger.info(
            "Created property %s (%s, %d units)", prop.id, prop.type.value, prop.unit_count
        )
        return prop

    # =========================================================================
    # Lenient Operations
    # =========================================================================

    def _check_draft(self, data) -> None:
        result = validate_draft(data)
        if not result.is_valid:
            logger.warning("Rejected draft: %s", "; ".join(result.errors))
            raise PropertyValidationError(result.errors, message="Draft requires a name and a type")

    def create_draft(self, data: dict) -> Property:
        """
        Create a draft from partial data.

        Only a name and a property type are required. Missing strings
        default to "", missing building/unit fields take the partial
        defaults. current_step is taken from data (default 1).

        Raises:
            PropertyValidationError: If name or type is missing
            InvalidStepNumberError: If current_step is outside 1-3
        """
        self._check_draft(data)
        current_step = check_step_number(data.get("current_step") or STEP_GENERAL_INFO)

        def operation() -> Property:
            now = utc_now()
            prop = Property(created_at=now, current_step=current_step)
            prop.apply_general_info(data)
            prop.replace_buildings(data.get("buildings") or [])
            apply_progress_tracking(prop, now=now)
            return self._repository.create(prop)

        prop = self._repository.execute_transaction(operation)
        logger.info("Created draft %s at %d%%", prop.id, prop.completion_percentage)
        return prop

    def _merge(self, prop: Property, data: dict) -> None:
        """
        Merge editable fields. Identity and derived fields are never taken from data.

        The merged property must keep a name and a type.
        """
        prop.apply_general_info(data)
        if "buildings" in data:
            prop.replace_buildings(data["buildings"] or [])
        if data.get("status") is not None:
            prop.status = parse_enum(PropertyStatus, data["status"])
        if data.get("current_step") is not None:
            prop.current_step = check_step_number(data["current_step"])
        self._check_draft(prop)

    def update(self, property_id: str, data: dict) -> Optional[Property]:
        """
        Merge data into an existing property.

        Returns:
            The updated property, or None if it does not exist
        """

        def operation() -> Optional[Property]:
            prop = self._repository.find_by_id(property_id)
            if prop is None:
                return None
            self._merge(prop, data)
            apply_progress_tracking(prop)
            return self._repository.update(property_id, prop)

        prop = self._repository.execute_transaction(operation)
        if prop is None:
            logger.warning("Update skipped, property %s not found", property_id)
        else:
            logger.info("Updated property %s", property_id)
        return prop

    def autosave(self, property_id: str, data: dict) -> Property:
        """
        Lenient partial save from the wizard.

        Client-sent step flags and completion values are ignored; they are
        recomputed from the merged data.

        Raises:
            PropertyNotFoundError: If the property does not exist
            PropertyValidationError: If the merge clears the name or type
        """

        def operation() -> Property:
            prop = self._require(property_id)
            self._merge(prop, data)
            apply_progress_tracking(prop)
            return self._repository.update(property_id, prop)

        prop = self._repository.execute_transaction(operation)
        logger.info("Autosaved property %s at %d%%", property_id, prop.completion_percentage)
        return prop

    def update_step(self, property_id: str, step_number: int, data: dict) -> Property:
        """
        Save the data of one wizard step.

        Step 1 merges general information. Steps 2 and 3 replace the
        buildings (with their units) when given. current_step is set to
        step_number.

        Raises:
            InvalidStepNumberError: If step_number is outside 1-3
            PropertyNotFoundError: If the property does not exist
            PropertyValidationError: If step 1 clears the name or type
        """
        step_number = check_step_number(step_number)

        def operation() -> Property:
            prop = self._require(property_id)
            if step_number == STEP_GENERAL_INFO:
                prop.apply_general_info(data)
                self._check_draft(prop)
            elif "buildings" in data:
                prop.replace_buildings(data["buildings"] or [])
            prop.current_step = step_number
            apply_progress_tracking(prop)
            return self._repository.update(property_id, prop)

        prop = self._repository.execute_transaction(operation)
        logger.info(
            "Saved step %d of property %s (%d%%)",
            step_number,
            property_id,
            prop.completion_percentage,
        )
        return prop

    # =========================================================================
    # Finalisation and Deletion
    # =========================================================================

    def finalize(self, property_id: str) -> Property:
        """
        Move a draft out of the wizard.

        Raises:
            PropertyNotFoundError: If the property does not exist
            PropertyValidationError: If onboarding is incomplete or the
                data fails strict validation
        """

        def operation() -> Property:
            prop = self._require(property_id)
            apply_progress_tracking(prop)

            errors = []
            if not prop.completed:
                errors.append(f"Onboarding is only {prop.completion_percentage}% complete")
            errors.extend(validate_submission_data(prop).errors)
            if errors:
                logger.warning("Cannot finalize property %s: %d errors", property_id, len(errors))
                raise PropertyValidationError(errors, message="Property cannot be finalized")

            prop.status = PropertyStatus.ACTIVE
            prop.current_step = STEP_UNITS
            return self._repository.update(property_id, prop)

        prop = self._repository.execute_transaction(operation)
        logger.info("Finalized property %s", property_id)
        return prop

    def delete_draft(self, property_id: str) -> None:
        """
        Delete a property permanently.

        Raises:
            PropertyNotFoundError: If the property does not exist
        """

        def operation() -> None:
            if not self._repository.delete(property_id):
                raise PropertyNotFoundError(property_id)

        self._repository.execute_transaction(operation)
        logger.info("Deleted draft %s", property_id)
