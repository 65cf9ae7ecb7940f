"""
Property Onboarding Module

Three-step wizard for bringing WEG (condominium) and MV (rental)
properties into the portfolio:
1. General information
2. Buildings
3. Units

Principles:
1. One ruleset, applied strictly on creation and leniently on drafts
2. Derived progress is recomputed on every mutation, never trusted from input
3. Stored records are only changed through explicit writes
"""

from core.onboarding.schema import (
    Property,
    Building,
    Unit,
    PropertyType,
    BuildingType,
    UnitType,
    PropertyStatus,
    building_from_partial,
    unit_from_partial,
    STEP_GENERAL_INFO,
    STEP_BUILDINGS,
    STEP_UNITS,
    TOTAL_STEPS,
)
from core.onboarding.exceptions import (
    OnboardingError,
    PropertyNotFoundError,
    PropertyValidationError,
    InvalidStepNumberError,
)
from core.onboarding.validation import (
    ValidationResult,
    validate_units,
    validate_building,
    validate_property,
    validate_draft,
    validate_submission_data,
)
from core.onboarding.invariants import (
    InvariantResult,
    check_ownership_share_sum,
    check_rent_presence,
    check_unique_unit_numbers,
    check_property_invariants,
)
from core.onboarding.completion import (
    StepStatus,
    FieldProgress,
    ProgressSummary,
    is_step1_complete,
    is_step2_complete,
    is_step3_complete,
    get_step_status,
    get_progress_summary,
    calculate_completion_percentage,
    apply_progress_tracking,
    can_navigate_to_step,
)
from core.onboarding.repository import (
    PropertyRepository,
    get_property_repository,
    reset_property_repository,
)
from core.onboarding.service import (
    PropertyService,
    PropertyStats,
    compute_stats,
)

__all__ = [
    # Schema
    "Property",
    "Building",
    "Unit",
    "PropertyType",
    "BuildingType",
    "UnitType",
    "PropertyStatus",
    "building_from_partial",
    "unit_from_partial",
    "STEP_GENERAL_INFO",
    "STEP_BUILDINGS",
    "STEP_UNITS",
    "TOTAL_STEPS",
    # Exceptions
    "OnboardingError",
    "PropertyNotFoundError",
    "PropertyValidationError",
    "InvalidStepNumberError",
    # Validation
    "ValidationResult",
    "validate_units",
    "validate_building",
    "validate_property",
    "validate_draft",
    "validate_submission_data",
    # Invariants
    "InvariantResult",
    "check_ownership_share_sum",
    "check_rent_presence",
    "check_unique_unit_numbers",
    "check_property_invariants",
    # Completion
    "StepStatus",
    "FieldProgress",
    "ProgressSummary",
    "is_step1_complete",
    "is_step2_complete",
    "is_step3_complete",
    "get_step_status",
    "get_progress_summary",
    "calculate_completion_percentage",
    "apply_progress_tracking",
    "can_navigate_to_step",
    # Repository
    "PropertyRepository",
    "get_property_repository",
    "reset_property_repository",
    # Service
    "PropertyService",
    "PropertyStats",
    "compute_stats",
]
