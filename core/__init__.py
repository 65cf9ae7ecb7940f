"""
Property Onboarding - Core Business Logic

This package holds the onboarding pipeline:
1. Schema (Property / Building / Unit records)
2. Field validation (errors and warnings)
3. Cross-field invariants (ownership shares, rent, unit numbers)
4. Completion tracking (step predicates, percentage)
5. Storage and service layer
"""

from .onboarding import (
    Property,
    Building,
    Unit,
    PropertyType,
    PropertyStatus,
    PropertyService,
    PropertyRepository,
    ValidationResult,
    validate_property,
    validate_submission_data,
    calculate_completion_percentage,
)

__all__ = [
    "Property",
    "Building",
    "Unit",
    "PropertyType",
    "PropertyStatus",
    "PropertyService",
    "PropertyRepository",
    "ValidationResult",
    "validate_property",
    "validate_submission_data",
    "calculate_completion_percentage",
]
