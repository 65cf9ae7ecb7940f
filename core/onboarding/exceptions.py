"""Exception hierarchy for the onboarding service."""

from __future__ import annotations

from typing import Iterable


class OnboardingError(Exception):
    """Base exception for all onboarding errors."""


class PropertyNotFoundError(OnboardingError):
    """Raised when a referenced property does not exist in the store."""

    def __init__(self, property_id: str):
        self.property_id = property_id
        super().__init__(f"Property {property_id} not found")


class PropertyValidationError(OnboardingError, ValueError):
    """Raised when input violates a structural or cross-field rule."""

    def __init__(self, errors: Iterable[str], message: str = "Validation failed"):
        self.errors = list(errors)
        self.message = message
        detail = f"{message}: {'; '.join(self.errors)}" if self.errors else message
        super().__init__(detail)


class InvalidStepNumberError(PropertyValidationError):
    """Raised when a wizard step outside 1-3 is addressed."""

    def __init__(self, step_number: object):
        self.step_number = step_number
        super().__init__(
            [f"Step must be between 1 and 3, got {step_number}"],
            message="Invalid step number",
        )
