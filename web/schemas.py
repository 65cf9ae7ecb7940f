"""
Request bodies for the property API.

Wizard payloads are partial: every field is optional and only the fields a
client actually sent are forwarded to the service (exclude_unset). The
strict create body requires the general information up front; all
remaining rules are enforced by the service's validator.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from core.onboarding.schema import BuildingType, PropertyStatus, PropertyType, UnitType


class UnitInput(BaseModel):
    """Unit data as sent by the wizard."""
    unit_number: Optional[str] = None
    floor: Optional[int] = None
    type: Optional[UnitType] = None
    rooms: Optional[float] = None
    size: Optional[float] = None
    ownership_share: Optional[float] = None  # WEG
    owner: Optional[str] = None  # WEG
    rent: Optional[float] = None  # MV
    tenant: Optional[str] = None  # MV


class BuildingInput(BaseModel):
    """Building data as sent by the wizard."""
    street_name: Optional[str] = None
    house_number: Optional[str] = None
    postal_code: Optional[str] = None
    city: Optional[str] = None
    building_type: Optional[BuildingType] = None
    floors: Optional[int] = None
    units_per_floor: Optional[int] = None
    construction_year: Optional[int] = None
    units: Optional[List[UnitInput]] = None


class GeneralInfoInput(BaseModel):
    """Step 1 fields."""
    name: Optional[str] = None
    type: Optional[PropertyType] = None
    property_number: Optional[str] = None
    management_company: Optional[str] = None
    property_manager: Optional[str] = None
    accountant: Optional[str] = None
    address: Optional[str] = None


class StepUpdateRequest(GeneralInfoInput):
    """
    Body of a single wizard step.

    Step 1 reads the general fields, steps 2 and 3 read `buildings`.
    """
    buildings: Optional[List[BuildingInput]] = None


class DraftRequest(StepUpdateRequest):
    """Any subset of property fields."""
    current_step: Optional[int] = None


class AutosaveRequest(DraftRequest):
    """
    Partial save from the wizard.

    Step flags and completion values sent by clients are not declared and
    therefore dropped; the service recomputes them.
    """
    status: Optional[PropertyStatus] = None


class UpdatePropertyRequest(AutosaveRequest):
    """Partial update of an existing property."""


class CreatePropertyRequest(BaseModel):
    """Full submission for strict creation."""
    name: str = Field(..., max_length=200)
    type: PropertyType
    property_number: str = Field(..., max_length=50)
    management_company: Optional[str] = None
    property_manager: Optional[str] = None
    accountant: Optional[str] = None
    address: str = Field(..., max_length=500)
    buildings: List[BuildingInput] = Field(default_factory=list)


def to_payload(body: BaseModel) -> dict:
    """Plain dict of the fields a client sent, enums as raw values."""
    return body.model_dump(mode="json", exclude_unset=True)
