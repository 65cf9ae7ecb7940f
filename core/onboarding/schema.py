"""
Onboarding Schema - Property, Building and Unit Records

Defines the canonical records collected by the three-step onboarding wizard:
1. General information (Property)
2. Building data (Building)
3. Unit data (Unit)

Records are plain dataclasses. Derived fields (unit_count, step flags,
completion_percentage, completed) are never taken from input; they are
recomputed by the completion tracker on every mutation.
"""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Final, Optional

from core.onboarding.exceptions import InvalidStepNumberError


# =============================================================================
# Enums
# =============================================================================


class PropertyType(Enum):
    """Management model of the property."""

    WEG = "WEG"  # Condominium - units carry ownership shares
    MV = "MV"  # Rental - units carry rent and tenant


class BuildingType(Enum):
    """Construction category of a building."""

    ALTBAU = "altbau"
    NEUBAU = "neubau"
    HOCHHAUS = "hochhaus"
    MIXED = "mixed"


class UnitType(Enum):
    """Usage of a single unit."""

    APARTMENT = "apartment"
    OFFICE = "office"
    PARKING = "parking"
    STORAGE = "storage"
    COMMERCIAL = "commercial"


class PropertyStatus(Enum):
    """Lifecycle status of a property in the portfolio."""

    ACTIVE = "active"
    ARCHIVED = "archived"


# =============================================================================
# Validation Limits
# =============================================================================

PROPERTY_NAME_MAX: Final[int] = 200
PROPERTY_NUMBER_MAX: Final[int] = 50
ADDRESS_MIN: Final[int] = 5
ADDRESS_MAX: Final[int] = 500
MANAGEMENT_COMPANY_MAX: Final[int] = 200
PERSON_NAME_MAX: Final[int] = 100  # property manager, accountant, owner, tenant

STREET_NAME_MAX: Final[int] = 100
HOUSE_NUMBER_MAX: Final[int] = 20
POSTAL_CODE_MIN: Final[int] = 4
POSTAL_CODE_MAX: Final[int] = 10
CITY_MAX: Final[int] = 100
FLOORS_MIN: Final[int] = 1
FLOORS_MAX: Final[int] = 200
UNITS_PER_FLOOR_MIN: Final[int] = 1
UNITS_PER_FLOOR_MAX: Final[int] = 50
CONSTRUCTION_YEAR_MIN: Final[int] = 1800
CONSTRUCTION_YEAR_LOOKAHEAD: Final[int] = 10

UNIT_NUMBER_MAX: Final[int] = 10
UNIT_FLOOR_MIN: Final[int] = 0
UNIT_FLOOR_MAX: Final[int] = 100
UNIT_ROOMS_MIN: Final[int] = 0
UNIT_ROOMS_MAX: Final[int] = 20
UNIT_SIZE_MIN: Final[float] = 1
UNIT_SIZE_MAX: Final[float] = 10000
UNIT_SIZE_WARNING: Final[float] = 10000

OWNERSHIP_SHARE_MIN: Final[float] = 0.01
OWNERSHIP_SHARE_MAX: Final[float] = 100
OWNERSHIP_SHARE_TOTAL: Final[float] = 100
OWNERSHIP_SHARE_TOLERANCE: Final[float] = 0.1

RENT_MIN: Final[float] = 0
RENT_MAX: Final[float] = 100000
RENT_WARNING: Final[float] = 50000

# Wizard steps (1-based)
STEP_GENERAL_INFO: Final[int] = 1
STEP_BUILDINGS: Final[int] = 2
STEP_UNITS: Final[int] = 3
TOTAL_STEPS: Final[int] = 3

# Defaults applied when partial wizard data is converted to full records
DEFAULT_BUILDING_TYPE: Final = BuildingType.ALTBAU
DEFAULT_FLOORS: Final[int] = 1
DEFAULT_UNITS_PER_FLOOR: Final[int] = 1
DEFAULT_UNIT_TYPE: Final = UnitType.APARTMENT
DEFAULT_ROOMS: Final[int] = 1
DEFAULT_SIZE: Final[float] = 50
DEFAULT_UNIT_FLOOR: Final[int] = 0


# =============================================================================
# Helpers
# =============================================================================


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def generate_property_id() -> str:
    """Generate a unique property ID."""
    return f"PROP-{uuid.uuid4().hex[:12].upper()}"


def max_construction_year(today: Optional[datetime] = None) -> int:
    """Latest plausible construction year (planned buildings included)."""
    return (today or utc_now()).year + CONSTRUCTION_YEAR_LOOKAHEAD


def is_number(value: Any) -> bool:
    """True for int and float values; bool is not a number here."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def has_text(value: Any) -> bool:
    """True if value is a string with non-whitespace content."""
    return isinstance(value, str) and bool(value.strip())


def enum_value(value: Any) -> Any:
    """Unwrap an Enum member to its raw value."""
    return value.value if isinstance(value, Enum) else value


def parse_enum(enum_cls: type[Enum], value: Any) -> Optional[Enum]:
    if value is None or value == "":
        return None
    if isinstance(value, enum_cls):
        return value
    return enum_cls(value)


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (0.5 -> 1, 2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def check_step_number(step_number: Any) -> int:
    """Return step_number if it addresses a wizard step (1-3), else raise InvalidStepNumberError."""
    if (
        not isinstance(step_number, int)
        or isinstance(step_number, bool)
        or not STEP_GENERAL_INFO <= step_number <= TOTAL_STEPS
    ):
        raise InvalidStepNumberError(step_number)
    return step_number


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def as_dict(record: Any) -> dict[str, Any]:
    """
    Normalise a record or partial payload to a plain dictionary.

    Validators and predicates work on dictionaries so they accept both
    dataclass records and the partial data sent by the wizard.
    """
    if record is None:
        return {}
    if hasattr(record, "to_dict"):
        return record.to_dict()
    return dict(record)


# =============================================================================
# Unit
# =============================================================================


@dataclass
class Unit:
    """
    A single rentable or ownable space inside a building.

    ownership_share/owner apply to WEG properties, rent/tenant to MV.
    """

    unit_number: str = ""
    floor: int = DEFAULT_UNIT_FLOOR
    type: Optional[UnitType] = DEFAULT_UNIT_TYPE
    rooms: float = DEFAULT_ROOMS
    size: float = DEFAULT_SIZE

    # === WEG ===
    ownership_share: Optional[float] = None  # percent, e.g. 8.33
    owner: Optional[str] = None

    # === MV ===
    rent: Optional[float] = None  # monthly rent in EUR
    tenant: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert unit to dictionary for serialisation."""
        return {
            "unit_number": self.unit_number,
            "floor": self.floor,
            "type": enum_value(self.type),
            "rooms": self.rooms,
            "size": self.size,
            "ownership_share": self.ownership_share,
            "owner": self.owner,
            "rent": self.rent,
            "tenant": self.tenant,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Unit":
        """Create unit from dictionary. Missing fields take partial defaults."""
        return unit_from_partial(data)


def unit_from_partial(data: Optional[dict]) -> Unit:
    """
    Convert partial unit data to a full Unit.

    Missing fields are defaulted: type -> apartment, rooms -> 1,
    size -> 50, floor -> 0, unit_number -> "".
    """
    data = data or {}

    def pick(key: str, default: Any) -> Any:
        value = data.get(key)
        return default if value is None else value

    return Unit(
        unit_number=pick("unit_number", ""),
        floor=pick("floor", DEFAULT_UNIT_FLOOR),
        type=parse_enum(UnitType, data.get("type")) or DEFAULT_UNIT_TYPE,
        rooms=pick("rooms", DEFAULT_ROOMS),
        size=pick("size", DEFAULT_SIZE),
        ownership_share=data.get("ownership_share"),
        owner=data.get("owner"),
        rent=data.get("rent"),
        tenant=data.get("tenant"),
    )


# =============================================================================
# Building
# =============================================================================


@dataclass
class Building:
    """A physical structure belonging to a property. Owns its units."""

    street_name: str = ""
    house_number: str = ""
    postal_code: str = ""
    city: str = ""
    building_type: Optional[BuildingType] = DEFAULT_BUILDING_TYPE
    floors: int = DEFAULT_FLOORS
    units_per_floor: int = DEFAULT_UNITS_PER_FLOOR
    construction_year: Optional[int] = None
    units: list[Unit] = field(default_factory=list)

    @property
    def expected_unit_count(self) -> int:
        """Number of units implied by floors x units per floor."""
        return (self.floors or 0) * (self.units_per_floor or 0)

    def to_dict(self) -> dict:
        """Convert building to dictionary for serialisation."""
        return {
            "street_name": self.street_name,
            "house_number": self.house_number,
            "postal_code": self.postal_code,
            "city": self.city,
            "building_type": enum_value(self.building_type),
            "floors": self.floors,
            "units_per_floor": self.units_per_floor,
            "construction_year": self.construction_year,
            "units": [unit.to_dict() for unit in self.units],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Building":
        """Create building from dictionary. Missing fields take partial defaults."""
        return building_from_partial(data)


def building_from_partial(data: Optional[dict]) -> Building:
    """
    Convert partial building data to a full Building.

    Missing fields are defaulted: building_type -> altbau, floors -> 1,
    units_per_floor -> 1, string fields -> "". Units are converted with
    unit_from_partial.
    """
    data = data or {}

    def pick(key: str, default: Any) -> Any:
        value = data.get(key)
        return default if value is None else value

    return Building(
        street_name=pick("street_name", ""),
        house_number=pick("house_number", ""),
        postal_code=pick("postal_code", ""),
        city=pick("city", ""),
        building_type=(
            parse_enum(BuildingType, data.get("building_type")) or DEFAULT_BUILDING_TYPE
        ),
        floors=pick("floors", DEFAULT_FLOORS),
        units_per_floor=pick("units_per_floor", DEFAULT_UNITS_PER_FLOOR),
        construction_year=data.get("construction_year"),
        units=[unit_from_partial(u) for u in data.get("units") or []],
    )


def count_units(buildings: list[Building]) -> int:
    """Total number of units across all buildings."""
    return sum(len(building.units) for building in buildings)


# =============================================================================
# Property
# =============================================================================

# Fields a caller may set directly on a property (general information)
GENERAL_INFO_FIELDS: Final[tuple[str, ...]] = (
    "name",
    "type",
    "property_number",
    "management_company",
    "property_manager",
    "accountant",
    "address",
)

REQUIRED_TEXT_FIELDS: Final[tuple[str, ...]] = ("name", "property_number", "address")

# Fields owned by the completion tracker - never copied from input
DERIVED_FIELDS: Final[tuple[str, ...]] = (
    "unit_count",
    "step1_complete",
    "step2_complete",
    "step3_complete",
    "completed",
    "completion_percentage",
    "created_at",
    "updated_at",
    "last_modified",
)


@dataclass
class Property:
    """
    Root aggregate of the onboarding flow.

    A property owns its buildings, and through them its units, by value.
    Replacing `buildings` replaces every contained unit.
    """

    id: str = field(default_factory=generate_property_id)
    name: str = ""
    type: Optional[PropertyType] = None
    property_number: str = ""
    management_company: Optional[str] = None
    property_manager: Optional[str] = None
    accountant: Optional[str] = None
    address: str = ""
    buildings: list[Building] = field(default_factory=list)
    status: PropertyStatus = PropertyStatus.ACTIVE

    # === DERIVED (recomputed on every mutation) ===
    unit_count: int = 0
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    last_modified: datetime = field(default_factory=utc_now)

    # === ONBOARDING PROGRESS ===
    step1_complete: bool = False
    step2_complete: bool = False
    step3_complete: bool = False
    current_step: int = STEP_GENERAL_INFO
    completed: bool = False
    completion_percentage: int = 0

    @property
    def is_draft(self) -> bool:
        """A property stays a draft until every onboarding step is complete."""
        return self.completion_percentage < 100

    def apply_general_info(self, data: dict) -> None:
        """
        Merge general information fields present in data.

        Required strings (name, property_number, address) set to None
        become "".
        """
        for key in GENERAL_INFO_FIELDS:
            if key not in data:
                continue
            value = data[key]
            if key == "type":
                value = parse_enum(PropertyType, value)
            elif value is None and key in REQUIRED_TEXT_FIELDS:
                value = ""
            setattr(self, key, value)

    def replace_buildings(self, buildings: list[dict]) -> None:
        """Replace all buildings (and their units) from partial data."""
        self.buildings = [building_from_partial(b) for b in buildings or []]
        self.unit_count = count_units(self.buildings)

    def to_dict(self) -> dict:
        """Convert property to dictionary for serialisation."""
        return {
            "id": self.id,
            "name": self.name,
            "type": enum_value(self.type),
            "property_number": self.property_number,
            "management_company": self.management_company,
            "property_manager": self.property_manager,
            "accountant": self.accountant,
            "address": self.address,
            "buildings": [building.to_dict() for building in self.buildings],
            "unit_count": self.unit_count,
            "status": enum_value(self.status),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "last_modified": self.last_modified.isoformat(),
            "step1_complete": self.step1_complete,
            "step2_complete": self.step2_complete,
            "step3_complete": self.step3_complete,
            "current_step": self.current_step,
            "completed": self.completed,
            "completion_percentage": self.completion_percentage,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Property":
        """
        Create property from dictionary.

        Accepts partial data. Derived fields are restored as stored; callers
        that accept outside input must recompute them afterwards.

        Raises:
            InvalidStepNumberError: If current_step is outside 1-3
        """
        prop = cls(
            id=data.get("id") or generate_property_id(),
            status=parse_enum(PropertyStatus, data.get("status")) or PropertyStatus.ACTIVE,
            current_step=check_step_number(data.get("current_step") or STEP_GENERAL_INFO),
        )
        prop.apply_general_info(data)
        prop.replace_buildings(data.get("buildings") or [])

        for key in ("step1_complete", "step2_complete", "step3_complete", "completed"):
            if key in data:
                setattr(prop, key, bool(data[key]))
        if data.get("completion_percentage") is not None:
            prop.completion_percentage = int(data["completion_percentage"])

        for key in ("created_at", "updated_at", "last_modified"):
            parsed = _parse_datetime(data.get(key))
            if parsed is not None:
                setattr(prop, key, parsed)

        return prop
