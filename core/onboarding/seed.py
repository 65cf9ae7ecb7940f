"""
Sample portfolio loaded into a fresh repository.

Three fully onboarded properties (two WEG, one MV) and two drafts stuck in
the first wizard step. Derived fields are recomputed on load, so the drafts
report the progress their data actually supports.
"""

from __future__ import annotations

from datetime import datetime

from core.onboarding.completion import apply_progress_tracking
from core.onboarding.schema import (
    STEP_GENERAL_INFO,
    STEP_UNITS,
    Building,
    BuildingType,
    Property,
    PropertyType,
    Unit,
    UnitType,
)


def _ts(value: str) -> datetime:
    return datetime.fromisoformat(value)


# =============================================================================
# Complete Properties
# =============================================================================


def _berliner_strasse() -> tuple[Property, datetime]:
    owner_titles = ["Familie", "Herr", "Frau"]
    owner_names = ["Meyer", "Schmidt", "Weber", "Wagner"]
    units = [
        Unit(
            unit_number=f"{i // 3 + 1}.{i % 3 + 1}",
            floor=i // 3,
            type=UnitType.APARTMENT,
            rooms=[3, 4, 2][i % 3],
            size=[85, 110, 65][i % 3],
            ownership_share=8.33,
            owner=f"{owner_titles[i % 3]} {owner_names[i // 3]}",
        )
        for i in range(12)
    ]
    return Property(
        id="1",
        name="Berliner Straße 42",
        type=PropertyType.WEG,
        property_number="WEG-2025-001",
        management_company="Hausverwaltung Schmidt & Partners",
        property_manager="Thomas Schmidt",
        accountant="Lisa Becker",
        address="Berliner Straße 42, 10115 Berlin",
        created_at=_ts("2025-01-15T09:00:00+00:00"),
        current_step=STEP_UNITS,
        buildings=[
            Building(
                street_name="Berliner Straße",
                house_number="42",
                postal_code="10115",
                city="Berlin",
                building_type=BuildingType.ALTBAU,
                floors=4,
                units_per_floor=3,
                construction_year=1905,
                units=units,
            )
        ],
    ), _ts("2025-01-20T14:30:00+00:00")


def _spree_building(house_number: str, prefix: str, offset: int, layout: dict, skip_tenant: int) -> Building:
    units = [
        Unit(
            unit_number=f"{prefix}{i // 4 + 1}.{i % 4 + 1}",
            floor=i // 4,
            type=UnitType.APARTMENT,
            rooms=layout["rooms"][i % 4],
            size=layout["size"][i % 4],
            rent=layout["rent"][i % 4],
            tenant=None if i % skip_tenant == 0 else f"Mieter {i + offset}",
        )
        for i in range(24)
    ]
    return Building(
        street_name="Spreeweg",
        house_number=house_number,
        postal_code="10557",
        city="Berlin",
        building_type=BuildingType.NEUBAU,
        floors=6,
        units_per_floor=4,
        construction_year=2020,
        units=units,
    )


def _wohnanlage_spree() -> tuple[Property, datetime]:
    building_a = _spree_building(
        "15",
        "A",
        offset=1,
        layout={"rooms": [1, 2, 3, 2], "size": [45, 65, 85, 55], "rent": [950, 1250, 1650, 1100]},
        skip_tenant=5,
    )
    building_b = _spree_building(
        "17",
        "B",
        offset=25,
        layout={"rooms": [2, 3, 1, 2], "size": [60, 80, 40, 55], "rent": [1150, 1450, 850, 1050]},
        skip_tenant=6,
    )
    return Property(
        id="2",
        name="Moderne Wohnanlage Spree",
        type=PropertyType.MV,
        property_number="MV-2025-001",
        management_company="Immobilien Berlin GmbH",
        property_manager="Sarah Johnson",
        accountant="Martin Fischer",
        address="Spreeweg 15-17, 10557 Berlin",
        created_at=_ts("2025-01-10T10:00:00+00:00"),
        current_step=STEP_UNITS,
        buildings=[building_a, building_b],
    ), _ts("2025-01-22T11:15:00+00:00")


def _charlottenburger_hoefe() -> tuple[Property, datetime]:
    owners = [
        "Dr. Klaus Weber",
        "Maria Schulz",
        "Familie Richter",
        "Hans-Peter König",
        "Ingrid Lehmann",
        "Prof. Müller",
        "Familie Braun",
        "Sophie Wagner",
    ]
    units = [
        Unit(
            unit_number=f"{i // 2 + 1}{'A' if i % 2 == 0 else 'B'}",
            floor=i // 2,
            type=UnitType.APARTMENT,
            rooms=5 if i % 2 == 0 else 4,
            size=165 if i % 2 == 0 else 135,
            ownership_share=12.5,
            owner=owners[i],
        )
        for i in range(8)
    ]
    return Property(
        id="3",
        name="Charlottenburger Höfe",
        type=PropertyType.WEG,
        property_number="WEG-2025-002",
        management_company="Premium Property Management",
        property_manager="Dr. Michael Hoffmann",
        accountant="Christina Neumann",
        address="Kurfürstendamm 250, 10719 Berlin",
        created_at=_ts("2025-01-18T12:00:00+00:00"),
        current_step=STEP_UNITS,
        buildings=[
            Building(
                street_name="Kurfürstendamm",
                house_number="250",
                postal_code="10719",
                city="Berlin",
                building_type=BuildingType.ALTBAU,
                floors=4,
                units_per_floor=2,
                construction_year=1895,
                units=units,
            )
        ],
    ), _ts("2025-01-23T16:45:00+00:00")


# =============================================================================
# Drafts
# =============================================================================


def _prenzlauer_berg() -> tuple[Property, datetime]:
    return Property(
        id="4",
        name="Prenzlauer Berg Residence",
        type=PropertyType.WEG,
        property_number="WEG-2025-003",
        management_company="Buena Property Management GmbH",
        property_manager="Max Mustermann",
        accountant="jane-smith",
        address="",
        created_at=_ts("2025-01-24T09:00:00+00:00"),
        current_step=STEP_GENERAL_INFO,
    ), _ts("2025-01-24T09:30:00+00:00")


def _friedrichshain_complex() -> tuple[Property, datetime]:
    return Property(
        id="5",
        name="Friedrichshain Complex",
        type=PropertyType.MV,
        property_number="MV-2025-002",
        management_company="Buena Property Management GmbH",
        property_manager="Max Mustermann",
        accountant="",
        address="",
        created_at=_ts("2025-01-24T08:30:00+00:00"),
        current_step=STEP_GENERAL_INFO,
    ), _ts("2025-01-24T08:45:00+00:00")


def build_seed_properties() -> list[Property]:
    """Build the sample portfolio with progress recomputed from its data."""
    properties = []
    for factory in (
        _berliner_strasse,
        _wohnanlage_spree,
        _charlottenburger_hoefe,
        _prenzlauer_berg,
        _friedrichshain_complex,
    ):
        prop, modified_at = factory()
        properties.append(apply_progress_tracking(prop, now=modified_at))
    return properties
