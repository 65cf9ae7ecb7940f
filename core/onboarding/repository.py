"""
Property Repository - In-Memory Storage for Onboarded Properties

Provides CRUD and filtering over a single in-memory collection.
Every read and write hands out deep copies, so callers can never mutate
stored state without going back through an explicit write.
"""

from __future__ import annotations

import copy
import logging
import threading
from typing import Callable, Optional, TypeVar

from core.onboarding.schema import Property, PropertyStatus, PropertyType


logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# Repository
# =============================================================================


class PropertyRepository:
    """
    Repository for storing and retrieving properties.

    Insertion order is preserved. execute_transaction offers best-effort
    atomicity: the collection is snapshotted before the operation and
    restored if it raises.
    """

    def __init__(self, properties: Optional[list[Property]] = None):
        """
        Initialise repository.

        Args:
            properties: Optional initial records (copied on the way in)
        """
        self._properties: dict[str, Property] = {}
        self._lock = threading.RLock()
        for prop in properties or []:
            self._properties[prop.id] = copy.deepcopy(prop)

    # =========================================================================
    # CRUD Operations
    # =========================================================================

    def find_all(self) -> list[Property]:
        """Get all properties."""
        return [copy.deepcopy(p) for p in self._properties.values()]

    def find_by_id(self, property_id: str) -> Optional[Property]:
        """
        Get a property by ID.

        Returns:
            Copy of the property if found, None otherwise
        """
        prop = self._properties.get(property_id)
        return copy.deepcopy(prop) if prop else None

    def create(self, prop: Property) -> Property:
        """
        Store a new property.

        Raises:
            ValueError: If the property ID already exists
        """
        if prop.id in self._properties:
            raise ValueError(f"Property {prop.id} already exists")

        self._properties[prop.id] = copy.deepcopy(prop)
        return copy.deepcopy(prop)

    def update(self, property_id: str, prop: Property) -> Optional[Property]:
        """
        Replace a stored property.

        Returns:
            Copy of the stored property, or None if not found
        """
        if property_id not in self._properties:
            return None

        self._properties[property_id] = copy.deepcopy(prop)
        return copy.deepcopy(prop)

    def delete(self, property_id: str) -> bool:
        """
        Delete a property. Deletion is immediate and irreversible.

        Returns:
            True if deleted, False if not found
        """
        if property_id in self._properties:
            del self._properties[property_id]
            return True
        return False

    # =========================================================================
    # Query Operations
    # =========================================================================

    def count(self) -> int:
        """Get total number of properties."""
        return len(self._properties)

    def find_by_type(self, property_type: PropertyType) -> list[Property]:
        """Get properties of one type (WEG or MV)."""
        property_type = PropertyType(property_type)
        return [copy.deepcopy(p) for p in self._properties.values() if p.type == property_type]

    def find_by_status(self, status: PropertyStatus) -> list[Property]:
        """Get properties by status."""
        status = PropertyStatus(status)
        return [copy.deepcopy(p) for p in self._properties.values() if p.status == status]

    # =========================================================================
    # Transactions
    # =========================================================================

    def execute_transaction(self, operation: Callable[[], T]) -> T:
        """
        Run operation with rollback on failure.

        The collection is snapshotted first; if operation raises, the
        snapshot is restored and the exception re-raised. The lock keeps
        transactions in one process from interleaving.
        """
        with self._lock:
            snapshot = copy.deepcopy(self._properties)
            try:
                return operation()
            except Exception:
                logger.warning("Transaction failed, restoring %d properties", len(snapshot))
                self._properties = snapshot
                raise


# =============================================================================
# Singleton Instance
# =============================================================================

_repository_instance: Optional[PropertyRepository] = None


def get_property_repository(seed: bool = False) -> PropertyRepository:
    """
    Get the property repository singleton.

    Args:
        seed: Load the sample properties (only used on first call)

    Returns:
        PropertyRepository instance
    """
    global _repository_instance
    if _repository_instance is None:
        properties: list[Property] = []
        if seed:
            from core.onboarding.seed import build_seed_properties

            properties = build_seed_properties()
        _repository_instance = PropertyRepository(properties)
        logger.info("Property repository initialised with %d properties", len(properties))
    return _repository_instance


def reset_property_repository() -> None:
    """Reset the singleton instance (for testing)."""
    global _repository_instance
    _repository_instance = None
