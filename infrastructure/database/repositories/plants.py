"""
Plant Repository
================

Repository for plant records, kept in a key-value store.
Clear ownership: PlantRepository is used exclusively by PlantRegistryService.

Responsibilities:
- Sequential id assignment (ids are never reused)
- Plant create / read / replace
- Owner index (ids in registration order)
- Caregiver index (ordered identities per plant)

Layout:
    plants:counter      -> last assigned id
    plants:<id>         -> plant dict
    owners:<owner>      -> [id, ...]
    caregivers:<id>     -> [identity, ...]
"""
from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Any, List

from app.domain.exceptions import InvalidInputError, NotFoundError
from app.domain.plant import Metrics, Plant
from app.utils.concurrency import synchronized
from infrastructure.database.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

COUNTER_KEY = "plants:counter"


def is_plant_id(value: Any) -> bool:
    """Plant ids are positive ints; bools and numeric strings are not ids."""
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def plant_key(plant_id: int) -> str:
    return f"plants:{plant_id}"


def owner_key(owner: str) -> str:
    return f"owners:{owner}"


def caregivers_key(plant_id: int) -> str:
    return f"caregivers:{plant_id}"


class PlantRepository:
    """Repository for plant operations (PlantRegistryService exclusive)."""

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store
        # Guards the id counter and the owner index
        self._lock = threading.RLock()

    # Plant CRUD Operations ----------------------------------------------------
    @synchronized
    def create(self, *, name: str, species: str, owner: str, now: datetime) -> int:
        """
        Create a new plant with default metrics.

        Args:
            name: Display name, must not be blank
            species: Species label, must not be blank
            owner: Identity of the registering caller
            now: Registration timestamp (UTC)

        Returns:
            The newly assigned plant id
        """
        if not isinstance(name, str):
            raise InvalidInputError("Plant name must be a string", detail={"field": "name"})
        if not isinstance(species, str):
            raise InvalidInputError("Plant species must be a string", detail={"field": "species"})
        clean_name = name.strip()
        clean_species = species.strip()
        if not clean_name:
            raise InvalidInputError("Plant name must not be empty", detail={"field": "name"})
        if not clean_species:
            raise InvalidInputError("Plant species must not be empty", detail={"field": "species"})

        plant_id = int(self._store.get(COUNTER_KEY, 0)) + 1
        plant = Plant(
            plant_id=plant_id,
            name=clean_name,
            species=clean_species,
            owner=owner,
            created_at=now,
            last_updated_at=now,
            alive=True,
            metrics=Metrics(),
        )
        owned = list(self._store.get(owner_key(owner), []))
        owned.append(plant_id)

        self._store.put_many(
            {
                plant_key(plant_id): plant.to_dict(),
                owner_key(owner): owned,
                caregivers_key(plant_id): [],
                COUNTER_KEY: plant_id,
            }
        )
        logger.debug("Stored plant %s for owner %s", plant_id, owner)
        return plant_id

    def get(self, plant_id: int) -> Plant:
        """Get plant by ID."""
        data = self._store.get(plant_key(plant_id)) if is_plant_id(plant_id) else None
        if data is None:
            raise NotFoundError(f"Plant {plant_id} not found", detail={"plant_id": plant_id})
        return Plant.from_dict(data)

    def exists(self, plant_id: Any) -> bool:
        return is_plant_id(plant_id) and self._store.contains(plant_key(plant_id))

    def put(self, plant_id: int, plant: Plant) -> None:
        """Replace an existing plant record."""
        if not self.exists(plant_id):
            raise NotFoundError(f"Plant {plant_id} not found", detail={"plant_id": plant_id})
        self._store.put(plant_key(plant_id), plant.to_dict())

    def list_by_owner(self, owner: str) -> List[int]:
        """Plant ids registered by ``owner``, in registration order."""
        return [int(pid) for pid in self._store.get(owner_key(owner), [])]

    def total_count(self) -> int:
        """Number of ids ever assigned."""
        return int(self._store.get(COUNTER_KEY, 0))

    # Caregiver index ----------------------------------------------------------
    def get_caregivers(self, plant_id: int) -> List[str]:
        if not self.exists(plant_id):
            raise NotFoundError(f"Plant {plant_id} not found", detail={"plant_id": plant_id})
        return list(self._store.get(caregivers_key(plant_id), []))

    def put_caregivers(self, plant_id: int, caregivers: List[str]) -> None:
        if not self.exists(plant_id):
            raise NotFoundError(f"Plant {plant_id} not found", detail={"plant_id": plant_id})
        self._store.put(caregivers_key(plant_id), list(caregivers))
