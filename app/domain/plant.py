"""
Plant Domain Entity
===================
Registered plant with its owner, raw readings and derived lifecycle state.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from app.constants import (
    DEFAULT_GROWTH_STAGE,
    DEFAULT_HEALTH_SCORE,
    DEFAULT_LIGHT_EXPOSURE,
    DEFAULT_SOIL_MOISTURE,
    DEFAULT_TEMPERATURE,
)
from app.enums.growth import GrowthStage
from app.utils.time import coerce_datetime


@dataclass(frozen=True)
class Metrics:
    """Raw readings plus the health score and growth stage derived from them."""

    soil_moisture: int = DEFAULT_SOIL_MOISTURE
    light_exposure: int = DEFAULT_LIGHT_EXPOSURE
    temperature: int = DEFAULT_TEMPERATURE  # tenths of a degree
    health_score: int = DEFAULT_HEALTH_SCORE
    growth_stage: int = DEFAULT_GROWTH_STAGE

    @property
    def stage(self) -> GrowthStage:
        return GrowthStage(self.growth_stage)

    def to_dict(self) -> dict[str, int]:
        """Convert to dictionary."""
        return {
            "soil_moisture": self.soil_moisture,
            "light_exposure": self.light_exposure,
            "temperature": self.temperature,
            "health_score": self.health_score,
            "growth_stage": self.growth_stage,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Metrics":
        return cls(
            soil_moisture=int(data["soil_moisture"]),
            light_exposure=int(data["light_exposure"]),
            temperature=int(data["temperature"]),
            health_score=int(data["health_score"]),
            growth_stage=int(data["growth_stage"]),
        )


@dataclass
class Plant:
    """A registered plant.

    ``plant_id``, ``name``, ``species``, ``owner`` and ``created_at`` never
    change after registration. ``alive`` only ever goes from True to False.
    """

    plant_id: int
    name: str
    species: str
    owner: str
    created_at: datetime
    last_updated_at: datetime
    alive: bool = True
    metrics: Metrics = field(default_factory=Metrics)

    def with_metrics(self, metrics: Metrics, *, updated_at: datetime, alive: bool) -> "Plant":
        """Return a copy carrying new metrics; the original is left untouched."""
        return replace(self, metrics=metrics, last_updated_at=updated_at, alive=alive)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "plant_id": self.plant_id,
            "name": self.name,
            "species": self.species,
            "owner": self.owner,
            "created_at": self.created_at.isoformat(),
            "last_updated_at": self.last_updated_at.isoformat(),
            "alive": self.alive,
            "metrics": self.metrics.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Plant":
        created_at = coerce_datetime(data["created_at"])
        last_updated_at = coerce_datetime(data.get("last_updated_at")) or created_at
        if created_at is None:
            raise ValueError("created_at must be a valid ISO-8601 datetime")
        return cls(
            plant_id=int(data["plant_id"]),
            name=data["name"],
            species=data["species"],
            owner=data["owner"],
            created_at=created_at,
            last_updated_at=last_updated_at,
            alive=bool(data.get("alive", True)),
            metrics=Metrics.from_dict(data["metrics"]),
        )
