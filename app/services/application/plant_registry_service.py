"""
Plant Registry Service
======================
Orchestrates plant registration, metric updates, caregiver management and
read-only queries.

Metric update pipeline (per plant, under that plant's lock):
    authorization -> input validation -> health score -> growth stage
    -> death transition -> notifications

Every check runs before the first write, so a rejected call leaves no
partial state behind and publishes nothing.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import TYPE_CHECKING, Any, Callable, Iterator, Optional

from app.constants import MetricBounds
from app.domain import lifecycle, scoring
from app.domain.exceptions import (
    EntityDeadError,
    InvalidAddressError,
    InvalidInputError,
    NotFoundError,
    OutOfRangeError,
    PlantRegistryError,
    UnauthorizedError,
)
from app.domain.plant import Metrics, Plant
from app.enums.events import AuditOutcome, PlantEvent
from app.schemas.events import (
    CaregiverAddedPayload,
    PlantMetricsUpdatedPayload,
    PlantRegisteredPayload,
    PlantStatusChangedPayload,
)
from app.services.application.access_control import AccessControl, is_valid_identity
from app.utils.concurrency import KeyedLock
from app.utils.time import coerce_datetime, utc_now

if TYPE_CHECKING:
    from app.utils.event_bus import EventBus
    from infrastructure.database.repositories.plants import PlantRepository
    from infrastructure.logging.audit import AuditLogger

logger = logging.getLogger(__name__)


def _validate_reading(field_name: str, value: Any, bounds: tuple[int, int]) -> int:
    low, high = bounds
    # bool is an int subclass but never a valid reading
    if isinstance(value, bool) or not isinstance(value, int):
        raise OutOfRangeError(
            f"{field_name} must be an integer",
            detail={"field": field_name, "value": value},
        )
    if value < low or value > high:
        raise OutOfRangeError(
            f"{field_name}={value} outside [{low}, {high}]",
            detail={"field": field_name, "value": value, "min": low, "max": high},
        )
    return value


class PlantRegistryService:
    """
    Registry of plants and their caregivers.

    Responsibilities:
    - Registration with default metrics
    - Metric updates deriving health, growth stage and death
    - Append-only caregiver delegation
    - Read-only queries (no authorization gate)
    """

    def __init__(
        self,
        plant_repo: "PlantRepository",
        event_bus: "EventBus",
        access_control: AccessControl | None = None,
        audit_logger: "AuditLogger" | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.plant_repo = plant_repo
        self.event_bus = event_bus
        self.access_control = access_control or AccessControl()
        self.audit_logger = audit_logger
        self._clock = clock
        self._plant_locks = KeyedLock()

    # ==================== Helpers ====================

    def _resolve_now(self, now: Optional[datetime]) -> datetime:
        if now is None:
            return self._clock()
        resolved = coerce_datetime(now)
        if resolved is None:
            raise InvalidInputError("now must be a datetime or ISO-8601 string", detail={"now": repr(now)})
        return resolved

    @contextmanager
    def _locked_plant(self, plant_id: Any) -> Iterator[None]:
        """Hold the lock of an existing plant; unknown ids never get a lock."""
        if not self.plant_repo.exists(plant_id):
            raise NotFoundError(f"Plant {plant_id} not found", detail={"plant_id": plant_id})
        with self._plant_locks.hold(plant_id):
            yield

    def _publish(self, event: PlantEvent, payload: Any) -> None:
        try:
            self.event_bus.publish(event, payload)
        except Exception:
            logger.warning("Event bus publish failed for %s", event.value, exc_info=True)

    @contextmanager
    def _audited(self, actor: Any, action: str, resource: str, **metadata: Any) -> Iterator[None]:
        """Record the outcome of a mutating call in the audit log."""
        try:
            yield
        except UnauthorizedError as e:
            logger.warning("Denied %s on %s for %s: %s", action, resource, actor, e)
            self._audit(actor, action, resource, AuditOutcome.DENIED, error=str(e), **metadata)
            raise
        except PlantRegistryError as e:
            logger.warning("Rejected %s on %s for %s: %s", action, resource, actor, e)
            self._audit(actor, action, resource, AuditOutcome.REJECTED, error=type(e).__name__, **metadata)
            raise
        self._audit(actor, action, resource, AuditOutcome.SUCCESS, **metadata)

    def _audit(self, actor: Any, action: str, resource: str, outcome: AuditOutcome, **metadata: Any) -> None:
        if self.audit_logger is None:
            return
        self.audit_logger.log_event(str(actor), action, resource, outcome.value, **metadata)

    # ==================== Registration ====================

    def register_plant(self, name: str, species: str, owner: str, now: Optional[datetime] = None) -> int:
        """
        Register a new plant owned by ``owner``.

        Args:
            name: Plant name (non-empty)
            species: Plant species (non-empty)
            owner: Registering identity
            now: Registration time, defaults to the service clock

        Returns:
            The new plant id
        """
        with self._audited(owner, "register_plant", "plant", name=name, species=species):
            if not is_valid_identity(owner):
                raise InvalidAddressError("Owner identity must not be empty", detail={"owner": owner})
            plant_id = self.plant_repo.create(name=name, species=species, owner=owner, now=self._resolve_now(now))
            plant = self.plant_repo.get(plant_id)
            self._publish(
                PlantEvent.PLANT_REGISTERED,
                PlantRegisteredPayload(plant_id=plant_id, name=plant.name, owner=owner),
            )

        logger.info("Registered plant %s (%s) for %s", plant_id, plant.species, owner)
        return plant_id

    # ==================== Metric Updates ====================

    def update_plant_metrics(
        self,
        plant_id: int,
        soil_moisture: int,
        light_exposure: int,
        temperature: int,
        caller: str,
        now: Optional[datetime] = None,
    ) -> Metrics:
        """
        Store new readings and re-derive health, growth stage and liveness.

        Raises, in this order of precedence:
            NotFoundError, UnauthorizedError, OutOfRangeError, EntityDeadError

        Returns:
            The metrics stored for the plant
        """
        resource = f"plant:{plant_id}"
        with self._audited(caller, "update_plant_metrics", resource), self._locked_plant(plant_id):
            plant = self.plant_repo.get(plant_id)
            caregivers = self.plant_repo.get_caregivers(plant_id)
            if not self.access_control.can_update_metrics(plant, caregivers, caller):
                raise UnauthorizedError(
                    f"{caller} may not update plant {plant_id}",
                    detail={"plant_id": plant_id, "caller": caller},
                )

            moisture = _validate_reading("soil_moisture", soil_moisture, MetricBounds.SOIL_MOISTURE)
            light = _validate_reading("light_exposure", light_exposure, MetricBounds.LIGHT_EXPOSURE)
            temp = _validate_reading("temperature", temperature, MetricBounds.TEMPERATURE)

            if not plant.alive:
                raise EntityDeadError(f"Plant {plant_id} is dead", detail={"plant_id": plant_id})

            updated, died = self._apply_readings(plant, moisture, light, temp, self._resolve_now(now))
            self.plant_repo.put(plant_id, updated)

            if died:
                logger.warning(
                    "Plant %s died (health %s)", plant_id, updated.metrics.health_score
                )
                self._publish(
                    PlantEvent.PLANT_STATUS_CHANGED,
                    PlantStatusChangedPayload(plant_id=plant_id, alive=False),
                )
            self._publish(
                PlantEvent.PLANT_METRICS_UPDATED,
                PlantMetricsUpdatedPayload(
                    plant_id=plant_id,
                    health_score=updated.metrics.health_score,
                    growth_stage=updated.metrics.growth_stage,
                    timestamp=updated.last_updated_at.isoformat(),
                ),
            )

        logger.info(
            "Updated plant %s metrics: health=%s stage=%s",
            plant_id,
            updated.metrics.health_score,
            updated.metrics.stage,
        )
        return updated.metrics

    def _apply_readings(
        self, plant: Plant, moisture: int, light: int, temperature: int, now: datetime
    ) -> tuple[Plant, bool]:
        """Derive score, then stage, then death from a single update."""
        score = scoring.health_score(moisture, light, temperature)
        age = lifecycle.age_in_days(plant.created_at, now)
        stage = lifecycle.growth_stage(age, score, plant.metrics.growth_stage)
        died = lifecycle.death_check(score)

        metrics = Metrics(
            soil_moisture=moisture,
            light_exposure=light,
            temperature=temperature,
            health_score=score,
            growth_stage=stage,
        )
        updated_at = max(plant.last_updated_at, now)
        return plant.with_metrics(metrics, updated_at=updated_at, alive=not died), died

    # ==================== Caregivers ====================

    def add_caregiver(self, plant_id: int, caregiver: str, caller: str) -> list[str]:
        """
        Grant ``caregiver`` permission to update the plant's metrics.

        Only the owner may add caregivers; the list is append-only.

        Returns:
            The updated caregiver list
        """
        resource = f"plant:{plant_id}"
        with self._audited(caller, "add_caregiver", resource, caregiver=caregiver), self._locked_plant(plant_id):
            plant = self.plant_repo.get(plant_id)
            if not self.access_control.can_manage(plant, caller):
                raise UnauthorizedError(
                    f"Only the owner may add caregivers to plant {plant_id}",
                    detail={"plant_id": plant_id, "caller": caller},
                )
            caregivers = self.access_control.add_caregiver(self.plant_repo.get_caregivers(plant_id), caregiver)
            self.plant_repo.put_caregivers(plant_id, caregivers)
            self._publish(
                PlantEvent.CAREGIVER_ADDED,
                CaregiverAddedPayload(plant_id=plant_id, caregiver=caregiver),
            )

        logger.info("Added caregiver %s to plant %s", caregiver, plant_id)
        return caregivers

    # ==================== Queries ====================

    def get_plant(self, plant_id: int) -> Plant:
        return self.plant_repo.get(plant_id)

    def get_plant_metrics(self, plant_id: int) -> Metrics:
        return self.plant_repo.get(plant_id).metrics

    def get_plants_by_owner(self, owner: str) -> list[int]:
        return self.plant_repo.list_by_owner(owner)

    def get_total_plants(self) -> int:
        return self.plant_repo.total_count()

    def get_caregivers(self, plant_id: int) -> list[str]:
        return self.plant_repo.get_caregivers(plant_id)

    def is_caregiver(self, plant_id: int, identity: str) -> bool:
        return identity in self.plant_repo.get_caregivers(plant_id)
