# infrastructure/logging/event_logger.py
import logging
from typing import Callable

from app.enums.events import PlantEvent
from app.enums.growth import GrowthStage
from app.utils.event_bus import EventBus

logger = logging.getLogger(__name__)


class EventLogger:
    """Listens for plant events and logs them."""

    def __init__(self, event_bus: EventBus):
        self.event_bus = event_bus
        self._unsubscribers: list[Callable[[], None]] = [
            self.event_bus.subscribe(PlantEvent.PLANT_REGISTERED, self.log_plant_registered),
            self.event_bus.subscribe(PlantEvent.PLANT_METRICS_UPDATED, self.log_metrics_updated),
            self.event_bus.subscribe(PlantEvent.PLANT_STATUS_CHANGED, self.log_status_changed),
            self.event_bus.subscribe(PlantEvent.CAREGIVER_ADDED, self.log_caregiver_added),
        ]

    def log_plant_registered(self, data):
        logger.info("🌱 Plant %s '%s' registered by %s", data["plant_id"], data["name"], data["owner"])

    def log_metrics_updated(self, data):
        stage = data.get("growth_stage")
        stage_name = str(GrowthStage(stage)) if stage is not None else "?"
        logger.info(
            "📈 Plant %s health %s (%s) at %s",
            data["plant_id"],
            data["health_score"],
            stage_name,
            data["timestamp"],
        )

    def log_status_changed(self, data):
        if data["alive"]:
            logger.info("💚 Plant %s is alive", data["plant_id"])
        else:
            logger.warning("🥀 Plant %s has died", data["plant_id"])

    def log_caregiver_added(self, data):
        logger.info("🤝 Caregiver %s added to plant %s", data["caregiver"], data["plant_id"])

    def close(self) -> None:
        """Unsubscribe from every topic."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
