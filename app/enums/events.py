from enum import Enum
from typing import TypeAlias


class PlantEvent(str, Enum):
    PLANT_REGISTERED = "plant_registered"
    PLANT_METRICS_UPDATED = "plant_metrics_updated"
    PLANT_STATUS_CHANGED = "plant_status_changed"
    CAREGIVER_ADDED = "caregiver_added"


class AuditOutcome(str, Enum):
    """Outcome recorded for each audited registry call."""

    SUCCESS = "success"
    DENIED = "denied"
    REJECTED = "rejected"


EventType: TypeAlias = PlantEvent
