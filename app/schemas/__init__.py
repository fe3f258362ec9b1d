"""
Schemas Module
==============

This module provides Pydantic models for event payloads.
Schemas ensure data integrity and provide automatic validation.
"""

from app.schemas.events import (
    CaregiverAddedPayload,
    PlantMetricsUpdatedPayload,
    PlantRegisteredPayload,
    PlantStatusChangedPayload,
)

__all__ = [
    "CaregiverAddedPayload",
    "PlantMetricsUpdatedPayload",
    "PlantRegisteredPayload",
    "PlantStatusChangedPayload",
]
