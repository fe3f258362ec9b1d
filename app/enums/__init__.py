"""
Enums Module
============

This module provides enumeration types for the plant registry.
Enums ensure type safety and consistency across the codebase.
"""

from app.enums.events import AuditOutcome, EventType, PlantEvent
from app.enums.growth import GrowthStage

__all__ = [
    "AuditOutcome",
    "EventType",
    "GrowthStage",
    "PlantEvent",
]
