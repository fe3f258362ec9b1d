"""
Plant Registry
==============
Registry of plants with owner/caregiver access control, health scoring and
an age/health-gated growth lifecycle.

Usage:
    from app.services.container import ServiceContainer

    container = ServiceContainer.build()
    registry = container.plant_registry
    plant_id = registry.register_plant("Basil", "Ocimum basilicum", owner="alice")
"""

__version__ = "1.0.0"
