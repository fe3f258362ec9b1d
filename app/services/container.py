from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from app.config import AppConfig, load_config
from app.domain.exceptions import ConfigurationError
from app.services.application.access_control import AccessControl
from app.services.application.plant_registry_service import PlantRegistryService
from app.utils.event_bus import EventBus
from infrastructure.database.kv_store import InMemoryKeyValueStore, JsonFileKeyValueStore, KeyValueStore
from infrastructure.database.repositories.plants import PlantRepository
from infrastructure.logging.audit import AuditLogger
from infrastructure.logging.event_logger import EventLogger

logger = logging.getLogger(__name__)


def build_store(config: AppConfig) -> KeyValueStore:
    """Create the key-value backend named by ``config.storage_backend``."""
    if config.storage_backend == "memory":
        return InMemoryKeyValueStore()
    if config.storage_backend == "json":
        return JsonFileKeyValueStore(config.storage_path, lock_timeout=config.storage_lock_timeout)
    raise ConfigurationError(
        f"Unknown storage backend '{config.storage_backend}'",
        detail={"storage_backend": config.storage_backend},
    )


@dataclass
class ServiceContainer:
    """Aggregate and manage the registry and its collaborators."""

    config: AppConfig
    store: KeyValueStore
    plant_repo: PlantRepository
    event_bus: EventBus
    event_logger: EventLogger
    audit_logger: Optional[AuditLogger]
    plant_registry: PlantRegistryService

    @classmethod
    def build(cls, config: AppConfig | None = None) -> "ServiceContainer":
        """Construct the service container with all dependencies.

        Args:
            config: Application configuration, defaults to ``load_config()``
        """
        config = config or load_config()
        store = build_store(config)
        plant_repo = PlantRepository(store)
        event_bus = EventBus(asynchronous=config.eventbus_async, queue_size=config.eventbus_queue_size)
        event_logger = EventLogger(event_bus)
        audit_logger = AuditLogger(config.audit_log_path, level=config.log_level) if config.audit_enabled else None

        plant_registry = PlantRegistryService(
            plant_repo=plant_repo,
            event_bus=event_bus,
            access_control=AccessControl(),
            audit_logger=audit_logger,
        )
        logger.info(
            "ServiceContainer built (storage=%s, async_events=%s, audit=%s)",
            config.storage_backend,
            config.eventbus_async,
            config.audit_enabled,
        )
        return cls(
            config=config,
            store=store,
            plant_repo=plant_repo,
            event_bus=event_bus,
            event_logger=event_logger,
            audit_logger=audit_logger,
            plant_registry=plant_registry,
        )

    def shutdown(self) -> None:
        """Flush pending events and release log handlers."""
        self.event_bus.drain()
        self.event_logger.close()
        if self.audit_logger is not None:
            self.audit_logger.close()
        logger.info("ServiceContainer shutdown complete.")
