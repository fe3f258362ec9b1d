"""
Service Organization
====================
**application/**
  Services managed by ServiceContainer. One instance per application.
  Examples: PlantRegistryService, AccessControl

``container.ServiceContainer`` wires configuration, storage, the event bus,
loggers and the registry together.
"""
