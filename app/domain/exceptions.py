"""Centralized exception hierarchy for the plant registry.

All domain and service exceptions inherit from :class:`PlantRegistryError` so
that callers can catch a single base class when they need a broad safety net,
yet still match on specific subclasses where narrower handling is appropriate.

Every client error is raised before any state is written, so a failed call
never leaves a partial update behind.

Hierarchy
---------
::

    PlantRegistryError (base — maps to 500)
    ├── ValidationError          (400 — bad input from caller)
    │   ├── InvalidInputError    (empty required text)
    │   ├── OutOfRangeError      (metric outside its declared bound)
    │   └── InvalidAddressError  (null / empty identity)
    ├── UnauthorizedError        (403 — caller lacks the required role)
    ├── NotFoundError            (404 — plant does not exist)
    ├── ConflictError            (409 — duplicate / state conflict)
    │   ├── AlreadyCaregiverError
    │   └── EntityDeadError
    ├── RepositoryError          (500 — storage failure)
    └── ConfigurationError       (500 — missing / invalid config)
"""

from __future__ import annotations


class PlantRegistryError(Exception):
    """Base exception for all plant registry errors.

    Parameters
    ----------
    message:
        Human-readable description.
    detail:
        Optional machine-readable context dict attached to the error for
        structured logging.
    """

    http_status: int = 500

    def __init__(self, message: str = "", *, detail: dict | None = None) -> None:
        super().__init__(message)
        self.detail = detail or {}


# ── Client errors (4xx) ──────────────────────────────────────────────


class ValidationError(PlantRegistryError):
    """Caller supplied invalid or incomplete input (HTTP 400)."""

    http_status: int = 400


class InvalidInputError(ValidationError):
    """A required text field is empty."""


class OutOfRangeError(ValidationError):
    """A raw metric reading is outside its declared bound."""


class InvalidAddressError(ValidationError):
    """An identity is null or empty."""


class UnauthorizedError(PlantRegistryError):
    """Caller is neither owner nor (where allowed) caregiver (HTTP 403)."""

    http_status: int = 403


class NotFoundError(PlantRegistryError):
    """Requested plant does not exist (HTTP 404)."""

    http_status: int = 404


class ConflictError(PlantRegistryError):
    """Operation conflicts with existing state (HTTP 409)."""

    http_status: int = 409


class AlreadyCaregiverError(ConflictError):
    """Identity is already a caregiver of the plant."""


class EntityDeadError(ConflictError):
    """Mutation attempted on a plant that has died."""


# ── Server errors (5xx) ──────────────────────────────────────────────


class RepositoryError(PlantRegistryError):
    """Storage layer failure (HTTP 500)."""

    http_status: int = 500


class ConfigurationError(PlantRegistryError):
    """Missing or invalid application configuration (HTTP 500)."""

    http_status: int = 500
