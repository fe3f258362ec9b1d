"""
Access Control
==============
Capability checks deciding who may mutate a plant.

Owners manage a plant (add caregivers) and update its metrics; caregivers may
only update metrics. The owner is never implicitly a caregiver.
"""

from __future__ import annotations

from typing import Any, Sequence

from app.domain.exceptions import AlreadyCaregiverError, InvalidAddressError
from app.domain.plant import Plant


def is_valid_identity(identity: Any) -> bool:
    """An identity is any non-blank string."""
    return isinstance(identity, str) and bool(identity.strip())


class AccessControl:
    """Owner / caregiver policy for plant mutations."""

    def can_manage(self, plant: Plant, caller: str) -> bool:
        return caller == plant.owner

    def can_update_metrics(self, plant: Plant, caregivers: Sequence[str], caller: str) -> bool:
        return caller == plant.owner or caller in caregivers

    def add_caregiver(self, caregivers: Sequence[str], candidate: str) -> list[str]:
        """
        Return a new caregiver list with ``candidate`` appended.

        Raises:
            InvalidAddressError: candidate is None or blank
            AlreadyCaregiverError: candidate is already listed
        """
        if not is_valid_identity(candidate):
            raise InvalidAddressError("Caregiver identity must not be empty", detail={"caregiver": candidate})
        if candidate in caregivers:
            raise AlreadyCaregiverError(
                f"{candidate} is already a caregiver",
                detail={"caregiver": candidate},
            )
        return [*caregivers, candidate]
