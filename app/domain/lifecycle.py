"""
Plant Lifecycle Rules
=====================
Growth stage and death derivation from age and health.

Stages are age-driven rather than incremental: a healthy plant is always at
the stage its age dictates, so a plant that stalled while unhealthy may jump
several stages on its next healthy update.
"""

from __future__ import annotations

from datetime import datetime

from app.constants import Lifecycle
from app.enums.growth import GrowthStage


def age_in_days(created_at: datetime, now: datetime) -> int:
    """Whole days elapsed since ``created_at``; never negative."""
    elapsed = (now - created_at).total_seconds()
    return max(0, int(elapsed // Lifecycle.SECONDS_PER_DAY))


def stage_for_age(age_days: int) -> GrowthStage:
    for stage, threshold in enumerate(Lifecycle.STAGE_AGE_THRESHOLDS_DAYS):
        if age_days < threshold:
            return GrowthStage(stage)
    return GrowthStage.FLOWERING


def growth_stage(age_days: int, health_score: int, previous_stage: int) -> int:
    """
    Derive the growth stage for an update.

    Args:
        age_days: Whole days since registration
        health_score: Score computed for the same update
        previous_stage: Stage stored before the update

    Returns:
        ``previous_stage`` while health is below the stall threshold,
        otherwise the stage matching ``age_days``
    """
    if health_score < Lifecycle.STALL_HEALTH_THRESHOLD:
        return previous_stage
    return int(stage_for_age(age_days))


def death_check(health_score: int) -> bool:
    return health_score < Lifecycle.DEATH_HEALTH_THRESHOLD
