"""
Application Constants
=====================

Scoring bands, lifecycle thresholds and metric bounds for plants.

Usage:
    from app.constants import MetricBounds, ScoringBands, Lifecycle
"""

# =============================================================================
# Metric Bounds (inclusive)
# =============================================================================


class MetricBounds:
    """Accepted ranges for raw readings."""

    SOIL_MOISTURE = (0, 100)  # percent
    LIGHT_EXPOSURE = (0, 100)  # percent
    TEMPERATURE = (0, 500)  # tenths of a degree (235 == 23.5)
    HEALTH_SCORE = (0, 100)


# =============================================================================
# Health Scoring
# =============================================================================


class ScoringBands:
    """Optimal plateaus used by the health scorer.

    Each band is ``(low, high, below_divisor, above_divisor, ceiling)``.
    Readings inside ``[low, high]`` score 100.
    """

    SOIL_MOISTURE = (30, 70, 30, 30, 100)
    LIGHT_EXPOSURE = (40, 80, 40, 20, 100)
    TEMPERATURE = (180, 280, 180, 70, 350)

    MAX_SCORE = 100
    MIN_SCORE = 0


# =============================================================================
# Lifecycle
# =============================================================================


class Lifecycle:
    """Growth and death thresholds."""

    # Age in days at which each stage after SEED begins
    STAGE_AGE_THRESHOLDS_DAYS = (7, 30, 90, 180)

    # Growth pauses while health is below this score
    STALL_HEALTH_THRESHOLD = 30

    # Plant dies when health falls below this score
    DEATH_HEALTH_THRESHOLD = 20

    SECONDS_PER_DAY = 86_400


# =============================================================================
# Defaults for newly registered plants
# =============================================================================

DEFAULT_SOIL_MOISTURE = 50
DEFAULT_LIGHT_EXPOSURE = 50
DEFAULT_TEMPERATURE = 220
DEFAULT_HEALTH_SCORE = 100
DEFAULT_GROWTH_STAGE = 0
