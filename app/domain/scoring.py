"""
Plant Health Scoring
====================
Pure functions mapping raw readings to a 0-100 health score.

Each reading is scored against a plateau: inside the optimal closed interval
it scores 100, below it rises linearly from 0 at a reading of 0, above it
falls linearly to 0 at the band's ceiling. Integer floor arithmetic is used
throughout and every sub-score is clamped to [0, 100] before averaging.
"""

from __future__ import annotations

from typing import NamedTuple

from app.constants import ScoringBands


class SubScores(NamedTuple):
    soil_moisture: int
    light_exposure: int
    temperature: int


def clamp_score(value: int) -> int:
    return max(ScoringBands.MIN_SCORE, min(ScoringBands.MAX_SCORE, value))


def plateau_score(reading: int, band: tuple[int, int, int, int, int]) -> int:
    """Score a single reading against a ``(low, high, below, above, ceiling)`` band."""
    low, high, below_divisor, above_divisor, ceiling = band
    if reading < low:
        raw = reading * ScoringBands.MAX_SCORE // below_divisor
    elif reading > high:
        raw = (ceiling - reading) * ScoringBands.MAX_SCORE // above_divisor
    else:
        raw = ScoringBands.MAX_SCORE
    return clamp_score(raw)


def sub_scores(soil_moisture: int, light_exposure: int, temperature: int) -> SubScores:
    """Return the three clamped sub-scores."""
    return SubScores(
        soil_moisture=plateau_score(soil_moisture, ScoringBands.SOIL_MOISTURE),
        light_exposure=plateau_score(light_exposure, ScoringBands.LIGHT_EXPOSURE),
        temperature=plateau_score(temperature, ScoringBands.TEMPERATURE),
    )


def health_score(soil_moisture: int, light_exposure: int, temperature: int) -> int:
    """
    Compute the plant health score.

    Args:
        soil_moisture: Percent, 0-100
        light_exposure: Percent, 0-100
        temperature: Tenths of a degree, 0-500

    Returns:
        Floor average of the three sub-scores, always within [0, 100]
    """
    scores = sub_scores(soil_moisture, light_exposure, temperature)
    return clamp_score(sum(scores) // len(scores))
