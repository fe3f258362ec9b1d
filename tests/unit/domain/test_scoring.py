"""
Tests for the health scorer.

Covers:
- Plateau scoring inside, below and above each optimal band
- Boundary readings (closed intervals)
- Clamping for readings past a band's ceiling or outside declared bounds
"""

from __future__ import annotations

import pytest

from app.domain.scoring import health_score, plateau_score, sub_scores
from app.constants import ScoringBands


class TestHealthScore:
    def test_all_optimal_scores_100(self):
        assert health_score(50, 50, 220) == 100

    def test_all_zero_scores_0(self):
        assert sub_scores(0, 0, 0) == (0, 0, 0)
        assert health_score(0, 0, 0) == 0

    def test_all_maximum_readings_score_0(self):
        assert sub_scores(100, 100, 500) == (0, 0, 0)
        assert health_score(100, 100, 500) == 0

    def test_average_uses_floor_division(self):
        # 96 + 100 + 100 = 296 -> 98
        assert health_score(29, 50, 220) == 98
        # 0 + 0 + 66 = 66 -> 22
        assert health_score(0, 0, 120) == 22

    def test_score_bounded_for_every_valid_triple(self):
        for moisture in range(0, 101, 5):
            for light in range(0, 101, 5):
                for temperature in range(0, 501, 25):
                    score = health_score(moisture, light, temperature)
                    assert 0 <= score <= 100

    @pytest.mark.parametrize("reading", [(-50, -50, -100), (500, 500, 9000)])
    def test_out_of_range_input_is_clamped(self, reading):
        assert 0 <= health_score(*reading) <= 100


class TestPlateauBoundaries:
    @pytest.mark.parametrize(
        "reading,expected",
        [(0, 0), (15, 50), (29, 96), (30, 100), (70, 100), (71, 96), (85, 50), (100, 0)],
    )
    def test_soil_moisture(self, reading, expected):
        assert plateau_score(reading, ScoringBands.SOIL_MOISTURE) == expected

    @pytest.mark.parametrize(
        "reading,expected",
        [(0, 0), (20, 50), (39, 97), (40, 100), (80, 100), (81, 95), (90, 50), (100, 0)],
    )
    def test_light_exposure(self, reading, expected):
        assert plateau_score(reading, ScoringBands.LIGHT_EXPOSURE) == expected

    @pytest.mark.parametrize(
        "reading,expected",
        [(0, 0), (90, 50), (179, 99), (180, 100), (280, 100), (281, 98), (315, 50), (350, 0), (351, 0), (500, 0)],
    )
    def test_temperature(self, reading, expected):
        assert plateau_score(reading, ScoringBands.TEMPERATURE) == expected
