from datetime import datetime, timezone

import pytest

from app.domain.plant import Metrics, Plant
from app.enums.growth import GrowthStage

CREATED = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _plant(**overrides) -> Plant:
    values = dict(
        plant_id=3,
        name="Fern",
        species="Nephrolepis exaltata",
        owner="alice",
        created_at=CREATED,
        last_updated_at=CREATED,
    )
    values.update(overrides)
    return Plant(**values)


def test_new_plant_defaults():
    plant = _plant()
    assert plant.alive is True
    assert plant.metrics == Metrics(50, 50, 220, 100, 0)
    assert plant.metrics.stage is GrowthStage.SEED


def test_from_dict_restores_plant_stored_by_to_dict():
    plant = _plant(alive=False, metrics=Metrics(10, 20, 90, 11, 2))
    data = plant.to_dict()

    assert data["created_at"] == "2026-01-01T00:00:00+00:00"
    assert data["metrics"]["growth_stage"] == 2
    assert Plant.from_dict(data) == plant


def test_from_dict_defaults_last_updated_to_created():
    data = _plant().to_dict()
    del data["last_updated_at"]
    assert Plant.from_dict(data).last_updated_at == CREATED


def test_from_dict_rejects_invalid_created_at():
    data = _plant().to_dict()
    data["created_at"] = "yesterday"
    with pytest.raises(ValueError, match="created_at"):
        Plant.from_dict(data)


def test_with_metrics_leaves_original_untouched():
    plant = _plant()
    later = datetime(2026, 1, 5, tzinfo=timezone.utc)
    updated = plant.with_metrics(Metrics(0, 0, 0, 0, 0), updated_at=later, alive=False)

    assert updated.alive is False
    assert updated.last_updated_at == later
    assert plant.alive is True
    assert plant.metrics.health_score == 100


def test_growth_stage_labels():
    assert str(GrowthStage.FLOWERING) == "Flowering"
    assert [int(s) for s in GrowthStage] == [0, 1, 2, 3, 4]
