from __future__ import annotations

from datetime import datetime, timezone

import pytest

from app.domain.exceptions import InvalidInputError, NotFoundError
from app.domain.plant import Metrics
from infrastructure.database.repositories.plants import COUNTER_KEY, PlantRepository

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


class TestCreate:
    def test_assigns_sequential_ids(self, plant_repo):
        first = plant_repo.create(name="Basil", species="Ocimum", owner="alice", now=NOW)
        second = plant_repo.create(name="Mint", species="Mentha", owner="bob", now=NOW)
        assert (first, second) == (1, 2)
        assert plant_repo.total_count() == 2

    def test_stores_defaults(self, plant_repo):
        plant_id = plant_repo.create(name=" Basil ", species="Ocimum", owner="alice", now=NOW)
        plant = plant_repo.get(plant_id)

        assert plant.name == "Basil"
        assert plant.owner == "alice"
        assert plant.alive is True
        assert plant.created_at == NOW
        assert plant.last_updated_at == NOW
        assert plant.metrics == Metrics(50, 50, 220, 100, 0)
        assert plant_repo.get_caregivers(plant_id) == []

    @pytest.mark.parametrize("name,species", [("", "Ocimum"), ("Basil", ""), ("  ", "Ocimum"), (None, "Ocimum")])
    def test_blank_text_rejected_without_consuming_an_id(self, plant_repo, store, name, species):
        with pytest.raises(InvalidInputError):
            plant_repo.create(name=name, species=species, owner="alice", now=NOW)
        assert plant_repo.total_count() == 0
        assert store.get(COUNTER_KEY) is None
        assert plant_repo.list_by_owner("alice") == []

    @pytest.mark.parametrize("name,species", [(5, "Ocimum"), ("Basil", 3.5), (b"Basil", "Ocimum")])
    def test_non_text_rejected(self, plant_repo, name, species):
        with pytest.raises(InvalidInputError, match="must be a string"):
            plant_repo.create(name=name, species=species, owner="alice", now=NOW)
        assert plant_repo.total_count() == 0


class TestQueries:
    def test_get_unknown_raises(self, plant_repo):
        with pytest.raises(NotFoundError, match="not found"):
            plant_repo.get(42)

    @pytest.mark.parametrize("bad_id", ["1", True, 1.0, None])
    def test_only_int_ids_resolve(self, plant_repo, bad_id):
        plant_repo.create(name="Basil", species="Ocimum", owner="alice", now=NOW)
        assert plant_repo.exists(1) is True
        assert plant_repo.exists(bad_id) is False
        with pytest.raises(NotFoundError):
            plant_repo.get(bad_id)
        with pytest.raises(NotFoundError):
            plant_repo.get_caregivers(bad_id)

    def test_put_unknown_raises(self, plant_repo):
        plant_id = plant_repo.create(name="Basil", species="Ocimum", owner="alice", now=NOW)
        plant = plant_repo.get(plant_id)
        with pytest.raises(NotFoundError):
            plant_repo.put(plant_id + 1, plant)

    def test_put_replaces_record(self, plant_repo):
        plant_id = plant_repo.create(name="Basil", species="Ocimum", owner="alice", now=NOW)
        plant = plant_repo.get(plant_id)
        plant_repo.put(plant_id, plant.with_metrics(Metrics(1, 2, 3, 4, 0), updated_at=NOW, alive=False))

        stored = plant_repo.get(plant_id)
        assert stored.alive is False
        assert stored.metrics.temperature == 3

    def test_owner_index_keeps_registration_order(self, plant_repo):
        ids = []
        for owner in ["alice", "bob", "alice", "carol", "alice"]:
            ids.append(plant_repo.create(name="P", species="S", owner=owner, now=NOW))

        assert plant_repo.list_by_owner("alice") == [ids[0], ids[2], ids[4]]
        assert plant_repo.list_by_owner("bob") == [ids[1]]
        assert plant_repo.list_by_owner("nobody") == []

    def test_caregivers_round_trip(self, plant_repo):
        plant_id = plant_repo.create(name="Basil", species="Ocimum", owner="alice", now=NOW)
        plant_repo.put_caregivers(plant_id, ["bob", "carol"])
        assert plant_repo.get_caregivers(plant_id) == ["bob", "carol"]

    def test_caregivers_of_unknown_plant_raise(self, plant_repo):
        with pytest.raises(NotFoundError):
            plant_repo.get_caregivers(7)
        with pytest.raises(NotFoundError):
            plant_repo.put_caregivers(7, ["bob"])


def test_counter_survives_new_repository_over_same_store(store):
    PlantRepository(store).create(name="Basil", species="Ocimum", owner="alice", now=NOW)
    again = PlantRepository(store)
    assert again.create(name="Mint", species="Mentha", owner="alice", now=NOW) == 2
