from __future__ import annotations

import sqlite3
from dataclasses import replace

import pytest

from venue_pricing.domain.errors import CatalogFormatError, CatalogLoadError
from venue_pricing.repository.data_repository import DataRepository
from venue_pricing.services.catalog_service import CatalogService
from venue_pricing.utils.config import get_settings


def _build_test_settings(tmp_path, filename: str = "catalog.db"):
    get_settings.cache_clear()
    return replace(
        get_settings(),
        database_path=tmp_path / filename,
        catalog_max_retries=3,
        catalog_retry_delay_seconds=2.0,
    )


def _seeded_repository(settings) -> DataRepository:
    repository = DataRepository(settings)
    repository.initialize_database()
    repository.seed_default_catalog()
    return repository


class FlakyRepository:
    """Fails a fixed number of catalog reads before delegating."""

    def __init__(self, delegate: DataRepository, failures: int) -> None:
        self._delegate = delegate
        self._failures = failures
        self.calls = 0

    def list_room_rules(self):
        self.calls += 1
        if self.calls <= self._failures:
            raise sqlite3.OperationalError("database is locked")
        return self._delegate.list_room_rules()

    def list_resources(self):
        return self._delegate.list_resources()


def test_seed_is_idempotent(tmp_path) -> None:
    settings = _build_test_settings(tmp_path)
    repository = _seeded_repository(settings)
    rooms_before = repository.list_room_rules()

    repository.seed_default_catalog()

    assert repository.list_room_rules() == rooms_before
    assert len(rooms_before) == 6


def test_upserts_replace_stored_documents(tmp_path) -> None:
    repository = _seeded_repository(_build_test_settings(tmp_path))

    repository.upsert_room_rules(
        "main-hall",
        {"all": {"fullDay": {"public": 10, "private": 20, "type": "flat"}}},
    )
    repository.upsert_resource({"id": "projector", "cost": 65, "type": "flat"})

    assert repository.list_room_rules()["main-hall"]["all"]["fullDay"]["public"] == 10
    projector = next(item for item in repository.list_resources() if item["id"] == "projector")
    assert projector["cost"] == 65


def test_missing_estimate_returns_none(tmp_path) -> None:
    repository = _seeded_repository(_build_test_settings(tmp_path))

    assert repository.get_cost_estimate("does-not-exist") is None
    assert repository.count_cost_estimates() == 0


def test_catalog_loaded_from_seeded_store(tmp_path) -> None:
    settings = _build_test_settings(tmp_path)
    service = CatalogService(repository=_seeded_repository(settings), settings=settings)

    catalog = service.get_catalog()

    assert catalog.rules_for_room("living-room") is not None
    assert catalog.resource("backline").override_for("living-room") is not None


def test_catalog_snapshot_is_cached_until_refresh(tmp_path) -> None:
    settings = _build_test_settings(tmp_path)
    repository = _seeded_repository(settings)
    service = CatalogService(repository=repository, settings=settings)

    first = service.get_catalog()
    repository.upsert_resource({"id": "projector", "cost": 65, "type": "flat"})

    assert service.get_catalog() is first
    refreshed = service.get_catalog(refresh=True)
    assert refreshed.resource("projector").cost == 65.0


def test_catalog_load_retries_transient_failures(tmp_path) -> None:
    settings = _build_test_settings(tmp_path)
    flaky = FlakyRepository(_seeded_repository(settings), failures=2)
    sleeps: list[float] = []
    service = CatalogService(repository=flaky, settings=settings, sleep=sleeps.append)

    catalog = service.load_catalog()

    assert flaky.calls == 3
    assert sleeps == [2.0, 2.0]
    assert catalog.rules_for_room("main-hall") is not None


def test_catalog_load_gives_up_after_max_retries(tmp_path) -> None:
    settings = _build_test_settings(tmp_path)
    flaky = FlakyRepository(_seeded_repository(settings), failures=10)
    sleeps: list[float] = []
    service = CatalogService(repository=flaky, settings=settings, sleep=sleeps.append)

    with pytest.raises(CatalogLoadError, match="after 3 attempts"):
        service.load_catalog()
    assert flaky.calls == 3
    assert len(sleeps) == 2


def test_malformed_catalog_is_not_retried(tmp_path) -> None:
    settings = _build_test_settings(tmp_path)
    repository = _seeded_repository(settings)
    repository.upsert_room_rules("annex", {"all": {"daytime": {"public": 10, "type": "weekly"}}})
    sleeps: list[float] = []
    service = CatalogService(repository=repository, settings=settings, sleep=sleeps.append)

    with pytest.raises(CatalogFormatError):
        service.load_catalog()
    assert sleeps == []


def test_zero_retry_budget_is_rejected(tmp_path) -> None:
    settings = replace(_build_test_settings(tmp_path), catalog_max_retries=0)

    with pytest.raises(ValueError):
        CatalogService(repository=_seeded_repository(settings), settings=settings)
