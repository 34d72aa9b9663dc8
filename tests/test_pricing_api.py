from __future__ import annotations

from dataclasses import replace

from fastapi import FastAPI
from fastapi.testclient import TestClient

from venue_pricing.controllers.pricing_controller import router as pricing_router
from venue_pricing.domain.errors import CatalogLoadError
from venue_pricing.repository.data_repository import DataRepository
from venue_pricing.services.catalog_service import CatalogService
from venue_pricing.services.pricing_service import PricingService
from venue_pricing.utils.config import get_settings


MONDAY = "2026-01-05"


class BrokenCatalogService:
    def get_catalog(self, refresh: bool = False):
        raise CatalogLoadError("Failed to fetch pricing data after 3 attempts: database is locked")


def _build_test_app(tmp_path, catalog_service=None) -> tuple[FastAPI, DataRepository]:
    get_settings.cache_clear()
    settings = replace(
        get_settings(),
        database_path=tmp_path / "pricing_api.db",
        catalog_retry_delay_seconds=0.0,
    )
    repository = DataRepository(settings)
    repository.initialize_database()
    repository.seed_default_catalog()
    pricing_service = PricingService(
        repository=repository,
        settings=settings,
        catalog_service=catalog_service or CatalogService(repository=repository, settings=settings),
    )

    app = FastAPI()
    app.include_router(pricing_router)
    app.state.repository = repository
    app.state.pricing_service = pricing_service
    return app, repository


def _rental_dates() -> dict:
    return {
        MONDAY: [
            {
                "id": "hall",
                "roomSlugs": ["living-room"],
                "start": f"{MONDAY}T18:00:00",
                "end": f"{MONDAY}T21:00:00",
                "isPrivate": False,
                "expectedAttendance": 40,
                "resources": ["food", "backline", "projector"],
                "rooms": [
                    {
                        "roomSlug": "living-room",
                        "additionalCosts": [{"description": "Extra chairs", "cost": 20}],
                    }
                ],
            },
            {
                "id": "bad",
                "roomSlugs": ["main-hall"],
                "start": "sometime",
                "end": f"{MONDAY}T21:00:00",
            },
        ]
    }


def test_price_endpoint_returns_batch(tmp_path) -> None:
    app, _ = _build_test_app(tmp_path)
    client = TestClient(app)

    response = client.post("/price", json={"rentalDates": _rental_dates()})

    assert response.status_code == 200
    body = response.json()
    hall, bad = body["costEstimates"]
    assert hall["id"] == "hall"
    # living room evening flat 250 + backline 75 + chairs 20 + cleaning 75
    assert hall["slotTotal"] == 420.0
    assert [item["description"] for item in hall["estimates"][0]["additionalCosts"]] == [
        "Extra chairs",
        "Backline (Living Room, projector included)",
    ]
    assert bad["slotTotal"] == 0.0
    assert bad["error"]
    assert body["grandTotal"] == 420.0
    assert body["tax"] == 54.6
    assert body["totalWithTax"] == 474.6


def test_price_endpoint_accepts_empty_request(tmp_path) -> None:
    app, _ = _build_test_app(tmp_path)
    client = TestClient(app)

    response = client.post("/price", json={"rentalDates": {}})

    assert response.status_code == 200
    assert response.json()["grandTotal"] == 0.0


def test_price_endpoint_rejects_malformed_body(tmp_path) -> None:
    app, _ = _build_test_app(tmp_path)
    client = TestClient(app)

    response = client.post("/price", json={"rentalDates": {MONDAY: [{"roomSlugs": "main-hall"}]}})

    assert response.status_code == 422


def test_catalog_failure_maps_to_service_unavailable(tmp_path) -> None:
    app, _ = _build_test_app(tmp_path, catalog_service=BrokenCatalogService())
    client = TestClient(app)

    response = client.post("/price", json={"rentalDates": _rental_dates()})

    assert response.status_code == 503
    assert "Failed to fetch pricing data" in response.json()["detail"]


def test_estimate_is_persisted_and_retrievable(tmp_path) -> None:
    app, repository = _build_test_app(tmp_path)
    client = TestClient(app)

    created = client.post(
        "/estimates",
        json={"rentalRequestId": "rental-7", "rentalDates": _rental_dates()},
    )

    assert created.status_code == 201
    estimate_id = created.json()["estimateId"]
    assert repository.count_cost_estimates() == 1

    fetched = client.get(f"/estimates/{estimate_id}")
    assert fetched.status_code == 200
    body = fetched.json()
    assert body["rentalRequestId"] == "rental-7"
    assert body["grandTotal"] == 420.0
    assert len(body["costEstimates"]) == 2


def test_unknown_estimate_returns_404(tmp_path) -> None:
    app, _ = _build_test_app(tmp_path)
    client = TestClient(app)

    response = client.get("/estimates/missing")

    assert response.status_code == 404


def test_services_missing_from_app_state_return_503() -> None:
    app = FastAPI()
    app.include_router(pricing_router)
    client = TestClient(app)

    assert client.post("/price", json={"rentalDates": {}}).status_code == 503
    assert client.get("/estimates/anything").status_code == 503


def test_health_reports_app_identity() -> None:
    app = FastAPI()
    app.include_router(pricing_router)
    client = TestClient(app)

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_negative_manual_cost_is_reported_per_booking(tmp_path) -> None:
    app, _ = _build_test_app(tmp_path)
    client = TestClient(app)
    rental_dates = _rental_dates()
    rental_dates[MONDAY][0]["rooms"][0]["additionalCosts"][0]["cost"] = -20

    response = client.post("/price", json={"rentalDates": rental_dates})

    assert response.status_code == 200
    hall = response.json()["costEstimates"][0]
    assert hall["slotTotal"] == 0.0
    assert "must be >= 0" in hall["error"]
