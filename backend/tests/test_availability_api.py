import asyncio

import pytest
from fastapi.testclient import TestClient

from _helpers import FailingRepository, scenario_repository

from app.availability.cache import MemoryQuoteCache
from app.availability.service import AvailabilityService
from app.core.config import get_settings
from app.main import create_app

QUOTE_URL = "/v1/availability/quote"
SCENARIO = {"hotelId": "H1", "checkIn": "2025-10-15", "checkOut": "2025-10-18", "guests": 2}


@pytest.fixture()
def api():
    repository = scenario_repository()
    cache = MemoryQuoteCache()
    app = create_app()
    app.state.availability_service = AvailabilityService(repository, cache)
    client = TestClient(app, raise_server_exceptions=False)
    return client, app, repository


def test_quote_endpoint_returns_scenario(api):
    client, _app, _repository = api

    response = client.post(QUOTE_URL, json=SCENARIO)

    assert response.status_code == 200
    assert response.json() == {
        "nights": 3,
        "rooms": [
            {
                "roomTypeId": "RT1",
                "name": "Deluxe Double",
                "capacity": 2,
                "total": 1_600_000,
                "breakdown": [
                    {"date": "2025-10-15", "price": 500_000},
                    {"date": "2025-10-16", "price": 600_000},
                    {"date": "2025-10-17", "price": 500_000},
                ],
                "availableAllNights": True,
            }
        ],
        "currency": "VND",
    }


def test_repeated_quote_is_byte_identical_and_cached(api):
    client, _app, repository = api

    first = client.post(QUOTE_URL, json=SCENARIO)
    second = client.post(QUOTE_URL, json=SCENARIO)

    assert first.content == second.content
    assert repository.calls == {"room_types": 1, "inventory": 1, "price_overrides": 1}


@pytest.mark.parametrize(
    "check_out,message,bound",
    [
        ("2025-10-14", "checkOut must be after checkIn", "order"),
        ("2025-10-15", "Nights must be >= 1", "min"),
        ("2025-11-15", "Max 30 nights", "max"),
    ],
)
def test_range_errors_are_400(api, check_out, message, bound):
    client, _app, repository = api

    response = client.post(QUOTE_URL, json={**SCENARIO, "checkOut": check_out})

    assert response.status_code == 400
    assert response.json() == {"detail": message, "bound": bound}
    assert repository.total_calls == 0


@pytest.mark.parametrize(
    "patch",
    [
        {"guests": 0},
        {"checkIn": "2025-13-01"},
        {"checkOut": "tomorrow"},
        {"checkIn": 1760486400},
        {"checkOut": "1760745600"},
        {"checkIn": 20251015.0},
        {"hotelId": ""},
    ],
)
def test_malformed_body_is_rejected(api, patch):
    client, _app, repository = api

    response = client.post(QUOTE_URL, json={**SCENARIO, **patch})

    assert response.status_code == 422
    assert repository.total_calls == 0


def test_missing_field_is_rejected(api):
    client, _app, _repository = api
    body = dict(SCENARIO)
    body.pop("guests")

    response = client.post(QUOTE_URL, json=body)

    assert response.status_code == 422


def test_storage_failure_is_generic_500(api):
    client, app, _repository = api
    app.state.availability_service = AvailabilityService(FailingRepository(), MemoryQuoteCache())

    response = client.post(QUOTE_URL, json=SCENARIO)

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}
    assert "unreachable" not in response.text


def test_slow_quote_times_out(api, monkeypatch):
    client, app, _repository = api

    class StuckService:
        async def quote(self, request):
            await asyncio.sleep(5)

    app.state.availability_service = StuckService()
    fast = get_settings().model_copy(update={"quote_timeout": 0.01})
    monkeypatch.setattr("app.api.v1.availability.get_settings", lambda: fast)

    response = client.post(QUOTE_URL, json=SCENARIO)

    assert response.status_code == 504


def test_admin_cache_endpoints(api):
    client, _app, _repository = api
    client.post(QUOTE_URL, json=SCENARIO)

    stats = client.get("/v1/admin/cache/stats").json()
    removed = client.delete("/v1/admin/cache/hotels/H1").json()

    assert stats["backend"] == "memory"
    assert stats["size"] == 1
    assert removed == {"hotelId": "H1", "removed": 1}


def test_admin_health(api):
    client, _app, _repository = api

    assert client.get("/v1/admin/health").json() == {"ok": True}


def test_admin_requires_key_when_configured(api, monkeypatch):
    client, _app, _repository = api
    secured = get_settings().model_copy(update={"admin_api_key": "s3cret"})
    monkeypatch.setattr("app.core.security.get_settings", lambda: secured)

    assert client.get("/v1/admin/health").status_code == 401
    assert client.get("/v1/admin/health", headers={"X-API-Key": "wrong"}).status_code == 401
    assert client.get("/v1/admin/health", headers={"X-API-Key": "s3cret"}).status_code == 200
    # quoting stays public
    assert client.post(QUOTE_URL, json=SCENARIO).status_code == 200


def test_admin_ready_reports_missing_database(api):
    client, _app, _repository = api

    assert client.get("/v1/admin/ready").json() == {"ok": False, "postgres": False, "cache": True}
