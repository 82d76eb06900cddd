import pytest
from fastapi.testclient import TestClient

from geoip2_geocoder import factory
from geoip2_geocoder.adapters.base import build_lookup_uri
from geoip2_geocoder.errors import AdapterError
from geoip2_geocoder.factory import get_geocoder_provider
from geoip2_geocoder.main import app
from geoip2_geocoder.providers.geoip2_provider import GeoIP2Provider
from tests.common import LONDON_RECORD, FakeGeoIP2Adapter, NotFoundAdapter


def _get(url: str, adapter: FakeGeoIP2Adapter) -> tuple[int, dict]:
    """Helper that wires a provider over `adapter` and calls the API."""
    app.dependency_overrides[get_geocoder_provider] = lambda: GeoIP2Provider(adapter)
    client = TestClient(app)
    try:
        response = client.get(url)
        return response.status_code, response.json()
    finally:
        app.dependency_overrides.clear()


def test_health() -> None:
    status_code, body = _get("/health", FakeGeoIP2Adapter())

    assert status_code == 200
    assert body == {"status": "ok"}


def test_geocode_returns_address_record() -> None:
    status_code, body = _get("/v1/geocode?address=81.2.69.142&locale=de", FakeGeoIP2Adapter(LONDON_RECORD))

    assert status_code == 200
    assert body["provider"] == "geoip2"
    address = body["address"]
    assert address["country_code"] == "GB"
    assert address["country"] == "Vereinigtes Königreich"
    assert address["locality"] == "London"
    assert address["postal_code"] == "EC2V"
    assert address["timezone"] == "Europe/London"
    assert address["admin_levels"] == [{"name": None, "code": "ENG", "level": 1}]
    assert address["provided_by"] == "geoip2"


def test_geocode_localhost() -> None:
    adapter = FakeGeoIP2Adapter(LONDON_RECORD)
    status_code, body = _get("/v1/geocode?address=127.0.0.1", adapter)

    assert status_code == 200
    assert body["address"]["locality"] == "localhost"
    assert adapter.calls == []


def test_geocode_maps_street_address_to_400() -> None:
    status_code, body = _get("/v1/geocode?address=10%20Downing%20St", FakeGeoIP2Adapter(LONDON_RECORD))

    assert status_code == 400
    assert body["detail"]["code"] == "unsupported_operation"
    assert "only IP addresses" in body["detail"]["message"]


def test_geocode_maps_no_result_to_404() -> None:
    status_code, body = _get("/v1/geocode?address=203.0.113.10", NotFoundAdapter())

    assert status_code == 404
    assert body["detail"]["code"] == "no_result"
    assert "203.0.113.10" in body["detail"]["message"]


def test_geocode_maps_adapter_error_to_502() -> None:
    status_code, body = _get("/v1/geocode?address=8.8.8.8", FakeGeoIP2Adapter(exc=AdapterError("Upstream failure")))

    assert status_code == 502
    assert body["detail"]["code"] == "adapter_error"
    assert "Upstream failure" in body["detail"]["message"]


def test_geocode_missing_address_is_invalid_request() -> None:
    status_code, body = _get("/v1/geocode", FakeGeoIP2Adapter())

    assert status_code == 400
    assert body["code"] == "invalid_request"
    assert body["provider"] == "geoip2"


def test_reverse_is_unsupported() -> None:
    adapter = FakeGeoIP2Adapter(LONDON_RECORD)
    status_code, body = _get("/v1/reverse?latitude=51.5142&longitude=-0.0931", adapter)

    assert status_code == 400
    assert body["detail"]["code"] == "unsupported_operation"
    assert adapter.calls == []


def test_reverse_out_of_range_coordinates() -> None:
    status_code, body = _get("/v1/reverse?latitude=123&longitude=0", FakeGeoIP2Adapter())

    assert status_code == 400
    assert body["code"] == "invalid_coordinates"


def test_lifespan_builds_provider_at_startup_and_closes_it(monkeypatch: pytest.MonkeyPatch) -> None:
    adapter = FakeGeoIP2Adapter(LONDON_RECORD)
    monkeypatch.setattr(factory, "build_adapter", lambda: adapter)
    get_geocoder_provider.cache_clear()

    with TestClient(app) as client:
        assert get_geocoder_provider.cache_info().currsize == 1
        response = client.get("/v1/geocode?address=81.2.69.142")
        assert response.status_code == 200
        assert adapter.closed is False

    assert adapter.closed is True
    assert adapter.calls == [build_lookup_uri("81.2.69.142")]
    assert get_geocoder_provider.cache_info().currsize == 0
