import json
from http import HTTPStatus
from typing import Any

import httpx

from geoip2_geocoder.adapters.base import BaseGeoIP2Adapter
from geoip2_geocoder.errors import AddressNotFoundError

# Trimmed GeoIP2 City record, shaped like MaxMind's test data for 81.2.69.142.
LONDON_RECORD: dict[str, Any] = {
    "city": {"geoname_id": 2643743, "names": {"de": "London", "en": "London", "ru": "Лондон"}},
    "continent": {"code": "EU", "geoname_id": 6255148, "names": {"en": "Europe"}},
    "country": {
        "geoname_id": 2635167,
        "iso_code": "GB",
        "names": {"de": "Vereinigtes Königreich", "en": "United Kingdom", "fr": "Royaume-Uni"},
    },
    "location": {
        "accuracy_radius": 10,
        "latitude": 51.5142,
        "longitude": -0.0931,
        "time_zone": "Europe/London",
    },
    "postal": {"code": "EC2V"},
    "subdivisions": [
        {"geoname_id": 6269131, "iso_code": "ENG", "names": {"en": "England", "fr": "Angleterre"}},
    ],
    "traits": {"ip_address": "81.2.69.142", "network": "81.2.69.142/31"},
}


class FakeGeoIP2Adapter(BaseGeoIP2Adapter):
    """In-memory adapter returning a fixed record (or raising) and recording every URI it was asked for."""

    def __init__(self, record: dict[str, Any] | str | None = None, exc: Exception | None = None) -> None:
        self._content = record if isinstance(record, str) else json.dumps(record or {})
        self._exc = exc
        self.calls: list[str] = []
        self.closed = False

    async def get_content(self, uri: str) -> str:
        self.calls.append(uri)
        if self._exc is not None:
            raise self._exc
        return self._content

    async def close(self) -> None:
        self.closed = True


class NotFoundAdapter(FakeGeoIP2Adapter):
    def __init__(self) -> None:
        super().__init__(exc=AddressNotFoundError("The address is not in the database."))


class MockResponse:
    def __init__(self, status_code: int, payload: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = {} if payload is None else payload
        self.text = text

    def json(self) -> Any:
        return self._payload


class MockAsyncClient:
    """Minimal async context-manager mock for httpx.AsyncClient."""

    def __init__(self, response: MockResponse, **kwargs: Any) -> None:
        self._response = response
        self.init_kwargs = kwargs
        self.requested_urls: list[str] = []

    async def __aenter__(self) -> "MockAsyncClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    async def get(self, url: str, **kwargs: Any) -> MockResponse:
        self.requested_urls.append(url)
        return self._response


class FailingAsyncClient:
    """Async client that raises a RequestError on enter to simulate network failure."""

    def __init__(self, url: str, *args: Any, **kwargs: Any) -> None:
        self._url = url

    async def __aenter__(self) -> "FailingAsyncClient":
        request = httpx.Request("GET", self._url)
        raise httpx.RequestError("Network failure", request=request)

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    async def get(self, url: str, **kwargs: Any) -> MockResponse:
        return MockResponse(status_code=HTTPStatus.OK, payload={})
