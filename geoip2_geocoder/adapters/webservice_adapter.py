import json
from http import HTTPStatus
from typing import Any

import httpx

from geoip2_geocoder.adapters.base import BaseGeoIP2Adapter, GeoIP2Model
from geoip2_geocoder.errors import AdapterError, AddressNotFoundError, InvalidArgumentError
from geoip2_geocoder.logger import logger

NOT_FOUND_CODES = frozenset({"IP_ADDRESS_NOT_FOUND", "IP_ADDRESS_RESERVED"})
INVALID_ADDRESS_CODES = frozenset({"IP_ADDRESS_INVALID", "IP_ADDRESS_REQUIRED"})


class GeoIP2WebServiceAdapter(BaseGeoIP2Adapter):
    """Adapter for the MaxMind GeoIP2 Precision web service.

    The web service returns the same record shape as the MMDB databases, so
    the provider maps both identically. Errors come back as a JSON body with
    a `code` and an `error` message:
    https://dev.maxmind.com/geoip/docs/web-services/responses#errors
    """

    def __init__(
        self,
        account_id: str,
        license_key: str,
        host: str = "geoip.maxmind.com",
        model: GeoIP2Model = GeoIP2Model.city,
        timeout_seconds: float = 5.0,
    ) -> None:
        self._account_id = account_id
        self._license_key = license_key
        self._base_url = f"https://{host.rstrip('/')}/geoip/v2.1"
        self._model = GeoIP2Model(model)
        self._timeout_seconds = timeout_seconds

    @property
    def model(self) -> GeoIP2Model:
        return self._model

    async def get_content(self, uri: str) -> str:
        address = self.address_from_uri(uri)
        url = f"{self._base_url}/{self._model.value}/{address}"

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout_seconds,
                auth=(self._account_id, self._license_key),
            ) as client:
                response = await client.get(url, headers={"Accept": "application/json"})
        except httpx.RequestError as exc:
            logger.error(f"Request to GeoIP2 web service failed url={url} error={exc!r}")
            raise AdapterError(f"Request to GeoIP2 web service failed: {repr(exc)}") from exc

        self._handle_http_errors(response)

        return json.dumps(self._parse_json(response))

    def _handle_http_errors(self, response: httpx.Response) -> None:
        """Map HTTP status codes and MaxMind error codes to domain-specific errors."""
        status_code = response.status_code
        if status_code < HTTPStatus.BAD_REQUEST:
            return

        code, message = self._error_details(response)

        if code in NOT_FOUND_CODES:
            raise AddressNotFoundError(message)

        if code in INVALID_ADDRESS_CODES:
            raise InvalidArgumentError(message)

        if status_code == HTTPStatus.NOT_FOUND:
            raise AddressNotFoundError(message)

        if status_code in (HTTPStatus.UNAUTHORIZED, HTTPStatus.PAYMENT_REQUIRED, HTTPStatus.FORBIDDEN):
            # Bad credentials, exhausted funds or a service the account may not use.
            raise AdapterError(f"GeoIP2 web service rejected the request ({code or status_code}): {message}")

        if status_code == HTTPStatus.TOO_MANY_REQUESTS:
            raise AdapterError("GeoIP2 web service rate limit exceeded (HTTP 429).")

        raise AdapterError(f"GeoIP2 web service returned HTTP {status_code}: {message}")

    @staticmethod
    def _error_details(response: httpx.Response) -> tuple[str | None, str]:
        """Best-effort extraction of MaxMind's `code`/`error` pair from an error body."""
        try:
            body = response.json()
        except ValueError:
            return None, response.text or f"HTTP {response.status_code}"

        if not isinstance(body, dict):
            return None, response.text or f"HTTP {response.status_code}"

        code = body.get("code")
        message = str(body.get("error") or response.text or f"HTTP {response.status_code}")
        return (str(code) if code else None), message

    @staticmethod
    def _parse_json(response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as exc:
            raise AdapterError(f"Failed to decode GeoIP2 web service response as JSON: {exc}") from exc

        if not isinstance(data, dict):
            raise AdapterError("GeoIP2 web service response is not a JSON object.")
        return data
