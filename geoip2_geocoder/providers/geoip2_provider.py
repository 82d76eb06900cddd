from ipaddress import ip_address
from typing import Any

from pydantic import ValidationError

from geoip2_geocoder.adapters.base import BaseGeoIP2Adapter, build_lookup_uri
from geoip2_geocoder.config import DEFAULT_LOCALE
from geoip2_geocoder.errors import (
    AdapterError,
    AddressNotFoundError,
    InvalidArgumentError,
    NoResultError,
    UnsupportedOperationError,
)
from geoip2_geocoder.logger import logger
from geoip2_geocoder.models.address import ADDRESS_DEFAULTS, LOCALHOST_DEFAULTS, AddressRecord, AdminLevel
from geoip2_geocoder.models.query import GeocodeQuery, ReverseQuery
from geoip2_geocoder.models.raw_record import RawCityRecord, RawNamedRecord
from geoip2_geocoder.providers.base import BaseGeocoderProvider

LOCALHOST_ADDRESS = "127.0.0.1"


def _is_ip_address(value: str) -> bool:
    # Scoped IPv6 literals (fe80::1%eth0) name a local interface, not a routable address.
    if "%" in value:
        return False
    try:
        ip_address(value)
    except ValueError:
        return False
    return True


class GeoIP2Provider(BaseGeocoderProvider):
    """Geocodes IP addresses from GeoIP2 data.

    The actual database read is delegated to a GeoIP2 adapter; this class
    only validates the query and maps the raw GeoIP2 record onto an
    AddressRecord.
    """

    def __init__(self, adapter: BaseGeoIP2Adapter) -> None:
        self._adapter = adapter

    def provider_name(self) -> str:
        return "geoip2"

    async def lookup(self, query: GeocodeQuery) -> AddressRecord:
        address = query.address
        locale = query.locale or DEFAULT_LOCALE

        if not _is_ip_address(address):
            raise UnsupportedOperationError(
                "The GeoIP2 provider does not support street addresses, only IP addresses."
            )

        if address == LOCALHOST_ADDRESS:
            logger.debug(f"Returning localhost defaults ip={address}")
            return self._build_record(LOCALHOST_DEFAULTS)

        raw = self._parse_content(await self._execute_query(address))

        return self._build_record(
            {
                "country_code": raw.country.iso_code if raw.country else None,
                "country": raw.country.localized_name(locale) if raw.country else None,
                "locality": raw.city.localized_name(locale) if raw.city else None,
                "latitude": raw.location.latitude if raw.location else None,
                "longitude": raw.location.longitude if raw.location else None,
                "timezone": raw.location.time_zone if raw.location else None,
                "postal_code": raw.postal.code if raw.postal else None,
                "admin_levels": self._map_admin_levels(raw.subdivisions, locale),
            }
        )

    async def reverse_lookup(self, query: ReverseQuery) -> AddressRecord:
        raise UnsupportedOperationError("The GeoIP2 provider is not able to do reverse geocoding.")

    async def close(self) -> None:
        await self._adapter.close()

    async def _execute_query(self, address: str) -> str:
        uri = build_lookup_uri(address)
        logger.info(f"Performing GeoIP2 lookup ip={address} adapter={type(self._adapter).__name__}")

        try:
            return await self._adapter.get_content(uri)
        except AddressNotFoundError as exc:
            logger.info(f"No GeoIP2 entry for ip={address} error={exc}")
            raise NoResultError(f'No results found for IP address "{address}".') from exc
        except InvalidArgumentError as exc:
            # The address already passed the IP literal check, so this is the backend rejecting it.
            logger.error(f"GeoIP2 adapter rejected ip={address} error={exc}")
            raise AdapterError(f'GeoIP2 adapter rejected the address "{address}": {exc}') from exc

    @staticmethod
    def _parse_content(content: str) -> RawCityRecord:
        try:
            return RawCityRecord.model_validate_json(content)
        except ValidationError as exc:
            raise AdapterError(f"GeoIP2 adapter returned an undecodable record: {exc}") from exc

    @staticmethod
    def _map_admin_levels(subdivisions: list[RawNamedRecord], locale: str) -> tuple[AdminLevel, ...]:
        """Map subdivisions to admin levels, dropping entries with neither name nor code.

        `level` is the 1-based position in the raw list, so a dropped entry
        leaves a gap rather than shifting the levels after it.
        """
        admin_levels = []
        for i, subdivision in enumerate(subdivisions):
            name = subdivision.localized_name(locale)
            code = subdivision.iso_code
            if name is not None or code is not None:
                admin_levels.append(AdminLevel(name=name, code=code, level=i + 1))
        return tuple(admin_levels)

    def _build_record(self, fields: dict[str, Any]) -> AddressRecord:
        return AddressRecord(**{**ADDRESS_DEFAULTS, **fields, "provided_by": self.provider_name()})
