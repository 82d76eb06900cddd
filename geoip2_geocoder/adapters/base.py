from abc import ABC, abstractmethod
from enum import Enum
from ipaddress import ip_address
from urllib.parse import quote, unquote, urlsplit

from geoip2_geocoder.errors import InvalidArgumentError

LOOKUP_URI_SCHEME = "file"
LOOKUP_URI_HOST = "geoip"


class GeoIP2Model(str, Enum):
    """GeoIP2 record types an adapter can be asked for."""

    country = "country"
    city = "city"
    insights = "insights"


def build_lookup_uri(address: str) -> str:
    """Encode an IP address as the key handed to `BaseGeoIP2Adapter.get_content`."""
    return f"{LOOKUP_URI_SCHEME}://{LOOKUP_URI_HOST}?{quote(address, safe=':.')}"


class BaseGeoIP2Adapter(ABC):
    """Abstract base for the GeoIP2 data sources the provider delegates to.

    Concrete implementations (local MMDB database, MaxMind web service) return
    the raw GeoIP2 record as a JSON string and signal a missing entry by
    raising AddressNotFoundError.
    """

    @abstractmethod
    async def get_content(self, uri: str) -> str:
        """Return the raw GeoIP2 record for the address encoded in `uri`."""
        raise NotImplementedError

    async def close(self) -> None:
        """Release resources held by the adapter."""
        return None

    @staticmethod
    def address_from_uri(uri: str) -> str:
        """Extract and validate the IP address from a lookup URI."""
        parts = urlsplit(uri)
        if parts.scheme != LOOKUP_URI_SCHEME or parts.netloc != LOOKUP_URI_HOST:
            raise InvalidArgumentError(f'Unsupported lookup URI "{uri}".')

        address = unquote(parts.query)
        if not address:
            raise InvalidArgumentError(f'Lookup URI "{uri}" does not contain an IP address.')

        try:
            ip_address(address)
        except ValueError as exc:
            raise InvalidArgumentError(f'"{address}" is not a valid IPv4 or IPv6 address.') from exc

        return address
