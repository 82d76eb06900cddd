from abc import ABC, abstractmethod

from geoip2_geocoder.models.address import AddressRecord
from geoip2_geocoder.models.query import GeocodeQuery, ReverseQuery


class BaseGeocoderProvider(ABC):
    """Abstract base for geocoding providers.

    Providers turn a query into a normalized AddressRecord, or raise one of
    the errors from `geoip2_geocoder.errors`.
    """

    @abstractmethod
    def provider_name(self) -> str:
        """Short identifier stamped on every record the provider returns."""
        raise NotImplementedError

    @abstractmethod
    async def lookup(self, query: GeocodeQuery) -> AddressRecord:
        """Geocode an address."""
        raise NotImplementedError

    @abstractmethod
    async def reverse_lookup(self, query: ReverseQuery) -> AddressRecord:
        """Resolve coordinates to an address."""
        raise NotImplementedError

    async def close(self) -> None:
        return None
