class GeocoderError(Exception):
    """Base error for the GeoIP2 geocoder."""


class InvalidArgumentError(GeocoderError):
    """Raised when a caller hands over an argument the geocoder cannot work with."""


class UnsupportedOperationError(GeocoderError):
    """Raised for operations the provider does not support (street addresses, reverse geocoding)."""


class NoResultError(GeocoderError):
    """Raised when a valid IP address has no entry in the GeoIP2 data."""


class AddressNotFoundError(GeocoderError):
    """Raised by an adapter when the looked-up address is absent from its database."""


class AdapterError(GeocoderError):
    """Raised when the GeoIP2 adapter fails (I/O, upstream web service, undecodable payload)."""
