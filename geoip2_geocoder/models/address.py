from typing import Any

from pydantic import BaseModel, ConfigDict, PositiveInt


class AdminLevel(BaseModel):
    """One political subdivision (state, province, region) of an address."""

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    code: str | None = None
    level: PositiveInt


class Bounds(BaseModel):
    model_config = ConfigDict(frozen=True)

    south: float | None = None
    west: float | None = None
    north: float | None = None
    east: float | None = None


class AddressRecord(BaseModel):
    """Normalized address returned by a geocoding provider.

    Records are immutable; providers build them by merging their mapped
    fields over ADDRESS_DEFAULTS.
    """

    model_config = ConfigDict(frozen=True)

    latitude: float | None
    longitude: float | None
    bounds: Bounds | None
    street_number: str | None
    street_name: str | None
    sub_locality: str | None
    locality: str | None
    postal_code: str | None
    admin_levels: tuple[AdminLevel, ...]
    country: str | None
    country_code: str | None
    timezone: str | None
    provided_by: str


# Values every provider falls back to for fields it does not map.
ADDRESS_DEFAULTS: dict[str, Any] = {
    "latitude": None,
    "longitude": None,
    "bounds": None,
    "street_number": None,
    "street_name": None,
    "sub_locality": None,
    "locality": None,
    "postal_code": None,
    "admin_levels": (),
    "country": None,
    "country_code": None,
    "timezone": None,
}

LOCALHOST_DEFAULTS: dict[str, Any] = {
    **ADDRESS_DEFAULTS,
    "locality": "localhost",
    "country": "localhost",
}
