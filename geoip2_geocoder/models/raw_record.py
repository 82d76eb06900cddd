"""Typed view of the JSON document a GeoIP2 adapter returns.

Every section of a GeoIP2 record is optional: country databases carry no
city, anonymous networks carry no location, and many networks carry no
subdivisions. Sections of an unexpected JSON type are treated as absent so
that a sparse or slightly off record still maps instead of failing.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _mapping_or_none(value: Any) -> Any:
    return value if isinstance(value, dict) else None


class RawNamedRecord(BaseModel):
    """Country, city or subdivision section: an ISO code plus localized names."""

    model_config = ConfigDict(extra="ignore")

    iso_code: str | None = None
    names: dict[str, str] = Field(default_factory=dict)

    @field_validator("iso_code", mode="before")
    @classmethod
    def _coerce_iso_code(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None

    @field_validator("names", mode="before")
    @classmethod
    def _coerce_names(cls, value: Any) -> dict[str, str]:
        """Keep only string translations; anything that is not a mapping means no names."""
        if not isinstance(value, dict):
            return {}
        return {str(locale): name for locale, name in value.items() if isinstance(name, str)}

    def localized_name(self, locale: str) -> str | None:
        return self.names.get(locale)


class RawLocation(BaseModel):
    model_config = ConfigDict(extra="ignore")

    latitude: float | None = None
    longitude: float | None = None
    time_zone: str | None = None

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _coerce_lat_lon(cls, value: Any) -> float | None:
        """Allow latitude/longitude to be provided as strings, numbers, or null."""
        if value is None or isinstance(value, bool):
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None

    @field_validator("time_zone", mode="before")
    @classmethod
    def _coerce_time_zone(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None


class RawPostal(BaseModel):
    model_config = ConfigDict(extra="ignore")

    code: str | None = None

    @field_validator("code", mode="before")
    @classmethod
    def _coerce_code(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None


class RawCityRecord(BaseModel):
    """Subset of a GeoIP2 City/Country record the provider maps."""

    model_config = ConfigDict(extra="ignore")

    country: RawNamedRecord | None = None
    city: RawNamedRecord | None = None
    subdivisions: list[RawNamedRecord] = Field(default_factory=list)
    location: RawLocation | None = None
    postal: RawPostal | None = None

    @field_validator("country", "city", "location", "postal", mode="before")
    @classmethod
    def _coerce_section(cls, value: Any) -> Any:
        return _mapping_or_none(value)

    @field_validator("subdivisions", mode="before")
    @classmethod
    def _coerce_subdivisions(cls, value: Any) -> list[dict[str, Any]]:
        """Non-list subdivisions mean none at all.

        Non-mapping entries become empty records rather than being removed,
        so they still occupy their position in the list.
        """
        if not isinstance(value, list):
            return []
        return [entry if isinstance(entry, dict) else {} for entry in value]
