from pydantic import BaseModel, Field, field_validator


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value_str = str(value).strip()
    return value_str or None


class GeocodeQuery(BaseModel):
    """Forward geocoding query.

    The address is taken as-is: deciding whether it is an IP literal is the
    provider's job, so that a street address surfaces as an unsupported
    operation rather than as a validation error.
    """

    address: str = Field(
        description="IPv4 or IPv6 address to geocode.",
        examples=["8.8.8.8", "2001:4860:4860::8888"],
    )
    locale: str | None = Field(
        default=None,
        description="Locale used for localized names. Defaults to English.",
        examples=["en", "de", "pt-BR"],
    )

    @field_validator("locale", mode="before")
    @classmethod
    def _normalize_locale(cls, value: str | None) -> str | None:
        """Blank locale is treated as unset."""
        return _blank_to_none(value)


class ReverseQuery(BaseModel):
    """Reverse geocoding query (coordinates to address)."""

    latitude: float = Field(ge=-90, le=90, examples=[37.751])
    longitude: float = Field(ge=-180, le=180, examples=[-97.822])
    locale: str | None = None

    @field_validator("locale", mode="before")
    @classmethod
    def _normalize_locale(cls, value: str | None) -> str | None:
        return _blank_to_none(value)
