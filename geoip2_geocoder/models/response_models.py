from pydantic import BaseModel

from geoip2_geocoder.models.address import AddressRecord


class HealthResponse(BaseModel):
    """Response model for the health check endpoint."""

    status: str


class GeocodeResponse(BaseModel):
    """Response model for IP geocoding."""

    provider: str
    address: AddressRecord
