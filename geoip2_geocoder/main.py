from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from geoip2_geocoder.errors import AdapterError, NoResultError, UnsupportedOperationError
from geoip2_geocoder.exception_handlers import unhandled_exception_handler, validation_exception_handler
from geoip2_geocoder.factory import get_geocoder_provider
from geoip2_geocoder.logger import logger
from geoip2_geocoder.models.query import GeocodeQuery, ReverseQuery
from geoip2_geocoder.models.response_models import GeocodeResponse, HealthResponse
from geoip2_geocoder.providers.base import BaseGeocoderProvider

PROVIDER_NAME = "geoip2"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Open the adapter before serving so concurrent first requests share one reader.
    provider = get_geocoder_provider()
    logger.info(f"Built geocoder provider provider={provider.provider_name()}")
    yield
    if get_geocoder_provider.cache_info().currsize:
        await get_geocoder_provider().close()
        get_geocoder_provider.cache_clear()
        logger.info("Closed geocoder provider")


app = FastAPI(
    lifespan=lifespan,
    title="GeoIP2 Geocoder",
    version="0.1.0",
    description="Geocodes IP addresses into normalized address records from GeoIP2 data.",
)
app.state.provider_name = PROVIDER_NAME
logger.info("Started GeoIP2 Geocoder")

app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(ValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)


def _error_detail(code: str, exc: Exception) -> dict:
    return {
        "code": code,
        "message": str(exc),
        "provider": PROVIDER_NAME,
    }


@app.get(
    "/health",
    tags=["health"],
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
)
async def health() -> HealthResponse:
    """Basic health check endpoint."""
    return HealthResponse(status="ok")


@app.get(
    "/v1/geocode",
    response_model=GeocodeResponse,
    status_code=status.HTTP_200_OK,
    tags=["geocode"],
    summary="Geocode an IP address.",
)
async def geocode(
    request: Request,
    query: Annotated[GeocodeQuery, Depends()],
    provider: Annotated[BaseGeocoderProvider, Depends(get_geocoder_provider)],
) -> GeocodeResponse:
    """Look up the address record for an IPv4 or IPv6 address.

    - `address` must be an IP literal; street addresses are rejected.
    - `locale` selects the language of country, city and subdivision names
      and defaults to English.
    """
    address = query.address
    logger.info(
        "Performing geocode lookup "
        f"path={request.url.path} method={request.method} address={address} locale={query.locale}"
    )

    try:
        record = await provider.lookup(query)
    except UnsupportedOperationError as exc:
        logger.error(
            "Rejected geocode lookup "
            f"path={request.url.path} method={request.method} address={address} error={exc}"
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=_error_detail("unsupported_operation", exc)
        ) from exc
    except NoResultError as exc:
        logger.error(
            "No geolocation information found for address "
            f"path={request.url.path} method={request.method} address={address} error={exc}"
        )
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_error_detail("no_result", exc)) from exc
    except AdapterError as exc:
        logger.exception(
            "GeoIP2 adapter error during lookup "
            f"path={request.url.path} method={request.method} address={address} error={exc}"
        )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY, detail=_error_detail("adapter_error", exc)
        ) from exc

    return GeocodeResponse(provider=provider.provider_name(), address=record)


@app.get(
    "/v1/reverse",
    response_model=GeocodeResponse,
    status_code=status.HTTP_200_OK,
    tags=["geocode"],
    summary="Reverse geocode coordinates (not supported by GeoIP2).",
)
async def reverse_geocode(
    request: Request,
    query: Annotated[ReverseQuery, Depends()],
    provider: Annotated[BaseGeocoderProvider, Depends(get_geocoder_provider)],
) -> GeocodeResponse:
    try:
        record = await provider.reverse_lookup(query)
    except UnsupportedOperationError as exc:
        logger.error(
            "Rejected reverse lookup "
            f"path={request.url.path} method={request.method} "
            f"latitude={query.latitude} longitude={query.longitude} error={exc}"
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=_error_detail("unsupported_operation", exc)
        ) from exc

    return GeocodeResponse(provider=provider.provider_name(), address=record)
