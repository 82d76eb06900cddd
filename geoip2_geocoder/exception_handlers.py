from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from geoip2_geocoder.logger import logger

COORDINATE_FIELDS = ("latitude", "longitude")


def _get_address_from_request(request: Request) -> str | None:
    """Best-effort extraction of the looked-up address, for logging only."""
    return request.query_params.get("address")


def _normalize_pydantic_errors(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Make sure Pydantic error dicts are JSON-serializable."""
    normalized: list[dict[str, Any]] = []
    for error in errors:
        e = dict(error)
        ctx = e.get("ctx")
        if isinstance(ctx, dict):
            e["ctx"] = {k: str(v) for k, v in ctx.items()}
        normalized.append(e)
    return normalized


def _build_validation_error_payload(exc: ValidationError | RequestValidationError) -> dict:
    """Normalize validation errors into the `code`/`message` shape used by all error responses."""
    code = "invalid_request"
    message = "Invalid request parameters"

    for error in _normalize_pydantic_errors(list(exc.errors())):
        loc = error.get("loc", ())
        if len(loc) >= 1 and loc[-1] in COORDINATE_FIELDS:
            code = "invalid_coordinates"
            message = "Latitude must be within [-90, 90] and longitude within [-180, 180]."
            break

    return {
        "code": code,
        "message": message,
    }


async def validation_exception_handler(request: Request, exc: ValidationError | RequestValidationError) -> JSONResponse:
    """Handle request and model validation errors with a 400 response."""
    logger.info(
        "Validation error during request handling "
        f"path={request.url.path} method={request.method} errors={exc.errors()}"
    )
    payload = _build_validation_error_payload(exc)
    payload["provider"] = request.app.state.provider_name
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=payload)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected errors to return a structured 500 response."""
    address = _get_address_from_request(request)
    logger.exception(
        "Unhandled exception while processing request: "
        f"{repr(exc)} path={request.url.path} method={request.method} address={address}"
    )
    content: dict[str, Any] = {
        "code": "internal_error",
        "message": "An unexpected error occurred while processing the request.",
        "provider": request.app.state.provider_name,
    }
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=content,
    )
