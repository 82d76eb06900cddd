from functools import lru_cache

from geoip2_geocoder import config
from geoip2_geocoder.adapters.base import BaseGeoIP2Adapter, GeoIP2Model
from geoip2_geocoder.errors import InvalidArgumentError
from geoip2_geocoder.logger import logger
from geoip2_geocoder.providers.geoip2_provider import GeoIP2Provider


def _build_database_adapter(model: GeoIP2Model) -> BaseGeoIP2Adapter:
    from geoip2_geocoder.adapters.database_adapter import GeoIP2DatabaseAdapter

    return GeoIP2DatabaseAdapter.from_path(config.GEOIP2_DATABASE_PATH, model=model)


def _build_webservice_adapter(model: GeoIP2Model) -> BaseGeoIP2Adapter:
    from geoip2_geocoder.adapters.webservice_adapter import GeoIP2WebServiceAdapter

    if not config.MAXMIND_ACCOUNT_ID or not config.MAXMIND_LICENSE_KEY:
        raise InvalidArgumentError("MAXMIND_ACCOUNT_ID and MAXMIND_LICENSE_KEY are required for the webservice backend.")

    return GeoIP2WebServiceAdapter(
        account_id=config.MAXMIND_ACCOUNT_ID,
        license_key=config.MAXMIND_LICENSE_KEY,
        host=config.MAXMIND_HOST,
        model=model,
        timeout_seconds=config.GEOIP2_TIMEOUT_SECONDS,
    )


ADAPTER_BUILDERS = {
    "database": _build_database_adapter,
    "webservice": _build_webservice_adapter,
}


def build_adapter(backend: str | None = None, model: str | None = None) -> BaseGeoIP2Adapter:
    """Build the GeoIP2 adapter selected by `backend` (or GEOIP2_BACKEND)."""
    backend = backend or config.GEOIP2_BACKEND
    model = model or config.GEOIP2_MODEL

    builder = ADAPTER_BUILDERS.get(backend)
    if builder is None:
        raise InvalidArgumentError(f'Unknown GeoIP2 backend "{backend}", expected one of {sorted(ADAPTER_BUILDERS)}.')

    try:
        geoip2_model = GeoIP2Model(model)
    except ValueError as exc:
        raise InvalidArgumentError(f'Unknown GeoIP2 model "{model}".') from exc

    logger.info(f"Building GeoIP2 adapter backend={backend} model={geoip2_model.value}")
    return builder(geoip2_model)


@lru_cache(maxsize=1)
def get_geocoder_provider() -> GeoIP2Provider:
    """Dependency returning the process-wide GeoIP2 provider.

    The adapter (and with it an open database reader) is built on first use.
    """
    return GeoIP2Provider(build_adapter())
