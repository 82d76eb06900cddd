import json
from pathlib import Path

import geoip2.database
import geoip2.errors

from geoip2_geocoder.adapters.base import BaseGeoIP2Adapter, GeoIP2Model
from geoip2_geocoder.errors import AdapterError, AddressNotFoundError, UnsupportedOperationError
from geoip2_geocoder.logger import logger


class GeoIP2DatabaseAdapter(BaseGeoIP2Adapter):
    """Adapter over a local MaxMind MMDB file read through `geoip2.database.Reader`.

    Only City and Country databases are supported; Insights data exists
    solely in the web service.
    """

    SUPPORTED_MODELS = (GeoIP2Model.city, GeoIP2Model.country)

    def __init__(self, reader: geoip2.database.Reader, model: GeoIP2Model = GeoIP2Model.city) -> None:
        model = GeoIP2Model(model)
        if model not in self.SUPPORTED_MODELS:
            raise UnsupportedOperationError(f'The GeoIP2 database adapter does not support the "{model.value}" model.')
        self._reader = reader
        self._model = model

    @classmethod
    def from_path(cls, path: str | Path, model: GeoIP2Model = GeoIP2Model.city) -> "GeoIP2DatabaseAdapter":
        """Open the MMDB file at `path`.

        Raises:
            FileNotFoundError: If the database file doesn't exist.
        """
        db_path = Path(path)
        if not db_path.exists():
            raise FileNotFoundError(f"GeoIP2 database not found: {db_path}")
        logger.info(f"Opening GeoIP2 database path={db_path} model={GeoIP2Model(model).value}")
        return cls(geoip2.database.Reader(str(db_path)), model=model)

    @property
    def model(self) -> GeoIP2Model:
        return self._model

    async def get_content(self, uri: str) -> str:
        address = self.address_from_uri(uri)
        lookup = self._reader.city if self._model is GeoIP2Model.city else self._reader.country

        try:
            record = lookup(address)
        except geoip2.errors.AddressNotFoundError as exc:
            raise AddressNotFoundError(f"The address {address} is not in the database.") from exc
        except (TypeError, ValueError) as exc:
            # TypeError: the database type does not match the requested model.
            logger.error(f"GeoIP2 database lookup failed ip={address} model={self._model.value} error={exc!r}")
            raise AdapterError(f"GeoIP2 database lookup failed: {exc}") from exc

        return json.dumps(record.to_dict())

    async def close(self) -> None:
        self._reader.close()
