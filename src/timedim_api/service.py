"""The time-dimension operation: catalog lookup, store resolution, value retrieval."""

from __future__ import annotations

import logging
from typing import Any

from timedim_api.catalog import Catalog, LayerName, Presentation, ResourceInfo, load_catalog
from timedim_api.config import get_settings
from timedim_api.coverage import CoverageTimeIndexLocator
from timedim_api.errors import NotFoundError
from timedim_api.formatting import TemporalFormatter
from timedim_api.resolver import TimeValueResolver, ValueSet
from timedim_api.schemas import ErrorEnvelope, TimeDimensionResult
from timedim_api.stores import StoreHandle, open_store

logger = logging.getLogger(__name__)

RESOURCE_NOT_FOUND = "Resource not found."


def build_resolver() -> TimeValueResolver:
    """Resolver configured from the current settings."""

    settings = get_settings()
    formatter = TemporalFormatter(settings.date_format, settings.timezone)
    return TimeValueResolver(formatter=formatter, logger=logging.getLogger("timedim_api.resolver"))


class TimeDimensionService:
    """Answer time-dimension requests against one catalog."""

    def __init__(
        self,
        catalog: Catalog,
        resolver: TimeValueResolver | None = None,
        locator: CoverageTimeIndexLocator | None = None,
    ) -> None:
        self.catalog = catalog
        self.resolver = resolver or build_resolver()
        self.locator = locator or CoverageTimeIndexLocator()

    def get_time_dimension(self, layer_name: str) -> dict[str, Any]:
        """Return ``{"presentation", "data"}`` or an error envelope; never raises."""
        try:
            logger.info("Getting time dimensions for layer: %s", layer_name)
            return self._time_dimension(layer_name)
        except NotFoundError as err:
            logger.info("Time dimension lookup for '%s' failed: %s", layer_name, err)
            return error(str(err))
        except Exception as err:
            logger.warning("Error getting time dimension", exc_info=True)
            return error(f"Error getting time dimension: {err}")

    def _time_dimension(self, layer_name: str) -> dict[str, Any]:
        name = LayerName.parse(layer_name)
        resource = self.catalog.get_resource_by_layer_name(str(name))
        if resource is None:
            raise NotFoundError(RESOURCE_NOT_FOUND)

        dimension = resource.time_dimension
        if dimension is None:
            raise NotFoundError(f"Layer '{name}' has no time dimension configured.")

        values = self._values(resource, dimension.attribute, dimension.presentation, name.local_name)
        result = TimeDimensionResult(presentation=dimension.presentation, data=values.to_list())
        logger.info("Found %d time values for layer %s", len(values), name)
        return result.model_dump(mode="json")

    def _values(self, resource: ResourceInfo, attribute: str, presentation: Presentation, table_name: str) -> ValueSet:
        store: StoreHandle
        if resource.kind == "coverage":
            index = self.locator.locate(
                self.catalog.base_directory,
                resource.native_name,
                store_url=resource.store.url,
            )
            attribute = index.attribute
            store = index.index_store
        else:
            store = open_store(resource.store, self.catalog.base_directory)

        return self.resolver.resolve(store, attribute, presentation, table_name)


def error(message: str) -> dict[str, Any]:
    return ErrorEnvelope(message=message).model_dump(mode="json")


def get_time_dimension(layer_name: str) -> dict[str, Any]:
    """Time dimension of ``layer_name`` from the configured catalog."""

    try:
        service = TimeDimensionService(load_catalog())
    except Exception as err:
        logger.warning("Could not set up time dimension service", exc_info=True)
        return error(f"Error getting time dimension: {err}")
    return service.get_time_dimension(layer_name)
