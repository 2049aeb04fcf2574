"""Layer catalog loaded from a YAML document.

The catalog plays the part of the host server's configuration: it maps
qualified layer names to resources, each backed by a store and optionally
carrying a ``time`` dimension in its metadata.

Example document::

    data_dir: data
    stores:
      stations_db:
        type: postgis
        read_only: true
        connection_parameters:
          host: localhost
          database: gis
          schema: public
    layers:
      test:stations:
        kind: featuretype
        store: stations_db
        native_name: stations
        metadata:
          time:
            attribute: obs_time
            presentation: LIST
"""

from __future__ import annotations

import logging
from enum import StrEnum
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from timedim_api.config import get_settings
from timedim_api.errors import CatalogError, InvalidLayerNameError

logger = logging.getLogger(__name__)

LAYER_NAME_SEPARATOR = ":"


class Presentation(StrEnum):
    """How a time dimension is exposed to clients."""

    LIST = "LIST"
    DISCRETE_INTERVAL = "DISCRETE_INTERVAL"
    CONTINUOUS_INTERVAL = "CONTINUOUS_INTERVAL"

    @property
    def is_interval(self) -> bool:
        return self is not Presentation.LIST


class LayerName(BaseModel):
    """Qualified ``namespace:localName`` layer identifier."""

    namespace: str
    local_name: str

    @classmethod
    def parse(cls, value: str) -> LayerName:
        parts = value.split(LAYER_NAME_SEPARATOR)
        if len(parts) != 2 or not all(part.strip() for part in parts):
            raise InvalidLayerNameError(f"Malformed layer name '{value}', expected 'namespace:localName'")
        return cls(namespace=parts[0], local_name=parts[1])

    def __str__(self) -> str:
        return f"{self.namespace}{LAYER_NAME_SEPARATOR}{self.local_name}"


class TimeDimensionInfo(BaseModel):
    attribute: str = Field(min_length=1)
    presentation: Presentation = Presentation.LIST
    enabled: bool = True


class StoreInfo(BaseModel):
    """Connection details of a data or coverage store."""

    name: str = Field(min_length=1)
    type: str = Field(min_length=1)
    read_only: bool = False
    connection_parameters: dict[str, Any] = Field(default_factory=dict)
    url: str | None = None


class ResourceInfo(BaseModel):
    """A published feature type or coverage."""

    name: str
    kind: Literal["featuretype", "coverage"] = "featuretype"
    native_name: str = Field(min_length=1)
    store: StoreInfo
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def time_dimension(self) -> TimeDimensionInfo | None:
        raw = self.metadata.get("time")
        if raw is None:
            return None
        dimension = raw if isinstance(raw, TimeDimensionInfo) else TimeDimensionInfo.model_validate(raw)
        return dimension if dimension.enabled else None


class LayerEntry(BaseModel):
    kind: Literal["featuretype", "coverage"] = "featuretype"
    store: str = Field(min_length=1)
    native_name: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class StoreEntry(BaseModel):
    type: str = Field(min_length=1)
    read_only: bool = False
    connection_parameters: dict[str, Any] = Field(default_factory=dict)
    url: str | None = None


class CatalogDocument(BaseModel):
    """Top-level catalog YAML document."""

    data_dir: str | None = None
    stores: dict[str, StoreEntry] = Field(default_factory=dict)
    layers: dict[str, LayerEntry] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_store_references(self) -> CatalogDocument:
        for layer_name, layer in self.layers.items():
            if layer.store not in self.stores:
                raise ValueError(f"Layer '{layer_name}' references unknown store '{layer.store}'")
        return self


class Catalog:
    """Read-only view over the configured stores and layers."""

    def __init__(self, base_directory: Path, stores: dict[str, StoreInfo], resources: dict[str, ResourceInfo]) -> None:
        self.base_directory = base_directory
        self._stores = stores
        self._resources = resources

    @classmethod
    def from_document(cls, document: CatalogDocument, base_directory: Path) -> Catalog:
        stores = {name: StoreInfo(name=name, **entry.model_dump()) for name, entry in document.stores.items()}
        resources: dict[str, ResourceInfo] = {}
        for layer_name, layer in document.layers.items():
            native_name = layer.native_name or layer_name.split(LAYER_NAME_SEPARATOR)[-1]
            resources[layer_name] = ResourceInfo(
                name=layer_name,
                kind=layer.kind,
                native_name=native_name,
                store=stores[layer.store],
                metadata=layer.metadata,
            )
        return cls(base_directory, stores, resources)

    @classmethod
    def from_mapping(cls, payload: dict[str, Any], base_directory: Path) -> Catalog:
        try:
            document = CatalogDocument.model_validate(payload)
        except ValidationError as err:
            raise CatalogError(f"Invalid catalog: {err}") from err
        return cls.from_document(document, base_directory)

    def get_resource_by_layer_name(self, name: str) -> ResourceInfo | None:
        return self._resources.get(name)

    def get_store(self, name: str) -> StoreInfo | None:
        return self._stores.get(name)

    @property
    def layer_names(self) -> list[str]:
        return sorted(self._resources)


def _load_yaml_document(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as file_handle:
        payload = yaml.safe_load(file_handle) or {}
    if not isinstance(payload, dict):
        raise CatalogError(f"Catalog '{path}' must be a YAML mapping")
    return payload


def _resolve_base_directory(document_dir: str | None, catalog_path: Path) -> Path:
    override = get_settings().data_dir
    if override is not None:
        return override
    if document_dir is None:
        return catalog_path.parent
    data_dir = Path(document_dir)
    return data_dir if data_dir.is_absolute() else catalog_path.parent / data_dir


def clear_catalog_cache() -> None:
    """Clear the in-memory catalog cache."""

    load_catalog.cache_clear()


@lru_cache(maxsize=4)
def load_catalog(path: str | Path | None = None) -> Catalog:
    """Load and validate the catalog document at ``path`` (or the configured one)."""

    resolved_path = Path(path) if path is not None else get_settings().catalog_path
    if not resolved_path.exists():
        raise CatalogError(f"Catalog not found: {resolved_path}")

    payload = _load_yaml_document(resolved_path)
    try:
        document = CatalogDocument.model_validate(payload)
    except ValidationError as err:
        raise CatalogError(f"Invalid catalog '{resolved_path}': {err}") from err

    base_directory = _resolve_base_directory(document.data_dir, resolved_path)
    catalog = Catalog.from_document(document, base_directory)
    logger.info("Loaded catalog %s with %d layers", resolved_path, len(catalog.layer_names))
    return catalog
