"""Backing stores of catalogued layers and the factory that opens them."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TypeVar, Union

from timedim_api.catalog import StoreInfo
from timedim_api.errors import UnsupportedStoreError
from timedim_api.stores.file import FileStore, strip_file_url
from timedim_api.stores.relational import RelationalStore

logger = logging.getLogger(__name__)

StoreT = TypeVar("StoreT", RelationalStore, FileStore)


class ReadOnlyStore:
    """Access-control decorator around a concrete store."""

    def __init__(self, delegate: RelationalStore | FileStore) -> None:
        self._delegate = delegate

    def unwrap(self, kind: type[StoreT]) -> StoreT:
        if not isinstance(self._delegate, kind):
            raise TypeError(f"{self!r} does not wrap a {kind.__name__}")
        return self._delegate

    def __repr__(self) -> str:
        return f"<ReadOnlyStore {self._delegate!r}>"


StoreHandle = Union[RelationalStore, FileStore, ReadOnlyStore]

UNWRAP_ORDER: tuple[type[RelationalStore] | type[FileStore], ...] = (RelationalStore, FileStore)


def unwrap_store(store: object) -> RelationalStore | FileStore:
    """Return the concrete store behind ``store``, trying relational first, then file."""

    if isinstance(store, (RelationalStore, FileStore)):
        return store
    if isinstance(store, ReadOnlyStore):
        for kind in UNWRAP_ORDER:
            try:
                return store.unwrap(kind)
            except TypeError:
                logger.debug("Could not unwrap data store of type %s", kind.__name__, exc_info=True)
        raise UnsupportedStoreError("Could not unwrap data store")
    raise UnsupportedStoreError(f"Unsupported data store type: {type(store).__name__}")


def resolve_store_path(url: str, base_directory: Path) -> Path:
    """Join a (possibly ``file:`` prefixed) store location to the base directory."""

    path = Path(strip_file_url(url))
    return path if path.is_absolute() else base_directory / path


def open_store(store_info: StoreInfo, base_directory: Path) -> StoreHandle:
    """Build the store handle described by ``store_info``."""

    store: RelationalStore | FileStore
    if store_info.type == "postgis":
        store = RelationalStore.from_connection_parameters(store_info.connection_parameters)
    elif store_info.type == "shapefile":
        url = store_info.connection_parameters.get("url") or store_info.url
        if not url:
            raise UnsupportedStoreError(f"Shapefile store '{store_info.name}' has no url")
        store = FileStore(resolve_store_path(str(url), base_directory))
    else:
        raise UnsupportedStoreError(f"Unsupported data store type: {store_info.type}")

    logger.info("Opened %s store '%s'", store_info.type, store_info.name)
    return ReadOnlyStore(store) if store_info.read_only else store


__all__ = [
    "FileStore",
    "ReadOnlyStore",
    "RelationalStore",
    "StoreHandle",
    "open_store",
    "resolve_store_path",
    "unwrap_store",
]
