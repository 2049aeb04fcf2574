"""Flat-file (shapefile) backing store read with geopandas."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import geopandas as gpd
import pandas as pd

from timedim_api.errors import StoreAccessError

logger = logging.getLogger(__name__)

FILE_URL_PREFIX = "file:"


def strip_file_url(url: str) -> str:
    """Turn a ``file:`` URL as stored in the catalog into a plain path string."""
    if url.startswith(FILE_URL_PREFIX):
        url = url[len(FILE_URL_PREFIX):]
        if url.startswith("//"):
            url = url[2:]
    return url


def read_attribute_table(path: Path) -> pd.DataFrame:
    return gpd.read_file(path, engine="pyogrio", ignore_geometry=True)


@dataclass(frozen=True)
class FileStore:
    """A geospatial file whose features are scanned in memory."""

    path: Path

    @contextmanager
    def features(self, attribute: str) -> Iterator[Iterator[Any]]:
        """Yield an iterator over the values of ``attribute`` for every feature."""
        if not self.path.is_file():
            raise StoreAccessError(f"File store not found: {self.path}")

        try:
            table = read_attribute_table(self.path)
        except (OSError, RuntimeError, ValueError) as err:
            raise StoreAccessError(f"Could not read {self.path}: {err}") from err

        if attribute not in table.columns:
            raise StoreAccessError(f"Attribute '{attribute}' not found in {self.path.name}")

        logger.debug("Scanning %d features of %s", len(table), self.path.name)
        yield iter(table[attribute].tolist())

    def __repr__(self) -> str:
        return f"<FileStore {self.path}>"
