"""Locate the time attribute and footprint index of an image mosaic.

A mosaic directory holds the granules, a footprint index shapefile and a
properties file describing the mosaic. The mosaic properties declare the
attribute of the index that carries the time of each granule::

    rainfall/
        rainfall.properties     <- TimeAttribute=ingestion
        rainfall.shp            <- one feature per granule
        indexer.properties
        timeregex.properties
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from timedim_api.errors import AmbiguousOrMissingIndexError, DirectoryNotFoundError, TimeAttributeNotFoundError
from timedim_api.stores import FileStore, resolve_store_path

TIME_ATTRIBUTE_KEY = "TimeAttribute"
PROPERTIES_SUFFIX = "properties"
EXCLUDED_PROPERTIES = frozenset({"indexer.properties", "timeregex.properties"})
INDEX_SUFFIX = ".shp"


def _split_property(line: str) -> tuple[str, str]:
    index = 0
    length = len(line)
    while index < length:
        char = line[index]
        if char == "\\":
            index += 2
            continue
        if char in "=: \t\f":
            break
        index += 1

    key = line[:index]
    rest = line[index:].lstrip(" \t\f")
    if rest[:1] in ("=", ":"):
        rest = rest[1:].lstrip(" \t\f")
    return _unescape(key), _unescape(rest)


def _unescape(value: str) -> str:
    replacements = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
    chars: list[str] = []
    index = 0
    while index < len(value):
        char = value[index]
        if char == "\\" and index + 1 < len(value):
            following = value[index + 1]
            if following == "u" and index + 6 <= len(value):
                try:
                    chars.append(chr(int(value[index + 2 : index + 6], 16)))
                    index += 6
                    continue
                except ValueError:
                    pass
            chars.append(replacements.get(following, following))
            index += 2
            continue
        chars.append(char)
        index += 1
    return "".join(chars)


def read_properties(path: Path) -> dict[str, str]:
    """Parse a Java ``.properties`` file."""

    properties: dict[str, str] = {}
    logical = ""
    with path.open("r", encoding="latin-1") as file_handle:
        for raw_line in file_handle:
            line = raw_line.rstrip("\r\n")
            stripped = line.lstrip(" \t\f")
            if not logical and (not stripped or stripped[0] in "#!"):
                continue

            trailing = len(stripped) - len(stripped.rstrip("\\"))
            if trailing % 2 == 1:
                logical += stripped[:-1]
                continue

            logical += stripped
            key, value = _split_property(logical)
            properties[key] = value
            logical = ""

    if logical:
        key, value = _split_property(logical)
        properties[key] = value
    return properties


@dataclass(frozen=True)
class CoverageTimeIndex:
    attribute: str
    index_store: FileStore


class CoverageTimeIndexLocator:
    """Find the time attribute and the index shapefile of a mosaic directory."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger(__name__)

    def coverage_directory(
        self,
        base_directory: Path,
        native_name: str | None = None,
        store_url: str | None = None,
    ) -> Path:
        """Directory of the mosaic, from the store URL when known, else from the native name."""
        if store_url:
            return resolve_store_path(store_url, base_directory)
        if not native_name:
            raise DirectoryNotFoundError("Coverage has neither a store url nor a native name")
        return base_directory / native_name

    def locate(
        self,
        base_directory: Path,
        native_name: str | None = None,
        *,
        store_url: str | None = None,
    ) -> CoverageTimeIndex:
        directory = self.coverage_directory(base_directory, native_name, store_url)
        if not directory.is_dir():
            raise DirectoryNotFoundError(f"Coverage directory not found: {directory}")

        entries = sorted(entry for entry in directory.iterdir() if entry.is_file())
        attribute = self.find_time_attribute(entries)
        index_store = self.find_index_store(entries)
        return CoverageTimeIndex(attribute=attribute, index_store=index_store)

    def find_time_attribute(self, entries: list[Path]) -> str:
        self.logger.info("Getting time attribute from coverage")
        for entry in entries:
            if not entry.name.endswith(PROPERTIES_SUFFIX) or entry.name in EXCLUDED_PROPERTIES:
                continue
            value = read_properties(entry).get(TIME_ATTRIBUTE_KEY)
            if value:
                self.logger.debug("Time attribute '%s' declared in %s", value, entry.name)
                return value
        raise TimeAttributeNotFoundError("Could not find time attribute in coverage properties")

    def find_index_store(self, entries: list[Path]) -> FileStore:
        self.logger.info("Getting shapefile resource from coverage")
        shapefiles = [entry for entry in entries if entry.name.endswith(INDEX_SUFFIX)]
        if len(shapefiles) != 1:
            raise AmbiguousOrMissingIndexError("Coverage contains more than one shapefile or no shapefile.")
        return FileStore(shapefiles[0])
