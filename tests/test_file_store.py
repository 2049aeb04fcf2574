from pathlib import Path

import geopandas as gpd
import pytest

from timedim_api.catalog import Presentation
from timedim_api.coverage import CoverageTimeIndexLocator
from timedim_api.resolver import TimeValueResolver
from timedim_api.stores import FileStore

DBF_HEADER_SIZE = 32
DBF_DESCRIPTOR_SIZE = 32
DBF_HEADER_TERMINATOR = 0x0D


def mark_as_date_field(dbf: Path, field: str) -> None:
    """Retype an 8-character text column of a DBF file as a ``D`` (Date) field."""
    header = bytearray(dbf.read_bytes())
    offset = DBF_HEADER_SIZE
    while header[offset] != DBF_HEADER_TERMINATOR:
        name = bytes(header[offset : offset + 11]).rstrip(b"\x00").decode("ascii")
        if name.lower() == field.lower():
            assert header[offset + 16] == 8
            header[offset + 11] = ord("D")
        offset += DBF_DESCRIPTOR_SIZE
    dbf.write_bytes(bytes(header))


def write_dated_shapefile(path: Path, field: str, days: list[str]) -> Path:
    frame = gpd.GeoDataFrame(
        {field: days, "label": [f"feature-{index}" for index in range(len(days))]},
        geometry=gpd.points_from_xy(range(len(days)), range(len(days))),
        crs="EPSG:4326",
    )
    frame.to_file(path, engine="pyogrio", layer_options={"RESIZE": "YES"})
    mark_as_date_field(path.with_suffix(".dbf"), field)
    return path


@pytest.fixture
def tracks_shapefile(tmp_path: Path) -> Path:
    return write_dated_shapefile(tmp_path / "tracks.shp", "recorded", ["20200601", "20200131", "20200601"])


def test_shapefile_date_field_is_listed(tracks_shapefile: Path) -> None:
    values = TimeValueResolver().resolve(FileStore(tracks_shapefile), "recorded", Presentation.LIST)

    assert values.to_list() == ["2020-06-01 00:00:00+0000", "2020-01-31 00:00:00+0000"]


def test_shapefile_date_field_interval(tracks_shapefile: Path) -> None:
    values = TimeValueResolver().resolve(FileStore(tracks_shapefile), "recorded", Presentation.DISCRETE_INTERVAL)

    assert values.to_list() == ["2020-01-31 00:00:00+0000", "2020-06-01 00:00:00+0000"]


def test_shapefile_text_attribute_yields_no_values(tracks_shapefile: Path) -> None:
    values = TimeValueResolver().resolve(FileStore(tracks_shapefile), "label", Presentation.LIST)

    assert len(values) == 0


def test_mosaic_index_shapefile_interval(tmp_path: Path) -> None:
    mosaic = tmp_path / "rainfall"
    mosaic.mkdir()
    (mosaic / "rainfall.properties").write_text("TimeAttribute=ingestion\n", encoding="latin-1")
    write_dated_shapefile(mosaic / "rainfall.shp", "ingestion", ["20210301", "20210101", "20210201"])

    index = CoverageTimeIndexLocator().locate(tmp_path, "rainfall")
    values = TimeValueResolver().resolve(index.index_store, index.attribute, Presentation.CONTINUOUS_INTERVAL)

    assert values.to_list() == ["2021-01-01 00:00:00+0000", "2021-03-01 00:00:00+0000"]
