from collections.abc import Iterator
from datetime import date
from pathlib import Path
from typing import Any

import psycopg
import pytest
from fastapi.testclient import TestClient
from psycopg import sql

from timedim_api.catalog import Catalog, clear_catalog_cache
from timedim_api.config import clear_settings_cache
from timedim_api.stores import relational


class FakeCursor:
    def __init__(self, connection: "FakeConnection") -> None:
        self.connection = connection
        self.closed = False
        self._rows: list[tuple[Any, ...]] = []

    def __enter__(self) -> "FakeCursor":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self.closed = True

    def execute(self, query: sql.Composable) -> None:
        self.connection.database.queries.append(query)
        self._rows = self.connection.database.respond(query)

    def __iter__(self) -> Iterator[tuple[Any, ...]]:
        fail_after = self.connection.database.fail_after
        for index, row in enumerate(self._rows):
            if fail_after is not None and index >= fail_after:
                raise psycopg.OperationalError("server closed the connection unexpectedly")
            yield row


class FakeConnection:
    def __init__(self, database: "FakeDatabase") -> None:
        self.database = database
        self.closed = False
        self.read_only = False
        self.cursors: list[FakeCursor] = []

    def __enter__(self) -> "FakeConnection":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self.closed = True

    def cursor(self) -> FakeCursor:
        cursor = FakeCursor(self)
        self.cursors.append(cursor)
        return cursor


class FakeDatabase:
    """Single-column table double that tracks every connection and cursor it hands out."""

    def __init__(self, values: list[Any] | None = None) -> None:
        self.values = list(values or [])
        self.fail_after: int | None = None
        self.refuse_connections = False
        self.conninfos: list[str] = []
        self.connections: list[FakeConnection] = []
        self.queries: list[sql.Composable] = []

    def connect(self, conninfo: str) -> FakeConnection:
        if self.refuse_connections:
            raise psycopg.OperationalError("connection refused")
        self.conninfos.append(conninfo)
        connection = FakeConnection(self)
        self.connections.append(connection)
        return connection

    def respond(self, query: sql.Composable) -> list[tuple[Any, ...]]:
        head = query.as_string(None)
        if head.startswith("SELECT DISTINCT"):
            return [(value,) for value in dict.fromkeys(self.values)]
        if head.startswith("SELECT MIN"):
            present = [value for value in self.values if value is not None]
            if not present:
                return [(None, None)]
            return [(min(present), max(present))]
        raise AssertionError(f"Unexpected query: {query!r}")

    @property
    def all_released(self) -> bool:
        return all(
            connection.closed and all(cursor.closed for cursor in connection.cursors)
            for connection in self.connections
        )


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in ("TIMEDIM_CATALOG", "TIMEDIM_DATA_DIR", "TIMEDIM_TIMEZONE", "TIMEDIM_DATE_FORMAT", "TIMEDIM_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    clear_settings_cache()
    clear_catalog_cache()
    yield
    clear_settings_cache()
    clear_catalog_cache()


@pytest.fixture
def stations_db(monkeypatch: pytest.MonkeyPatch) -> FakeDatabase:
    database = FakeDatabase([date(2020, 1, 1), date(2020, 1, 1), date(2020, 6, 1)])
    monkeypatch.setattr(relational, "open_connection", database.connect)
    return database


@pytest.fixture
def catalog_payload() -> dict[str, Any]:
    return {
        "stores": {
            "observations": {
                "type": "postgis",
                "read_only": True,
                "connection_parameters": {"host": "db", "database": "gis", "schema": "obs"},
            },
            "tracks": {"type": "shapefile", "connection_parameters": {"url": "file:tracks/tracks.shp"}},
            "rainfall": {"type": "imagemosaic", "url": "file:mosaics/rainfall"},
            "legacy": {"type": "geopkg", "connection_parameters": {"database": "legacy.gpkg"}},
        },
        "layers": {
            "test:stations": {
                "store": "observations",
                "metadata": {"time": {"attribute": "obs_time", "presentation": "LIST"}},
            },
            "test:stations_range": {
                "store": "observations",
                "metadata": {"time": {"attribute": "obs_time", "presentation": "CONTINUOUS_INTERVAL"}},
            },
            "test:tracks": {
                "store": "tracks",
                "metadata": {"time": {"attribute": "recorded", "presentation": "LIST"}},
            },
            "test:rainfall": {
                "kind": "coverage",
                "store": "rainfall",
                "native_name": "rainfall",
                "metadata": {"time": {"attribute": "time", "presentation": "DISCRETE_INTERVAL"}},
            },
            "test:legacy": {
                "store": "legacy",
                "metadata": {"time": {"attribute": "obs_time", "presentation": "LIST"}},
            },
            "test:untimed": {"store": "observations"},
        },
    }


@pytest.fixture
def catalog(tmp_path: Path, catalog_payload: dict[str, Any]) -> Catalog:
    return Catalog.from_mapping(catalog_payload, tmp_path)


@pytest.fixture
def client() -> TestClient:
    from timedim_api.main import app

    return TestClient(app)
