"""Relational (PostGIS) backing store accessed through psycopg."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

import psycopg
from psycopg import sql
from psycopg.conninfo import make_conninfo

from timedim_api.errors import StoreAccessError

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA = "public"

# catalog connection parameter -> libpq keyword
CONNINFO_KEYS = {
    "host": "host",
    "port": "port",
    "database": "dbname",
    "user": "user",
    "passwd": "password",
    "sslmode": "sslmode",
}


def open_connection(conninfo: str) -> psycopg.Connection:
    return psycopg.connect(conninfo)


@dataclass(frozen=True)
class RelationalStore:
    """A schema inside a PostgreSQL database."""

    schema: str
    conninfo: str

    @classmethod
    def from_connection_parameters(cls, parameters: dict[str, Any]) -> RelationalStore:
        options = {
            keyword: str(parameters[key])
            for key, keyword in CONNINFO_KEYS.items()
            if parameters.get(key) not in (None, "")
        }
        schema = parameters.get("schema") or DEFAULT_SCHEMA
        return cls(schema=str(schema), conninfo=make_conninfo(**options))

    def table(self, table_name: str) -> sql.Identifier:
        return sql.Identifier(self.schema, table_name)

    @contextmanager
    def connect(self) -> Iterator[psycopg.Connection]:
        """Open a read-only connection that is closed on exit."""
        try:
            conn = open_connection(self.conninfo)
        except psycopg.Error as err:
            raise StoreAccessError(f"Could not connect to database: {err}") from err

        with conn:
            conn.read_only = True
            yield conn

    def fetch_rows(self, query: sql.Composable) -> Iterator[tuple[Any, ...]]:
        """Run ``query`` and yield its rows; connection and cursor are always released."""
        logger.debug("Final SQL: %r", query)
        with self.connect() as conn:
            with conn.cursor() as cursor:
                try:
                    cursor.execute(query)
                    yield from cursor
                except psycopg.Error as err:
                    raise StoreAccessError(f"Query on schema '{self.schema}' failed: {err}") from err

    def __repr__(self) -> str:
        return f"<RelationalStore schema={self.schema!r}>"
