"""Retrieval of the values of a temporal attribute from a backing store."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from collections.abc import Set as AbstractSet
from contextlib import closing

from psycopg import sql

from timedim_api.catalog import Presentation
from timedim_api.formatting import TemporalFormatter
from timedim_api.stores import FileStore, RelationalStore, StoreHandle, unwrap_store


class ValueSet(AbstractSet):
    """Deduplicated string values, kept in insertion order."""

    def __init__(self, values: Iterable[str] = ()) -> None:
        self._values: dict[str, None] = dict.fromkeys(values)

    def add(self, value: str) -> None:
        self._values[value] = None

    def __contains__(self, value: object) -> bool:
        return value in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def to_list(self) -> list[str]:
        return list(self._values)

    def __repr__(self) -> str:
        return f"ValueSet({self.to_list()!r})"


class TimeValueResolver:
    """Collect the distinct values, or the min/max pair, of a temporal attribute.

    Relational stores are queried with ``SELECT DISTINCT`` / ``MIN``/``MAX``
    and render values the way the driver does (``str()`` of what psycopg
    returns). File stores are scanned feature by feature and values are
    rendered with ``formatter``; their min/max is taken on the rendered
    strings, so it follows string order rather than chronology.
    """

    def __init__(self, formatter: TemporalFormatter | None = None, logger: logging.Logger | None = None) -> None:
        self.formatter = formatter or TemporalFormatter()
        self.logger = logger or logging.getLogger(__name__)

    def resolve(
        self,
        store: StoreHandle,
        attribute: str,
        presentation: Presentation,
        table_name: str | None = None,
    ) -> ValueSet:
        concrete = unwrap_store(store)
        if isinstance(concrete, RelationalStore):
            if not table_name:
                raise ValueError("A table name is required for relational stores")
            if presentation.is_interval:
                return self.min_max_from_table(concrete, attribute, table_name)
            return self.distinct_from_table(concrete, attribute, table_name)

        if presentation.is_interval:
            return self.min_max_from_file(concrete, attribute)
        return self.distinct_from_file(concrete, attribute)

    def distinct_from_table(self, store: RelationalStore, attribute: str, table_name: str) -> ValueSet:
        self.logger.info("Get distinct values from relational store")
        query = sql.SQL("SELECT DISTINCT {attribute} FROM {table}").format(
            attribute=sql.Identifier(attribute),
            table=store.table(table_name),
        )
        values = ValueSet()
        for (value,) in store.fetch_rows(query):
            if value is not None:
                values.add(str(value))
        return values

    def min_max_from_table(self, store: RelationalStore, attribute: str, table_name: str) -> ValueSet:
        self.logger.info("Get min/max values from relational store")
        query = sql.SQL("SELECT MIN({attribute}), MAX({attribute}) FROM {table}").format(
            attribute=sql.Identifier(attribute),
            table=store.table(table_name),
        )
        values = ValueSet()
        with closing(store.fetch_rows(query)) as rows:
            row = next(rows, None)
        if row is not None:
            for value in row[:2]:
                if value is not None:
                    values.add(str(value))
        return values

    def distinct_from_file(self, store: FileStore, attribute: str) -> ValueSet:
        self.logger.info("Get distinct values from file store")
        values = ValueSet()
        with store.features(attribute) as features:
            for value in features:
                formatted = self.formatter.format(value)
                if formatted is not None:
                    values.add(formatted)
        return values

    def min_max_from_file(self, store: FileStore, attribute: str) -> ValueSet:
        self.logger.info("Get min/max values from file store")
        values = self.distinct_from_file(store, attribute)
        if not values:
            return values
        return ValueSet([min(values), max(values)])
