"""Concurrent metadata fetching from two catalogs.

``MetadataFetcher`` reads both catalogs side by side: the object lists
together, then the columns of each table as both sides of a pair.  When one
side fails, its sibling is cancelled and the first error is raised.

Columns are read either per table on demand (default) or, with
``column_strategy="bulk"``, once per catalog up front into a frozen
``ColumnIndex``.  Both strategies return the same columns for a table.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable, Iterable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from schema_diff.errors import TableComparisonError
from schema_diff.schema.models import CatalogObject, ColumnDescriptor, CompareOptions

if TYPE_CHECKING:
    from schema_diff.adapters.base import CatalogReader

logger = logging.getLogger(__name__)


async def gather_first_error(*aws: Awaitable[Any]) -> list[Any]:
    """Run awaitables concurrently; on failure cancel the rest.

    Unlike ``asyncio.gather`` the remaining awaitables are cancelled as soon
    as one fails, and the first failure is raised as-is instead of as an
    ``ExceptionGroup``.

    Returns:
        Results in the order the awaitables were given.
    """
    first: BaseException | None = None
    try:
        async with asyncio.TaskGroup() as tg:
            tasks = [tg.create_task(aw) for aw in aws]
    except ExceptionGroup as eg:
        first = eg.exceptions[0]
        while isinstance(first, ExceptionGroup):
            first = first.exceptions[0]
    if first is not None:
        raise first
    return [task.result() for task in tasks]


class ColumnIndex:
    """Read-only ``table -> columns`` mapping for one catalog.

    Built once from a bulk column fetch and never mutated afterwards, so
    any number of table comparisons can read it concurrently.

    Example:
        >>> index = ColumnIndex([
        ...     ColumnDescriptor(table="T_A", name="ID", type_signature="DATE"),
        ... ])
        >>> [c.name for c in index.get("T_A")]
        ['ID']
        >>> index.get("T_MISSING")
        ()
    """

    def __init__(self, columns: Iterable[ColumnDescriptor]) -> None:
        grouped: dict[str, list[ColumnDescriptor]] = defaultdict(list)
        for column in columns:
            grouped[column.table].append(column)
        self._tables: Mapping[str, tuple[ColumnDescriptor, ...]] = MappingProxyType(
            {table: tuple(cols) for table, cols in grouped.items()}
        )

    def __len__(self) -> int:
        return len(self._tables)

    def __contains__(self, table: object) -> bool:
        return table in self._tables

    def get(self, table: str) -> tuple[ColumnDescriptor, ...]:
        return self._tables.get(table, ())


class MetadataFetcher:
    """Fetches object lists and column lists from a local and remote catalog.

    At most ``options.max_concurrency`` reader calls run at once per
    catalog, so a connection pool smaller than the number of tables is
    enough.

    Args:
        local: Reader for the local catalog.
        remote: Reader for the remote catalog.
        options: Object types, name pattern and column strategy.

    Example:
        fetcher = MetadataFetcher(local_reader, remote_reader, CompareOptions())
        local_objects, remote_objects = await fetcher.fetch_objects()
        local_cols, remote_cols = await fetcher.fetch_columns("T_USERS")
    """

    def __init__(
        self,
        local: CatalogReader,
        remote: CatalogReader,
        options: CompareOptions,
    ) -> None:
        self._local = local
        self._remote = remote
        self._options = options
        self._slots: dict[str, asyncio.Semaphore] = {
            "local": asyncio.Semaphore(options.max_concurrency),
            "remote": asyncio.Semaphore(options.max_concurrency),
        }
        self._indexes: tuple[ColumnIndex, ColumnIndex] | None = None

    @property
    def uses_bulk_columns(self) -> bool:
        return self._options.column_strategy == "bulk"

    async def fetch_objects(
        self,
    ) -> tuple[list[CatalogObject], list[CatalogObject]]:
        """Fetch both catalogs' object lists concurrently.

        In bulk mode the column indexes are fetched in the same group, so a
        failure anywhere aborts the whole phase.

        Returns:
            ``(local_objects, remote_objects)``, each ordered by
            ``(name, type)``.

        Raises:
            CatalogConnectionError: If either catalog is unreachable.
            CatalogQueryError: If either catalog rejects the query.
        """
        pattern = self._options.effective_pattern
        types = self._options.object_types

        jobs = [
            self._call("local", self._local.fetch_objects, types, pattern),
            self._call("remote", self._remote.fetch_objects, types, pattern),
        ]
        if self.uses_bulk_columns:
            jobs += [
                self._build_index("local", self._local, pattern),
                self._build_index("remote", self._remote, pattern),
            ]

        results = await gather_first_error(*jobs)
        local_objects, remote_objects = results[0], results[1]
        if self.uses_bulk_columns:
            self._indexes = (results[2], results[3])

        logger.info(
            "Fetched %d local and %d remote objects",
            len(local_objects),
            len(remote_objects),
        )
        return local_objects, remote_objects

    async def fetch_columns(
        self, table: str
    ) -> tuple[list[ColumnDescriptor], list[ColumnDescriptor]]:
        """Fetch one table's columns from both catalogs.

        Returns:
            ``(local_columns, remote_columns)``, each ordered by column name.

        Raises:
            TableComparisonError: If either side fails; the original error
                is chained as ``__cause__``.
        """
        if self._indexes is not None:
            local_index, remote_index = self._indexes
            return list(local_index.get(table)), list(remote_index.get(table))

        try:
            local_columns, remote_columns = await gather_first_error(
                self._call("local", self._local.fetch_columns, table),
                self._call("remote", self._remote.fetch_columns, table),
            )
        except Exception as e:
            raise TableComparisonError(table, str(e)) from e

        logger.debug(
            "Fetched columns of %s: %d local, %d remote",
            table,
            len(local_columns),
            len(remote_columns),
        )
        return local_columns, remote_columns

    async def _call(
        self, side: str, method: Callable[..., Awaitable[Any]], *args: Any
    ) -> Any:
        async with self._slots[side]:
            return await method(*args)

    async def _build_index(
        self, side: str, reader: CatalogReader, pattern: str
    ) -> ColumnIndex:
        columns = await self._call(side, reader.fetch_all_columns, pattern)
        index = ColumnIndex(columns)
        logger.info("Indexed %d columns of %d %s tables", len(columns), len(index), side)
        return index
