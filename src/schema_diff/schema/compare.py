"""End-to-end comparison of two catalogs.

Runs one comparison: fetch both object lists, diff them, then fetch and
diff the columns of every table present in both catalogs with one task per
table.  Tables finish in any order; the aggregator restores table-name
order before the last report section is written.

Usage:
    from schema_diff.schema.compare import run_comparison

    result = await run_comparison(local_reader, remote_reader, options,
                                  sink=sys.stdout, timeout=60)
    if result.has_differences:
        ...
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, TextIO

from schema_diff.errors import ComparisonCancelledError, TableComparisonError
from schema_diff.schema.comparator import diff_columns, diff_objects
from schema_diff.schema.fetch import MetadataFetcher
from schema_diff.schema.models import CompareOptions, ComparisonResult, TableDiff
from schema_diff.schema.report import DiffAggregator, DiffReporter

if TYPE_CHECKING:
    from schema_diff.adapters.base import CatalogReader

logger = logging.getLogger(__name__)


async def compare_catalogs(
    local: CatalogReader,
    remote: CatalogReader,
    options: CompareOptions | None = None,
    sink: TextIO | None = None,
) -> ComparisonResult:
    """Compare the local catalog against the remote one.

    When *sink* is given, the object sections are written as soon as the
    object lists are compared and the column section once every table is
    done.  A failed run never writes the column section.

    Scheduling of table comparisons stops at the first failed table.
    Tables already running are allowed to finish, then the first failure
    is raised.

    Args:
        local: Reader for the catalog being checked.
        remote: Reader for the reference catalog.
        options: Object types, pattern, diff mode and concurrency.
        sink: Optional text stream for the report.

    Returns:
        ``ComparisonResult`` with the object diff and the table diffs
        sorted by table name.

    Raises:
        CatalogConnectionError: If a catalog is unreachable while listing
            objects (or building the bulk column index).
        CatalogQueryError: If a catalog rejects the object query.
        TableComparisonError: If a table's column fetch fails.
    """
    options = options or CompareOptions()
    reporter = DiffReporter(sink) if sink is not None else None
    fetcher = MetadataFetcher(local, remote, options)

    local_objects, remote_objects = await fetcher.fetch_objects()
    objects = diff_objects(local_objects, remote_objects)
    logger.info(
        "%d objects missing from local, %d extraneous, %d tables to compare",
        len(objects.missing_from_local),
        len(objects.extraneous_in_local),
        len(objects.common_tables),
    )

    aggregator = DiffAggregator(capacity=len(objects.common_tables))
    slots = asyncio.Semaphore(options.max_concurrency)
    failures: list[TableComparisonError] = []

    async def compare_table(table: str) -> None:
        try:
            local_columns, remote_columns = await fetcher.fetch_columns(table)
            diff_text = diff_columns(local_columns, remote_columns, options.mode)
            if diff_text:
                await aggregator.put(TableDiff(table=table, diff_text=diff_text))
        except TableComparisonError as e:
            logger.error("Column comparison failed: %s", e)
            failures.append(e)
        finally:
            slots.release()

    async def produce() -> None:
        async with asyncio.TaskGroup() as tg:
            for table in objects.common_tables:
                await slots.acquire()
                if failures:
                    slots.release()
                    logger.warning(
                        "Not scheduling remaining tables after %s failed",
                        failures[0].table,
                    )
                    break
                tg.create_task(compare_table(table))
        # Every producer has joined
        await aggregator.close()

    async with asyncio.TaskGroup() as tg:
        tg.create_task(produce())
        if reporter is not None:
            reporter.write_objects(objects)
        table_diffs = await aggregator.drain()

    if failures:
        raise failures[0]

    if reporter is not None:
        reporter.write_table_diffs(table_diffs)

    return ComparisonResult(objects=objects, table_diffs=table_diffs)


async def run_comparison(
    local: CatalogReader,
    remote: CatalogReader,
    options: CompareOptions | None = None,
    sink: TextIO | None = None,
    timeout: float | None = 60,
) -> ComparisonResult:
    """Run ``compare_catalogs`` under an overall deadline.

    Every outstanding catalog call is cancelled when the deadline passes.
    A ``TimeoutError`` raised by a reader itself is not the deadline and
    propagates unchanged.

    Raises:
        ComparisonCancelledError: If the run does not finish within
            *timeout* seconds.
    """
    deadline = asyncio.timeout(timeout)
    try:
        async with deadline:
            return await compare_catalogs(local, remote, options, sink)
    except TimeoutError as e:
        if not deadline.expired():
            raise
        raise ComparisonCancelledError(timeout or 0) from e
