"""Diff aggregation and report rendering.

``DiffAggregator`` collects table diffs from concurrent producers through a
bounded queue and hands them back sorted by table name.  ``DiffReporter``
writes the three report sections to a text sink:

1. Objects missing from local schema
2. Extraneous objects in local schema
3. Data type discrepancies for table columns that exist in both schemas
"""

import asyncio
import io
import sys
from collections.abc import Iterable
from typing import TextIO

from schema_diff.schema.models import CatalogObject, ComparisonResult, ObjectDiff, TableDiff

MISSING_TITLE = "Objects missing from local schema"
EXTRANEOUS_TITLE = "Extraneous objects in local schema"
COLUMNS_TITLE = "Data type discrepancies for table columns that exist in both schemas"


def banner(title: str) -> str:
    """Frame a section title with dashes, preceded by a blank line.

    Example:
        >>> print(banner("Tables"), end="")
        <BLANKLINE>
        ------------
        -- Tables --
        ------------
    """
    heading = f"-- {title} --"
    rule = "-" * len(heading)
    return f"\n{rule}\n{heading}\n{rule}\n"


class DiffAggregator:
    """Fan-in point for per-table diffs produced concurrently.

    The queue holds ``capacity`` diffs plus the end marker, so producers
    never wait on a slow consumer when ``capacity`` is at least the number
    of candidate tables.  ``close()`` must be called exactly once, after
    every producer has finished.

    Args:
        capacity: Number of tables that may produce a diff.
    """

    def __init__(self, capacity: int) -> None:
        self._queue: asyncio.Queue[TableDiff | None] = asyncio.Queue(
            maxsize=max(1, capacity) + 1
        )
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def put(self, diff: TableDiff) -> None:
        """Add one table's diff."""
        if self._closed:
            raise RuntimeError("DiffAggregator is closed")
        await self._queue.put(diff)

    async def close(self) -> None:
        """Signal that no more diffs will arrive."""
        if self._closed:
            return
        self._closed = True
        await self._queue.put(None)

    async def drain(self) -> list[TableDiff]:
        """Consume diffs until closed.

        Returns:
            Non-empty diffs sorted by table name, so the report does not
            depend on which table finished first.
        """
        diffs: list[TableDiff] = []
        while True:
            item = await self._queue.get()
            if item is None:
                break
            if item.diff_text:
                diffs.append(item)
        return sorted(diffs, key=lambda d: d.table)


class DiffReporter:
    """Writes report sections to a text sink (``sys.stdout`` by default)."""

    def __init__(self, sink: TextIO | None = None) -> None:
        self._sink = sink if sink is not None else sys.stdout

    def write_objects(self, objects: ObjectDiff) -> None:
        """Write sections 1 and 2 (missing and extraneous objects)."""
        self._write_section(MISSING_TITLE, objects.missing_from_local)
        self._write_section(EXTRANEOUS_TITLE, objects.extraneous_in_local)

    def write_table_diffs(self, diffs: Iterable[TableDiff]) -> None:
        """Write section 3, one ``-- <table>`` block per diff."""
        self._sink.write(banner(COLUMNS_TITLE))
        for diff in diffs:
            if not diff.diff_text:
                continue
            self._sink.write(f"-- {diff.table}\n{diff.diff_text}\n")
        self._sink.flush()

    def write(self, result: ComparisonResult) -> None:
        """Write all three sections of a finished comparison."""
        self.write_objects(result.objects)
        self.write_table_diffs(result.table_diffs)

    def _write_section(self, title: str, objects: Iterable[CatalogObject]) -> None:
        self._sink.write(banner(title))
        for obj in objects:
            self._sink.write(f"{obj}\n")
        self._sink.flush()


def render_report(result: ComparisonResult) -> str:
    """Render a finished comparison as report text."""
    buffer = io.StringIO()
    DiffReporter(buffer).write(result)
    return buffer.getvalue()
