"""Catalog reader protocol definition.

Defines the ``CatalogReader`` Protocol that all catalog adapters must
implement.  All methods are ``async def`` -- the comparison engine runs
reader calls concurrently and cancels them when a sibling fails.

Usage:
    from schema_diff.adapters.base import CatalogReader

    async def list_tables(reader: CatalogReader) -> list[str]:
        objects = await reader.fetch_objects(["TABLE"], "^T_")
        return [o.name for o in objects]
"""

from collections.abc import Sequence
from typing import Protocol

from schema_diff.schema.models import CatalogObject, ColumnDescriptor


class CatalogReader(Protocol):
    """Catalog reader interface that all adapters must implement.

    ``label`` names the catalog ("local" or "remote") in error messages and
    is stamped on every ``ColumnDescriptor`` the reader returns.

    Readers must raise ``CatalogConnectionError`` when the catalog cannot be
    reached and ``CatalogQueryError`` when a query is rejected.  An empty
    result is an empty list, never an error.
    """

    label: str

    async def fetch_objects(
        self,
        object_types: Sequence[str],
        pattern: str,
    ) -> list[CatalogObject]:
        """List objects of the given types whose name matches *pattern*.

        Args:
            object_types: Object types to include (e.g. ``["TABLE", "SEQUENCE"]``).
            pattern: Regular expression matched against the object name.

        Returns:
            Objects ordered by ``(name, type)``.
        """
        ...

    async def fetch_columns(self, table: str) -> list[ColumnDescriptor]:
        """List the columns of exactly one table, ordered by column name."""
        ...

    async def fetch_all_columns(self, pattern: str) -> list[ColumnDescriptor]:
        """List columns of every table whose name matches *pattern*.

        Returns:
            Columns ordered by ``(table, name)``.
        """
        ...

    async def close(self) -> None:
        """Release the connection pool."""
        ...
