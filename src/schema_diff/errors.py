"""Exceptions raised while fetching and comparing catalogs.

Every failure inside a comparison run is terminal -- there is no retry
policy in the library.  Callers decide whether to retry.

Usage:
    from schema_diff.errors import CatalogQueryError, SchemaDiffError

    try:
        result = await compare_catalogs(local, remote, options)
    except SchemaDiffError as e:
        console.print(f"[red]{e}[/red]")
"""


class SchemaDiffError(Exception):
    """Base class for all schema-diff errors."""

    pass


class CatalogConnectionError(SchemaDiffError):
    """Raised when a catalog cannot be reached."""

    def __init__(self, catalog: str, message: str) -> None:
        self.catalog = catalog
        super().__init__(f"[{catalog}] connection failed: {message}")


class CatalogQueryError(SchemaDiffError):
    """Raised when a catalog rejects a query.

    The offending query text is kept on the exception and included in the
    message so the failure can be reproduced by hand.
    """

    def __init__(self, catalog: str, query: str, message: str) -> None:
        self.catalog = catalog
        self.query = query
        super().__init__(f"[{catalog}] query failed: {message}\n{query.strip()}")


class TableComparisonError(SchemaDiffError):
    """Raised when fetching or comparing the columns of one table fails."""

    def __init__(self, table: str, message: str) -> None:
        self.table = table
        super().__init__(f"table {table}: {message}")


class ComparisonCancelledError(SchemaDiffError):
    """Raised when a comparison run exceeds its deadline."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"comparison did not finish within {timeout:g}s")
