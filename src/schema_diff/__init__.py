"""schema-diff: Async schema comparison of two database catalogs.

Compares the objects and table columns of a local and a remote catalog
(Oracle or PostgreSQL) and reports the differences as ``ALTER TABLE``
statements or ``+``/``-`` lines.

Usage:
    from schema_diff import compare_catalogs, CompareOptions, get_reader

    local = get_reader("dev", "local", load_diff_config())
    remote = get_reader("prod", "remote", load_diff_config())
    result = await compare_catalogs(local, remote, CompareOptions(), sink=sys.stdout)
"""

__version__ = "0.1.0"

# Adapters
from schema_diff.adapters.base import CatalogReader
from schema_diff.adapters.oracle import AsyncOracleCatalogReader
from schema_diff.adapters.postgres import AsyncPostgresCatalogReader

# Config
from schema_diff.config.loader import load_diff_config
from schema_diff.config.models import CompareSettings, DatabaseProfile, DiffConfig

# Errors
from schema_diff.errors import (
    CatalogConnectionError,
    CatalogQueryError,
    ComparisonCancelledError,
    SchemaDiffError,
    TableComparisonError,
)

# Factory
from schema_diff.factory import ProfileNotFoundError, get_reader, resolve_url

# Schema (comparison engine)
from schema_diff.schema.comparator import diff_columns, diff_objects
from schema_diff.schema.compare import compare_catalogs, run_comparison
from schema_diff.schema.models import (
    CatalogObject,
    ColumnDescriptor,
    CompareOptions,
    ComparisonResult,
    ObjectDiff,
    TableDiff,
)

__all__ = [
    # Adapters
    "CatalogReader",
    "AsyncOracleCatalogReader",
    "AsyncPostgresCatalogReader",
    # Config
    "load_diff_config",
    "CompareSettings",
    "DatabaseProfile",
    "DiffConfig",
    # Errors
    "SchemaDiffError",
    "CatalogConnectionError",
    "CatalogQueryError",
    "TableComparisonError",
    "ComparisonCancelledError",
    # Factory
    "get_reader",
    "resolve_url",
    "ProfileNotFoundError",
    # Schema
    "compare_catalogs",
    "run_comparison",
    "diff_objects",
    "diff_columns",
    "CatalogObject",
    "ColumnDescriptor",
    "CompareOptions",
    "ComparisonResult",
    "ObjectDiff",
    "TableDiff",
]
