"""Schema comparison engine.

Provides object and column comparison (``diff_objects``, ``diff_columns``),
concurrent metadata fetching (``MetadataFetcher``), diff aggregation and
reporting (``DiffAggregator``, ``DiffReporter``), and the end-to-end runner
(``compare_catalogs``, ``run_comparison``).

Usage:
    from schema_diff.schema import compare_catalogs, CompareOptions
    from schema_diff.schema import diff_objects, diff_columns
"""

from schema_diff.schema.compare import compare_catalogs, run_comparison
from schema_diff.schema.comparator import (
    diff_columns,
    diff_columns_statements,
    diff_columns_text,
    diff_objects,
)
from schema_diff.schema.fetch import ColumnIndex, MetadataFetcher, gather_first_error
from schema_diff.schema.models import (
    CatalogObject,
    ColumnDescriptor,
    ColumnStrategy,
    CompareOptions,
    ComparisonResult,
    DiffMode,
    ObjectDiff,
    TableDiff,
)
from schema_diff.schema.report import DiffAggregator, DiffReporter, banner, render_report

__all__ = [
    "compare_catalogs",
    "run_comparison",
    "diff_objects",
    "diff_columns",
    "diff_columns_statements",
    "diff_columns_text",
    "MetadataFetcher",
    "ColumnIndex",
    "gather_first_error",
    "DiffAggregator",
    "DiffReporter",
    "banner",
    "render_report",
    "CatalogObject",
    "ColumnDescriptor",
    "ColumnStrategy",
    "CompareOptions",
    "ComparisonResult",
    "DiffMode",
    "ObjectDiff",
    "TableDiff",
]
