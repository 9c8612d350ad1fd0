"""Catalog reader adapters package.

Provides the ``CatalogReader`` Protocol and concrete async readers for
Oracle and PostgreSQL catalogs.

Usage:
    from schema_diff.adapters import CatalogReader, AsyncOracleCatalogReader
"""

from schema_diff.adapters.base import CatalogReader
from schema_diff.adapters.engine import SQLCatalogReader, create_async_engine_pooled
from schema_diff.adapters.oracle import AsyncOracleCatalogReader
from schema_diff.adapters.postgres import AsyncPostgresCatalogReader

__all__ = [
    "CatalogReader",
    "SQLCatalogReader",
    "create_async_engine_pooled",
    "AsyncOracleCatalogReader",
    "AsyncPostgresCatalogReader",
]
