"""Shared SQLAlchemy async plumbing for catalog readers.

Provides ``create_async_engine_pooled`` and ``SQLCatalogReader``, the base
class the Oracle and PostgreSQL readers build on.  Subclasses supply the
three catalog queries and the row-to-model mapping; this module owns
connection handling and error translation.
"""

import logging
from collections.abc import Sequence
from typing import Any

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from schema_diff.errors import CatalogConnectionError, CatalogQueryError
from schema_diff.schema.models import CatalogObject, ColumnDescriptor

logger = logging.getLogger(__name__)


def create_async_engine_pooled(database_url: str, **kwargs: Any) -> AsyncEngine:
    """Create an async SQLAlchemy engine with connection pooling.

    Default pool settings:

    - ``pool_size=8``: One connection per concurrent catalog query.
    - ``max_overflow=0``: Never open more than ``pool_size`` connections.
    - ``pool_pre_ping=True``: Validate connections before checkout.
    - ``pool_recycle=300``: Recycle connections every 5 minutes.

    Args:
        database_url: Connection URL with an async driver scheme.
        **kwargs: Additional keyword arguments forwarded to
            ``create_async_engine``.

    Returns:
        Configured ``AsyncEngine``.
    """
    defaults: dict[str, Any] = {
        "pool_size": 8,
        "max_overflow": 0,
        "pool_pre_ping": True,
        "pool_recycle": 300,
        "echo": False,
    }
    # Caller kwargs override defaults
    merged = {**defaults, **kwargs}

    return create_async_engine(database_url, **merged)


class SQLCatalogReader:
    """Base ``CatalogReader`` over a pooled SQLAlchemy async engine.

    Subclasses set ``OBJECTS_QUERY``, ``COLUMNS_QUERY`` and
    ``ALL_COLUMNS_QUERY`` and implement ``_normalize_url``,
    ``_connect_args``, ``_object_params`` and ``_column_from_row``.

    Args:
        database_url: Catalog connection URL.  Normalized to the reader's
            async driver scheme.
        label: Catalog name used in errors and on column descriptors.
        pool_size: Maximum number of pooled connections.
        connect_timeout: Seconds to wait for a new connection.
        batch_size: Rows fetched per round trip.
        **engine_kwargs: Forwarded to ``create_async_engine_pooled``.
    """

    OBJECTS_QUERY: str = ""
    COLUMNS_QUERY: str = ""
    ALL_COLUMNS_QUERY: str = ""

    def __init__(
        self,
        database_url: str,
        label: str,
        *,
        pool_size: int = 8,
        connect_timeout: int = 10,
        batch_size: int = 512,
        **engine_kwargs: Any,
    ) -> None:
        self.label = label
        self._batch_size = batch_size
        self._engine: AsyncEngine = create_async_engine_pooled(
            self._normalize_url(database_url),
            pool_size=pool_size,
            connect_args=self._connect_args(connect_timeout),
            **engine_kwargs,
        )

    # ------------------------------------------------------------------
    # CatalogReader Methods
    # ------------------------------------------------------------------

    async def fetch_objects(
        self,
        object_types: Sequence[str],
        pattern: str,
    ) -> list[CatalogObject]:
        """List objects of *object_types* whose name matches *pattern*."""
        rows = await self._fetch_rows(
            self.OBJECTS_QUERY, self._object_params(object_types, pattern)
        )
        return [CatalogObject(name=name, type=obj_type) for name, obj_type in rows]

    async def fetch_columns(self, table: str) -> list[ColumnDescriptor]:
        """List the columns of *table*, ordered by column name."""
        rows = await self._fetch_rows(self.COLUMNS_QUERY, {"table_name": table})
        return [self._column_from_row(row) for row in rows]

    async def fetch_all_columns(self, pattern: str) -> list[ColumnDescriptor]:
        """List the columns of all tables matching *pattern*."""
        rows = await self._fetch_rows(
            self.ALL_COLUMNS_QUERY, {"pattern": pattern}, batch_size=8192
        )
        return [self._column_from_row(row) for row in rows]

    async def close(self) -> None:
        """Dispose of the connection pool."""
        if self._engine:
            await self._engine.dispose()

    # ------------------------------------------------------------------
    # Query Execution
    # ------------------------------------------------------------------

    async def _fetch_rows(
        self,
        query: str,
        params: dict[str, Any],
        batch_size: int | None = None,
    ) -> list[tuple]:
        """Run *query* and return all rows as tuples.

        Connection failures raise ``CatalogConnectionError``; failures while
        executing or reading rows, including driver and socket timeouts,
        raise ``CatalogQueryError`` carrying the query text.
        """
        try:
            conn = await self._engine.connect()
        except (SQLAlchemyError, OSError) as e:
            raise CatalogConnectionError(self.label, str(e)) from e

        try:
            statement = text(query).execution_options(
                yield_per=batch_size or self._batch_size
            )
            result = await conn.stream(statement, params)
            rows = [tuple(row) async for row in result]
        except (SQLAlchemyError, OSError) as e:
            raise CatalogQueryError(self.label, query, str(e)) from e
        finally:
            await conn.close()

        logger.debug("[%s] %d rows", self.label, len(rows))
        return rows

    # ------------------------------------------------------------------
    # Dialect Hooks
    # ------------------------------------------------------------------

    def _normalize_url(self, database_url: str) -> str:
        return database_url

    def _connect_args(self, connect_timeout: int) -> dict[str, Any]:
        return {}

    def _object_params(
        self, object_types: Sequence[str], pattern: str
    ) -> dict[str, Any]:
        raise NotImplementedError

    def _column_from_row(self, row: tuple) -> ColumnDescriptor:
        raise NotImplementedError
