from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Protocol

import asyncpg  # type: ignore[import-untyped]

from jobly.core.telemetry import db_query_span
from jobly.services.errors import RepositoryUnavailableError

logger = logging.getLogger(__name__)


class QueryExecutor(Protocol):
    async def execute(self, sql: str, params: Sequence[Any]) -> list[dict[str, Any]]:
        """Run ``sql`` with ``$n`` placeholders bound to ``params`` by position."""
        ...


class AsyncpgQueryExecutor:
    def __init__(self, database_url: str | None, min_pool_size: int, max_pool_size: int) -> None:
        self.database_url = database_url
        self.min_pool_size = min_pool_size
        self.max_pool_size = max_pool_size
        self._pool: asyncpg.Pool | None = None

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None

    async def execute(self, sql: str, params: Sequence[Any]) -> list[dict[str, Any]]:
        pool = await self._get_pool()
        with db_query_span(sql, param_count=len(params)):
            logger.debug("executing sql params=%s statement=%s", len(params), sql)
            rows = await pool.fetch(sql, *params)
        return [dict(row) for row in rows]

    async def _get_pool(self) -> asyncpg.Pool:
        if not self.database_url:
            raise RepositoryUnavailableError("JOBLY_DATABASE_URL is required")

        if self._pool is not None:
            return self._pool

        try:
            self._pool = await asyncpg.create_pool(
                dsn=self.database_url,
                min_size=self.min_pool_size,
                max_size=self.max_pool_size,
                command_timeout=15,
            )
            return self._pool
        except Exception as exc:  # pragma: no cover - depends on environment
            raise RepositoryUnavailableError("database unavailable") from exc
