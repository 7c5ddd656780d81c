from __future__ import annotations

import logging
from collections.abc import Mapping
from decimal import Decimal
from functools import lru_cache
from typing import Any

from jobly.core.config import get_settings
from jobly.services.errors import InvalidUpdateError, NotFoundError
from jobly.services.executor import AsyncpgQueryExecutor, QueryExecutor
from jobly.services.sql import JobFilter, build_job_filter_clause, sql_for_partial_update

logger = logging.getLogger(__name__)

JOB_UPDATABLE_FIELDS = ("title", "salary", "equity")
# Logical job field names already match their storage columns.
JOB_COLUMN_NAMES: dict[str, str] = {}
JOB_RETURNING_SQL = "id, title, salary, equity, company_handle"


class JobRepository:
    """Jobs table access; every SQL value travels as a positional parameter."""

    def __init__(self, executor: QueryExecutor) -> None:
        self.executor = executor

    async def create(self, data: Mapping[str, Any]) -> dict[str, Any]:
        rows = await self.executor.execute(
            f"""
            INSERT INTO jobs (title, salary, equity, company_handle)
            VALUES ($1, $2, $3, $4)
            RETURNING {JOB_RETURNING_SQL}
            """,
            [
                data["title"],
                data.get("salary"),
                self._coerce_equity(data.get("equity")),
                data["company_handle"],
            ],
        )
        job = self._job_row_to_dict(rows[0])
        logger.info("job created id=%s company_handle=%s", job["id"], job["company_handle"])
        return job

    async def find_all(self, job_filter: JobFilter | None = None) -> list[dict[str, Any]]:
        clause = build_job_filter_clause(job_filter or JobFilter())
        rows = await self.executor.execute(
            f"""
            SELECT j.id,
                   j.title,
                   j.salary,
                   j.equity,
                   j.company_handle,
                   c.name AS company_name
            FROM jobs j
              LEFT JOIN companies AS c ON c.handle = j.company_handle{clause.sql}
            ORDER BY title
            """,
            clause.params,
        )
        return [self._job_list_row_to_dict(row) for row in rows]

    async def get(self, job_id: int) -> dict[str, Any]:
        job_rows = await self.executor.execute(
            f"""
            SELECT {JOB_RETURNING_SQL}
            FROM jobs
            WHERE id = $1
            """,
            [job_id],
        )
        if not job_rows:
            logger.info("job not found id=%s", job_id)
            raise NotFoundError(f"No job: {job_id}")

        job = self._job_row_to_dict(job_rows[0])
        company_rows = await self.executor.execute(
            """
            SELECT handle,
                   name,
                   description,
                   num_employees,
                   logo_url
            FROM companies
            WHERE handle = $1
            """,
            [job.pop("company_handle")],
        )
        job["company"] = self._company_row_to_dict(company_rows[0]) if company_rows else None
        return job

    async def update(self, job_id: int, data: Mapping[str, Any]) -> dict[str, Any]:
        unknown = sorted(set(data) - set(JOB_UPDATABLE_FIELDS))
        if unknown:
            raise InvalidUpdateError(f"unsupported job fields: {', '.join(unknown)}")

        values = dict(data)
        if "equity" in values:
            values["equity"] = self._coerce_equity(values["equity"])

        update = sql_for_partial_update(values, JOB_COLUMN_NAMES)
        rows = await self.executor.execute(
            f"""
            UPDATE jobs
            SET {update.set_cols}
            WHERE id = {update.next_placeholder()}
            RETURNING {JOB_RETURNING_SQL}
            """,
            [*update.values, job_id],
        )
        if not rows:
            logger.info("job not found for update id=%s", job_id)
            raise NotFoundError(f"No job: {job_id}")

        logger.info("job updated id=%s fields=%s", job_id, ",".join(values))
        return self._job_row_to_dict(rows[0])

    async def remove(self, job_id: int) -> None:
        rows = await self.executor.execute(
            """
            DELETE
            FROM jobs
            WHERE id = $1
            RETURNING id
            """,
            [job_id],
        )
        if not rows:
            logger.info("job not found for removal id=%s", job_id)
            raise NotFoundError(f"No job: {job_id}")
        logger.info("job removed id=%s", job_id)

    async def close(self) -> None:
        close = getattr(self.executor, "close", None)
        if close is not None:
            await close()

    @staticmethod
    def _coerce_equity(value: Any) -> Decimal | None:
        if value is None or isinstance(value, Decimal):
            return value
        return Decimal(str(value))

    @staticmethod
    def _job_row_to_dict(row: Mapping[str, Any]) -> dict[str, Any]:
        return {
            "id": row["id"],
            "title": row["title"],
            "salary": row["salary"],
            "equity": row["equity"],
            "company_handle": row["company_handle"],
        }

    @staticmethod
    def _job_list_row_to_dict(row: Mapping[str, Any]) -> dict[str, Any]:
        return {
            "id": row["id"],
            "title": row["title"],
            "salary": row["salary"],
            "equity": row["equity"],
            "company_handle": row["company_handle"],
            "company_name": row["company_name"],
        }

    @staticmethod
    def _company_row_to_dict(row: Mapping[str, Any]) -> dict[str, Any]:
        return {
            "handle": row["handle"],
            "name": row["name"],
            "description": row["description"],
            "num_employees": row["num_employees"],
            "logo_url": row["logo_url"],
        }


@lru_cache
def get_repository() -> JobRepository:
    settings = get_settings()
    return JobRepository(
        executor=AsyncpgQueryExecutor(
            database_url=settings.database_url,
            min_pool_size=settings.database_pool_min_size,
            max_pool_size=settings.database_pool_max_size,
        )
    )
