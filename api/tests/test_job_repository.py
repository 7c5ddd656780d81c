from __future__ import annotations

import asyncio
from collections.abc import Sequence
from decimal import Decimal
from typing import Any

import pytest

from jobly.services.errors import InvalidUpdateError, NotFoundError
from jobly.services.repository import JobRepository
from jobly.services.sql import JobFilter

ACME = {
    "handle": "acme",
    "name": "Acme Corp",
    "description": "Anvils and rockets",
    "num_employees": 250,
    "logo_url": "https://acme.example/logo.png",
}


class RecordingExecutor:
    def __init__(self, *responses: list[dict[str, Any]]) -> None:
        self._responses = list(responses)
        self.calls: list[tuple[str, list[Any]]] = []

    async def execute(self, sql: str, params: Sequence[Any]) -> list[dict[str, Any]]:
        self.calls.append((" ".join(sql.split()), list(params)))
        if not self._responses:
            return []
        return self._responses.pop(0)


def _job_row(**overrides: Any) -> dict[str, Any]:
    row = {
        "id": 7,
        "title": "Dev",
        "salary": 100000,
        "equity": Decimal("0.05"),
        "company_handle": "acme",
    }
    row.update(overrides)
    return row


def test_create_binds_four_fields_and_returns_row() -> None:
    executor = RecordingExecutor([_job_row()])
    repository = JobRepository(executor)

    job = asyncio.run(
        repository.create({"title": "Dev", "salary": 100000, "equity": "0.05", "company_handle": "acme"})
    )

    assert job == _job_row()
    sql, params = executor.calls[0]
    assert sql.startswith("INSERT INTO jobs (title, salary, equity, company_handle) VALUES ($1, $2, $3, $4)")
    assert params == ["Dev", 100000, Decimal("0.05"), "acme"]


def test_find_all_without_criteria_has_no_where_clause() -> None:
    executor = RecordingExecutor([{**_job_row(), "company_name": "Acme Corp"}])
    repository = JobRepository(executor)

    jobs = asyncio.run(repository.find_all())

    assert jobs[0]["company_name"] == "Acme Corp"
    sql, params = executor.calls[0]
    assert "WHERE" not in sql
    assert sql.endswith("ORDER BY title")
    assert params == []


def test_find_all_has_equity_false_matches_no_criteria() -> None:
    executor = RecordingExecutor()
    repository = JobRepository(executor)

    asyncio.run(repository.find_all(JobFilter()))
    asyncio.run(repository.find_all(JobFilter(has_equity=False)))

    assert executor.calls[0] == executor.calls[1]


def test_find_all_appends_conditions_before_order_by() -> None:
    executor = RecordingExecutor()
    repository = JobRepository(executor)

    asyncio.run(repository.find_all(JobFilter(min_salary=50000, title="engineer")))

    sql, params = executor.calls[0]
    assert "WHERE salary >= $1 AND title ILIKE $2 ORDER BY title" in sql
    assert params == [50000, "%engineer%"]


def test_get_nests_company_and_drops_handle() -> None:
    executor = RecordingExecutor([_job_row()], [dict(ACME)])
    repository = JobRepository(executor)

    job = asyncio.run(repository.get(7))

    assert "company_handle" not in job
    assert job["company"] == ACME
    assert set(job["company"]) == {"handle", "name", "description", "num_employees", "logo_url"}
    assert executor.calls[0][1] == [7]
    assert executor.calls[1][1] == ["acme"]


def test_get_missing_job_raises_not_found_without_company_lookup() -> None:
    executor = RecordingExecutor([])
    repository = JobRepository(executor)

    with pytest.raises(NotFoundError, match="No job: 99"):
        asyncio.run(repository.get(99))
    assert len(executor.calls) == 1


def test_update_binds_id_after_field_values() -> None:
    executor = RecordingExecutor([_job_row(title="Senior Dev", salary=120000)])
    repository = JobRepository(executor)

    job = asyncio.run(repository.update(7, {"title": "Senior Dev", "salary": 120000}))

    assert job["title"] == "Senior Dev"
    sql, params = executor.calls[0]
    assert "SET title = $1, salary = $2 WHERE id = $3" in sql
    assert params == ["Senior Dev", 120000, 7]


def test_update_coerces_equity_to_decimal() -> None:
    executor = RecordingExecutor([_job_row(equity=Decimal("0.1"))])
    repository = JobRepository(executor)

    asyncio.run(repository.update(7, {"equity": 0.1}))

    assert executor.calls[0][1] == [Decimal("0.1"), 7]


def test_update_missing_job_raises_not_found() -> None:
    executor = RecordingExecutor([])
    repository = JobRepository(executor)

    with pytest.raises(NotFoundError):
        asyncio.run(repository.update(404, {"salary": 1}))


def test_update_with_no_fields_never_reaches_storage() -> None:
    executor = RecordingExecutor()
    repository = JobRepository(executor)

    with pytest.raises(InvalidUpdateError):
        asyncio.run(repository.update(7, {}))
    assert executor.calls == []


def test_update_rejects_unknown_fields_before_building_sql() -> None:
    executor = RecordingExecutor()
    repository = JobRepository(executor)

    with pytest.raises(InvalidUpdateError, match="company_handle"):
        asyncio.run(repository.update(7, {"company_handle": "other", "title": "x"}))
    assert executor.calls == []


def test_remove_succeeds_with_no_return_value() -> None:
    executor = RecordingExecutor([{"id": 7}])
    repository = JobRepository(executor)

    assert asyncio.run(repository.remove(7)) is None
    assert executor.calls[0][1] == [7]


def test_remove_missing_job_raises_not_found() -> None:
    executor = RecordingExecutor([])
    repository = JobRepository(executor)

    with pytest.raises(NotFoundError, match="No job: 7"):
        asyncio.run(repository.remove(7))


def test_get_returns_null_company_when_company_vanished_between_reads() -> None:
    executor = RecordingExecutor([_job_row()], [])
    repository = JobRepository(executor)

    job = asyncio.run(repository.get(7))

    assert job["company"] is None
    assert "company_handle" not in job
    assert len(executor.calls) == 2
