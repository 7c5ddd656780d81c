"""Positional-parameter SQL fragments for filtered reads and partial updates.

Both builders number placeholders from the parameters already queued, so the
emitted ``$n`` tokens always read ``$1..$N`` left to right and line up with the
returned parameter list.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from jobly.services.errors import InvalidUpdateError


@dataclass(frozen=True, slots=True)
class JobFilter:
    min_salary: int | None = None
    has_equity: bool | None = None
    title: str | None = None


@dataclass(slots=True)
class WhereClause:
    conditions: list[str] = field(default_factory=list)
    params: list[Any] = field(default_factory=list)

    def bind(self, value: Any) -> str:
        self.params.append(value)
        return f"${len(self.params)}"

    @property
    def sql(self) -> str:
        if not self.conditions:
            return ""
        return " WHERE " + " AND ".join(self.conditions)


@dataclass(slots=True)
class PartialUpdate:
    set_cols: str
    values: list[Any]

    def next_placeholder(self) -> str:
        return f"${len(self.values) + 1}"


def build_job_filter_clause(job_filter: JobFilter) -> WhereClause:
    clause = WhereClause()

    if job_filter.min_salary is not None:
        clause.conditions.append(f"salary >= {clause.bind(job_filter.min_salary)}")

    # Only an explicit True narrows the result; False is not "equity = 0".
    if job_filter.has_equity is True:
        clause.conditions.append("equity > 0")

    if job_filter.title is not None:
        clause.conditions.append(f"title ILIKE {clause.bind(f'%{job_filter.title}%')}")

    return clause


def sql_for_partial_update(
    data: Mapping[str, Any],
    column_names: Mapping[str, str] | None = None,
) -> PartialUpdate:
    """Build the ``SET`` assignment list for a partial update.

    ``data`` maps logical field names to new values; ``column_names`` renames
    the fields whose storage column differs (``{"numEmployees": "num_employees"}``).
    The caller binds the row identifier at ``next_placeholder()``.

    Raises:
        InvalidUpdateError: ``data`` is empty.
    """
    if not data:
        raise InvalidUpdateError("No data")

    overrides = column_names or {}
    assignments: list[str] = []
    values: list[Any] = []
    for key, value in data.items():
        values.append(value)
        assignments.append(f"{overrides.get(key, key)} = ${len(values)}")

    return PartialUpdate(set_cols=", ".join(assignments), values=values)
