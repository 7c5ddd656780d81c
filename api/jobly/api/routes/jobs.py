import asyncpg  # type: ignore[import-untyped]
from fastapi import APIRouter, Depends, HTTPException, Query, status as http_status

from jobly.core.security import get_admin_principal
from jobly.schemas.jobs import (
    JobDeletedOut,
    JobDetailEnvelope,
    JobDetailOut,
    JobEnvelope,
    JobListEnvelope,
    JobListItemOut,
    JobNewRequest,
    JobOut,
    JobUpdateRequest,
)
from jobly.services.errors import InvalidUpdateError, NotFoundError, RepositoryUnavailableError
from jobly.services.repository import get_repository
from jobly.services.sql import JobFilter

router = APIRouter()


def _require_write(principal) -> None:
    try:
        principal.require_scopes({"jobs:write"})
    except PermissionError as exc:
        raise HTTPException(status_code=http_status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc


@router.post("", response_model=JobEnvelope, status_code=http_status.HTTP_201_CREATED)
async def create_job(
    payload: JobNewRequest,
    principal=Depends(get_admin_principal),
    repository=Depends(get_repository),
) -> JobEnvelope:
    _require_write(principal)
    try:
        row = await repository.create(payload.model_dump())
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=http_status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except asyncpg.ForeignKeyViolationError as exc:
        raise HTTPException(
            status_code=http_status.HTTP_400_BAD_REQUEST,
            detail=f"No company: {payload.company_handle}",
        ) from exc
    return JobEnvelope(job=JobOut(**row))


@router.get("", response_model=JobListEnvelope)
async def list_jobs(
    min_salary: int | None = Query(default=None, ge=0, alias="minSalary"),
    has_equity: str | None = Query(default=None, alias="hasEquity"),
    title: str | None = Query(default=None, min_length=1),
    repository=Depends(get_repository),
) -> JobListEnvelope:
    job_filter = JobFilter(min_salary=min_salary, has_equity=has_equity == "true", title=title)
    try:
        rows = await repository.find_all(job_filter)
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=http_status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return JobListEnvelope(jobs=[JobListItemOut(**row) for row in rows])


@router.get("/{job_id}", response_model=JobDetailEnvelope)
async def get_job(job_id: int, repository=Depends(get_repository)) -> JobDetailEnvelope:
    try:
        row = await repository.get(job_id)
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=http_status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=http_status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return JobDetailEnvelope(job=JobDetailOut(**row))


@router.patch("/{job_id}", response_model=JobEnvelope)
async def patch_job(
    job_id: int,
    payload: JobUpdateRequest,
    principal=Depends(get_admin_principal),
    repository=Depends(get_repository),
) -> JobEnvelope:
    _require_write(principal)
    try:
        row = await repository.update(job_id, payload.model_dump(exclude_unset=True))
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=http_status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except InvalidUpdateError as exc:
        raise HTTPException(status_code=http_status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=http_status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return JobEnvelope(job=JobOut(**row))


@router.delete("/{job_id}", response_model=JobDeletedOut)
async def delete_job(
    job_id: int,
    principal=Depends(get_admin_principal),
    repository=Depends(get_repository),
) -> JobDeletedOut:
    _require_write(principal)
    try:
        await repository.remove(job_id)
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=http_status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=http_status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return JobDeletedOut(deleted=job_id)
