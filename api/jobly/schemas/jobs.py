from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class JobNewRequest(BaseModel):
    title: str = Field(min_length=1)
    salary: int | None = Field(default=None, ge=0)
    equity: Decimal | None = Field(default=None, ge=0, le=1)
    company_handle: str = Field(alias="companyHandle", min_length=1)

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class JobUpdateRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1)
    salary: int | None = Field(default=None, ge=0)
    equity: Decimal | None = Field(default=None, ge=0, le=1)

    model_config = ConfigDict(extra="forbid")

    @field_validator("title")
    @classmethod
    def _title_not_null(cls, value: str | None) -> str:
        # jobs.title is NOT NULL; salary and equity accept null.
        if value is None:
            raise ValueError("title cannot be null")
        return value


class JobOut(BaseModel):
    id: int
    title: str
    salary: int | None = None
    equity: Decimal | None = None
    company_handle: str = Field(alias="companyHandle")

    model_config = ConfigDict(populate_by_name=True)


class JobListItemOut(JobOut):
    company_name: str | None = Field(default=None, alias="companyName")


class CompanyOut(BaseModel):
    handle: str
    name: str
    description: str | None = None
    num_employees: int | None = Field(default=None, alias="numEmployees")
    logo_url: str | None = Field(default=None, alias="logoUrl")

    model_config = ConfigDict(populate_by_name=True)


class JobDetailOut(BaseModel):
    id: int
    title: str
    salary: int | None = None
    equity: Decimal | None = None
    company: CompanyOut | None = None


class JobEnvelope(BaseModel):
    job: JobOut


class JobDetailEnvelope(BaseModel):
    job: JobDetailOut


class JobListEnvelope(BaseModel):
    jobs: list[JobListItemOut]


class JobDeletedOut(BaseModel):
    deleted: int
