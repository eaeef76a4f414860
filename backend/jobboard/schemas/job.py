from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

JobType = Literal["full-time", "part-time", "contract", "internship"]
JobStatus = Literal["active", "closed", "draft"]


class JobCreate(BaseModel):
    """Client-writable job fields. slug, category_name and views are derived server-side."""

    title: str = Field(min_length=1, max_length=300)
    description: str = Field(min_length=1)
    company: str = Field(min_length=1, max_length=300)
    location: str = Field(min_length=1, max_length=300)
    country: str = Field(min_length=1, max_length=120)
    type: JobType
    category_id: str
    salary: str | None = None
    experience: str | None = None
    requirements: list[str] = Field(default_factory=list)
    responsibilities: list[str] = Field(default_factory=list)
    benefits: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    logo: str | None = None
    company_description: str | None = None
    company_size: str | None = None
    status: JobStatus = "active"
    featured: bool = False
    deadline: datetime | None = None

    @field_validator("title", "company", "location", "country")
    @classmethod
    def strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class JobUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=300)
    description: str | None = None
    company: str | None = None
    location: str | None = None
    country: str | None = None
    type: JobType | None = None
    category_id: str | None = None
    salary: str | None = None
    experience: str | None = None
    requirements: list[str] | None = None
    responsibilities: list[str] | None = None
    benefits: list[str] | None = None
    tags: list[str] | None = None
    logo: str | None = None
    company_description: str | None = None
    company_size: str | None = None
    status: JobStatus | None = None
    featured: bool | None = None
    deadline: datetime | None = None

    @field_validator("title", "company", "location", "country")
    @classmethod
    def strip_required(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class JobResponse(BaseModel):
    id: str
    slug: str | None
    title: str
    description: str
    company: str
    location: str
    country: str
    type: str
    category_id: str
    category_name: str | None = None
    employer_id: str | None = None
    salary: str | None = None
    experience: str | None = None
    requirements: list[str] | None = None
    responsibilities: list[str] | None = None
    benefits: list[str] | None = None
    tags: list[str] | None = None
    logo: str | None = None
    company_description: str | None = None
    company_size: str | None = None
    status: str | None = None
    featured: bool | None = None
    posted_date: datetime | None = None
    deadline: datetime | None = None
    views: int | None = 0
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class JobSummary(BaseModel):
    id: str
    slug: str | None
    title: str
    company: str
    location: str

    class Config:
        from_attributes = True
