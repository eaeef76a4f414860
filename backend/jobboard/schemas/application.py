from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from jobboard.schemas.job import JobSummary

ApplicationStatus = Literal["pending", "reviewed", "shortlisted", "rejected", "accepted"]


class ApplicationCreate(BaseModel):
    resume: str = Field(min_length=1, max_length=2000)
    resume_file_name: str | None = None
    resume_file_type: str | None = None
    cover_letter: str | None = Field(default=None, max_length=20000)


class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus
    notes: str | None = None


class ApplicantSummary(BaseModel):
    id: str
    first_name: str
    last_name: str
    email: str

    class Config:
        from_attributes = True


class ApplicationResponse(BaseModel):
    id: str
    user_id: str
    job_id: str
    resume: str
    resume_file_name: str | None = None
    resume_file_type: str | None = None
    cover_letter: str | None = None
    status: str
    applied_at: datetime | None = None
    reviewed_at: datetime | None = None
    notes: str | None = None
    job: JobSummary | None = None
    applicant: ApplicantSummary | None = None

    class Config:
        from_attributes = True
