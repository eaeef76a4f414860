import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from jobboard.database import get_db
from jobboard.dependencies import get_current_employer
from jobboard.models.user import User
from jobboard.repos.job_repo import (
    create_one as create_job,
    delete_one as delete_job,
    get_all_paginated as get_jobs_paginated,
    get_by_id as get_job_by_id,
    get_by_slug as get_job_by_slug,
    increment_views,
    require_category,
    update_one as update_job,
)
from jobboard.schemas.job import JobCreate, JobResponse, JobUpdate

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/jobs", tags=["jobs"])


def _job_to_response(job) -> JobResponse:
    return JobResponse.model_validate(job)


def _ensure_owner(job, user: User) -> None:
    if job.employer_id != user.id and getattr(user, "role", None) != "admin":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized to modify this job")


@router.get("")
def list_jobs(
    search: str | None = None,
    location: str | None = None,
    job_type: str | None = Query(default=None, alias="type"),
    category_id: str | None = None,
    status: str | None = None,
    page: int = 1,
    page_size: int = 10,
    db: Session = Depends(get_db),
):
    """Public job search with optional filters and pagination."""
    page = max(1, page)
    page_size = min(max(1, page_size), 100)
    offset = (page - 1) * page_size
    jobs, total = get_jobs_paginated(
        db,
        search=search,
        location=location,
        job_type=job_type,
        category_id=category_id,
        status=status,
        limit=page_size,
        offset=offset,
    )
    return {"items": [_job_to_response(j) for j in jobs], "total": total, "page": page, "page_size": page_size}


@router.get("/slug/{slug}", response_model=JobResponse)
def get_job_by_slug_route(slug: str, db: Session = Depends(get_db)):
    job = get_job_by_slug(db, slug)
    if not job:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
    return _job_to_response(increment_views(db, job))


@router.get("/{job_id}", response_model=JobResponse)
def get_job(job_id: str, db: Session = Depends(get_db)):
    """Get one job. Each fetch counts as a view."""
    job = get_job_by_id(db, job_id)
    if not job:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
    return _job_to_response(increment_views(db, job))


@router.post("", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
def create_job_route(
    body: JobCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_employer),
):
    """Post a job. Employers and admins only; category_id must reference an existing category."""
    require_category(db, body.category_id)
    job = create_job(db, employer_id=user.id, **body.model_dump())
    logger.info("Job %s posted by %s", job.id, user.email)
    return _job_to_response(job)


@router.patch("/{job_id}", response_model=JobResponse)
def update_job_route(
    job_id: str,
    body: JobUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_employer),
):
    """Update a job. Only the posting employer or an admin."""
    job = get_job_by_id(db, job_id)
    if not job:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
    _ensure_owner(job, user)
    changes = body.model_dump(exclude_unset=True)
    if "category_id" in changes:
        require_category(db, changes["category_id"])
    updated = update_job(db, job_id, **changes)
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
    return _job_to_response(updated)


@router.delete("/{job_id}")
def delete_job_route(
    job_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_employer),
):
    """Delete a job. Only the posting employer or an admin."""
    job = get_job_by_id(db, job_id)
    if not job:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
    _ensure_owner(job, user)
    if not delete_job(db, job_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
    return {"message": "Job deleted"}
