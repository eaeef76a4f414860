import logging

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobboard.config import settings
from jobboard.core.exceptions import SlugGenerationError, ValidationError
from jobboard.core.security import generate_id
from jobboard.models.application import Application
from jobboard.models.job import Job
from jobboard.models.job_category import JobCategory
from jobboard.models.saved_job import SavedJob
from jobboard.services import job_lifecycle
from jobboard.services.slug_service import is_slug_conflict

logger = logging.getLogger(__name__)

# Columns callers may set; slug, category_name and views are managed here.
WRITABLE_FIELDS = (
    "title",
    "description",
    "company",
    "location",
    "country",
    "salary",
    "type",
    "category_id",
    "experience",
    "requirements",
    "responsibilities",
    "benefits",
    "tags",
    "logo",
    "company_description",
    "company_size",
    "status",
    "featured",
    "deadline",
)

REQUIRED_TEXT_FIELDS = ("title", "company", "location", "country")


def _strip_required(values: dict) -> dict:
    """Strip required text fields in place; a blank one raises ValidationError."""
    for key in REQUIRED_TEXT_FIELDS:
        if key in values and isinstance(values[key], str):
            values[key] = values[key].strip()
            if not values[key]:
                raise ValidationError(f"{key} must not be blank")
    return values


def require_category(db: Session, category_id: str | None) -> JobCategory:
    """Raise ValidationError unless category_id references an existing category."""
    if not category_id:
        raise ValidationError("category_id is required")
    category = db.query(JobCategory).filter(JobCategory.id == category_id).first()
    if not category:
        raise ValidationError(f"Invalid category_id: {category_id}")
    return category


def get_by_id(db: Session, job_id: str) -> Job | None:
    return db.query(Job).filter(Job.id == job_id).first()


def get_by_slug(db: Session, slug: str) -> Job | None:
    return db.query(Job).filter(Job.slug == slug).first()


def get_all_paginated(
    db: Session,
    search: str | None = None,
    location: str | None = None,
    job_type: str | None = None,
    category_id: str | None = None,
    status: str | None = None,
    limit: int = 20,
    offset: int = 0,
) -> tuple[list[Job], int]:
    """List jobs newest first with optional filters. Returns (items, total)."""
    q = db.query(Job).order_by(Job.created_at.desc())
    if search and search.strip():
        term = f"%{search.strip()}%"
        q = q.filter(
            or_(
                Job.title.ilike(term),
                Job.description.ilike(term),
                Job.company.ilike(term),
            )
        )
    if location and location.strip():
        q = q.filter(Job.location.ilike(f"%{location.strip()}%"))
    if job_type:
        q = q.filter(Job.type == job_type)
    if category_id:
        q = q.filter(Job.category_id == category_id)
    if status:
        q = q.filter(Job.status == status)
    total = q.count()
    items = q.offset(offset).limit(limit).all()
    return items, total


def get_by_employer(db: Session, employer_id: str) -> list[Job]:
    return db.query(Job).filter(Job.employer_id == employer_id).order_by(Job.created_at.desc()).all()


def count_by_category(db: Session, category_id: str, status: str | None = None) -> int:
    q = db.query(Job).filter(Job.category_id == category_id)
    if status:
        q = q.filter(Job.status == status)
    return q.count()


def create_one(db: Session, *, employer_id: str | None, **fields) -> Job:
    """
    Insert a job, assign its slug and category_name, and bump its category's job_count.
    A slug unique-index conflict (a concurrent insert won the race) is rolled back
    and retried with the losing candidate marked taken.
    """
    values = {k: v for k, v in fields.items() if k in WRITABLE_FIELDS}
    _strip_required(values)
    taken: set[str] = set()
    for attempt in range(1, settings.slug_write_retries + 1):
        job = Job(id=generate_id(), employer_id=employer_id, **values)
        job_lifecycle.before_create(db, job, taken=taken)
        candidate = job.slug
        db.add(job)
        try:
            db.flush()
        except IntegrityError as e:
            db.rollback()
            if not is_slug_conflict(e):
                raise
            logger.warning("Slug %r taken concurrently (attempt %d); retrying", candidate, attempt)
            taken.add(candidate)
            continue
        job_lifecycle.after_create(db, job)
        db.commit()
        db.refresh(job)
        logger.info("Job created: id=%s slug=%s category=%s", job.id, job.slug, job.category_id)
        return job
    raise SlugGenerationError(f"Could not write a unique slug for {fields.get('title')!r}")


def update_one(db: Session, job_id: str, **fields) -> Job | None:
    """
    Apply non-None fields to a job. Title changes regenerate the slug (excluding
    the job's own row); category changes re-copy category_name and move one count
    from the old category to the new one.
    """
    values = {k: v for k, v in fields.items() if k in WRITABLE_FIELDS and v is not None}
    _strip_required(values)
    taken: set[str] = set()
    for attempt in range(1, settings.slug_write_retries + 1):
        job = get_by_id(db, job_id)
        if not job:
            return None
        previous_title = job.title
        previous_category_id = job.category_id
        for key, value in values.items():
            setattr(job, key, value)
        job_lifecycle.before_update(db, job, previous_title, previous_category_id, taken=taken)
        candidate = job.slug
        try:
            db.flush()
        except IntegrityError as e:
            db.rollback()
            if not is_slug_conflict(e):
                raise
            logger.warning("Slug %r taken concurrently on update (attempt %d); retrying", candidate, attempt)
            taken.add(candidate)
            continue
        job_lifecycle.after_update(db, job, previous_category_id)
        db.commit()
        db.refresh(job)
        return job
    raise SlugGenerationError(f"Could not write a unique slug for job {job_id}")


def delete_one(db: Session, job_id: str) -> bool:
    job = get_by_id(db, job_id)
    if not job:
        return False
    category_id = job.category_id
    # Remove dependents explicitly so this works without DB-level ON DELETE CASCADE (e.g. SQLite).
    db.query(Application).filter(Application.job_id == job_id).delete(synchronize_session=False)
    db.query(SavedJob).filter(SavedJob.job_id == job_id).delete(synchronize_session=False)
    db.delete(job)
    db.flush()
    job_lifecycle.after_delete(db, category_id)
    db.commit()
    logger.info("Job deleted: id=%s category=%s", job_id, category_id)
    return True


def increment_views(db: Session, job: Job) -> Job:
    db.query(Job).filter(Job.id == job.id).update({Job.views: Job.views + 1}, synchronize_session=False)
    db.commit()
    db.refresh(job)
    return job
