"""
Side effects of Job writes: slug, denormalized category name, category job counts.

before_* hooks run before the row is flushed and only touch the Job instance.
after_* hooks run after the flush, inside the same transaction, and adjust
category counters. The job repo is the only caller; writing jobs any other
way skips these and needs category_counter.reconcile afterwards.
"""
import logging

from sqlalchemy.orm import Session

from jobboard.models.job import Job
from jobboard.models.job_category import JobCategory
from jobboard.services import category_counter
from jobboard.services.slug_service import SlugExists, generate_slug, with_taken

logger = logging.getLogger(__name__)


def job_slug_exists(db: Session) -> SlugExists:
    def _exists(candidate: str, exclude_id: str | None = None) -> bool:
        q = db.query(Job.id).filter(Job.slug == candidate)
        if exclude_id is not None:
            q = q.filter(Job.id != exclude_id)
        return q.first() is not None

    return _exists


def _assign_slug(db: Session, job: Job, exclude_id: str | None, taken: set[str] | None) -> None:
    exists = job_slug_exists(db)
    if taken:
        exists = with_taken(exists, taken)
    job.slug = generate_slug(job.title, exists, exclude_id, fallback=job.id)


def _copy_category_name(db: Session, job: Job) -> None:
    category = db.query(JobCategory).filter(JobCategory.id == job.category_id).first() if job.category_id else None
    if category is None:
        # Callers validate category_id up front; nothing to copy here.
        logger.warning("Job %s references missing category %s; category_name left as is", job.id, job.category_id)
        return
    job.category_name = category.name


def before_create(db: Session, job: Job, taken: set[str] | None = None) -> None:
    _assign_slug(db, job, exclude_id=None, taken=taken)
    _copy_category_name(db, job)


def before_update(
    db: Session,
    job: Job,
    previous_title: str | None,
    previous_category_id: str | None,
    taken: set[str] | None = None,
) -> None:
    if job.title != previous_title:
        _assign_slug(db, job, exclude_id=job.id, taken=taken)
    if job.category_id != previous_category_id:
        _copy_category_name(db, job)


def after_create(db: Session, job: Job) -> None:
    if job.category_id:
        category_counter.increment(db, job.category_id)


def after_update(db: Session, job: Job, previous_category_id: str | None) -> None:
    if job.category_id != previous_category_id:
        logger.info("Job %s moved from category %s to %s", job.id, previous_category_id, job.category_id)
        category_counter.move(db, previous_category_id, job.category_id)


def after_delete(db: Session, category_id: str | None) -> None:
    if category_id:
        category_counter.decrement(db, category_id)
