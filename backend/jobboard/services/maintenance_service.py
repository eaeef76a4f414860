"""One-shot maintenance routines: slug backfill and job-count reconcile."""
import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session

from jobboard.models.job import Job
from jobboard.models.job_category import JobCategory
from jobboard.repos.category_repo import slug_exists as category_slug_exists
from jobboard.services import category_counter
from jobboard.services.job_lifecycle import job_slug_exists
from jobboard.services.slug_service import generate_slug, with_taken

logger = logging.getLogger(__name__)


def backfill_job_slugs(db: Session) -> int:
    """
    Assign a unique slug to every job whose slug is NULL or empty.
    Returns number of rows written; 0 (and no commit) when every job already has one.
    """
    missing = db.query(Job).filter(or_(Job.slug.is_(None), Job.slug == "")).order_by(Job.created_at).all()
    if not missing:
        logger.info("Slug backfill: all jobs already have slugs")
        return 0
    # Slugs assigned earlier in this run are not flushed yet, so track them here.
    taken: set[str] = set()
    exists = with_taken(job_slug_exists(db), taken)
    for job in missing:
        job.slug = generate_slug(job.title, exists, job.id, fallback=job.id)
        taken.add(job.slug)
    db.commit()
    logger.info("Slug backfill: assigned slugs to %d jobs", len(missing))
    return len(missing)


def backfill_category_slugs(db: Session) -> int:
    missing = (
        db.query(JobCategory)
        .filter(or_(JobCategory.slug.is_(None), JobCategory.slug == ""))
        .order_by(JobCategory.name)
        .all()
    )
    if not missing:
        return 0
    taken: set[str] = set()
    exists = with_taken(category_slug_exists(db), taken)
    for category in missing:
        category.slug = generate_slug(category.name, exists, category.id, fallback=category.id)
        taken.add(category.slug)
    db.commit()
    logger.info("Slug backfill: assigned slugs to %d categories", len(missing))
    return len(missing)


def backfill_slugs(db: Session) -> dict:
    return {
        "categories": backfill_category_slugs(db),
        "jobs": backfill_job_slugs(db),
    }


def reconcile_job_counts(db: Session) -> dict:
    changed = category_counter.reconcile(db)
    return {
        "changed": len(changed),
        "categories": [
            {"id": category_id, "previous": old, "current": new}
            for category_id, (old, new) in sorted(changed.items())
        ],
    }
