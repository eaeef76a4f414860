"""
Denormalized JobCategory.job_count maintenance.

increment/decrement issue single-statement UPDATEs so concurrent writers cannot
lose updates; neither commits, the calling repo owns the transaction.
"""
import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from jobboard.models.job import Job
from jobboard.models.job_category import JobCategory

logger = logging.getLogger(__name__)


def increment(db: Session, category_id: str) -> bool:
    """job_count += 1. Returns False if the category does not exist."""
    updated = (
        db.query(JobCategory)
        .filter(JobCategory.id == category_id)
        .update({JobCategory.job_count: JobCategory.job_count + 1}, synchronize_session=False)
    )
    if not updated:
        logger.warning("job_count increment skipped: category %s not found", category_id)
        return False
    logger.debug("job_count incremented for category %s", category_id)
    return True


def decrement(db: Session, category_id: str) -> bool:
    """
    job_count = max(job_count - 1, 0).
    The job_count > 0 guard keeps the counter from going negative when a
    decrement has no matching increment (manual edits, bulk imports).
    """
    updated = (
        db.query(JobCategory)
        .filter(JobCategory.id == category_id, JobCategory.job_count > 0)
        .update({JobCategory.job_count: JobCategory.job_count - 1}, synchronize_session=False)
    )
    if not updated:
        logger.warning("job_count decrement skipped: category %s missing or already at 0", category_id)
        return False
    logger.debug("job_count decremented for category %s", category_id)
    return True


def move(db: Session, old_category_id: str | None, new_category_id: str | None) -> None:
    """Shift one job from old to new category. No-op when unchanged."""
    if old_category_id == new_category_id:
        return
    if old_category_id:
        decrement(db, old_category_id)
    if new_category_id:
        increment(db, new_category_id)


def count_jobs_by_category(db: Session) -> dict[str, int]:
    rows = db.query(Job.category_id, func.count(Job.id)).group_by(Job.category_id).all()
    return {category_id: count for category_id, count in rows if category_id}


def reconcile(db: Session) -> dict[str, tuple[int, int]]:
    """
    Recompute every category's job_count from the jobs table and fix drift.
    Returns {category_id: (old_count, new_count)} for the categories that changed.
    """
    actual = count_jobs_by_category(db)
    changed: dict[str, tuple[int, int]] = {}
    for category in db.query(JobCategory).populate_existing().all():
        expected = actual.get(category.id, 0)
        if category.job_count != expected:
            changed[category.id] = (category.job_count, expected)
            category.job_count = expected
    if changed:
        db.commit()
        logger.warning("Reconciled job_count drift for %d categories: %s", len(changed), changed)
    else:
        logger.info("Reconcile: all category job counts already consistent")
    return changed
