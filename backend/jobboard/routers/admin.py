import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from jobboard.database import get_db, ensure_tables_exist
from jobboard.dependencies import get_current_admin
from jobboard.models.user import User
from jobboard.repos.admin_repo import get_stats
from jobboard.repos.category_repo import seed_default_categories
from jobboard.services.maintenance_service import backfill_slugs, reconcile_job_counts

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/stats")
def get_admin_stats(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_admin),
):
    """Return dashboard stats. Admin only."""
    try:
        return get_stats(db)
    except Exception as e:
        logger.exception("Admin stats failed for admin=%s: %s", user.email, e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to load admin stats") from e


@router.post("/seed-categories")
def seed_categories(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_admin),
):
    """Seed default job categories if table is empty. Admin only."""
    ensure_tables_exist()
    categories, created_count = seed_default_categories(db)
    if created_count:
        message = f"Created {created_count} default categories."
    else:
        message = f"Categories already exist ({len(categories)} categories)."
    return {"message": message, "categories": [{"slug": c.slug, "name": c.name} for c in categories]}


@router.post("/backfill-slugs")
def run_slug_backfill(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_admin),
):
    """Assign slugs to categories and jobs that have none. Safe to re-run."""
    written = backfill_slugs(db)
    logger.info("Admin %s ran slug backfill: %s", user.email, written)
    return {"updated": written}


@router.post("/reconcile-job-counts")
def run_job_count_reconcile(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_admin),
):
    """Recompute every category's job_count from the jobs table."""
    result = reconcile_job_counts(db)
    logger.info("Admin %s reconciled job counts: %d changed", user.email, result["changed"])
    return result
