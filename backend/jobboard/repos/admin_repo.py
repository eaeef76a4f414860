"""Admin-specific repository functions for stats and system data."""

from sqlalchemy import func
from sqlalchemy.orm import Session

from jobboard.models.application import Application
from jobboard.models.job import Job
from jobboard.models.job_category import JobCategory
from jobboard.models.saved_job import SavedJob
from jobboard.models.user import User


def get_stats(db: Session) -> dict:
    """Return admin dashboard stats."""
    user_count = db.query(func.count(User.id)).scalar() or 0
    employer_count = db.query(func.count(User.id)).filter(User.role == "employer").scalar() or 0
    job_count = db.query(func.count(Job.id)).scalar() or 0
    active_job_count = db.query(func.count(Job.id)).filter(Job.status == "active").scalar() or 0
    application_count = db.query(func.count(Application.id)).scalar() or 0
    saved_job_count = db.query(func.count(SavedJob.id)).scalar() or 0
    category_count = db.query(func.count(JobCategory.id)).scalar() or 0
    return {
        "users_total": user_count,
        "employers": employer_count,
        "jobs_total": job_count,
        "jobs_active": active_job_count,
        "applications": application_count,
        "saved_jobs": saved_job_count,
        "categories": category_count,
    }
