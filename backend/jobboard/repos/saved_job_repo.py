from sqlalchemy.orm import Session, joinedload

from jobboard.core.security import generate_id
from jobboard.models.job import Job
from jobboard.models.saved_job import SavedJob


def get_saved_jobs(db: Session, user_id: str) -> list[Job]:
    """Jobs the user saved, most recently saved first."""
    rows = (
        db.query(SavedJob)
        .options(joinedload(SavedJob.job))
        .filter(SavedJob.user_id == user_id)
        .order_by(SavedJob.saved_at.desc())
        .all()
    )
    return [r.job for r in rows if r.job]


def get_saved(db: Session, user_id: str, job_id: str) -> SavedJob | None:
    return db.query(SavedJob).filter(SavedJob.user_id == user_id, SavedJob.job_id == job_id).first()


def is_saved(db: Session, user_id: str, job_id: str) -> bool:
    return get_saved(db, user_id, job_id) is not None


def save(db: Session, user_id: str, job_id: str) -> SavedJob:
    saved = SavedJob(id=generate_id(), user_id=user_id, job_id=job_id)
    db.add(saved)
    db.commit()
    db.refresh(saved)
    return saved


def unsave(db: Session, user_id: str, job_id: str) -> bool:
    saved = get_saved(db, user_id, job_id)
    if not saved:
        return False
    db.delete(saved)
    db.commit()
    return True
