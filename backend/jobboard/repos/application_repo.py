import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session, joinedload

from jobboard.core.security import generate_id
from jobboard.models.application import Application
from jobboard.models.job import Job

logger = logging.getLogger(__name__)


def get_by_id(db: Session, application_id: str) -> Application | None:
    return (
        db.query(Application)
        .options(joinedload(Application.job), joinedload(Application.applicant))
        .filter(Application.id == application_id)
        .first()
    )


def get_existing(db: Session, user_id: str, job_id: str) -> Application | None:
    return (
        db.query(Application)
        .filter(Application.user_id == user_id, Application.job_id == job_id)
        .first()
    )


def get_all(db: Session, employer_id: str | None = None) -> list[Application]:
    """All applications newest first; restricted to one employer's jobs when employer_id is given."""
    q = (
        db.query(Application)
        .options(joinedload(Application.job), joinedload(Application.applicant))
        .order_by(Application.applied_at.desc())
    )
    if employer_id:
        q = q.join(Job, Job.id == Application.job_id).filter(Job.employer_id == employer_id)
    return q.all()


def get_for_user(db: Session, user_id: str) -> list[Application]:
    return (
        db.query(Application)
        .options(joinedload(Application.job))
        .filter(Application.user_id == user_id)
        .order_by(Application.applied_at.desc())
        .all()
    )


def get_for_job(db: Session, job_id: str) -> list[Application]:
    return (
        db.query(Application)
        .options(joinedload(Application.applicant))
        .filter(Application.job_id == job_id)
        .order_by(Application.applied_at.desc())
        .all()
    )


def get_user_cvs(db: Session, user_id: str) -> list[dict]:
    """Distinct resumes a user has submitted, most recent first."""
    seen: set[str] = set()
    cvs = []
    for app in get_for_user(db, user_id):
        if app.resume in seen:
            continue
        seen.add(app.resume)
        cvs.append(
            {
                "url": app.resume,
                "name": app.resume_file_name or "CV_Document.pdf",
                "type": app.resume_file_type or "application/pdf",
                "uploaded_at": app.applied_at.isoformat() if app.applied_at else None,
            }
        )
    return cvs


def create(
    db: Session,
    user_id: str,
    job_id: str,
    resume: str,
    resume_file_name: str | None = None,
    resume_file_type: str | None = None,
    cover_letter: str | None = None,
) -> Application:
    application = Application(
        id=generate_id(),
        user_id=user_id,
        job_id=job_id,
        resume=resume,
        resume_file_name=resume_file_name,
        resume_file_type=resume_file_type,
        cover_letter=cover_letter,
        status="pending",
    )
    db.add(application)
    db.commit()
    db.refresh(application)
    logger.info("Application created: user=%s job=%s", user_id, job_id)
    return application


def update_status(db: Session, application_id: str, status: str, notes: str | None = None) -> Application | None:
    application = get_by_id(db, application_id)
    if not application:
        return None
    application.status = status
    if status != "pending":
        application.reviewed_at = datetime.now(timezone.utc)
    if notes is not None:
        application.notes = notes
    db.commit()
    db.refresh(application)
    return application


def delete(db: Session, application_id: str) -> bool:
    application = db.query(Application).filter(Application.id == application_id).first()
    if not application:
        return False
    db.delete(application)
    db.commit()
    return True
