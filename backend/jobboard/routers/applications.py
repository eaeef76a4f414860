import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from jobboard.database import get_db
from jobboard.dependencies import get_current_employer, get_current_user
from jobboard.models.user import User
from jobboard.repos.application_repo import (
    create as create_application,
    delete as delete_application,
    get_all as get_all_applications,
    get_by_id as get_application_by_id,
    get_existing as get_existing_application,
    get_for_job,
    get_for_user,
    get_user_cvs,
    update_status,
)
from jobboard.repos.job_repo import get_by_id as get_job_by_id
from jobboard.schemas.application import ApplicationCreate, ApplicationResponse, ApplicationStatusUpdate

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/applications", tags=["applications"])


def _is_admin(user: User) -> bool:
    return getattr(user, "role", None) == "admin"


def _owns_job(job, user: User) -> bool:
    return job is not None and (job.employer_id == user.id or _is_admin(user))


@router.get("", response_model=list[ApplicationResponse])
def list_applications(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_employer),
):
    """All applications for admins; applications to their own jobs for employers."""
    employer_id = None if _is_admin(user) else user.id
    return [ApplicationResponse.model_validate(a) for a in get_all_applications(db, employer_id=employer_id)]


@router.get("/my-applications", response_model=list[ApplicationResponse])
def my_applications(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return [ApplicationResponse.model_validate(a) for a in get_for_user(db, user.id)]


@router.get("/user-cvs")
def user_cvs(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Resumes the user already submitted, for reuse on new applications."""
    return get_user_cvs(db, user.id)


@router.get("/job/{job_id}", response_model=list[ApplicationResponse])
def applications_for_job(
    job_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_employer),
):
    job = get_job_by_id(db, job_id)
    if not job:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
    if not _owns_job(job, user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized to view these applications")
    return [ApplicationResponse.model_validate(a) for a in get_for_job(db, job_id)]


@router.post("/job/{job_id}", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
def apply_to_job(
    job_id: str,
    body: ApplicationCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Apply to an active job. One application per user per job."""
    job = get_job_by_id(db, job_id)
    if not job:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
    if job.status != "active":
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Job is not accepting applications")
    if get_existing_application(db, user.id, job_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You have already applied to this job")
    application = create_application(
        db,
        user.id,
        job_id,
        body.resume,
        resume_file_name=body.resume_file_name,
        resume_file_type=body.resume_file_type,
        cover_letter=body.cover_letter,
    )
    return ApplicationResponse.model_validate(application)


@router.put("/{application_id}/status", response_model=ApplicationResponse)
def set_application_status(
    application_id: str,
    body: ApplicationStatusUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_employer),
):
    application = get_application_by_id(db, application_id)
    if not application:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")
    if not _owns_job(application.job, user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized to update this application")
    updated = update_status(db, application_id, body.status, notes=body.notes)
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")
    logger.info("Application %s set to %s by %s", application_id, body.status, user.email)
    return ApplicationResponse.model_validate(updated)


@router.delete("/{application_id}")
def withdraw_application(
    application_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Delete an application. Allowed for the applicant or the job's employer."""
    application = get_application_by_id(db, application_id)
    if not application:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Application not found")
    if application.user_id != user.id and not _owns_job(application.job, user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized to delete this application")
    delete_application(db, application_id)
    return {"message": "Application deleted"}
