from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from jobboard.database import get_db
from jobboard.dependencies import get_current_user
from jobboard.models.user import User
from jobboard.repos.job_repo import get_by_id as get_job_by_id
from jobboard.repos.saved_job_repo import get_saved_jobs, is_saved, save, unsave
from jobboard.schemas.job import JobResponse

router = APIRouter(prefix="/saved-jobs", tags=["saved-jobs"])


@router.get("", response_model=list[JobResponse])
def list_saved_jobs(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return [JobResponse.model_validate(j) for j in get_saved_jobs(db, user.id)]


@router.post("/{job_id}", status_code=status.HTTP_201_CREATED)
def save_job(
    job_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if not get_job_by_id(db, job_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")
    if is_saved(db, user.id, job_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Job is already saved")
    save(db, user.id, job_id)
    return {"message": "Job saved"}


@router.delete("/{job_id}")
def unsave_job(
    job_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if not unsave(db, user.id, job_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Saved job not found")
    return {"message": "Job removed from saved jobs"}


@router.get("/{job_id}/check")
def check_saved_job(
    job_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return {"is_saved": is_saved(db, user.id, job_id)}
