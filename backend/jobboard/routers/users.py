import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from jobboard.core.security import hash_password, verify_password
from jobboard.database import get_db
from jobboard.dependencies import get_current_admin, get_current_employer, get_current_user
from jobboard.models.user import User
from jobboard.repos.application_repo import get_for_user as get_applications_for_user
from jobboard.repos.job_repo import get_by_employer as get_jobs_by_employer
from jobboard.repos.user_repo import (
    ROLES,
    delete_user,
    get_all_users_paginated,
    get_by_email,
    get_by_id,
    update as update_user,
)
from jobboard.schemas.application import ApplicationResponse
from jobboard.schemas.auth import UserProfileUpdate, UserResponse
from jobboard.schemas.job import JobResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/users", tags=["users"])


@router.get("")
def list_users(
    search: str | None = None,
    role: str | None = None,
    page: int = 1,
    page_size: int = 20,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_admin),
):
    """List users with optional email search and role filter. Admin only."""
    if role and role not in ROLES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown role: {role}")
    page = max(1, page)
    page_size = min(max(1, page_size), 100)
    offset = (page - 1) * page_size
    users, total = get_all_users_paginated(db, search=search, role=role, limit=page_size, offset=offset)
    return {"items": [UserResponse.model_validate(u) for u in users], "total": total}


@router.get("/profile", response_model=UserResponse)
def get_profile(user: User = Depends(get_current_user)):
    return UserResponse.model_validate(user)


@router.patch("/profile", response_model=UserResponse)
def update_profile(
    data: UserProfileUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    email = data.email.lower() if data.email else None
    if email is not None and email != user.email:
        if get_by_email(db, email):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already in use",
            )
    password_hash = None
    if data.new_password is not None:
        if not verify_password(data.current_password, user.password_hash):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Current password is incorrect",
            )
        password_hash = hash_password(data.new_password)
    updated = update_user(
        db,
        user.id,
        email=email,
        password_hash=password_hash,
        first_name=data.first_name,
        last_name=data.last_name,
        company_name=data.company_name,
    )
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserResponse.model_validate(updated)


@router.delete("/profile")
def delete_profile(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Delete own account with its applications and saved jobs. Posted jobs are kept."""
    if not delete_user(db, user.id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    logger.info("Account deleted: %s", user.email)
    return {"message": "Account deleted"}


@router.get("/posted-jobs", response_model=list[JobResponse])
def posted_jobs(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_employer),
):
    return [JobResponse.model_validate(j) for j in get_jobs_by_employer(db, user.id)]


@router.get("/applications", response_model=list[ApplicationResponse])
def my_applications(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return [ApplicationResponse.model_validate(a) for a in get_applications_for_user(db, user.id)]


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    """Get one user by id. Admin only."""
    target = get_by_id(db, user_id)
    if not target:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserResponse.model_validate(target)
