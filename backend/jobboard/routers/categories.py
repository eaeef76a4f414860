import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from jobboard.database import get_db
from jobboard.dependencies import get_current_admin
from jobboard.models.user import User
from jobboard.repos.category_repo import (
    create as create_category,
    delete as delete_category,
    get_all_paginated as get_categories_paginated,
    get_by_id as get_category_by_id,
    get_by_slug as get_category_by_slug,
    get_stats as get_category_stats,
    update as update_category,
)
from jobboard.repos.job_repo import count_by_category
from jobboard.schemas.category import CategoryCreate, CategoryDetail, CategoryResponse, CategoryUpdate

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/categories", tags=["categories"])


def _category_detail(db: Session, category) -> CategoryDetail:
    detail = CategoryDetail.model_validate(category)
    detail.active_jobs_count = count_by_category(db, category.id, status="active")
    return detail


@router.get("")
def list_categories(
    search: str | None = None,
    active_only: bool = False,
    page: int = 1,
    page_size: int = 10,
    db: Session = Depends(get_db),
):
    """List categories with optional name/description search."""
    page = max(1, page)
    page_size = min(max(1, page_size), 100)
    offset = (page - 1) * page_size
    categories, total = get_categories_paginated(
        db, search=search, active_only=active_only, limit=page_size, offset=offset
    )
    pages = (total + page_size - 1) // page_size
    return {
        "items": [CategoryResponse.model_validate(c) for c in categories],
        "total": total,
        "page": page,
        "pages": pages,
    }


@router.get("/stats")
def category_stats(db: Session = Depends(get_db)):
    """Cached job_count next to the live active-job count for every category."""
    return get_category_stats(db)


@router.get("/slug/{slug}", response_model=CategoryDetail)
def get_category_by_slug_route(slug: str, db: Session = Depends(get_db)):
    category = get_category_by_slug(db, slug)
    if not category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return _category_detail(db, category)


@router.get("/{category_id}", response_model=CategoryDetail)
def get_category(category_id: str, db: Session = Depends(get_db)):
    category = get_category_by_id(db, category_id)
    if not category:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Category not found")
    return _category_detail(db, category)


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category_route(
    body: CategoryCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_admin),
):
    """Create a category. Admin only. Duplicate names are rejected with 400."""
    category = create_category(db, body.name, body.description, body.icon)
    logger.info("Category %s created by %s", category.slug, user.email)
    return CategoryResponse.model_validate(category)


@router.put("/{category_id}", response_model=CategoryResponse)
def update_category_route(
    category_id: str,
    body: CategoryUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_admin),
):
    """Update a category. Renaming does not rewrite category_name on existing jobs."""
    category = update_category(
        db,
        category_id,
        name=body.name,
        description=body.description,
        icon=body.icon,
        is_active=body.is_active,
    )
    return CategoryResponse.model_validate(category)


@router.delete("/{category_id}")
def delete_category_route(
    category_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_admin),
):
    """Delete a category. Admin only. Refused while any job still references it."""
    delete_category(db, category_id)
    logger.info("Category %s deleted by %s", category_id, user.email)
    return {"message": "Category deleted"}
