import logging
from typing import Callable

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobboard.config import settings
from jobboard.core.exceptions import (
    CategoryInUseError,
    DuplicateNameError,
    NotFoundError,
    SlugGenerationError,
    ValidationError,
)
from jobboard.core.security import generate_id
from jobboard.models.job import Job
from jobboard.models.job_category import JobCategory
from jobboard.services.slug_service import generate_slug, is_slug_conflict, is_unique_conflict, with_taken

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    ("Software Development", "Jobs related to software development, programming, and engineering", "💻"),
    ("Design & Creative", "Jobs in UI/UX design, graphic design, and creative roles", "🎨"),
    ("DevOps & Cloud", "Jobs in DevOps, cloud computing, and infrastructure", "☁️"),
    ("Mobile Development", "Jobs in mobile app development and related technologies", "📱"),
    ("Data Science", "Jobs in data analysis, machine learning, and AI", "📊"),
    ("Product Management", "Jobs in product management and strategy", "📈"),
    ("Marketing", "Jobs in digital marketing, content creation, and SEO", "📢"),
    ("Sales", "Jobs in sales, business development, and account management", "💰"),
]


def slug_exists(db: Session):
    def _exists(candidate: str, exclude_id: str | None = None) -> bool:
        q = db.query(JobCategory.id).filter(JobCategory.slug == candidate)
        if exclude_id is not None:
            q = q.filter(JobCategory.id != exclude_id)
        return q.first() is not None

    return _exists


def name_taken(db: Session, name: str, exclude_id: str | None = None) -> bool:
    q = db.query(JobCategory.id).filter(JobCategory.name == name)
    if exclude_id is not None:
        q = q.filter(JobCategory.id != exclude_id)
    return q.first() is not None


def get_by_id(db: Session, category_id: str) -> JobCategory | None:
    return db.query(JobCategory).filter(JobCategory.id == category_id).first()


def get_by_slug(db: Session, slug: str) -> JobCategory | None:
    return db.query(JobCategory).filter(JobCategory.slug == slug).first()


def get_all(db: Session) -> list[JobCategory]:
    return db.query(JobCategory).order_by(JobCategory.name).all()


def get_all_paginated(
    db: Session,
    search: str | None = None,
    active_only: bool = False,
    limit: int = 10,
    offset: int = 0,
) -> tuple[list[JobCategory], int]:
    """List categories by name with optional name/description search. Returns (items, total)."""
    q = db.query(JobCategory).order_by(JobCategory.name)
    if search and search.strip():
        term = f"%{search.strip()}%"
        q = q.filter(or_(JobCategory.name.ilike(term), JobCategory.description.ilike(term)))
    if active_only:
        q = q.filter(JobCategory.is_active == True)
    total = q.count()
    items = q.offset(offset).limit(limit).all()
    return items, total


def get_stats(db: Session) -> list[dict]:
    """Per-category cached job_count alongside a live count of active jobs."""
    active_jobs = (
        db.query(Job.category_id, func.count(Job.id).label("active_jobs"))
        .filter(Job.status == "active")
        .group_by(Job.category_id)
        .subquery()
    )
    rows = (
        db.query(JobCategory, func.coalesce(active_jobs.c.active_jobs, 0))
        .outerjoin(active_jobs, active_jobs.c.category_id == JobCategory.id)
        .order_by(JobCategory.name)
        .all()
    )
    return [
        {
            "id": c.id,
            "name": c.name,
            "slug": c.slug,
            "description": c.description,
            "icon": c.icon,
            "job_count": c.job_count,
            "active_jobs": active,
        }
        for c, active in rows
    ]


def _write_with_slug(db: Session, build: Callable[[], JobCategory], exclude_id: str | None) -> JobCategory:
    """
    Assign a slug from the category name and commit, retrying on slug index conflicts.
    build() returns the category with pending changes applied; it is called again
    after each rollback because the rollback discards those changes.
    """
    taken: set[str] = set()
    for attempt in range(1, settings.slug_write_retries + 1):
        category = build()
        exists = with_taken(slug_exists(db), taken)
        category.slug = generate_slug(category.name, exists, exclude_id, fallback=category.id)
        candidate = category.slug
        db.add(category)
        try:
            db.flush()
        except IntegrityError as e:
            db.rollback()
            if is_slug_conflict(e):
                logger.warning("Category slug %r taken concurrently (attempt %d); retrying", candidate, attempt)
                taken.add(candidate)
                continue
            if is_unique_conflict(e, "name"):
                raise DuplicateNameError("A category with this name already exists") from e
            raise
        db.commit()
        db.refresh(category)
        return category
    raise SlugGenerationError(f"Could not write a unique category slug after {settings.slug_write_retries} attempts")


def create(
    db: Session,
    name: str,
    description: str,
    icon: str | None = None,
    is_active: bool = True,
) -> JobCategory:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Category name is required")
    if name_taken(db, name):
        raise DuplicateNameError("A category with this name already exists")
    category_id = generate_id()

    def _build() -> JobCategory:
        return JobCategory(
            id=category_id,
            name=name,
            description=description,
            icon=icon or "briefcase",
            is_active=is_active,
            job_count=0,
        )

    category = _write_with_slug(db, _build, exclude_id=None)
    logger.info("Category created: %s (%s)", category.name, category.slug)
    return category


def update(
    db: Session,
    category_id: str,
    *,
    name: str | None = None,
    description: str | None = None,
    icon: str | None = None,
    is_active: bool | None = None,
) -> JobCategory:
    """
    Update a category. A rename regenerates its slug but does not touch
    jobs' category_name, which stays a snapshot from each job's last write.
    """
    category = get_by_id(db, category_id)
    if not category:
        raise NotFoundError("Category not found")
    new_name = None
    if name is not None:
        new_name = name.strip()
        if not new_name:
            raise ValidationError("Category name is required")
    renamed = new_name is not None and new_name != category.name
    if renamed and name_taken(db, new_name, exclude_id=category_id):
        raise DuplicateNameError("A category with this name already exists")

    def _apply() -> JobCategory:
        target = get_by_id(db, category_id)
        if renamed:
            target.name = new_name
        if description is not None:
            target.description = description
        if icon is not None:
            target.icon = icon
        if is_active is not None:
            target.is_active = is_active
        return target

    if renamed:
        category = _write_with_slug(db, _apply, exclude_id=category_id)
        logger.info("Category %s renamed to %r (slug %s)", category_id, category.name, category.slug)
        return category
    category = _apply()
    db.commit()
    db.refresh(category)
    return category


def delete(db: Session, category_id: str) -> None:
    category = get_by_id(db, category_id)
    if not category:
        raise NotFoundError("Category not found")
    if db.query(Job.id).filter(Job.category_id == category_id).first() is not None:
        raise CategoryInUseError("Cannot delete category with existing jobs")
    db.delete(category)
    db.commit()
    logger.info("Category deleted: %s", category_id)


def seed_default_categories(db: Session) -> tuple[list[JobCategory], int]:
    """
    Seed default categories if table is empty.
    Returns (list of categories, number_created). number_created is 0 if table already had rows.
    """
    existing = get_all(db)
    if existing:
        return existing, 0
    created = []
    for name, description, icon in DEFAULT_CATEGORIES:
        created.append(create(db, name, description, icon))
    return created, len(created)
