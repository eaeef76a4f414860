from sqlalchemy.orm import Session

from jobboard.models.user import User
from jobboard.core.security import hash_password, generate_id

ROLES = ("user", "employer", "admin")


def get_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()


def get_by_id(db: Session, user_id: str) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def create(
    db: Session,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    role: str = "user",
    company_name: str | None = None,
) -> User:
    user = User(
        id=generate_id(),
        email=email,
        password_hash=hash_password(password),
        first_name=first_name,
        last_name=last_name,
        role=role,
        company_name=company_name,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update(
    db: Session,
    user_id: str,
    *,
    email: str | None = None,
    password_hash: str | None = None,
    first_name: str | None = None,
    last_name: str | None = None,
    company_name: str | None = None,
    role: str | None = None,
    is_active: bool | None = None,
) -> User | None:
    user = get_by_id(db, user_id)
    if not user:
        return None
    if email is not None:
        user.email = email
    if password_hash is not None:
        user.password_hash = password_hash
    if first_name is not None:
        user.first_name = first_name
    if last_name is not None:
        user.last_name = last_name
    if company_name is not None:
        user.company_name = company_name
    if role is not None:
        user.role = role
    if is_active is not None:
        user.is_active = is_active
    db.commit()
    db.refresh(user)
    return user


def get_all_users_paginated(
    db: Session,
    search: str | None = None,
    role: str | None = None,
    limit: int = 20,
    offset: int = 0,
) -> tuple[list[User], int]:
    """List users with optional email search and role filter. Returns (items, total)."""
    q = db.query(User).order_by(User.created_at.desc())
    if search and search.strip():
        term = f"%{search.strip()}%"
        q = q.filter(User.email.ilike(term))
    if role:
        q = q.filter(User.role == role)
    total = q.count()
    items = q.offset(offset).limit(limit).all()
    return items, total


def delete_user(db: Session, user_id: str) -> bool:
    """
    Delete user with their applications and saved jobs. Jobs they posted stay
    (employer_id is cleared) so category counts are unaffected.
    """
    user = get_by_id(db, user_id)
    if not user:
        return False
    db.delete(user)
    db.commit()
    return True
