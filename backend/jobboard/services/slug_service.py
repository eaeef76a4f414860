"""
URL slug generation for jobs and categories.

Slugs are derived from a display name and made unique by probing numbered
suffixes (``base``, ``base-2``, ``base-3``, ...) against a caller-supplied
existence check. The check is not atomic with the write that follows, so
callers also keep a unique index on the slug column and retry on conflict
(see ``is_slug_conflict``).
"""
import logging
import re
import unicodedata
from typing import Callable

from sqlalchemy.exc import IntegrityError

from jobboard.config import settings
from jobboard.core.exceptions import SlugGenerationError

logger = logging.getLogger(__name__)

# exists(candidate, exclude_id) -> True if another row already uses candidate
SlugExists = Callable[[str, str | None], bool]

DEFAULT_FALLBACK = "item"
FIRST_SUFFIX = 2

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(text: str | None) -> str:
    """
    Lowercase, ASCII-fold, collapse non-alphanumeric runs to a single hyphen and trim hyphens.
    E.g. "Senior C++ Developer (Remote)" -> "senior-c-developer-remote"
    """
    if not text:
        return ""
    folded = unicodedata.normalize("NFKD", str(text)).encode("ascii", "ignore").decode("ascii")
    return _NON_ALNUM.sub("-", folded.strip().lower()).strip("-")


def generate_slug(
    name: str | None,
    exists: SlugExists,
    exclude_id: str | None = None,
    *,
    fallback: str | None = None,
    max_attempts: int | None = None,
) -> str:
    """
    Return the first free slug for name: the bare base, then base-2, base-3, ...

    exclude_id is passed through to exists so an update does not collide with its own row.
    When name has no alphanumerics, the base comes from fallback (usually the entity id).
    Raises SlugGenerationError after max_attempts probes.
    """
    base = slugify(name)
    if not base:
        base = slugify(fallback) or DEFAULT_FALLBACK
        logger.warning("Name %r has no slug characters; using fallback base %r", name, base)

    if not exists(base, exclude_id):
        return base

    limit = max_attempts or settings.slug_max_attempts
    for suffix in range(FIRST_SUFFIX, limit + 1):
        candidate = f"{base}-{suffix}"
        if not exists(candidate, exclude_id):
            return candidate

    logger.error("Slug probe limit (%d) exhausted for base %r", limit, base)
    raise SlugGenerationError(f"Could not find a free slug for {base!r} within {limit} attempts")


def with_taken(exists: SlugExists, taken: set[str]) -> SlugExists:
    """Wrap exists so candidates that already lost a write race are treated as used."""

    def _exists(candidate: str, exclude_id: str | None = None) -> bool:
        return candidate in taken or exists(candidate, exclude_id)

    return _exists


def _constraint_name(exc: IntegrityError) -> str | None:
    diag = getattr(getattr(exc, "orig", None), "diag", None)
    return getattr(diag, "constraint_name", None)


def is_unique_conflict(exc: IntegrityError, column: str) -> bool:
    """
    True if an IntegrityError came from the unique index or constraint on column.

    psycopg2 exposes the constraint name on diag. Otherwise only the first line of
    the driver message is read: PostgreSQL appends the offending row values in a
    DETAIL line, and those must not be matched.
    """
    constraint = _constraint_name(exc)
    if constraint:
        return constraint.endswith((f"_{column}", f"_{column}_key"))
    lines = str(getattr(exc, "orig", exc)).lower().splitlines()
    first = lines[0] if lines else ""
    # SQLite: "UNIQUE constraint failed: jobs.slug"; PostgreSQL: '... constraint "ix_jobs_slug"'
    return f".{column}" in first or f'_{column}"' in first or f'_{column}_key"' in first


def is_slug_conflict(exc: IntegrityError) -> bool:
    return is_unique_conflict(exc, "slug")
