"""
Assign slugs to categories and jobs created before slugs existed.
Re-running is a no-op once every row has a slug.
Usage: python -m jobboard.scripts.backfill_slugs
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from jobboard.database import SessionLocal, ensure_tables_exist
from jobboard.logging_config import setup_logging
from jobboard.services.maintenance_service import backfill_slugs


def main():
    setup_logging()
    ensure_tables_exist()
    db = SessionLocal()
    try:
        written = backfill_slugs(db)
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
    print(f"Backfilled slugs: {written['categories']} categories, {written['jobs']} jobs.")


if __name__ == "__main__":
    main()
