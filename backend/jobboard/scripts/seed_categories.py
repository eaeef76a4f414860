"""
Insert the default job categories when the table is empty.
Usage: python -m jobboard.scripts.seed_categories
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from jobboard.database import SessionLocal, ensure_tables_exist
from jobboard.logging_config import setup_logging
from jobboard.repos.category_repo import seed_default_categories


def main():
    setup_logging()
    ensure_tables_exist()
    db = SessionLocal()
    try:
        categories, created = seed_default_categories(db)
        if created:
            print(f"Created {created} default categories.")
        else:
            print(f"Categories already exist ({len(categories)}); nothing seeded.")
        for c in categories:
            print(f"  {c.slug:<24} {c.name}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
