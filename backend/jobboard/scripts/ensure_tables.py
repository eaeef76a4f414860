"""
Create missing job board tables (jobs, job_categories, users, applications, saved_jobs).
Existing tables and rows are left alone; run backfill_slugs afterwards for legacy rows.

Usage: python -m jobboard.scripts.ensure_tables
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from jobboard.database import ensure_tables_exist
from jobboard.logging_config import setup_logging


def main():
    setup_logging()
    created = ensure_tables_exist()
    if created:
        print(f"Created tables: {', '.join(created)}")
    else:
        print("All tables already exist; nothing to create.")


if __name__ == "__main__":
    main()
