"""
Recompute job_categories.job_count from the jobs table.
Usage: python -m jobboard.scripts.reconcile_counts
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from jobboard.database import SessionLocal
from jobboard.logging_config import setup_logging
from jobboard.services.maintenance_service import reconcile_job_counts


def main():
    setup_logging()
    db = SessionLocal()
    try:
        result = reconcile_job_counts(db)
    finally:
        db.close()
    if not result["changed"]:
        print("All category job counts are already correct.")
        return
    for row in result["categories"]:
        print(f"  {row['id']}: {row['previous']} -> {row['current']}")
    print(f"Corrected {result['changed']} categories.")


if __name__ == "__main__":
    main()
