from jobboard.models.job import Job
from jobboard.models.job_category import JobCategory
from jobboard.services import maintenance_service


def _clear_slugs(db):
    db.query(Job).update({Job.slug: None})
    db.query(JobCategory).update({JobCategory.slug: None})
    db.commit()


def test_backfill_assigns_unique_slugs(db, make_category, make_job):
    cat = make_category("Design")
    a = make_job(cat, title="Product Designer")
    b = make_job(cat, title="Product Designer")
    _clear_slugs(db)

    assert maintenance_service.backfill_slugs(db) == {"categories": 1, "jobs": 2}
    db.expire_all()
    slugs = {db.get(Job, a.id).slug, db.get(Job, b.id).slug}
    assert slugs == {"product-designer", "product-designer-2"}
    assert db.get(JobCategory, cat.id).slug == "design"


def test_backfill_keeps_existing_slugs(db, make_category, make_job):
    cat = make_category()
    kept = make_job(cat, title="Backend Engineer")
    legacy = make_job(cat, title="Backend Engineer", status="closed")
    db.query(Job).filter(Job.id == legacy.id).update({Job.slug: ""})
    db.commit()

    assert maintenance_service.backfill_job_slugs(db) == 1
    db.expire_all()
    assert db.get(Job, kept.id).slug == "backend-engineer"
    assert db.get(Job, legacy.id).slug == "backend-engineer-2"


def test_backfill_rerun_writes_nothing(db, make_category, make_job, monkeypatch):
    make_job(make_category())
    commits = []
    monkeypatch.setattr(db, "commit", lambda: commits.append(1))
    assert maintenance_service.backfill_slugs(db) == {"categories": 0, "jobs": 0}
    assert commits == []


def test_reconcile_job_counts_report(db, make_category, make_job):
    cat = make_category()
    make_job(cat)
    db.query(JobCategory).update({JobCategory.job_count: 5})
    db.commit()

    result = maintenance_service.reconcile_job_counts(db)
    assert result == {"changed": 1, "categories": [{"id": cat.id, "previous": 5, "current": 1}]}
    assert maintenance_service.reconcile_job_counts(db) == {"changed": 0, "categories": []}
