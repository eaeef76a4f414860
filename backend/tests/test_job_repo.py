import pytest

from jobboard.core.exceptions import SlugGenerationError, ValidationError
from jobboard.models.job import Job
from jobboard.repos import application_repo, category_repo, job_repo, saved_job_repo, user_repo
from jobboard.services import job_lifecycle


def test_create_assigns_slug_and_category_name(db, make_category, make_job):
    cat = make_category("Software Development")
    job = make_job(cat, title="Senior Backend Engineer")
    assert job.slug == "senior-backend-engineer"
    assert job.category_name == "Software Development"
    assert job.views == 0


def test_duplicate_titles_get_numbered_slugs(db, make_category, make_job):
    cat = make_category()
    slugs = [make_job(cat, title="Backend Engineer").slug for _ in range(3)]
    assert slugs == ["backend-engineer", "backend-engineer-2", "backend-engineer-3"]


def test_title_without_slug_characters_falls_back_to_id(db, make_category, make_job):
    cat = make_category()
    job = make_job(cat, title="???")
    assert job.slug == job.id


def test_update_same_title_keeps_own_slug(db, make_category, make_job):
    cat = make_category()
    job = make_job(cat, title="Backend Engineer")
    updated = job_repo.update_one(db, job.id, title="Backend Engineer!")
    assert updated.slug == "backend-engineer"


def test_update_title_regenerates_slug(db, make_category, make_job):
    cat = make_category()
    make_job(cat, title="Platform Engineer")
    job = make_job(cat, title="Backend Engineer")
    updated = job_repo.update_one(db, job.id, title="Platform Engineer")
    assert updated.slug == "platform-engineer-2"


def test_update_without_title_change_leaves_slug(db, make_category, make_job):
    cat = make_category()
    job = make_job(cat, title="Backend Engineer")
    db.query(Job).filter(Job.id == job.id).update({Job.slug: "custom-slug"})
    db.commit()
    updated = job_repo.update_one(db, job.id, salary="100k")
    assert updated.slug == "custom-slug"
    assert updated.salary == "100k"


def test_update_ignores_none_and_unknown_fields(db, make_category, make_job):
    cat = make_category()
    job = make_job(cat, title="Backend Engineer", salary="90k")
    updated = job_repo.update_one(db, job.id, salary=None, views=1000, slug="hijack")
    assert updated.salary == "90k"
    assert updated.views == 0
    assert updated.slug == "backend-engineer"


def test_update_missing_job_returns_none(db):
    assert job_repo.update_one(db, "missing", title="x") is None


def test_category_name_is_snapshot_until_job_category_changes(db, make_category, make_job):
    eng = make_category("Engineering")
    design = make_category("Design")
    job = make_job(eng)

    category_repo.update(db, eng.id, name="Software Engineering")
    db.expire_all()
    assert job_repo.get_by_id(db, job.id).category_name == "Engineering"

    # unrelated edit does not refresh the copy
    job_repo.update_one(db, job.id, salary="120k")
    assert job_repo.get_by_id(db, job.id).category_name == "Engineering"

    job_repo.update_one(db, job.id, category_id=design.id)
    job_repo.update_one(db, job.id, category_id=eng.id)
    assert job_repo.get_by_id(db, job.id).category_name == "Software Engineering"


def test_concurrent_slug_conflict_is_retried(db, make_category, make_job, monkeypatch):
    cat = make_category()
    make_job(cat, title="Backend Engineer")

    # Simulate a racing writer: the existence check misses the committed row.
    monkeypatch.setattr(job_lifecycle, "job_slug_exists", lambda db: (lambda candidate, exclude_id=None: False))
    job = make_job(cat, title="Backend Engineer")
    assert job.slug == "backend-engineer-2"
    db.expire_all()
    assert category_repo.get_by_id(db, cat.id).job_count == 2


def test_slug_conflict_retries_are_bounded(db, make_category, make_job, monkeypatch):
    cat = make_category()
    make_job(cat, title="Backend Engineer")
    monkeypatch.setattr(job_repo.settings, "slug_write_retries", 1)
    monkeypatch.setattr(job_lifecycle, "job_slug_exists", lambda db: (lambda candidate, exclude_id=None: False))
    with pytest.raises(SlugGenerationError):
        make_job(cat, title="Backend Engineer")
    db.expire_all()
    assert category_repo.get_by_id(db, cat.id).job_count == 1


def test_require_category(db, make_category):
    cat = make_category()
    assert job_repo.require_category(db, cat.id).id == cat.id
    with pytest.raises(ValidationError):
        job_repo.require_category(db, "missing")
    with pytest.raises(ValidationError):
        job_repo.require_category(db, None)


def test_paginated_filters(db, make_category, make_job):
    eng = make_category("Engineering")
    design = make_category("Design")
    make_job(eng, title="Backend Engineer", location="Berlin")
    make_job(eng, title="Frontend Engineer", type="contract")
    make_job(design, title="Product Designer", status="closed")

    items, total = job_repo.get_all_paginated(db, search="engineer")
    assert total == 2
    _, total = job_repo.get_all_paginated(db, location="berl")
    assert total == 1
    items, total = job_repo.get_all_paginated(db, job_type="contract")
    assert [j.title for j in items] == ["Frontend Engineer"]
    _, total = job_repo.get_all_paginated(db, category_id=design.id, status="active")
    assert total == 0
    items, total = job_repo.get_all_paginated(db, limit=2, offset=0)
    assert total == 3 and len(items) == 2
    assert job_repo.count_by_category(db, eng.id) == 2
    assert job_repo.count_by_category(db, design.id, status="active") == 0


def test_increment_views(db, make_category, make_job):
    job = make_job(make_category())
    job_repo.increment_views(db, job)
    job = job_repo.increment_views(db, job)
    assert job.views == 2


def test_delete_removes_dependents_and_decrements(db, make_category, make_job):
    cat = make_category()
    job = make_job(cat)
    job_id, cat_id = job.id, cat.id
    user = user_repo.create(db, "seeker@example.com", "secret1", "Sam", "Seeker")
    user_id = user.id
    application_repo.create(db, user_id, job_id, "https://cdn.example/cv.pdf")
    saved_job_repo.save(db, user_id, job_id)
    db.expunge_all()

    assert job_repo.delete_one(db, job_id) is True
    assert job_repo.get_by_id(db, job_id) is None
    assert application_repo.get_existing(db, user_id, job_id) is None
    assert saved_job_repo.is_saved(db, user_id, job_id) is False
    assert category_repo.get_by_id(db, cat_id).job_count == 0
    assert job_repo.delete_one(db, job_id) is False


def test_update_rejects_blank_required_fields(db, make_category, make_job):
    job = make_job(make_category(), title="Backend Engineer")
    job_id, slug = job.id, job.slug
    with pytest.raises(ValidationError):
        job_repo.update_one(db, job_id, title="   ")
    with pytest.raises(ValidationError):
        job_repo.update_one(db, job_id, company="")
    db.expire_all()
    stored = job_repo.get_by_id(db, job_id)
    assert (stored.title, stored.slug) == ("Backend Engineer", slug)


def test_create_strips_required_fields(db, make_category, make_job):
    job = make_job(make_category(), title="  Data Engineer ", location=" Berlin ")
    assert (job.title, job.location, job.slug) == ("Data Engineer", "Berlin", "data-engineer")
    with pytest.raises(ValidationError):
        make_job(make_category("Design"), title=" ")
