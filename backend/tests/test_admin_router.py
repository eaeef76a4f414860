import jobboard.routers.admin as admin_mod


class _Category:
    def __init__(self, slug="design", name="Design"):
        self.slug = slug
        self.name = name


def test_admin_routes_forbidden_for_users(client):
    assert client.get("/admin/stats").status_code == 403
    assert client.post("/admin/backfill-slugs").status_code == 403


def test_admin_stats_success(monkeypatch, admin_client):
    monkeypatch.setattr(admin_mod, "get_stats", lambda db: {"users_total": 1})
    resp = admin_client.get("/admin/stats")
    assert resp.status_code == 200
    assert resp.json()["users_total"] == 1


def test_admin_stats_failure_sanitized(monkeypatch, admin_client):
    monkeypatch.setattr(admin_mod, "get_stats", lambda db: (_ for _ in ()).throw(RuntimeError("db fail")))
    resp = admin_client.get("/admin/stats")
    assert resp.status_code == 500
    assert "Failed to load admin stats" in resp.json()["detail"]


def test_seed_categories(monkeypatch, admin_client):
    monkeypatch.setattr(admin_mod, "ensure_tables_exist", lambda: None)
    monkeypatch.setattr(admin_mod, "seed_default_categories", lambda db: ([_Category()], 1))
    resp = admin_client.post("/admin/seed-categories")
    assert resp.status_code == 200
    assert "Created 1" in resp.json()["message"]

    monkeypatch.setattr(admin_mod, "seed_default_categories", lambda db: ([_Category()], 0))
    resp = admin_client.post("/admin/seed-categories")
    assert "already exist" in resp.json()["message"]


def test_backfill_slugs(monkeypatch, admin_client):
    monkeypatch.setattr(admin_mod, "backfill_slugs", lambda db: {"categories": 0, "jobs": 4})
    resp = admin_client.post("/admin/backfill-slugs")
    assert resp.status_code == 200
    assert resp.json() == {"updated": {"categories": 0, "jobs": 4}}


def test_reconcile_job_counts(monkeypatch, admin_client):
    report = {"changed": 1, "categories": [{"id": "c1", "previous": 3, "current": 2}]}
    monkeypatch.setattr(admin_mod, "reconcile_job_counts", lambda db: report)
    resp = admin_client.post("/admin/reconcile-job-counts")
    assert resp.status_code == 200
    assert resp.json() == report
