"""Integration tests for admin content API routes."""

from unittest.mock import patch

from src.core.errors import StoreUnavailable


def _create_draft(client, headers, **body):
    res = client.post("/api/content/drafts", json=body, headers=headers)
    assert res.status_code == 201, res.text
    return res.json()


# --- Auth ---


def test_requires_token(client):
    res = client.get("/api/content")
    assert res.status_code == 401
    assert res.headers["WWW-Authenticate"] == "Bearer"


def test_rejects_bad_token(client):
    res = client.get("/api/content", headers={"Authorization": "Bearer nonsense"})
    assert res.status_code == 401


def test_non_admin_forbidden(client, outsider_headers):
    assert client.get("/api/content", headers=outsider_headers).status_code == 403


def test_unverified_admin_forbidden(client, unverified_admin_headers):
    assert client.get("/api/content", headers=unverified_admin_headers).status_code == 403


# --- Lifecycle ---


def test_draft_publish_unpublish_delete(client, admin_headers):
    draft = _create_draft(client, admin_headers, title="Hello World", tags=["Faith"])
    assert draft["slug"] == "hello-world"
    assert draft["status"] == "draft"
    assert draft["author_email"] == "admin@example-ministry.org"

    res = client.post(f"/api/content/{draft['id']}/publish", headers=admin_headers)
    assert res.status_code == 200
    assert res.json()["status"] == "published"
    assert res.json()["published_at"] is not None

    res = client.post(f"/api/content/{draft['id']}/unpublish", headers=admin_headers)
    assert res.json()["status"] == "draft"

    res = client.delete(f"/api/content/{draft['id']}", headers=admin_headers)
    assert res.status_code == 204
    assert client.get(f"/api/content/{draft['id']}", headers=admin_headers).status_code == 404


def test_publish_new(client, admin_headers):
    res = client.post("/api/content/publish", json={"title": "Straight Out"}, headers=admin_headers)
    assert res.status_code == 201
    assert res.json()["status"] == "published"


def test_update_with_body(client, admin_headers):
    draft = _create_draft(client, admin_headers, title="Before")
    res = client.put(
        f"/api/content/{draft['id']}",
        json={"title": "After", "excerpt": "new"},
        headers=admin_headers,
    )
    assert res.status_code == 200
    body = res.json()
    assert body["slug"] == "after"
    assert body["old_slugs"] == ["before"]
    assert body["excerpt"] == "new"


def test_list_filters_by_status(client, admin_headers):
    _create_draft(client, admin_headers, title="One")
    client.post("/api/content/publish", json={"title": "Two"}, headers=admin_headers)

    res = client.get("/api/content", params={"status": "draft"}, headers=admin_headers)
    assert res.status_code == 200
    assert [i["title"] for i in res.json()["items"]] == ["One"]
    assert client.get("/api/content", headers=admin_headers).json()["total"] == 2


# --- Errors ---


def test_validation_error_shape(client, admin_headers):
    res = client.post("/api/content/drafts", json={"title": ""}, headers=admin_headers)
    assert res.status_code == 400
    detail = res.json()["detail"]
    assert detail["error"] == "Title is required"
    assert detail["details"][0]["code"] == "title_required"


def test_duplicate_manual_slug(client, admin_headers):
    _create_draft(client, admin_headers, title="A", slug="shared")
    res = client.post("/api/content/drafts", json={"title": "B", "slug": "shared"}, headers=admin_headers)
    assert res.status_code == 400
    assert res.json()["detail"]["details"][0]["code"] == "slug_taken"


def test_invalid_transition(client, admin_headers):
    draft = _create_draft(client, admin_headers, title="Never Published")
    res = client.post(f"/api/content/{draft['id']}/unpublish", headers=admin_headers)
    assert res.status_code == 400
    assert res.json()["detail"]["details"][0]["code"] == "invalid_transition"


def test_missing_item(client, admin_headers):
    assert client.put("/api/content/nope", json={"title": "x"}, headers=admin_headers).status_code == 404
    assert client.post("/api/content/nope/publish", headers=admin_headers).status_code == 404
    assert client.delete("/api/content/nope", headers=admin_headers).status_code == 404


def test_store_failure_is_503(client, admin_headers, store):
    with patch.object(store, "list_all", side_effect=StoreUnavailable("db down")):
        res = client.get("/api/content", headers=admin_headers)
    assert res.status_code == 503
    assert "db down" not in res.text


def test_read_only_mode_blocks_writes(client, admin_headers, settings_context):
    settings_context.update({"read_only_mode": True}, "test")
    res = client.post("/api/content/drafts", json={"title": "Blocked"}, headers=admin_headers)
    assert res.status_code == 503
    # Reads still work
    assert client.get("/api/content", headers=admin_headers).status_code == 200


# --- Slug Preview ---


def test_slug_preview(client, admin_headers):
    _create_draft(client, admin_headers, title="Taken Title")
    res = client.get(
        "/api/content/slug-preview",
        params={"title": "Taken Title"},
        headers=admin_headers,
    )
    assert res.status_code == 200
    body = res.json()
    assert body["slug"] == "taken-title-2"
    assert body["available"] is False


def test_slug_preview_reserved(client, admin_headers):
    res = client.get("/api/content/slug-preview", params={"title": "Admin"}, headers=admin_headers)
    assert res.json()["slug"] == "admin-1"
