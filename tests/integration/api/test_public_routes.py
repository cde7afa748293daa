"""Integration tests for public article routes."""


def _publish(client, headers, **body):
    res = client.post("/api/content/publish", json=body, headers=headers)
    assert res.status_code == 201, res.text
    return res.json()


def test_list_articles_only_published(client, admin_headers, clock):
    _publish(client, admin_headers, title="First Sermon")
    clock.advance(60)
    client.post("/api/content/drafts", json={"title": "Unfinished"}, headers=admin_headers)
    clock.advance(60)
    _publish(client, admin_headers, title="Second Sermon")

    res = client.get("/api/public/articles")
    assert res.status_code == 200
    assert [i["slug"] for i in res.json()["items"]] == ["second-sermon", "first-sermon"]


def test_article_by_slug(client, admin_headers):
    item = _publish(client, admin_headers, title="Grace Abounds")
    res = client.get("/api/public/articles/grace-abounds")
    assert res.status_code == 200
    assert res.json()["id"] == item["id"]


def test_draft_is_404(client, admin_headers):
    client.post("/api/content/drafts", json={"title": "Private"}, headers=admin_headers)
    assert client.get("/api/public/articles/private").status_code == 404


def test_old_slug_redirects(client, admin_headers):
    item = _publish(client, admin_headers, title="Old Name")
    client.put(f"/api/content/{item['id']}", json={"slug": "new-name"}, headers=admin_headers)

    res = client.get("/api/public/articles/old-name", follow_redirects=False)
    assert res.status_code == 301
    assert res.headers["location"] == "/api/public/articles/new-name"

    followed = client.get("/api/public/articles/old-name")
    assert followed.status_code == 200
    assert followed.json()["slug"] == "new-name"


def test_tags(client, admin_headers):
    _publish(client, admin_headers, title="A", tags=["Hope", "Faith"])
    _publish(client, admin_headers, title="B", tags=["faith"])
    res = client.get("/api/public/tags")
    assert res.json() == [{"tag": "Faith", "count": 2}, {"tag": "Hope", "count": 1}]


def test_health(client):
    assert client.get("/health").json() == {"status": "ok", "service": "api"}


def test_paging_parameters_are_bounded(client, admin_headers):
    _publish(client, admin_headers, title="Only Article")
    assert client.get("/api/public/articles", params={"offset": -2}).status_code == 422
    assert client.get("/api/public/articles", params={"limit": 0}).status_code == 422
    assert client.get("/api/public/tags", params={"limit": -1}).status_code == 422
    assert client.get("/api/content", params={"offset": -1}, headers=admin_headers).status_code == 422

    res = client.get("/api/public/articles", params={"limit": 1, "offset": 0})
    assert [i["slug"] for i in res.json()["items"]] == ["only-article"]
