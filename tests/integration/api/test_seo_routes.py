"""Integration tests for robots.txt and sitemap.xml routes."""


def test_robots_txt(client, rules):
    res = client.get("/robots.txt")
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/plain")
    assert res.headers["cache-control"] == "public, max-age=86400"
    assert f"Sitemap: {rules.seo.site_url}/sitemap.xml" in res.text
    assert "Disallow: /api/" in res.text


def test_sitemap_lists_published_only(client, admin_headers, rules):
    client.post("/api/content/publish", json={"title": "Live Article"}, headers=admin_headers)
    client.post("/api/content/drafts", json={"title": "Draft Article"}, headers=admin_headers)

    res = client.get("/sitemap.xml")
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("application/xml")
    assert res.headers["cache-control"] == "public, max-age=3600"
    assert f"<loc>{rules.seo.site_url}/articles/live-article/</loc>" in res.text
    assert "draft-article" not in res.text
    assert f"<loc>{rules.seo.site_url}/welcome/</loc>" in res.text
