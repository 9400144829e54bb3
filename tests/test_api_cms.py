"""CMS, media and public publication endpoints."""

import pytest

from crm_backend.models import UserRole


@pytest.fixture()
async def editors(factory):
    company_a = await factory.company("Publisher A")
    company_b = await factory.company("Publisher B")
    return {
        "company_a": company_a,
        "company_b": company_b,
        "admin_a": await factory.user(company_a, UserRole.admin, email="admin@publisher-a.io"),
        "manager_a": await factory.user(company_a, UserRole.manager, email="manager@publisher-a.io"),
        "sales_a": await factory.user(company_a, UserRole.sales, email="sales@publisher-a.io"),
        "admin_b": await factory.user(company_b, UserRole.admin, email="admin@publisher-b.io"),
        "root": await factory.user(None, UserRole.super_admin, email="root@publisher.io"),
    }


async def _create(client, headers, path, **body):
    resp = await client.post(f"/api/cms/{path}", json=body, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


# ── Contents ──────────────────────────────────────────────────────────────────

async def test_content_slug_is_derived_and_unique(client, auth, editors):
    headers = auth(editors["manager_a"])
    content = await _create(client, headers, "contents", title="Hello World!", body="Hi")
    assert content["slug"] == "hello-world"
    assert content["status"] == "draft"
    assert content["author_id"] == editors["manager_a"].id
    assert content["company_id"] == editors["company_a"].id
    assert "password_hash" not in content

    resp = await client.post(
        "/api/cms/contents", json={"title": "Hello   world", "body": "Again"}, headers=headers
    )
    assert resp.status_code == 409

    # Slugs are unique per company only
    other = await _create(client, auth(editors["admin_b"]), "contents", title="Hello World", body="B")
    assert other["slug"] == "hello-world"


async def test_sales_cannot_edit_content(client, auth, editors):
    resp = await client.post(
        "/api/cms/contents", json={"title": "Nope", "body": "x"}, headers=auth(editors["sales_a"])
    )
    assert resp.status_code == 403

    resp = await client.get("/api/cms/contents", headers=auth(editors["sales_a"]))
    assert resp.status_code == 200


async def test_manager_cannot_delete_content(client, auth, editors):
    content = await _create(client, auth(editors["manager_a"]), "contents", title="Keep", body="x")
    resp = await client.delete(f"/api/cms/contents/{content['id']}", headers=auth(editors["manager_a"]))
    assert resp.status_code == 403
    resp = await client.delete(f"/api/cms/contents/{content['id']}", headers=auth(editors["admin_a"]))
    assert resp.status_code == 200


async def test_content_is_tenant_scoped(client, auth, editors):
    content = await _create(client, auth(editors["admin_a"]), "contents", title="Secret", body="x")

    resp = await client.get(f"/api/cms/contents/{content['id']}", headers=auth(editors["admin_b"]))
    assert resp.status_code == 404
    resp = await client.get("/api/cms/contents", headers=auth(editors["admin_b"]))
    assert resp.json()["total"] == 0

    resp = await client.get("/api/cms/contents", headers=auth(editors["root"]))
    assert resp.json()["total"] == 1


async def test_content_filters(client, auth, editors):
    headers = auth(editors["admin_a"])
    await _create(client, headers, "contents", title="Draft one", body="x")
    await _create(client, headers, "contents", title="Live one", body="x", status="published")

    resp = await client.get("/api/cms/contents", params={"status": "published"}, headers=headers)
    assert [c["title"] for c in resp.json()["contents"]] == ["Live one"]

    resp = await client.get("/api/cms/contents", params={"search": "draft"}, headers=headers)
    assert [c["title"] for c in resp.json()["contents"]] == ["Draft one"]


async def test_content_references_must_share_the_company(client, auth, editors):
    foreign = await _create(client, auth(editors["admin_b"]), "categories", name="Elsewhere")
    resp = await client.post(
        "/api/cms/contents",
        json={"title": "Mixed", "body": "x", "category_id": foreign["id"]},
        headers=auth(editors["admin_a"]),
    )
    assert resp.status_code == 404

    resp = await client.post(
        "/api/cms/contents",
        json={
            "title": "Mixed",
            "body": "x",
            "category_id": foreign["id"],
            "company_id": editors["company_a"].id,
        },
        headers=auth(editors["root"]),
    )
    assert resp.status_code == 404


async def test_super_admin_creates_content_for_a_company(client, auth, editors):
    headers = auth(editors["root"])
    resp = await client.post("/api/cms/contents", json={"title": "T", "body": "x"}, headers=headers)
    assert resp.status_code == 400

    content = await _create(
        client, headers, "contents", title="T", body="x", company_id=editors["company_b"].id
    )
    assert content["company_id"] == editors["company_b"].id


# ── Tags ──────────────────────────────────────────────────────────────────────

async def test_tag_counts_follow_attachments(client, auth, editors):
    headers = auth(editors["admin_a"])
    first = await _create(client, headers, "contents", title="First", body="x")
    second = await _create(client, headers, "contents", title="Second", body="x")
    python = await _create(client, headers, "tags", name="Python")
    await _create(client, headers, "tags", name="Unused")
    assert python["slug"] == "python"
    assert python["count"] == 0

    for content in (first, second):
        resp = await client.post(
            f"/api/cms/contents/{content['id']}/tags/{python['id']}", headers=headers
        )
        assert resp.status_code == 201
    assert resp.json()["count"] == 2

    resp = await client.post(f"/api/cms/contents/{first['id']}/tags/{python['id']}", headers=headers)
    assert resp.status_code == 409

    resp = await client.get("/api/cms/tags/usage/1", headers=headers)
    assert [t["name"] for t in resp.json()["tags"]] == ["Python"]

    resp = await client.get(f"/api/cms/tags/content/{first['id']}", headers=headers)
    assert [t["id"] for t in resp.json()["tags"]] == [python["id"]]

    resp = await client.delete(f"/api/cms/contents/{first['id']}/tags/{python['id']}", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["count"] == 1

    resp = await client.delete(f"/api/cms/contents/{first['id']}/tags/{python['id']}", headers=headers)
    assert resp.status_code == 404

    # Deleting tagged content releases the tag
    resp = await client.delete(f"/api/cms/contents/{second['id']}", headers=headers)
    assert resp.status_code == 200
    resp = await client.get(f"/api/cms/tags/{python['id']}", headers=headers)
    assert resp.json()["count"] == 0


async def test_foreign_tag_cannot_be_attached(client, auth, editors):
    content = await _create(client, auth(editors["admin_a"]), "contents", title="Mine", body="x")
    foreign = await _create(client, auth(editors["admin_b"]), "tags", name="Theirs")
    resp = await client.post(
        f"/api/cms/contents/{content['id']}/tags/{foreign['id']}", headers=auth(editors["root"])
    )
    assert resp.status_code == 404


# ── Categories ────────────────────────────────────────────────────────────────

async def test_category_tree(client, auth, editors):
    headers = auth(editors["admin_a"])
    news = await _create(client, headers, "categories", name="News")
    local = await _create(client, headers, "categories", name="Local", parent_id=news["id"])
    street = await _create(client, headers, "categories", name="Street", parent_id=local["id"])

    resp = await client.get("/api/cms/categories", params={"root": "true"}, headers=headers)
    assert [c["name"] for c in resp.json()["categories"]] == ["News"]

    resp = await client.get("/api/cms/categories", params={"parent_id": news["id"]}, headers=headers)
    assert [c["name"] for c in resp.json()["categories"]] == ["Local"]

    resp = await client.put(
        f"/api/cms/categories/{news['id']}", json={"parent_id": street["id"]}, headers=headers
    )
    assert resp.status_code == 400


async def test_category_parent_must_share_the_company(client, auth, editors):
    foreign = await _create(client, auth(editors["admin_b"]), "categories", name="Theirs")
    resp = await client.post(
        "/api/cms/categories",
        json={"name": "Mine", "parent_id": foreign["id"]},
        headers=auth(editors["admin_a"]),
    )
    assert resp.status_code == 404


# ── Templates ─────────────────────────────────────────────────────────────────

async def test_single_default_template_per_type(client, auth, editors):
    headers = auth(editors["admin_a"])
    first = await _create(
        client, headers, "templates",
        name="Classic", html_structure="<main/>", template_type="page", is_default=True,
    )
    post = await _create(
        client, headers, "templates",
        name="Post", html_structure="<article/>", template_type="post", is_default=True,
    )
    second = await _create(
        client, headers, "templates",
        name="Modern", html_structure="<main/>", template_type="page", is_default=True,
    )
    assert first["created_by"] == editors["admin_a"].id

    resp = await client.get(
        "/api/cms/templates", params={"is_default": "true"}, headers=headers
    )
    assert sorted(t["id"] for t in resp.json()["templates"]) == sorted([post["id"], second["id"]])

    resp = await client.put(
        f"/api/cms/templates/{first['id']}", json={"is_default": True}, headers=headers
    )
    assert resp.json()["is_default"] is True
    resp = await client.get(f"/api/cms/templates/{second['id']}", headers=headers)
    assert resp.json()["is_default"] is False


async def test_default_template_moved_to_another_type_stays_unique(client, auth, editors):
    headers = auth(editors["admin_a"])
    page = await _create(
        client, headers, "templates",
        name="Landing", html_structure="<main/>", template_type="page", is_default=True,
    )
    post = await _create(
        client, headers, "templates",
        name="Article", html_structure="<article/>", template_type="post", is_default=True,
    )

    resp = await client.put(
        f"/api/cms/templates/{page['id']}", json={"template_type": "post"}, headers=headers
    )
    assert resp.status_code == 200
    assert resp.json()["is_default"] is True

    resp = await client.get(
        "/api/cms/templates",
        params={"is_default": "true", "template_type": "post"},
        headers=headers,
    )
    assert resp.json()["total"] == 1
    assert resp.json()["templates"][0]["id"] == page["id"]
    resp = await client.get(f"/api/cms/templates/{post['id']}", headers=headers)
    assert resp.json()["is_default"] is False


# ── Media ─────────────────────────────────────────────────────────────────────

async def test_media_metadata(client, auth, editors):
    headers = auth(editors["manager_a"])
    resp = await client.post(
        "/api/media",
        json={
            "title": "Logo",
            "file_url": "https://cdn.publisher-a.io/logo.png",
            "mime_type": "image/png",
            "file_size": 2048,
            "media_type": "image",
            "tags": ["brand"],
        },
        headers=headers,
    )
    assert resp.status_code == 201
    media = resp.json()
    assert media["uploaded_by"] == editors["manager_a"].id

    resp = await client.get("/api/media", params={"media_type": "image"}, headers=headers)
    assert resp.json()["total"] == 1
    resp = await client.get(f"/api/media/{media['id']}", headers=auth(editors["admin_b"]))
    assert resp.status_code == 404


# ── Blogs / courses ───────────────────────────────────────────────────────────

def _blog(slug: str, **extra) -> dict:
    return {
        "slug": slug,
        "title": slug.replace("-", " ").title(),
        "excerpt": "Short",
        "image": "https://cdn.publisher-a.io/cover.png",
        "author": "Jane Doe",
        "published_on": "2024-03-01",
        **extra,
    }


async def test_public_blog_filters(client, auth, editors):
    headers = auth(editors["admin_a"])
    guides = await _create(client, headers, "blog-categories", name="Guides")
    await _create(client, headers, "blogs", **_blog("intro", category_ids=[guides["id"]]))
    await _create(client, headers, "blogs", **_blog("bonjour", audience="french"))
    await _create(client, headers, "blogs", **_blog("hello", audience="english"))

    resp = await client.get("/api/blogs", params={"category": "guides"})
    assert resp.status_code == 200
    body = resp.json()
    assert [b["slug"] for b in body["blogs"]] == ["intro"]
    assert body["blogs"][0]["categories"][0]["slug"] == "guides"

    resp = await client.get("/api/blogs", params={"category": guides["id"]})
    assert resp.json()["total"] == 1

    resp = await client.get("/api/blogs", params={"audience": "french"})
    assert sorted(b["slug"] for b in resp.json()["blogs"]) == ["bonjour", "intro"]

    resp = await client.get("/api/blogs/hello")
    assert resp.status_code == 200
    assert resp.json()["audience"] == "english"
    resp = await client.get("/api/blogs/missing")
    assert resp.status_code == 404


async def test_blog_categories_must_share_the_company(client, auth, editors):
    foreign = await _create(client, auth(editors["admin_b"]), "blog-categories", name="Theirs")
    resp = await client.post(
        "/api/cms/blogs",
        json=_blog("mixed", category_ids=[foreign["id"]]),
        headers=auth(editors["admin_a"]),
    )
    assert resp.status_code == 404


async def test_blog_update_replaces_categories(client, auth, editors):
    headers = auth(editors["admin_a"])
    news = await _create(client, headers, "blog-categories", name="News")
    blog = await _create(client, headers, "blogs", **_blog("post", category_ids=[news["id"]]))

    resp = await client.put(
        f"/api/cms/blogs/{blog['id']}", json={"category_ids": [], "title": "Renamed"}, headers=headers
    )
    assert resp.status_code == 200
    assert resp.json()["categories"] == []
    assert resp.json()["title"] == "Renamed"


async def test_public_courses(client, auth, editors):
    headers = auth(editors["admin_b"])
    await _create(
        client,
        headers,
        "courses",
        slug="fastapi-101",
        title="FastAPI 101",
        description="Basics",
        long_description="Everything about the basics",
        image="https://cdn.publisher-b.io/course.png",
        level="beginner",
        duration="3h",
        modules=2,
        module_details=[{"title": "Routing", "duration": "1h"}, {"title": "Models", "duration": "2h"}],
    )
    resp = await client.get("/api/courses", params={"company_id": editors["company_b"].id})
    assert resp.json()["total"] == 1
    resp = await client.get("/api/courses", params={"company_id": editors["company_a"].id})
    assert resp.json()["total"] == 0

    resp = await client.get("/api/courses/fastapi-101")
    assert resp.json()["module_details"][1]["title"] == "Models"
