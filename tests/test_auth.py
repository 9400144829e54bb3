from crm_backend.core.security import decode_access_token
from crm_backend.models import UserRole

from conftest import PASSWORD


async def _login(client, email: str, password: str = PASSWORD):
    return await client.post("/api/auth/login", data={"username": email, "password": password})


async def test_register_then_login(client, factory):
    company = await factory.company("Acme")
    resp = await client.post(
        "/api/auth/register",
        json={
            "name": "Jane",
            "email": "Jane@Acme.io",
            "password": "another-passw0rd",
            "company_id": company.id,
        },
    )
    assert resp.status_code == 201
    user = resp.json()
    assert user["role"] == "user"
    assert user["email"] == "jane@acme.io"
    assert "hashed_password" not in user

    resp = await _login(client, "JANE@acme.io", "another-passw0rd")
    assert resp.status_code == 200
    body = resp.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["id"] == user["id"]

    claims = decode_access_token(body["access_token"])
    assert claims["sub"] == user["id"]
    assert claims["tenant_id"] == company.id


async def test_register_duplicate_email(client, factory):
    company = await factory.company()
    await factory.user(company, email="taken@acme.io")
    resp = await client.post(
        "/api/auth/register",
        json={"name": "Dup", "email": "taken@acme.io", "password": PASSWORD, "company_id": company.id},
    )
    assert resp.status_code == 409


async def test_register_into_unknown_company(client):
    resp = await client.post(
        "/api/auth/register",
        json={"name": "Lost", "email": "lost@acme.io", "password": PASSWORD, "company_id": "nope"},
    )
    assert resp.status_code == 404


async def test_bad_credentials(client, factory):
    user = await factory.user(await factory.company())
    resp = await _login(client, user.email, "wrong-password")
    assert resp.status_code == 401
    resp = await _login(client, "nobody@acme.io")
    assert resp.status_code == 401


async def test_me(client, auth, factory):
    user = await factory.user(await factory.company(), UserRole.sales, email="me@acme.io")
    resp = await client.get("/api/auth/me", headers=auth(user))
    assert resp.status_code == 200
    assert resp.json()["role"] == "sales"

    resp = await client.put(
        "/api/auth/me", json={"name": "Renamed", "password": "brand-new-passw0rd"}, headers=auth(user)
    )
    assert resp.status_code == 200
    assert resp.json()["name"] == "Renamed"
    assert (await _login(client, "me@acme.io", "brand-new-passw0rd")).status_code == 200


async def test_token_for_deleted_user_is_rejected(client, auth, factory, db):
    user = await factory.user(await factory.company())
    headers = auth(user)
    await db.delete(user)
    await db.commit()
    resp = await client.get("/api/auth/me", headers=headers)
    assert resp.status_code == 401


async def test_garbage_token(client):
    resp = await client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


# ── Companies ─────────────────────────────────────────────────────────────────

async def test_companies_are_managed_by_super_admins(client, auth, tenants):
    root = auth(tenants["super_admin"])
    resp = await client.post("/api/companies", json={"name": "  Globex  "}, headers=root)
    assert resp.status_code == 201
    assert resp.json()["name"] == "Globex"

    resp = await client.post("/api/companies", json={"name": "Globex"}, headers=root)
    assert resp.status_code == 409

    resp = await client.get("/api/companies", headers=root)
    assert resp.json()["total"] == 3

    resp = await client.get("/api/companies", headers=auth(tenants["admin_a"]))
    assert resp.status_code == 403
    resp = await client.post("/api/companies", json={"name": "Rogue"}, headers=auth(tenants["admin_a"]))
    assert resp.status_code == 403


async def test_company_visibility(client, auth, tenants):
    company_a = tenants["company_a"].id
    resp = await client.get(f"/api/companies/{company_a}", headers=auth(tenants["sales_a"]))
    assert resp.status_code == 200
    resp = await client.get(f"/api/companies/{company_a}", headers=auth(tenants["sales_b"]))
    assert resp.status_code == 404

    resp = await client.put(
        f"/api/companies/{company_a}", json={"postal_code": "75001"}, headers=auth(tenants["admin_a"])
    )
    assert resp.status_code == 200
    assert resp.json()["postal_code"] == "75001"


async def test_deleting_a_company_removes_its_data(client, auth, tenants):
    root = auth(tenants["super_admin"])
    resp = await client.delete(f"/api/companies/{tenants['company_b'].id}", headers=root)
    assert resp.status_code == 200

    resp = await client.get("/api/clients", headers=root)
    assert sorted(c["name"] for c in resp.json()["clients"]) == ["C1", "C2"]


async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
