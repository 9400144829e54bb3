"""End-to-end CRM behaviour through the HTTP API."""

from datetime import datetime, timedelta, timezone

import pytest

from crm_backend.models import UserRole


def _due(days: int = 2) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


# ── Tenant isolation ──────────────────────────────────────────────────────────

async def test_task_list_is_scoped_to_the_callers_company(client, auth, tenants):
    resp = await client.get("/api/tasks", headers=auth(tenants["sales_a"]))
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 2
    assert sorted(t["title"] for t in body["tasks"]) == ["T1", "T2"]
    # The whole chain is embedded
    task = next(t for t in body["tasks"] if t["title"] == "T1")
    assert task["interaction"]["lead"]["client"]["name"] == "C1"
    assert task["assignee"]["email"] == "sales@tenant-a.io"

    resp = await client.get(
        "/api/tasks",
        params={"interaction_id": tenants["i1"].id},
        headers=auth(tenants["sales_b"]),
    )
    assert resp.status_code == 200
    assert resp.json()["total"] == 0
    assert resp.json()["tasks"] == []


async def test_super_admin_sees_every_company(client, auth, tenants):
    resp = await client.get("/api/tasks", headers=auth(tenants["super_admin"]))
    assert resp.json()["total"] == 3


async def test_personal_task_list(client, auth, tenants):
    resp = await client.get(
        "/api/tasks", params={"personal": "true"}, headers=auth(tenants["sales_a"])
    )
    assert [t["title"] for t in resp.json()["tasks"]] == ["T1"]


@pytest.mark.parametrize(
    "path, key",
    [
        ("/api/clients/{}", "cb"),
        ("/api/leads/{}", "lb"),
        ("/api/interactions/{}", "ib"),
        ("/api/tasks/{}", "tb"),
    ],
)
async def test_cross_tenant_record_looks_missing(client, auth, tenants, path, key):
    headers = auth(tenants["sales_a"])
    foreign = await client.get(path.format(tenants[key].id), headers=headers)
    missing = await client.get(path.format("00000000-0000-0000-0000-000000000000"), headers=headers)
    assert foreign.status_code == missing.status_code == 404
    assert foreign.json() == missing.json()


async def test_cross_tenant_update_and_delete_are_not_found(client, auth, tenants):
    headers = auth(tenants["sales_a"])
    task_id = tenants["tb"].id

    resp = await client.put(f"/api/tasks/{task_id}", json={"title": "Hijacked"}, headers=headers)
    assert resp.status_code == 404
    resp = await client.delete(f"/api/tasks/{task_id}", headers=headers)
    assert resp.status_code == 404

    # Untouched for its owner
    resp = await client.get(f"/api/tasks/{task_id}", headers=auth(tenants["sales_b"]))
    assert resp.status_code == 200
    assert resp.json()["title"] == "TB"


async def test_user_without_company_is_forbidden(client, auth, factory, tenants):
    orphan = await factory.user(None, UserRole.manager, email="orphan@acme.io")
    resp = await client.get("/api/clients", headers=auth(orphan))
    assert resp.status_code == 403
    assert resp.json()["detail"] == "User is not assigned to a company"


async def test_missing_token_is_unauthorized(client):
    resp = await client.get("/api/clients")
    assert resp.status_code == 401


# ── Clients ───────────────────────────────────────────────────────────────────

async def test_client_created_in_callers_company(client, auth, tenants):
    resp = await client.post(
        "/api/clients",
        json={"name": "Initech", "company_id": tenants["company_b"].id},
        headers=auth(tenants["admin_a"]),
    )
    assert resp.status_code == 201
    assert resp.json()["company_id"] == tenants["company_a"].id


async def test_super_admin_must_name_a_company(client, auth, tenants):
    headers = auth(tenants["super_admin"])
    resp = await client.post("/api/clients", json={"name": "Initech"}, headers=headers)
    assert resp.status_code == 400

    resp = await client.post(
        "/api/clients",
        json={"name": "Initech", "company_id": tenants["company_b"].id},
        headers=headers,
    )
    assert resp.status_code == 201
    assert resp.json()["company_id"] == tenants["company_b"].id


async def test_client_search_and_pagination(client, auth, tenants):
    headers = auth(tenants["sales_a"])
    resp = await client.get("/api/clients", params={"search": "c1"}, headers=headers)
    assert [c["name"] for c in resp.json()["clients"]] == ["C1"]

    resp = await client.get("/api/clients", params={"limit": 1, "page": 2, "sort": "name"}, headers=headers)
    body = resp.json()
    assert body["clients"][0]["name"] == "C2"
    assert (body["total"], body["pages"]) == (2, 2)

    resp = await client.get("/api/clients", params={"sort": "nope"}, headers=headers)
    assert resp.status_code == 400


async def test_only_admins_delete_clients(client, auth, tenants):
    resp = await client.delete(f"/api/clients/{tenants['c2'].id}", headers=auth(tenants["sales_a"]))
    assert resp.status_code == 403
    resp = await client.delete(f"/api/clients/{tenants['c2'].id}", headers=auth(tenants["admin_a"]))
    assert resp.status_code == 200


# ── Users ─────────────────────────────────────────────────────────────────────

@pytest.mark.parametrize("role", list(UserRole))
async def test_nobody_deletes_their_own_account(client, auth, factory, tenants, role):
    company = None if role is UserRole.super_admin else tenants["company_a"]
    user = await factory.user(company, role, email=f"{role.value}-self@tenant-a.io")
    resp = await client.delete(f"/api/users/{user.id}", headers=auth(user))
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Cannot delete your own account"

    resp = await client.get(f"/api/users/{user.id}", headers=auth(user))
    assert resp.status_code == 200


async def test_non_staff_cannot_delete_other_users(client, auth, tenants):
    resp = await client.delete(f"/api/users/{tenants['admin_a'].id}", headers=auth(tenants["sales_a"]))
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Insufficient privileges"


async def test_role_grants_are_guarded(client, auth, factory, tenants):
    manager = await factory.user(tenants["company_a"], UserRole.manager, email="manager@tenant-a.io")
    body = {"name": "New", "email": "new@tenant-a.io", "password": "long-enough-1"}

    resp = await client.post("/api/users", json={**body, "role": "admin"}, headers=auth(manager))
    assert resp.status_code == 403

    resp = await client.post(
        "/api/users", json={**body, "role": "super_admin"}, headers=auth(tenants["admin_a"])
    )
    assert resp.status_code == 403

    resp = await client.post("/api/users", json={**body, "role": "admin"}, headers=auth(tenants["admin_a"]))
    assert resp.status_code == 201
    assert resp.json()["company_id"] == tenants["company_a"].id

    resp = await client.post("/api/users", json={**body, "role": "sales"}, headers=auth(tenants["admin_a"]))
    assert resp.status_code == 409


async def test_manager_cannot_edit_an_admin(client, auth, factory, tenants):
    manager = await factory.user(tenants["company_a"], UserRole.manager, email="manager@tenant-a.io")
    resp = await client.put(
        f"/api/users/{tenants['admin_a'].id}", json={"name": "Renamed"}, headers=auth(manager)
    )
    assert resp.status_code == 403


async def test_sales_cannot_manage_users(client, auth, tenants):
    resp = await client.delete(f"/api/users/{tenants['admin_a'].id}", headers=auth(tenants["sales_a"]))
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Insufficient privileges"


async def test_user_listing_is_scoped(client, auth, tenants):
    resp = await client.get("/api/users", headers=auth(tenants["sales_b"]))
    assert [u["email"] for u in resp.json()["users"]] == ["sales@tenant-b.io"]


# ── Leads ─────────────────────────────────────────────────────────────────────

async def test_lead_status_history(client, auth, tenants):
    headers = auth(tenants["sales_a"])
    resp = await client.post(
        "/api/leads", json={"client_id": tenants["c1"].id, "name": "Big deal"}, headers=headers
    )
    assert resp.status_code == 201
    lead = resp.json()
    assert lead["status"] == "Start-to-Call"
    assert lead["user_id"] == tenants["sales_a"].id
    assert lead["client"]["name"] == "C1"

    resp = await client.put(
        f"/api/leads/{lead['id']}", json={"status": "Call-to-Connect"}, headers=headers
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "Call-to-Connect"

    # Same status again does not add a row
    await client.put(f"/api/leads/{lead['id']}", json={"status": "Call-to-Connect"}, headers=headers)

    resp = await client.get(f"/api/leads/{lead['id']}/status-logs", headers=headers)
    logs = resp.json()["status_logs"]
    assert resp.json()["total"] == 2
    transitions = sorted((log["previous_status"] or "", log["new_status"]) for log in logs)
    assert transitions == [("", "Start-to-Call"), ("Start-to-Call", "Call-to-Connect")]
    assert all(log["duration_ms"] >= 0 for log in logs)


async def test_lead_detail_includes_activity(client, auth, tenants):
    resp = await client.get(f"/api/leads/{tenants['l1'].id}", headers=auth(tenants["sales_a"]))
    assert resp.status_code == 200
    detail = resp.json()
    assert detail["name"] == "L1"
    assert [i["id"] for i in detail["interactions"]] == [tenants["i1"].id]
    assert sorted(t["title"] for t in detail["tasks"]) == ["T1", "T2"]
    assert detail["status_logs"] == []


async def test_only_admins_assign_leads_to_others(client, auth, tenants):
    payload = {
        "client_id": tenants["c1"].id,
        "name": "Handed over",
        "assigned_user_id": tenants["admin_a"].id,
    }
    resp = await client.post("/api/leads", json=payload, headers=auth(tenants["sales_a"]))
    assert resp.status_code == 403

    payload["assigned_user_id"] = tenants["sales_a"].id
    resp = await client.post("/api/leads", json=payload, headers=auth(tenants["admin_a"]))
    assert resp.status_code == 201
    assert resp.json()["owner"]["id"] == tenants["sales_a"].id


async def test_lead_cannot_be_assigned_across_companies(client, auth, tenants):
    payload = {
        "client_id": tenants["c1"].id,
        "name": "Leaky",
        "assigned_user_id": tenants["sales_b"].id,
    }
    resp = await client.post("/api/leads", json=payload, headers=auth(tenants["super_admin"]))
    assert resp.status_code == 403


async def test_lead_filters(client, auth, factory, tenants):
    await factory.lead(tenants["c2"], owner=tenants["admin_a"], name="Lost one", status="Lost")
    headers = auth(tenants["sales_a"])

    resp = await client.get("/api/leads", params={"status": "Lost"}, headers=headers)
    assert [lead["name"] for lead in resp.json()["leads"]] == ["Lost one"]

    resp = await client.get("/api/leads", params={"client_id": tenants["c1"].id}, headers=headers)
    assert [lead["name"] for lead in resp.json()["leads"]] == ["L1"]

    resp = await client.get("/api/leads", params={"client_id": tenants["cb"].id}, headers=headers)
    assert resp.json()["total"] == 0


# ── Tasks ─────────────────────────────────────────────────────────────────────

async def test_task_defaults_to_caller_as_assignee(client, auth, tenants):
    resp = await client.post(
        "/api/tasks",
        json={"interaction_id": tenants["i1"].id, "title": "Follow up", "due_date": _due()},
        headers=auth(tenants["sales_a"]),
    )
    assert resp.status_code == 201
    assert resp.json()["assigned_to"] == tenants["sales_a"].id
    assert resp.json()["status"] == "pending"


async def test_task_on_foreign_interaction_is_not_found(client, auth, tenants):
    resp = await client.post(
        "/api/tasks",
        json={"interaction_id": tenants["ib"].id, "title": "Sneaky", "due_date": _due()},
        headers=auth(tenants["sales_a"]),
    )
    assert resp.status_code == 404


async def test_sales_cannot_reassign_a_task(client, auth, tenants):
    resp = await client.put(
        f"/api/tasks/{tenants['t1'].id}",
        json={"assigned_to": tenants["admin_a"].id},
        headers=auth(tenants["sales_a"]),
    )
    assert resp.status_code == 403


# ── Interactions & contacts ───────────────────────────────────────────────────

async def test_interaction_description_can_be_cleared(client, auth, factory, tenants):
    interaction = await factory.interaction(tenants["l1"], description="Discussed pricing")
    headers = auth(tenants["admin_a"])

    resp = await client.put(
        f"/api/interactions/{interaction.id}", json={"description": None}, headers=headers
    )
    assert resp.status_code == 200
    assert resp.json()["description"] is None
    assert resp.json()["lead_id"] == tenants["l1"].id


async def test_interaction_contacts(client, auth, factory, tenants):
    contact = await factory.contact(tenants["c1"])
    foreign = await factory.contact(tenants["cb"])
    headers = auth(tenants["sales_a"])
    interaction_id = tenants["i1"].id

    resp = await client.post(f"/api/interactions/{interaction_id}/contacts/{contact.id}", headers=headers)
    assert resp.status_code == 201
    resp = await client.post(f"/api/interactions/{interaction_id}/contacts/{contact.id}", headers=headers)
    assert resp.status_code == 409

    resp = await client.post(f"/api/interactions/{interaction_id}/contacts/{foreign.id}", headers=headers)
    assert resp.status_code == 404

    resp = await client.get(f"/api/interactions/{interaction_id}/contacts", headers=headers)
    assert [c["id"] for c in resp.json()["contacts"]] == [contact.id]

    resp = await client.delete(f"/api/interactions/{interaction_id}/contacts/{contact.id}", headers=headers)
    assert resp.status_code == 200
    resp = await client.delete(f"/api/interactions/{interaction_id}/contacts/{contact.id}", headers=headers)
    assert resp.status_code == 404


async def test_super_admin_cannot_link_contact_across_companies(client, auth, factory, tenants):
    foreign = await factory.contact(tenants["cb"])
    resp = await client.post(
        "/api/interactions",
        json={"lead_id": tenants["l1"].id, "type": "meeting", "contact_ids": [foreign.id]},
        headers=auth(tenants["super_admin"]),
    )
    assert resp.status_code == 404


async def test_contact_email_is_unique(client, auth, tenants):
    headers = auth(tenants["sales_a"])
    body = {"client_id": tenants["c1"].id, "name": "Doe", "first_name": "John", "email": "John@Acme.io"}
    resp = await client.post("/api/contacts", json=body, headers=headers)
    assert resp.status_code == 201
    assert resp.json()["email"] == "john@acme.io"

    resp = await client.post("/api/contacts", json=body, headers=headers)
    assert resp.status_code == 409


async def test_notes_follow_their_client(client, auth, tenants):
    resp = await client.post(
        "/api/notes",
        json={"client_id": tenants["c1"].id, "content": "Kickoff went well"},
        headers=auth(tenants["sales_a"]),
    )
    assert resp.status_code == 201
    note_id = resp.json()["id"]

    resp = await client.get(f"/api/notes/{note_id}", headers=auth(tenants["sales_b"]))
    assert resp.status_code == 404
