from __future__ import annotations

from datetime import date, timedelta

import pytest


@pytest.mark.anyio("asyncio")
async def test_contact_lifecycle_with_company_resolution(client) -> None:
    create_resp = await client.post(
        "/api/crm/contacts",
        json={"first_name": "Ada", "last_name": "Lovelace", "company_name": "Engines Ltd"},
    )
    assert create_resp.status_code == 201
    contact = create_resp.json()["data"]
    assert contact["company_name"] == "Engines Ltd"
    contact_id = contact["id"]

    second = await client.post(
        "/api/crm/contacts", json={"first_name": "Charles", "company_name": "ENGINES LTD"}
    )
    assert second.json()["data"]["company_id"] == contact["company_id"]

    search_resp = await client.get("/api/crm/contacts", params={"q": "lovelace ada"})
    assert [item["id"] for item in search_resp.json()["data"]] == [contact_id]

    by_company = await client.get(
        "/api/crm/contacts", params={"company_id": contact["company_id"]}
    )
    assert len(by_company.json()["data"]) == 2

    patch_resp = await client.patch(
        f"/api/crm/contacts/{contact_id}", json={"phone": "555-0100", "company_name": ""}
    )
    assert patch_resp.status_code == 200
    patched = patch_resp.json()["data"]
    assert patched["phone"] == "555-0100"
    assert patched["company_id"] is None
    assert patched["last_name"] == "Lovelace"

    detail_resp = await client.get(f"/api/crm/contacts/{contact_id}")
    assert detail_resp.status_code == 200
    assert detail_resp.json()["data"]["contact"]["phone"] == "555-0100"

    delete_resp = await client.delete(f"/api/crm/contacts/{contact_id}")
    assert delete_resp.json() == {"data": {"deleted": True}}

    missing = await client.get(f"/api/crm/contacts/{contact_id}")
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


@pytest.mark.anyio("asyncio")
async def test_validation_errors_use_error_envelope(client) -> None:
    blank = await client.post("/api/crm/contacts", json={"first_name": "  "})
    assert blank.status_code == 422
    assert blank.json()["error"]["code"] == "VALIDATION_ERROR"

    bad_site = await client.post(
        "/api/crm/companies", json={"name": "Evil", "website": "ftp://evil.test"}
    )
    assert bad_site.status_code == 422

    cleared = await client.post("/api/crm/contacts", json={"first_name": "Ada"})
    contact_id = cleared.json()["data"]["id"]
    rejected = await client.patch(f"/api/crm/contacts/{contact_id}", json={"first_name": None})
    assert rejected.status_code == 422
    assert rejected.json()["error"] == {
        "code": "VALIDATION_ERROR",
        "message": "first_name cannot be empty",
    }


@pytest.mark.anyio("asyncio")
async def test_company_routes(client) -> None:
    create_resp = await client.post(
        "/api/crm/companies", json={"name": "Acme", "website": "acme.test", "industry": "Rockets"}
    )
    assert create_resp.status_code == 201
    company = create_resp.json()["data"]
    assert company["website"] == "https://acme.test"

    await client.post(
        "/api/crm/contacts", json={"first_name": "Wile", "company_id": company["id"]}
    )
    members = await client.get(f"/api/crm/companies/{company['id']}/contacts")
    assert [item["first_name"] for item in members.json()["data"]] == ["Wile"]

    search_resp = await client.get("/api/crm/companies", params={"q": "rocket"})
    assert [item["name"] for item in search_resp.json()["data"]] == ["Acme"]

    patch_resp = await client.patch(
        f"/api/crm/companies/{company['id']}", json={"industry": "Anvils"}
    )
    assert patch_resp.json()["data"]["industry"] == "Anvils"
    assert patch_resp.json()["data"]["website"] == "https://acme.test"

    assert (await client.delete(f"/api/crm/companies/{company['id']}")).status_code == 200
    contacts = (await client.get("/api/crm/contacts")).json()["data"]
    assert contacts[0]["company_id"] is None
    assert (await client.delete(f"/api/crm/companies/{company['id']}")).status_code == 404


@pytest.mark.anyio("asyncio")
async def test_interactions_reminders_and_relationships(client) -> None:
    ada = (await client.post("/api/crm/contacts", json={"first_name": "Ada"})).json()["data"]
    bob = (await client.post("/api/crm/contacts", json={"first_name": "Bob"})).json()["data"]

    interaction = await client.post(
        "/api/crm/interactions",
        json={"contact_id": ada["id"], "interaction_type": "coffee", "summary": "Chat"},
    )
    assert interaction.status_code == 201
    assert interaction.json()["data"]["first_name"] == "Ada"
    recent = await client.get("/api/crm/interactions")
    assert [item["summary"] for item in recent.json()["data"]] == ["Chat"]

    missing_contact = await client.post(
        "/api/crm/interactions",
        json={"contact_id": 9999, "interaction_type": "call", "summary": "?"},
    )
    assert missing_contact.status_code == 404

    for offset in (-1, 20, 45):
        resp = await client.post(
            "/api/crm/reminders",
            json={
                "contact_id": ada["id"],
                "reminder_type": "custom",
                "reminder_date": (date.today() + timedelta(days=offset)).isoformat(),
            },
        )
        assert resp.status_code == 201
    upcoming = await client.get("/api/crm/reminders/upcoming")
    assert len(upcoming.json()["data"]) == 2
    narrow = await client.get("/api/crm/reminders/upcoming", params={"days": 0})
    assert len(narrow.json()["data"]) == 1

    link = {"contact_id": ada["id"], "related_contact_id": bob["id"], "relationship_type": "friend"}
    first = await client.post("/api/crm/relationships", json=link)
    assert first.status_code == 201
    assert first.json()["data"]["first_name"] == "Bob"
    clash = await client.post("/api/crm/relationships", json=link)
    assert clash.status_code == 409
    assert clash.json()["error"]["code"] == "CONFLICT"

    listed = await client.get("/api/crm/relationships", params={"contact_id": ada["id"]})
    assert len(listed.json()["data"]) == 1


@pytest.mark.anyio("asyncio")
async def test_group_membership_routes(client) -> None:
    ada = (await client.post("/api/crm/contacts", json={"first_name": "Ada"})).json()["data"]
    group = (await client.post("/api/crm/groups", json={"name": "Friends"})).json()["data"]

    first = await client.put(f"/api/crm/groups/{group['id']}/members/{ada['id']}")
    assert first.json()["data"] == {"added": True}
    again = await client.put(f"/api/crm/groups/{group['id']}/members/{ada['id']}")
    assert again.json()["data"] == {"added": False}

    members = await client.get(f"/api/crm/groups/{group['id']}/members")
    assert [item["id"] for item in members.json()["data"]] == [ada["id"]]

    duplicate = await client.post("/api/crm/groups", json={"name": "Friends"})
    assert duplicate.status_code == 409

    removed = await client.delete(f"/api/crm/groups/{group['id']}/members/{ada['id']}")
    assert removed.json()["data"] == {"removed": True}
    gone = await client.delete(f"/api/crm/groups/{group['id']}/members/{ada['id']}")
    assert gone.status_code == 404


@pytest.mark.anyio("asyncio")
async def test_extension_field_routes(client) -> None:
    ada = (await client.post("/api/crm/contacts", json={"first_name": "Ada"})).json()["data"]
    url = f"/api/crm/contacts/{ada['id']}/extension-fields"

    put_resp = await client.put(
        url, json={"source": "github", "field_name": "login", "field_value": "ada"}
    )
    assert put_resp.status_code == 200
    assert put_resp.json()["data"]["field_type"] == "text"

    bad_type = await client.put(
        url,
        json={"source": "github", "field_name": "x", "field_value": "1", "field_type": "blob"},
    )
    assert bad_type.status_code == 422
    assert bad_type.json()["error"]["code"] == "VALIDATION_ERROR"

    listed = await client.get(url, params={"source": "github"})
    assert [item["field_value"] for item in listed.json()["data"]] == ["ada"]

    deleted = await client.delete(url, params={"source": "github"})
    assert deleted.json()["data"] == {"deleted": 1}

    company = (await client.post("/api/crm/companies", json={"name": "Acme"})).json()["data"]
    company_url = f"/api/crm/companies/{company['id']}/extension-fields"
    await client.put(
        company_url,
        json={
            "source": "crunchbase",
            "field_name": "founded",
            "field_value": 1949,
            "field_type": "number",
        },
    )
    company_fields = await client.get(company_url)
    assert [item["field_value"] for item in company_fields.json()["data"]] == ["1949"]


@pytest.mark.anyio("asyncio")
async def test_csv_export_import_and_duplicate_check(client) -> None:
    await client.post(
        "/api/crm/contacts",
        json={"first_name": "Jane", "last_name": "Doe", "email": "jane@example.com"},
    )

    import_resp = await client.post(
        "/api/crm/contacts/import",
        content="first,surname,mail,organization\nJane,Doe,,\nBob,Builder,bob@example.com,Acme\n",
        headers={"Content-Type": "text/csv"},
    )
    assert import_resp.status_code == 200
    result = import_resp.json()["data"]
    assert result["created"] == 1
    assert [item["row"] for item in result["duplicates"]] == [2]

    bad_import = await client.post("/api/crm/contacts/import", content="only,a,header\n")
    assert bad_import.status_code == 422

    export_resp = await client.get("/api/crm/contacts/export.csv")
    assert export_resp.status_code == 200
    assert export_resp.headers["content-type"].startswith("text/csv")
    lines = export_resp.text.splitlines()
    assert lines[0] == (
        "first_name,last_name,email,phone,company_name,birthday,anniversary,tags,notes"
    )
    assert "Bob,Builder,bob@example.com,,Acme,,,," in lines

    dup_resp = await client.post(
        "/api/crm/contacts/check-duplicates",
        json={"first_name": "Someone", "email": "bob@example.com"},
    )
    assert [item["first_name"] for item in dup_resp.json()["data"]] == ["Bob"]
