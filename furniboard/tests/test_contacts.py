import uuid

import pytest


async def create_ticket(client, name: str, message: str = "Do you deliver to Leeds?") -> dict:
    response = await client.post(
        "/api/v1/contacts",
        json={"name": name, "email": f"{name.lower()}@test.com", "message": message},
    )
    assert response.status_code == 201
    return response.json()


async def board(client, admin_headers) -> dict:
    response = await client.get("/api/v1/contacts/admin/by-status", headers=admin_headers)
    assert response.status_code == 200
    return response.json()


@pytest.mark.asyncio
async def test_create_ticket(client):
    response = await client.post(
        "/api/v1/contacts",
        json={
            "name": "Mia",
            "email": "mia@test.com",
            "phone": "+44 7700 900123",
            "message": "Is the walnut table in stock?",
        },
    )
    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "NEW"
    assert data["board_position"] == 0
    assert data["phone"] == "+44 7700 900123"


@pytest.mark.asyncio
async def test_create_ticket_rejects_bad_email(client):
    response = await client.post(
        "/api/v1/contacts",
        json={"name": "Mia", "email": "not-an-email", "message": "Hi"},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_list_tickets_in_board_order(client, admin_headers):
    a = await create_ticket(client, "Ann")
    b = await create_ticket(client, "Ben")
    await client.patch(
        f"/api/v1/contacts/admin/{a['id']}",
        headers=admin_headers,
        json={"status": "CLOSED"},
    )

    response = await client.get(
        "/api/v1/contacts/admin", headers=admin_headers, params={"include_history": "true"}
    )
    assert response.status_code == 200
    data = response.json()
    assert {t["id"] for t in data} == {a["id"], b["id"]}

    closed = next(t for t in data if t["id"] == a["id"])
    assert [h["action"] for h in closed["history"]] == ["STATUS_CHANGED", "CREATED"]


@pytest.mark.asyncio
async def test_list_tickets_without_history(client, admin_headers):
    await create_ticket(client, "Ann")
    response = await client.get("/api/v1/contacts/admin", headers=admin_headers)
    assert response.json()[0]["history"] is None


@pytest.mark.asyncio
async def test_tickets_by_status_lists_every_column(client, admin_headers):
    await create_ticket(client, "Ann")
    columns = await board(client, admin_headers)
    assert set(columns) == {"NEW", "IN_PROGRESS", "ANSWERED", "CLOSED"}
    assert len(columns["NEW"]) == 1
    assert columns["CLOSED"] == []


@pytest.mark.asyncio
async def test_patch_status_appends_to_end(client, admin_headers):
    a = await create_ticket(client, "Ann")
    b = await create_ticket(client, "Ben")
    c = await create_ticket(client, "Cal")
    await client.patch(
        f"/api/v1/contacts/admin/{c['id']}", headers=admin_headers, json={"status": "IN_PROGRESS"}
    )

    response = await client.patch(
        f"/api/v1/contacts/admin/{a['id']}",
        headers=admin_headers,
        json={"status": "IN_PROGRESS", "admin_notes": "Checking stock"},
    )
    assert response.status_code == 200
    data = response.json()
    assert (data["status"], data["board_position"]) == ("IN_PROGRESS", 1)
    assert data["admin_notes"] == "Checking stock"

    columns = await board(client, admin_headers)
    assert [(t["id"], t["board_position"]) for t in columns["NEW"]] == [(b["id"], 0)]
    assert [t["id"] for t in columns["IN_PROGRESS"]] == [c["id"], a["id"]]


@pytest.mark.asyncio
async def test_patch_position_without_status_stays_in_column(client, admin_headers):
    a = await create_ticket(client, "Ann")
    b = await create_ticket(client, "Ben")
    c = await create_ticket(client, "Cal")

    response = await client.patch(
        f"/api/v1/contacts/admin/{c['id']}", headers=admin_headers, json={"board_position": 0}
    )
    assert response.status_code == 200
    assert response.json()["status"] == "NEW"

    columns = await board(client, admin_headers)
    assert [t["id"] for t in columns["NEW"]] == [c["id"], a["id"], b["id"]]
    assert [t["board_position"] for t in columns["NEW"]] == [0, 1, 2]


@pytest.mark.asyncio
async def test_patch_status_and_position_moves_across(client, admin_headers):
    a = await create_ticket(client, "Ann")
    b = await create_ticket(client, "Ben")
    await client.patch(
        f"/api/v1/contacts/admin/{b['id']}", headers=admin_headers, json={"status": "ANSWERED"}
    )

    response = await client.patch(
        f"/api/v1/contacts/admin/{a['id']}",
        headers=admin_headers,
        json={"status": "ANSWERED", "board_position": 0},
    )
    assert response.status_code == 200

    columns = await board(client, admin_headers)
    assert columns["NEW"] == []
    assert [t["id"] for t in columns["ANSWERED"]] == [a["id"], b["id"]]


@pytest.mark.asyncio
async def test_patch_notes_only_logs_admin_notes(client, admin_headers):
    ticket = await create_ticket(client, "Ann")

    response = await client.patch(
        f"/api/v1/contacts/admin/{ticket['id']}",
        headers=admin_headers,
        json={"admin_notes": "Replied by phone"},
    )
    assert response.status_code == 200
    assert response.json()["board_position"] == 0

    detail = await client.get(
        f"/api/v1/contacts/admin/{ticket['id']}",
        headers=admin_headers,
        params={"include_history": "true"},
    )
    latest = detail.json()["history"][0]
    assert latest["action"] == "ADMIN_NOTES_UPDATED"
    assert latest["old_value"] == {"admin_notes": None}
    assert latest["new_value"] == {"admin_notes": "Replied by phone"}


@pytest.mark.asyncio
async def test_patch_invalid_status(client, admin_headers):
    ticket = await create_ticket(client, "Ann")
    response = await client.patch(
        f"/api/v1/contacts/admin/{ticket['id']}",
        headers=admin_headers,
        json={"status": "BUDGET_WAITING"},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_position_endpoint(client, admin_headers):
    a = await create_ticket(client, "Ann")
    b = await create_ticket(client, "Ben")

    response = await client.patch(
        f"/api/v1/contacts/admin/{a['id']}/position",
        headers=admin_headers,
        json={"status": "NEW", "board_position": 9},
    )
    assert response.status_code == 200
    assert response.json()["board_position"] == 1

    columns = await board(client, admin_headers)
    assert [t["id"] for t in columns["NEW"]] == [b["id"], a["id"]]


@pytest.mark.asyncio
async def test_delete_ticket(client, admin_headers):
    a = await create_ticket(client, "Ann")
    b = await create_ticket(client, "Ben")

    response = await client.delete(f"/api/v1/contacts/admin/{a['id']}", headers=admin_headers)
    assert response.status_code == 204

    columns = await board(client, admin_headers)
    assert [(t["id"], t["board_position"]) for t in columns["NEW"]] == [(b["id"], 0)]


@pytest.mark.asyncio
async def test_unknown_ticket(client, admin_headers):
    missing = uuid.uuid4()
    response = await client.get(f"/api/v1/contacts/admin/{missing}", headers=admin_headers)
    assert response.status_code == 404

    response = await client.patch(
        f"/api/v1/contacts/admin/{missing}", headers=admin_headers, json={"status": "CLOSED"}
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_ticket_stats(client, admin_headers):
    a = await create_ticket(client, "Ann")
    await create_ticket(client, "Ben")
    await client.patch(
        f"/api/v1/contacts/admin/{a['id']}", headers=admin_headers, json={"status": "CLOSED"}
    )

    response = await client.get("/api/v1/contacts/admin/stats", headers=admin_headers)
    data = response.json()
    assert data["total"] == 2
    assert data["by_status"] == {"NEW": 1, "IN_PROGRESS": 0, "ANSWERED": 0, "CLOSED": 1}


@pytest.mark.asyncio
async def test_patch_null_clears_notes_and_phone(client, admin_headers):
    ticket = await create_ticket(client, "Ann")
    url = f"/api/v1/contacts/admin/{ticket['id']}"
    await client.patch(
        url, headers=admin_headers, json={"admin_notes": "Call back", "phone": "+44 7700 900123"}
    )

    response = await client.patch(url, headers=admin_headers, json={"admin_notes": None, "phone": None})
    assert response.status_code == 200
    data = response.json()
    assert data["admin_notes"] is None
    assert data["phone"] is None

    response = await client.patch(url, headers=admin_headers, json={"message": None})
    assert response.status_code == 400
