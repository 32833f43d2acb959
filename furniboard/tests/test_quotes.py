import uuid

import pytest


def quote_payload(name: str = "Sarah Chen", quantities: tuple[int, ...] = (1, 2)) -> dict:
    return {
        "customer_name": name,
        "customer_email": f"{name.split()[0].lower()}@test.com",
        "customer_phone": "+44 20 7946 0101",
        "postcode": "SW1A 1AA",
        "address": "12 Rosebery Avenue, London",
        "message": "Please quote delivery too",
        "items": [
            {
                "furniture_id": f"item-{i}",
                "furniture_name": f"Chair {i}",
                "category": "Chairs",
                "color": "Oak",
                "quantity": q,
            }
            for i, q in enumerate(quantities)
        ],
    }


async def create_quote(client, name: str) -> dict:
    response = await client.post("/api/v1/quotes", json=quote_payload(name))
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_create_quote(client):
    response = await client.post("/api/v1/quotes", json=quote_payload(quantities=(2, 3)))
    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "OPEN"
    assert data["board_position"] == 0
    assert data["total_items"] == 5
    assert len(data["items"]) == 2
    assert data["history"] is None


@pytest.mark.asyncio
async def test_create_quote_without_items(client):
    payload = quote_payload()
    payload["items"] = []
    response = await client.post("/api/v1/quotes", json=payload)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_quote_invalid_quantity(client):
    payload = quote_payload(quantities=(0,))
    response = await client.post("/api/v1/quotes", json=payload)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_new_quotes_append_to_open_column(client):
    first = await create_quote(client, "Ann Lee")
    second = await create_quote(client, "Ben Ray")
    assert (first["board_position"], second["board_position"]) == (0, 1)


@pytest.mark.asyncio
async def test_list_quotes_filters_and_paginates(client, admin_headers):
    for name in ("Ann Lee", "Ben Ray", "Cal Fox"):
        await create_quote(client, name)

    response = await client.get(
        "/api/v1/quotes/admin",
        headers=admin_headers,
        params={"page_size": 2, "sort_by": "board_position", "sort_order": "asc"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 3
    assert data["total_pages"] == 2
    assert data["has_next"] is True
    assert [q["customer_name"] for q in data["items"]] == ["Ann Lee", "Ben Ray"]

    response = await client.get(
        "/api/v1/quotes/admin", headers=admin_headers, params={"search": "ben"}
    )
    assert [q["customer_name"] for q in response.json()["items"]] == ["Ben Ray"]

    response = await client.get(
        "/api/v1/quotes/admin", headers=admin_headers, params={"status": "DELIVERED"}
    )
    assert response.json()["total"] == 0


@pytest.mark.asyncio
async def test_get_quote_with_history(client, admin_headers):
    quote = await create_quote(client, "Ann Lee")

    response = await client.get(
        f"/api/v1/quotes/admin/{quote['id']}",
        headers=admin_headers,
        params={"include_history": "true"},
    )
    assert response.status_code == 200
    history = response.json()["history"]
    assert len(history) == 1
    assert history[0]["action"] == "CREATED"
    assert history[0]["performed_by"] == "customer"


@pytest.mark.asyncio
async def test_get_unknown_quote(client, admin_headers):
    response = await client.get(f"/api/v1/quotes/admin/{uuid.uuid4()}", headers=admin_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_quote_customer_info(client, admin_headers):
    quote = await create_quote(client, "Ann Lee")

    response = await client.patch(
        f"/api/v1/quotes/admin/{quote['id']}",
        headers=admin_headers,
        json={"postcode": "EC1A 1BB", "admin_notes": "Prefers email"},
    )
    assert response.status_code == 200
    assert response.json()["postcode"] == "EC1A 1BB"

    detail = await client.get(
        f"/api/v1/quotes/admin/{quote['id']}",
        headers=admin_headers,
        params={"include_history": "true"},
    )
    latest = detail.json()["history"][0]
    assert latest["action"] == "CUSTOMER_INFO_UPDATED"
    assert latest["performed_by"] == "admin"
    assert latest["new_value"] == {"postcode": "EC1A 1BB", "admin_notes": "Prefers email"}


@pytest.mark.asyncio
async def test_update_status_appends_to_destination(client, admin_headers):
    a = await create_quote(client, "Ann Lee")
    b = await create_quote(client, "Ben Ray")
    c = await create_quote(client, "Cal Fox")

    await client.patch(
        f"/api/v1/quotes/admin/{c['id']}/status",
        headers=admin_headers,
        json={"status": "ANSWERED"},
    )
    response = await client.patch(
        f"/api/v1/quotes/admin/{a['id']}/status",
        headers=admin_headers,
        json={"status": "ANSWERED", "admin_notes": "Sent pricing"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ANSWERED"
    assert data["board_position"] == 1
    assert data["admin_notes"] == "Sent pricing"

    board = (await client.get("/api/v1/quotes/admin/by-status", headers=admin_headers)).json()
    assert [(q["id"], q["board_position"]) for q in board["OPEN"]] == [(b["id"], 0)]
    assert [q["id"] for q in board["ANSWERED"]] == [c["id"], a["id"]]


@pytest.mark.asyncio
async def test_update_status_invalid(client, admin_headers):
    quote = await create_quote(client, "Ann Lee")
    response = await client.patch(
        f"/api/v1/quotes/admin/{quote['id']}/status",
        headers=admin_headers,
        json={"status": "ARCHIVED"},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_move_quote_position(client, admin_headers):
    ids = [(await create_quote(client, name))["id"] for name in ("Ann Lee", "Ben Ray", "Cal Fox", "Dee Poe")]

    response = await client.patch(
        f"/api/v1/quotes/admin/{ids[3]}/position",
        headers=admin_headers,
        json={"status": "OPEN", "board_position": 1},
    )
    assert response.status_code == 200
    assert response.json()["board_position"] == 1

    board = (await client.get("/api/v1/quotes/admin/by-status", headers=admin_headers)).json()
    assert [q["id"] for q in board["OPEN"]] == [ids[0], ids[3], ids[1], ids[2]]
    assert [q["board_position"] for q in board["OPEN"]] == [0, 1, 2, 3]


@pytest.mark.asyncio
async def test_move_quote_negative_position(client, admin_headers):
    quote = await create_quote(client, "Ann Lee")
    response = await client.patch(
        f"/api/v1/quotes/admin/{quote['id']}/position",
        headers=admin_headers,
        json={"status": "OPEN", "board_position": -1},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_move_unknown_quote(client, admin_headers):
    response = await client.patch(
        f"/api/v1/quotes/admin/{uuid.uuid4()}/position",
        headers=admin_headers,
        json={"status": "OPEN", "board_position": 0},
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_quote_closes_gap(client, admin_headers):
    a = await create_quote(client, "Ann Lee")
    b = await create_quote(client, "Ben Ray")
    c = await create_quote(client, "Cal Fox")

    response = await client.delete(f"/api/v1/quotes/admin/{b['id']}", headers=admin_headers)
    assert response.status_code == 204

    board = (await client.get("/api/v1/quotes/admin/by-status", headers=admin_headers)).json()
    assert [(q["id"], q["board_position"]) for q in board["OPEN"]] == [(a["id"], 0), (c["id"], 1)]

    response = await client.delete(f"/api/v1/quotes/admin/{b['id']}", headers=admin_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_quote_stats(client, admin_headers):
    a = await create_quote(client, "Ann Lee")
    await create_quote(client, "Ben Ray")
    await client.patch(
        f"/api/v1/quotes/admin/{a['id']}/status",
        headers=admin_headers,
        json={"status": "BUDGET_ACCEPTED"},
    )

    response = await client.get("/api/v1/quotes/admin/stats", headers=admin_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert data["recent"] == 2
    assert data["by_status"]["OPEN"] == 1
    assert data["by_status"]["BUDGET_ACCEPTED"] == 1


@pytest.mark.asyncio
async def test_replace_quote_items(client, admin_headers):
    quote = await create_quote(client, "Ann Lee")

    response = await client.put(
        f"/api/v1/quotes/admin/{quote['id']}/items",
        headers=admin_headers,
        json={
            "items": [
                {"furniture_id": "bed-1", "furniture_name": "Bed", "category": "Beds", "quantity": 4}
            ]
        },
    )
    assert response.status_code == 200
    data = response.json()
    assert data["total_items"] == 4
    assert [i["furniture_id"] for i in data["items"]] == ["bed-1"]

    detail = await client.get(
        f"/api/v1/quotes/admin/{quote['id']}",
        headers=admin_headers,
        params={"include_history": "true"},
    )
    latest = detail.json()["history"][0]
    assert latest["action"] == "ITEMS_UPDATED"
    assert latest["old_value"] == {"total_items": 3, "item_count": 2}


@pytest.mark.asyncio
async def test_replace_quote_items_requires_items(client, admin_headers):
    quote = await create_quote(client, "Ann Lee")
    response = await client.put(
        f"/api/v1/quotes/admin/{quote['id']}/items", headers=admin_headers, json={"items": []}
    )
    assert response.status_code == 422
