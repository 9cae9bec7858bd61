from uuid import UUID

import pytest

from kostkelola_backend.core.exceptions import NotFoundError, RoomTypeInUseError
from kostkelola_backend.modules.property_management.schemas import (
    PropertyCreate,
    RoomCreate,
    RoomTypeCreate,
    RoomTypeUpdate,
)
from kostkelola_backend.modules.property_management.services import (
    create_property,
    create_room,
    create_room_type,
    get_owned_property,
    update_room_type,
)


@pytest.fixture
async def owner_headers(owner, login, subscribe):
    await subscribe(owner.id, "Pro")
    return await login(owner.email)


@pytest.fixture
async def property_id(client, owner_headers):
    response = await client.post(
        "/api/properties",
        json={"name": "Kost Mawar", "city": "Yogyakarta", "email": "mawar@example.com"},
        headers=owner_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]["id"]


async def _add_room(client, headers, property_id, name, **fields):
    response = await client.post(
        f"/api/properties/{property_id}/rooms",
        json={"name": name, "price": "1000000", **fields},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def _add_tenant(client, headers, property_id, name, **fields):
    response = await client.post(
        f"/api/properties/{property_id}/tenants",
        json={"name": name, "email": f"{name.lower()}@example.com", **fields},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def test_rename_in_use_lists_affected_rooms(db, owner, subscribe):
    await subscribe(owner.id, "Pro")

    prop = await create_property(db, owner.id, PropertyCreate(name="Kost Kenanga"))
    standard = await create_room_type(
        db, prop.id, owner.id, RoomTypeCreate(name="Standard", price=1000000)
    )
    for name in ("B2", "B1"):
        await create_room(
            db, prop.id, owner.id, RoomCreate(name=name, type="Standard", price=1000000)
        )

    with pytest.raises(RoomTypeInUseError) as exc_info:
        await update_room_type(
            db, standard.id, owner.id, RoomTypeUpdate(name="Deluxe")
        )

    affected = exc_info.value.details["affected_rooms"]
    assert [room["name"] for room in affected] == ["B1", "B2"]
    assert "B1, B2" in exc_info.value.message


async def test_rename_without_rooms_succeeds(client, owner_headers, property_id):
    created = await client.post(
        f"/api/properties/{property_id}/room-types",
        json={"name": "Standard", "price": "900000"},
        headers=owner_headers,
    )
    type_id = created.json()["data"]["id"]

    response = await client.put(
        f"/api/room-types/{type_id}", json={"name": "Deluxe"}, headers=owner_headers
    )

    assert response.status_code == 200
    assert response.json()["data"]["name"] == "Deluxe"


async def test_rename_in_use_via_api_returns_conflict(client, owner_headers, property_id):
    created = await client.post(
        f"/api/properties/{property_id}/room-types",
        json={"name": "Standard", "price": "900000"},
        headers=owner_headers,
    )
    type_id = created.json()["data"]["id"]
    await _add_room(client, owner_headers, property_id, "C1", type="Standard")

    response = await client.put(
        f"/api/room-types/{type_id}", json={"name": "Deluxe"}, headers=owner_headers
    )

    assert response.status_code == 409
    body = response.json()
    assert body["success"] is False
    assert body["details"]["affected_rooms"][0]["name"] == "C1"


async def test_cascade_rename_updates_rooms(client, owner_headers, property_id):
    created = await client.post(
        f"/api/properties/{property_id}/room-types",
        json={"name": "Standard", "price": "900000"},
        headers=owner_headers,
    )
    type_id = created.json()["data"]["id"]
    room = await _add_room(client, owner_headers, property_id, "C1", type="Standard")

    response = await client.put(
        f"/api/room-types/{type_id}?cascade_rename=true",
        json={"name": "Deluxe"},
        headers=owner_headers,
    )
    assert response.status_code == 200

    room_response = await client.get(f"/api/rooms/{room['id']}", headers=owner_headers)
    assert room_response.json()["data"]["type"] == "Deluxe"


async def test_delete_room_type_in_use_is_blocked(client, owner_headers, property_id):
    created = await client.post(
        f"/api/properties/{property_id}/room-types",
        json={"name": "Standard", "price": "900000"},
        headers=owner_headers,
    )
    type_id = created.json()["data"]["id"]
    await _add_room(client, owner_headers, property_id, "C1", type="Standard")

    response = await client.delete(f"/api/room-types/{type_id}", headers=owner_headers)

    assert response.status_code == 409


async def test_room_with_unknown_type_is_rejected(client, owner_headers, property_id):
    response = await client.post(
        f"/api/properties/{property_id}/rooms",
        json={"name": "D1", "price": "1000000", "type": "Suite"},
        headers=owner_headers,
    )

    assert response.status_code == 400
    assert response.json()["success"] is False


async def test_assign_and_vacate_keep_both_sides_in_sync(
    client, owner_headers, property_id
):
    room = await _add_room(client, owner_headers, property_id, "E1")
    tenant = await _add_tenant(client, owner_headers, property_id, "Budi")

    assigned = await client.post(
        f"/api/rooms/{room['id']}/assign",
        json={"tenant_id": tenant["id"]},
        headers=owner_headers,
    )
    assert assigned.status_code == 200
    data = assigned.json()["data"]
    assert data["status"] == "occupied"
    assert data["tenant_id"] == tenant["id"]
    assert data["tenant_name"] == "Budi"

    tenant_response = await client.get(
        f"/api/tenants/{tenant['id']}", headers=owner_headers
    )
    assert tenant_response.json()["data"]["room_id"] == room["id"]

    vacated = await client.post(
        f"/api/rooms/{room['id']}/vacate", headers=owner_headers
    )
    assert vacated.json()["data"]["status"] == "vacant"
    assert vacated.json()["data"]["tenant_id"] is None

    tenant_response = await client.get(
        f"/api/tenants/{tenant['id']}", headers=owner_headers
    )
    assert tenant_response.json()["data"]["room_id"] is None


async def test_moving_tenant_frees_previous_room(client, owner_headers, property_id):
    first = await _add_room(client, owner_headers, property_id, "F1")
    second = await _add_room(client, owner_headers, property_id, "F2")
    tenant = await _add_tenant(
        client, owner_headers, property_id, "Sari", room_id=first["id"]
    )

    await client.post(
        f"/api/rooms/{second['id']}/assign",
        json={"tenant_id": tenant["id"]},
        headers=owner_headers,
    )

    old_room = await client.get(f"/api/rooms/{first['id']}", headers=owner_headers)
    assert old_room.json()["data"]["status"] == "vacant"
    assert old_room.json()["data"]["tenant_id"] is None


async def test_occupied_room_cannot_take_second_tenant(
    client, owner_headers, property_id
):
    room = await _add_room(client, owner_headers, property_id, "G1")
    await _add_tenant(client, owner_headers, property_id, "Andi", room_id=room["id"])
    other = await _add_tenant(client, owner_headers, property_id, "Dewi")

    response = await client.post(
        f"/api/rooms/{room['id']}/assign",
        json={"tenant_id": other["id"]},
        headers=owner_headers,
    )

    assert response.status_code == 409


async def test_room_cannot_be_marked_occupied_directly(
    client, owner_headers, property_id
):
    room = await _add_room(client, owner_headers, property_id, "H1")

    response = await client.put(
        f"/api/rooms/{room['id']}", json={"status": "occupied"}, headers=owner_headers
    )

    assert response.status_code == 400


async def test_duplicate_room_is_vacant_copy(client, owner_headers, property_id):
    room = await _add_room(client, owner_headers, property_id, "J1", floor="2")
    await _add_tenant(client, owner_headers, property_id, "Rina", room_id=room["id"])

    response = await client.post(
        f"/api/rooms/{room['id']}/duplicate", headers=owner_headers
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["name"] == "J1 (Copy)"
    assert data["floor"] == "2"
    assert data["status"] == "vacant"
    assert data["tenant_id"] is None


async def test_other_owner_cannot_see_property(
    client, property_id, make_user, login
):
    await make_user("intruder@example.com")
    headers = await login("intruder@example.com")

    response = await client.get(f"/api/properties/{property_id}", headers=headers)

    assert response.status_code == 404

    rooms = await client.get(f"/api/properties/{property_id}/rooms", headers=headers)
    assert rooms.status_code == 404


async def test_foreign_property_is_not_found(db, kost, make_user):
    property_obj, _ = kost
    other = await make_user("other@example.com")

    with pytest.raises(NotFoundError):
        await get_owned_property(db, property_obj.id, other.id)


async def test_rows_get_distinct_uuids(db, owner, kost):
    property_obj, room = kost

    assert isinstance(property_obj.uuid, UUID)
    assert isinstance(room.uuid, UUID)
    assert property_obj.uuid != room.uuid


async def test_marketplace_publish_requires_feature(client, owner, kost, login):
    property_obj, _ = kost
    headers = await login(owner.email)

    response = await client.put(
        f"/api/properties/{property_obj.id}/marketplace",
        json={"marketplace_enabled": True, "marketplace_status": "published"},
        headers=headers,
    )

    assert response.status_code == 403
    assert response.json()["details"]["feature"] == "marketplace_listing"


async def test_published_property_appears_in_marketplace(
    client, owner_headers, property_id
):
    await _add_room(client, owner_headers, property_id, "K1")
    await client.put(
        f"/api/properties/{property_id}/marketplace",
        json={"marketplace_enabled": True, "marketplace_status": "published"},
        headers=owner_headers,
    )

    response = await client.get("/api/marketplace/properties", params={"search": "yogya"})

    data = response.json()["data"]
    assert [p["name"] for p in data["properties"]] == ["Kost Mawar"]
    assert data["properties"][0]["available_rooms"] == 1
    assert "Yogyakarta" in data["cities"]
