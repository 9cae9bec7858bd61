from kostkelola_backend.modules.auth.models import RoleSlug
from kostkelola_backend.modules.realtime import (
    ChangeEvent,
    ChangeEventType,
    Channel,
)


class RecordingConnection:
    """Stand-in websocket that records ``send_json`` payloads."""

    def __init__(self, closed: bool = False):
        self.closed = closed
        self.messages: list[dict] = []

    async def send_json(self, data: dict) -> None:
        if self.closed:
            raise RuntimeError("websocket is closed")
        self.messages.append(data)


async def test_notification_feed_includes_broadcasts(client, make_user, login):
    await make_user("support@example.com", role=RoleSlug.SUPPORT)
    await make_user("owner1@example.com")
    await make_user("owner2@example.com")
    staff = await login("support@example.com")
    first = await login("owner1@example.com")
    second = await login("owner2@example.com")

    broadcast = await client.post(
        "/api/backoffice/notifications",
        json={"title": "Maintenance", "message": "Downtime tonight"},
        headers=staff,
    )
    assert broadcast.status_code == 201
    own = await client.post(
        "/api/notifications",
        json={"title": "Catatan", "message": "Cek meteran air"},
        headers=first,
    )
    assert own.status_code == 201

    first_feed = await client.get("/api/notifications", headers=first)
    second_feed = await client.get("/api/notifications", headers=second)

    assert [n["title"] for n in first_feed.json()["data"]] == ["Catatan", "Maintenance"]
    assert [n["title"] for n in second_feed.json()["data"]] == ["Maintenance"]

    count = await client.get("/api/notifications/unread-count", headers=first)
    assert count.json()["data"]["unread"] == 2


async def test_mark_read_and_read_all(client, owner, login):
    headers = await login(owner.email)
    ids = []
    for title in ("Satu", "Dua"):
        created = await client.post(
            "/api/notifications",
            json={"title": title, "message": "-"},
            headers=headers,
        )
        ids.append(created.json()["data"]["id"])

    single = await client.post(f"/api/notifications/{ids[0]}/read", headers=headers)
    assert single.json()["data"]["status"] == "read"

    await client.post("/api/notifications/read-all", headers=headers)

    unread = await client.get(
        "/api/notifications", params={"status": "unread"}, headers=headers
    )
    assert unread.json()["data"] == []


async def test_owner_cannot_mark_broadcast_read(client, make_user, login):
    await make_user("admin@example.com", role=RoleSlug.ADMIN)
    owner = await make_user("owner1@example.com")
    staff = await login("admin@example.com")
    headers = await login(owner.email)
    broadcast = await client.post(
        "/api/backoffice/notifications",
        json={"title": "Info", "message": "Harga baru"},
        headers=staff,
    )
    notification_id = broadcast.json()["data"]["id"]

    response = await client.post(
        f"/api/notifications/{notification_id}/read", headers=headers
    )

    assert response.status_code == 403


async def test_owner_cannot_broadcast(client, owner, login):
    headers = await login(owner.email)

    response = await client.post(
        "/api/backoffice/notifications",
        json={"title": "Spam", "message": "-"},
        headers=headers,
    )

    assert response.status_code == 403


async def test_chat_conversation_and_partners(client, make_user, login):
    alice = await make_user("alice@example.com")
    bob = await make_user("bob@example.com")
    alice_headers = await login(alice.email)
    bob_headers = await login(bob.email)

    for content in ("Halo", "Kamar masih ada?"):
        sent = await client.post(
            "/api/chat/messages",
            json={"receiver_id": bob.id, "content": content},
            headers=alice_headers,
        )
        assert sent.status_code == 201

    partners = await client.get("/api/chat/partners", headers=bob_headers)
    partner = partners.json()["data"][0]
    assert partner["user_id"] == alice.id
    assert partner["unread_count"] == 2
    assert partner["last_message"]["content"] == "Kamar masih ada?"

    conversation = await client.get(
        f"/api/chat/conversations/{alice.id}", headers=bob_headers
    )
    assert [m["content"] for m in conversation.json()["data"]] == [
        "Halo",
        "Kamar masih ada?",
    ]

    await client.post(f"/api/chat/conversations/{alice.id}/read", headers=bob_headers)
    partners = await client.get("/api/chat/partners", headers=bob_headers)
    assert partners.json()["data"][0]["unread_count"] == 0


async def test_chat_to_self_is_rejected(client, owner, login):
    headers = await login(owner.email)

    response = await client.post(
        "/api/chat/messages",
        json={"receiver_id": owner.id, "content": "Halo"},
        headers=headers,
    )

    assert response.status_code == 400


async def test_chat_message_reaches_only_participants(
    client, broker, make_user, login
):
    alice = await make_user("alice@example.com")
    bob = await make_user("bob@example.com")
    carol = await make_user("carol@example.com")
    bob_socket = RecordingConnection()
    carol_socket = RecordingConnection()
    await broker.subscribe(Channel.CHAT, bob_socket, bob.id)
    await broker.subscribe(Channel.CHAT, carol_socket, carol.id)

    await client.post(
        "/api/chat/messages",
        json={"receiver_id": bob.id, "content": "Halo Bob"},
        headers=await login(alice.email),
    )

    assert [m["record"]["content"] for m in bob_socket.messages] == ["Halo Bob"]
    assert carol_socket.messages == []
    assert "audience" not in bob_socket.messages[0]


async def test_broker_broadcast_and_pruning(broker):
    live = RecordingConnection()
    dead = RecordingConnection(closed=True)
    await broker.subscribe(Channel.NOTIFICATIONS, live, 1)
    await broker.subscribe(Channel.NOTIFICATIONS, dead, 2)

    delivered = await broker.publish(
        ChangeEvent(
            channel=Channel.NOTIFICATIONS,
            event=ChangeEventType.INSERT,
            table="notifications",
            record={"id": 1},
            audience=None,
        )
    )

    assert delivered == 1
    assert live.messages[0]["event"] == "INSERT"
    assert broker.subscriber_count(Channel.NOTIFICATIONS) == 1


async def test_broker_respects_audience(broker):
    owner_socket = RecordingConnection()
    stranger_socket = RecordingConnection()
    await broker.subscribe(Channel.PROPERTIES, owner_socket, 10)
    await broker.subscribe(Channel.PROPERTIES, stranger_socket, 11)

    await broker.publish(
        ChangeEvent(
            channel=Channel.PROPERTIES,
            event=ChangeEventType.UPDATE,
            table="rooms",
            record={"id": 5, "status": "occupied"},
            audience=[10],
        )
    )

    assert len(owner_socket.messages) == 1
    assert stranger_socket.messages == []
