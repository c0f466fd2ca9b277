"""Tests for sending messages and reading conversations through the API."""

import uuid

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession


async def send(client: AsyncClient, user: dict, announcement_id: str, content: str, receiver_id: str | None = None):
    payload = {"announcement_id": announcement_id, "content": content}
    if receiver_id:
        payload["receiver_id"] = receiver_id
    return await client.post("/api/v1/messages/", json=payload, headers=user["headers"])


async def create_listing(client: AsyncClient, user: dict, title: str) -> dict:
    response = await client.post(
        "/api/v1/announcements/",
        json={"title": title, "description": f"{title} in good condition", "price": "10.00"},
        headers=user["headers"],
    )
    return response.json()


# ============== Sending ==============


@pytest.mark.asyncio
async def test_send_message_defaults_to_owner(client: AsyncClient, seller, buyer, listing):
    response = await send(client, buyer, listing["id"], "Is this available?")

    assert response.status_code == 201
    data = response.json()
    assert data["sender_id"] == buyer["id"]
    assert data["receiver_id"] == seller["id"]
    assert data["announcement_id"] == listing["id"]
    assert data["content"] == "Is this available?"
    assert data["is_read"] is False
    assert data["read_at"] is None


@pytest.mark.asyncio
async def test_owner_replies_to_buyer(client: AsyncClient, seller, buyer, listing):
    await send(client, buyer, listing["id"], "Is this available?")

    response = await send(client, seller, listing["id"], "Yes it is", receiver_id=buyer["id"])

    assert response.status_code == 201
    assert response.json()["receiver_id"] == buyer["id"]


@pytest.mark.asyncio
async def test_send_message_to_self(client: AsyncClient, seller, listing):
    response = await send(client, seller, listing["id"], "Talking to myself")

    assert response.status_code == 422
    assert response.json()["field"] == "receiver_id"


@pytest.mark.asyncio
async def test_send_message_between_non_owners(client: AsyncClient, make_user, buyer, listing):
    other = await make_user("other@example.com")

    response = await send(client, buyer, listing["id"], "Hi", receiver_id=other["id"])

    assert response.status_code == 403
    assert response.json()["code"] == "AUTHZ_NOT_PARTICIPANT"


@pytest.mark.asyncio
async def test_send_message_unknown_listing(client: AsyncClient, buyer):
    response = await send(client, buyer, str(uuid.uuid4()), "Hello?")

    assert response.status_code == 404
    assert response.json()["detail"] == "Announcement not found"


@pytest.mark.asyncio
async def test_send_message_unknown_receiver(client: AsyncClient, seller, listing):
    response = await send(client, seller, listing["id"], "Hello?", receiver_id=str(uuid.uuid4()))

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_send_blank_message(client: AsyncClient, buyer, listing):
    response = await send(client, buyer, listing["id"], "   ")

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_send_message_requires_auth(client: AsyncClient, listing):
    response = await client.post(
        "/api/v1/messages/",
        json={"announcement_id": listing["id"], "content": "Hi"},
    )

    assert response.status_code == 401


# ============== Conversation list ==============


@pytest.mark.asyncio
async def test_conversations_for_seller(client: AsyncClient, seller, buyer, listing):
    await send(client, buyer, listing["id"], "Hi")
    await send(client, buyer, listing["id"], "Is this available?")

    response = await client.get("/api/v1/messages/conversations", headers=seller["headers"])

    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    assert data[0]["announcement_id"] == listing["id"]
    assert data[0]["announcement_title"] == "Road bike"
    assert data[0]["other_user"]["id"] == buyer["id"]
    assert data[0]["other_user"]["email"] == buyer["email"]
    assert data[0]["last_message"] == "Is this available?"
    assert data[0]["unread_count"] == 2


@pytest.mark.asyncio
async def test_conversations_for_buyer_do_not_count_own_messages(
    client: AsyncClient, seller, buyer, listing
):
    await send(client, buyer, listing["id"], "Hi")

    response = await client.get("/api/v1/messages/conversations", headers=buyer["headers"])

    data = response.json()
    assert len(data) == 1
    assert data[0]["other_user"]["id"] == seller["id"]
    assert data[0]["unread_count"] == 0


@pytest.mark.asyncio
async def test_conversations_ordered_by_latest_message(client: AsyncClient, seller, buyer):
    lamp = await create_listing(client, seller, "Lamp")
    desk = await create_listing(client, seller, "Desk")

    await send(client, buyer, lamp["id"], "About the lamp")
    await send(client, buyer, desk["id"], "About the desk")

    response = await client.get("/api/v1/messages/conversations", headers=seller["headers"])

    titles = [c["announcement_title"] for c in response.json()]
    assert titles == ["Desk", "Lamp"]


@pytest.mark.asyncio
async def test_conversations_empty(client: AsyncClient, buyer):
    response = await client.get("/api/v1/messages/conversations", headers=buyer["headers"])

    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
async def test_deleted_listing_drops_out_of_conversations(
    client: AsyncClient, seller, buyer, listing
):
    await send(client, buyer, listing["id"], "Hi")

    await client.delete(f"/api/v1/announcements/{listing['id']}", headers=seller["headers"])

    response = await client.get("/api/v1/messages/conversations", headers=seller["headers"])
    assert response.json() == []

    unread = await client.get("/api/v1/messages/unread-count", headers=seller["headers"])
    assert unread.json()["count"] == 0


# ============== Opening a conversation ==============


@pytest.mark.asyncio
async def test_open_conversation_marks_messages_read(client: AsyncClient, seller, buyer, listing):
    await send(client, buyer, listing["id"], "Hi")
    await send(client, buyer, listing["id"], "Is this available?")

    response = await client.get(
        f"/api/v1/messages/conversations/{listing['id']}",
        headers=seller["headers"],
    )

    assert response.status_code == 200
    data = response.json()
    assert data["announcement_id"] == listing["id"]
    assert data["announcement_owner_id"] == seller["id"]
    assert [m["content"] for m in data["messages"]] == ["Hi", "Is this available?"]
    assert all(m["is_read"] for m in data["messages"])
    assert all(m["read_at"] is not None for m in data["messages"])

    conversations = await client.get("/api/v1/messages/conversations", headers=seller["headers"])
    assert conversations.json()[0]["unread_count"] == 0


@pytest.mark.asyncio
async def test_open_conversation_leaves_other_listings_unread(client: AsyncClient, seller, buyer):
    lamp = await create_listing(client, seller, "Lamp")
    desk = await create_listing(client, seller, "Desk")
    await send(client, buyer, lamp["id"], "About the lamp")
    await send(client, buyer, desk["id"], "About the desk")

    await client.get(f"/api/v1/messages/conversations/{lamp['id']}", headers=seller["headers"])

    response = await client.get("/api/v1/messages/conversations", headers=seller["headers"])
    unread = {c["announcement_title"]: c["unread_count"] for c in response.json()}
    assert unread == {"Lamp": 0, "Desk": 1}


@pytest.mark.asyncio
async def test_open_conversation_does_not_mark_own_messages(
    client: AsyncClient, seller, buyer, listing
):
    await send(client, buyer, listing["id"], "Hi")

    response = await client.get(
        f"/api/v1/messages/conversations/{listing['id']}",
        headers=buyer["headers"],
    )

    assert response.status_code == 200
    assert response.json()["messages"][0]["is_read"] is False

    unread = await client.get("/api/v1/messages/unread-count", headers=seller["headers"])
    assert unread.json()["count"] == 1


@pytest.mark.asyncio
async def test_owner_opens_conversation_without_messages(client: AsyncClient, seller, listing):
    response = await client.get(
        f"/api/v1/messages/conversations/{listing['id']}",
        headers=seller["headers"],
    )

    assert response.status_code == 200
    assert response.json()["messages"] == []


@pytest.mark.asyncio
async def test_failed_mark_read_keeps_messages_unread(
    client: AsyncClient, db_session: AsyncSession, monkeypatch, seller, buyer, listing
):
    await send(client, buyer, listing["id"], "Is this available?")

    async def failing_commit():
        raise OperationalError("UPDATE messages", {}, Exception("database is locked"))

    monkeypatch.setattr(db_session, "commit", failing_commit)

    response = await client.get(
        f"/api/v1/messages/conversations/{listing['id']}",
        headers=seller["headers"],
    )

    assert response.status_code == 500
    assert response.json() == {
        "detail": "Failed to mark messages as read",
        "code": "SERVER_ERROR",
    }

    monkeypatch.undo()

    conversations = await client.get("/api/v1/messages/conversations", headers=seller["headers"])
    assert conversations.json()[0]["unread_count"] == 1

    unread = await client.get("/api/v1/messages/unread-count", headers=seller["headers"])
    assert unread.json()["count"] == 1


@pytest.mark.asyncio
async def test_outsider_cannot_open_conversation(client: AsyncClient, make_user, buyer, listing):
    outsider = await make_user("outsider@example.com")
    await send(client, buyer, listing["id"], "Hi")

    response = await client.get(
        f"/api/v1/messages/conversations/{listing['id']}",
        headers=outsider["headers"],
    )

    assert response.status_code == 403
    assert response.json()["code"] == "AUTHZ_NOT_PARTICIPANT"


@pytest.mark.asyncio
async def test_open_conversation_unknown_listing(client: AsyncClient, buyer):
    response = await client.get(
        f"/api/v1/messages/conversations/{uuid.uuid4()}",
        headers=buyer["headers"],
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_buyer_sees_only_own_thread(client: AsyncClient, make_user, seller, buyer, listing):
    second_buyer = await make_user("second@example.com")
    await send(client, buyer, listing["id"], "First buyer here")
    await send(client, second_buyer, listing["id"], "Second buyer here")

    response = await client.get(
        f"/api/v1/messages/conversations/{listing['id']}",
        headers=buyer["headers"],
    )

    assert [m["content"] for m in response.json()["messages"]] == ["First buyer here"]


# ============== Unread count ==============


@pytest.mark.asyncio
async def test_unread_count(client: AsyncClient, seller, buyer, listing):
    await send(client, buyer, listing["id"], "One")
    await send(client, buyer, listing["id"], "Two")
    await send(client, seller, listing["id"], "Reply", receiver_id=buyer["id"])

    seller_count = await client.get("/api/v1/messages/unread-count", headers=seller["headers"])
    buyer_count = await client.get("/api/v1/messages/unread-count", headers=buyer["headers"])

    assert seller_count.status_code == 200
    assert seller_count.json() == {"count": 2}
    assert buyer_count.json() == {"count": 1}
