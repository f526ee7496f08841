from __future__ import annotations

import pytest

from src.api.errors import NotFoundError, ValidationError
from src.api.services.support_service import NotificationStore, SupportTicketStore


def _ticket(store: SupportTicketStore, user_id: str = "u1"):
    return store.create(user_id, f"{user_id}@example.com", "Chart broken", "Candles do not load", priority="high")


def test_creating_ticket_notifies_owner(session) -> None:
    store = SupportTicketStore(session)

    ticket = _ticket(store)

    assert ticket.status == "open"
    assert ticket.priority == "high"
    assert ticket.category == "general"
    notifications = NotificationStore(session).list_for_user("u1")
    assert [n.type for n in notifications] == ["ticket_created"]
    assert f"#{ticket.id}" in notifications[0].message
    assert notifications[0].read is False


def test_resolving_ticket_notifies_once(session) -> None:
    store = SupportTicketStore(session)
    ticket = _ticket(store)

    store.update(ticket.id, "u1", status="resolved", resolution="Fixed the feed")
    store.update(ticket.id, "u1", status="resolved")

    updated = store.get(ticket.id, "u1")
    assert updated.status == "resolved"
    assert updated.resolution == "Fixed the feed"
    types = [n.type for n in NotificationStore(session).list_for_user("u1")]
    assert sorted(types) == ["ticket_created", "ticket_resolved"]


def test_ticket_lookup_is_scoped_to_owner(session) -> None:
    store = SupportTicketStore(session)
    ticket = _ticket(store)

    with pytest.raises(NotFoundError):
        store.get(ticket.id, "u2")
    with pytest.raises(NotFoundError):
        store.update(ticket.id, user_id="u2", status="closed")
    with pytest.raises(NotFoundError):
        store.rate(ticket.id, "u2", 1)
    assert store.list_for_user("u2") == []


def test_rate_ticket(session) -> None:
    store = SupportTicketStore(session)
    ticket = _ticket(store)

    rated = store.rate(ticket.id, "u1", 5, "Quick fix")

    assert (rated.rating, rated.feedback) == (5, "Quick fix")
    with pytest.raises(ValidationError):
        store.rate(ticket.id, "u1", 6)


def test_mark_read_only_for_owner(session) -> None:
    notifications = NotificationStore(session)
    note = notifications.add("u1", "plan_updated", "Plan updated", "You are now on Pro")

    with pytest.raises(NotFoundError):
        notifications.mark_read("u2", note.id)

    assert notifications.mark_read("u1", note.id).read is True


def test_notification_routes(client) -> None:
    ticket = client.post(
        "/api/support/tickets",
        json={
            "userId": "u1",
            "userEmail": "u1@example.com",
            "subject": "Billing question",
            "description": "Was I charged twice?",
            "category": "billing",
        },
    )
    assert ticket.status_code == 201
    assert ticket.json()["ticket"]["category"] == "billing"

    listing = client.get("/api/notifications", params={"userId": "u1"}).json()
    assert listing["unread"] == 1
    note_id = listing["notifications"][0]["id"]

    marked = client.patch(f"/api/notifications/{note_id}/read", params={"userId": "u1"})
    assert marked.status_code == 200
    assert marked.json()["read"] is True
    assert client.get("/api/notifications", params={"userId": "u1"}).json()["unread"] == 0


def test_support_ticket_routes(client) -> None:
    created = client.post(
        "/api/support/tickets",
        json={"userId": "u1", "userEmail": "u1@example.com", "subject": "Bug", "description": "Crash"},
    ).json()["ticket"]

    fetched = client.get(f"/api/support/tickets/{created['id']}", params={"userId": "u1"})
    assert fetched.json()["ticket"]["subject"] == "Bug"
    assert client.get(f"/api/support/tickets/{created['id']}", params={"userId": "u2"}).status_code == 404

    patched = client.patch(f"/api/support/tickets/{created['id']}", json={"userId": "u1", "status": "in_progress"})
    assert patched.json()["ticket"]["status"] == "in_progress"

    rated = client.put("/api/support/tickets", json={"ticketId": created["id"], "userId": "u1", "rating": 4})
    assert rated.json()["ticket"]["rating"] == 4
    assert client.put("/api/support/tickets", json={"ticketId": created["id"], "rating": 9}).status_code == 400

    tickets = client.get("/api/support/tickets", params={"userId": "u1"}).json()["tickets"]
    assert [t["id"] for t in tickets] == [created["id"]]


def test_ticket_without_email_is_400(client) -> None:
    response = client.post(
        "/api/support/tickets",
        json={"userId": "u1", "subject": "Bug", "description": "Crash"},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Missing required fields"


def test_ticket_changes_without_user_are_rejected(client) -> None:
    created = client.post(
        "/api/support/tickets",
        json={"userId": "u1", "userEmail": "u1@example.com", "subject": "Bug", "description": "Crash"},
    ).json()["ticket"]

    patched = client.patch(f"/api/support/tickets/{created['id']}", json={"status": "closed"})
    rated = client.put("/api/support/tickets", json={"ticketId": created["id"], "rating": 1})

    assert patched.status_code == 400
    assert rated.status_code == 400
    assert rated.json()["message"] == "User ID is required"
    ticket = client.get(f"/api/support/tickets/{created['id']}", params={"userId": "u1"}).json()["ticket"]
    assert ticket["status"] == "open"
    assert ticket["rating"] is None


def test_ticket_changes_by_other_user_are_404(client) -> None:
    created = client.post(
        "/api/support/tickets",
        json={"userId": "u1", "userEmail": "u1@example.com", "subject": "Bug", "description": "Crash"},
    ).json()["ticket"]

    patched = client.patch(f"/api/support/tickets/{created['id']}", json={"userId": "u2", "status": "closed"})
    rated = client.put("/api/support/tickets", json={"ticketId": created["id"], "userId": "u2", "rating": 1})

    assert patched.status_code == 404
    assert rated.status_code == 404
