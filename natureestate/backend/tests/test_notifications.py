# backend/tests/test_notifications.py
from __future__ import annotations

from app.services.notifications import notify

from conftest import create_listing


def _inquire(client, pid: str, headers: dict) -> None:
    r = client.post(
        f"/properties/{pid}/inquiries",
        json={"sender_name": "Bea", "sender_email": "buyer@example.com", "message": "Still available?"},
        headers=headers,
    )
    assert r.status_code == 201


def test_unread_count_and_mark_read(client, seller, buyer):
    pid = create_listing(client, seller["headers"])["property_id"]
    _inquire(client, pid, buyer["headers"])
    _inquire(client, pid, buyer["headers"])

    body = client.get("/notifications", headers=seller["headers"]).json()
    assert body["total_count"] == 2
    assert body["unread_count"] == 2
    first = body["notifications"][0]
    assert first["type"] == "inquiry"
    assert first["action_url"].startswith("/inquiries/")

    assert client.put(f"/notifications/{first['notification_id']}/read", headers=buyer["headers"]).status_code == 403
    assert client.put(f"/notifications/{first['notification_id']}/read", headers=seller["headers"]).status_code == 200

    body = client.get("/notifications", params={"is_read": "false"}, headers=seller["headers"]).json()
    assert body["total_count"] == 1
    assert body["unread_count"] == 1

    assert client.put("/notifications/mark-all-read", headers=seller["headers"]).status_code == 200
    body = client.get("/notifications", headers=seller["headers"]).json()
    assert body["unread_count"] == 0
    assert body["total_count"] == 2


def test_filters_by_type_and_priority(client, seller, db):
    uid = seller["user"]["user_id"]
    notify(db, user_id=uid, type="system", title="Maintenance", message="Tonight", priority="low")
    notify(db, user_id=uid, type="marketing", title="Promo", message="Feature your listing", priority="high")

    body = client.get("/notifications", params={"type": "system"}, headers=seller["headers"]).json()
    assert [n["title"] for n in body["notifications"]] == ["Maintenance"]

    body = client.get("/notifications", params={"priority": "high"}, headers=seller["headers"]).json()
    assert [n["title"] for n in body["notifications"]] == ["Promo"]
    assert body["notifications"][0]["is_email_sent"] is False

    assert client.get("/notifications", params={"type": "sms"}, headers=seller["headers"]).status_code == 400
    assert client.get("/notifications").status_code == 401
