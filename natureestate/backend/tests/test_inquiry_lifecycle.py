# backend/tests/test_inquiry_lifecycle.py
from __future__ import annotations

from sqlalchemy import select

from app.models import Notification, Property

from conftest import create_listing, register


def _inquire(client, pid: str, headers: dict | None = None, **overrides):
    payload = {
        "sender_name": "Bea Buyer",
        "sender_email": "buyer@example.com",
        "message": "Is the dock included?",
        "is_interested_in_viewing": True,
    }
    payload.update(overrides)
    return client.post(f"/properties/{pid}/inquiries", json=payload, headers=headers or {})


def test_inquiry_creates_counter_and_owner_notification(client, seller, buyer, db):
    pid = create_listing(client, seller["headers"])["property_id"]

    r = _inquire(client, pid, buyer["headers"], priority="high")
    assert r.status_code == 201
    inq = r.json()
    assert inq["status"] == "unread"
    assert inq["sender_user_id"] == buyer["user"]["user_id"]
    assert inq["recipient_user_id"] == seller["user"]["user_id"]
    assert inq["property_title"] == "Lakeside Cabin"

    assert db.get(Property, pid).inquiry_count == 1

    notes = db.scalars(select(Notification).where(Notification.user_id == seller["user"]["user_id"])).all()
    assert len(notes) == 1
    assert notes[0].type == "inquiry"
    assert notes[0].related_inquiry_id == inq["inquiry_id"]
    assert notes[0].priority == "high"
    assert notes[0].is_email_sent is True


def test_anonymous_inquiry_allowed(client, seller):
    pid = create_listing(client, seller["headers"])["property_id"]
    r = _inquire(client, pid, sender_email="walkin@example.com")
    assert r.status_code == 201
    assert r.json()["sender_user_id"] is None


def test_inquiry_on_unavailable_listing(client, seller, buyer):
    pid = create_listing(client, seller["headers"])["property_id"]
    client.put(f"/properties/{pid}", json={"status": "sold"}, headers=seller["headers"])

    r = _inquire(client, pid, buyer["headers"])
    assert r.status_code == 404
    assert _inquire(client, "missing", buyer["headers"]).status_code == 404


def test_read_update_and_respond(client, seller, buyer):
    pid = create_listing(client, seller["headers"])["property_id"]
    iid = _inquire(client, pid, buyer["headers"]).json()["inquiry_id"]
    stranger = register(client, "stranger@example.com")

    # sender reading does not mark it read
    assert client.get(f"/inquiries/{iid}", headers=buyer["headers"]).json()["status"] == "unread"
    assert client.get(f"/inquiries/{iid}", headers=seller["headers"]).json()["status"] == "read"
    assert client.get(f"/inquiries/{iid}", headers=stranger["headers"]).status_code == 403
    assert client.get("/inquiries/nope", headers=seller["headers"]).status_code == 404

    assert client.put(f"/inquiries/{iid}", json={"status": "archived"}, headers=buyer["headers"]).status_code == 403
    r = client.put(f"/inquiries/{iid}", json={"response_message": "Yes it is.", "priority": "low"}, headers=seller["headers"])
    assert r.status_code == 200
    assert r.json()["responded_at"] is not None
    assert r.json()["priority"] == "low"

    r = client.post(f"/inquiries/{iid}/responses", json={"message": "Want to visit Saturday?"}, headers=buyer["headers"])
    assert r.status_code == 201
    assert r.json()["sender_name"] == "Bea Buyer"
    assert r.json()["sender_type"] == "buyer"
    client.post(f"/inquiries/{iid}/responses", json={"message": "Saturday works."}, headers=seller["headers"])

    thread = client.get(f"/inquiries/{iid}/responses", headers=seller["headers"]).json()
    assert [m["message"] for m in thread] == ["Want to visit Saturday?", "Saturday works."]
    assert client.get(f"/inquiries/{iid}", headers=buyer["headers"]).json()["status"] == "responded"
    assert client.post(f"/inquiries/{iid}/responses", json={"message": "hi"}, headers=stranger["headers"]).status_code == 403


def test_inquiry_listing_scopes_and_filters(client, seller, buyer):
    p1 = create_listing(client, seller["headers"], title="One")["property_id"]
    p2 = create_listing(client, seller["headers"], title="Two")["property_id"]
    _inquire(client, p1, buyer["headers"])
    _inquire(client, p2, buyer["headers"], is_interested_in_viewing=False)
    _inquire(client, p2, sender_email="anon@example.com")
    stranger = register(client, "stranger@example.com")

    body = client.get("/inquiries", headers=seller["headers"]).json()
    assert body["total_count"] == 3
    assert body["per_page"] == 10

    assert client.get("/inquiries", headers=buyer["headers"]).json()["total_count"] == 2
    assert client.get("/inquiries", headers=stranger["headers"]).json()["total_count"] == 0

    r = client.get("/inquiries", params={"property_id": p2, "is_interested_in_viewing": "false"}, headers=seller["headers"])
    assert r.json()["total_count"] == 1

    r = client.get("/inquiries", params={"status": "bogus"}, headers=seller["headers"])
    assert r.status_code == 400

    r = client.get(f"/properties/{p2}/inquiries", headers=seller["headers"])
    assert r.json()["total_count"] == 2
    assert client.get(f"/properties/{p2}/inquiries", headers=buyer["headers"]).status_code == 403
