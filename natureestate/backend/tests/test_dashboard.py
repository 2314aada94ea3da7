# backend/tests/test_dashboard.py
from __future__ import annotations

from conftest import create_listing


def test_seller_dashboard(client, seller, buyer):
    p1 = create_listing(client, seller["headers"], title="One")["property_id"]
    p2 = create_listing(client, seller["headers"], title="Two")["property_id"]
    client.put(f"/properties/{p2}", json={"status": "inactive"}, headers=seller["headers"])

    client.get(f"/properties/{p1}", headers=buyer["headers"])
    client.post(
        f"/properties/{p1}/inquiries",
        json={"sender_name": "Bea", "sender_email": "buyer@example.com", "message": "Hi"},
        headers=buyer["headers"],
    )
    client.post("/saved-properties", json={"property_id": p1}, headers=buyer["headers"])

    r = client.get("/dashboard/stats", headers=seller["headers"])
    assert r.status_code == 200
    s = r.json()
    assert s["total_properties"] == 2
    assert s["active_listings"] == 1
    assert s["total_views"] == 1
    assert s["total_inquiries"] == 1
    assert s["total_favorites"] == 1
    assert s["pending_inquiries"] == 1
    kinds = [a["activity_type"] for a in s["recent_activity"]]
    assert sorted(kinds) == ["inquiry", "property_view"]
    assert s["recent_activity"][0]["activity_type"] == "inquiry"


def test_buyer_dashboard(client, seller, buyer):
    pid = create_listing(client, seller["headers"])["property_id"]
    client.post("/saved-properties", json={"property_id": pid}, headers=buyer["headers"])
    client.post("/saved-searches", json={"search_name": "Cabins"}, headers=buyer["headers"])

    s = client.get("/dashboard/stats", headers=buyer["headers"]).json()
    assert s["total_favorites"] == 1
    assert s["total_inquiries"] == 0
    assert s["saved_searches"] == 1
    assert s["total_properties"] == 0
    assert [a["activity_type"] for a in s["recent_activity"]] == ["property_saved"]
    assert s["recent_activity"][0]["related_id"] == pid


def test_dashboard_requires_auth(client):
    assert client.get("/dashboard/stats").status_code == 401
