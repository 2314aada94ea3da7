# backend/tests/test_ownership.py
from __future__ import annotations

from conftest import create_listing, register


def test_only_owner_may_modify_listing(client, seller, buyer):
    pid = create_listing(client, seller["headers"])["property_id"]

    r = client.put(f"/properties/{pid}", json={"price": 1}, headers=buyer["headers"])
    assert r.status_code == 403
    assert r.json()["error"] == "forbidden"

    assert client.patch(f"/properties/{pid}", json={"price": 1}, headers=buyer["headers"]).status_code == 403
    assert client.delete(f"/properties/{pid}", headers=buyer["headers"]).status_code == 403

    r = client.patch(f"/properties/{pid}", json={"price": 199000, "city": "Huntsville"}, headers=seller["headers"])
    assert r.status_code == 200
    assert r.json()["price"] == 199000
    assert r.json()["city"] == "Huntsville"
    assert r.json()["title"] == "Lakeside Cabin"


def test_missing_resource_is_404_before_ownership(client, buyer):
    r = client.put("/properties/nope", json={"price": 1}, headers=buyer["headers"])
    assert r.status_code == 404
    assert r.json()["error"] == "not_found"
    assert client.delete("/saved-properties/nope", headers=buyer["headers"]).status_code == 404
    assert client.put("/saved-searches/nope", json={}, headers=buyer["headers"]).status_code == 404
    assert client.put("/notifications/nope/read", headers=buyer["headers"]).status_code == 404


def test_delete_listing_cascades(client, seller, buyer):
    pid = create_listing(client, seller["headers"])["property_id"]
    client.post(f"/properties/{pid}/photos", json={"photo_url": "https://img/a.jpg"}, headers=seller["headers"])
    client.post("/saved-properties", json={"property_id": pid}, headers=buyer["headers"])

    r = client.delete(f"/properties/{pid}", headers=seller["headers"])
    assert r.status_code == 200
    assert client.get(f"/properties/{pid}").status_code == 404
    assert client.get("/saved-properties", headers=buyer["headers"]).json()["total_count"] == 0


def test_photo_management(client, seller, buyer):
    pid = create_listing(client, seller["headers"])["property_id"]
    a = client.post(f"/properties/{pid}/photos", json={"photo_url": "https://img/a.jpg", "is_primary": True},
                    headers=seller["headers"]).json()
    b = client.post(f"/properties/{pid}/photos", json={"photo_url": "https://img/b.jpg", "photo_order": 1},
                    headers=seller["headers"]).json()

    assert client.post(f"/properties/{pid}/photos", json={"photo_url": "x"}, headers=buyer["headers"]).status_code == 403

    r = client.put(f"/properties/{pid}/photos/{b['photo_id']}", json={"is_primary": True}, headers=seller["headers"])
    assert r.status_code == 200
    photos = {p["photo_id"]: p for p in client.get(f"/properties/{pid}/photos").json()}
    assert photos[b["photo_id"]]["is_primary"] is True
    assert photos[a["photo_id"]]["is_primary"] is False

    r = client.delete(f"/properties/{pid}/photos/{a['photo_id']}", headers=seller["headers"])
    assert r.status_code == 200
    assert len(client.get(f"/properties/{pid}/photos").json()) == 1
    assert client.delete(f"/properties/{pid}/photos/{a['photo_id']}", headers=seller["headers"]).status_code == 404


def test_photos_list_by_order_then_upload_time(client, seller):
    pid = create_listing(client, seller["headers"])["property_id"]
    for name, order in (("first", 0), ("late", 2), ("second", 0), ("third", 0), ("middle", 1)):
        url = f"https://img/{name}.jpg"
        r = client.post(f"/properties/{pid}/photos", json={"photo_url": url, "photo_order": order},
                        headers=seller["headers"])
        assert r.status_code == 201

    expected = ["https://img/first.jpg", "https://img/second.jpg", "https://img/third.jpg",
                "https://img/middle.jpg", "https://img/late.jpg"]
    assert [p["photo_url"] for p in client.get(f"/properties/{pid}/photos").json()] == expected
    assert [p["photo_url"] for p in client.get(f"/properties/{pid}").json()["photos"]] == expected


def test_saved_searches_are_private(client, buyer):
    other = register(client, "other@example.com")
    r = client.post(
        "/saved-searches",
        json={"search_name": "Lakes", "country": "Finland", "price_max": 300000, "alert_frequency": "daily"},
        headers=buyer["headers"],
    )
    assert r.status_code == 201
    sid = r.json()["saved_search_id"]

    assert client.get("/saved-searches", headers=other["headers"]).json() == []
    assert client.put(f"/saved-searches/{sid}", json={"search_name": "Mine"}, headers=other["headers"]).status_code == 403
    assert client.delete(f"/saved-searches/{sid}", headers=other["headers"]).status_code == 403

    r = client.put(f"/saved-searches/{sid}", json={"is_active": False}, headers=buyer["headers"])
    assert r.json()["is_active"] is False
    assert r.json()["search_name"] == "Lakes"

    assert client.delete(f"/saved-searches/{sid}", headers=buyer["headers"]).status_code == 200
    assert client.get("/saved-searches", headers=buyer["headers"]).json() == []


def test_profile_update_and_public_view(client, buyer):
    r = client.put("/users/me", json={"name": "Bea B.", "phone": "555-0100"}, headers=buyer["headers"])
    assert r.status_code == 200
    assert r.json()["name"] == "Bea B."

    r = client.get(f"/users/{buyer['user']['user_id']}")
    assert r.status_code == 200
    assert r.json()["name"] == "Bea B."
    assert "email" not in r.json()
    assert client.get("/users/nobody").status_code == 404
