# backend/tests/test_saved_properties.py
from __future__ import annotations

from app.models import Property

from conftest import create_listing


def _favorites(db, pid: str) -> int:
    db.expire_all()
    return db.get(Property, pid).favorite_count


def test_save_counts_and_rejects_duplicates(client, seller, buyer, db):
    pid = create_listing(client, seller["headers"])["property_id"]

    r = client.post("/saved-properties", json={"property_id": pid, "notes": "near the lake"}, headers=buyer["headers"])
    assert r.status_code == 201
    assert r.json()["notes"] == "near the lake"
    assert _favorites(db, pid) == 1

    r = client.post("/saved-properties", json={"property_id": pid}, headers=buyer["headers"])
    assert r.status_code == 409
    assert r.json()["error"] == "duplicate_save"
    assert _favorites(db, pid) == 1

    assert client.post("/saved-properties", json={"property_id": "nope"}, headers=buyer["headers"]).status_code == 404


def test_unsave_decrements_without_going_negative(client, seller, buyer, db):
    pid = create_listing(client, seller["headers"])["property_id"]
    saved = client.post("/saved-properties", json={"property_id": pid}, headers=buyer["headers"]).json()

    prop = db.get(Property, pid)
    prop.favorite_count = 0
    db.commit()

    r = client.delete(f"/saved-properties/{saved['saved_property_id']}", headers=buyer["headers"])
    assert r.status_code == 200
    assert _favorites(db, pid) == 0


def test_list_embeds_property_and_sorts(client, seller, buyer):
    cheap = create_listing(client, seller["headers"], title="Cheap", price=100000, country="Portugal", region="Algarve")
    pricey = create_listing(client, seller["headers"], title="Pricey", price=800000, country="Iceland")
    client.post(f"/properties/{pricey['property_id']}/photos", json={"photo_url": "https://img/p.jpg", "is_primary": True},
                headers=seller["headers"])
    client.post("/saved-properties", json={"property_id": cheap["property_id"]}, headers=buyer["headers"])
    client.post("/saved-properties", json={"property_id": pricey["property_id"]}, headers=buyer["headers"])

    body = client.get("/saved-properties", headers=buyer["headers"]).json()
    assert body["total_count"] == 2
    # newest save first
    assert [s["property"]["title"] for s in body["saved_properties"]] == ["Pricey", "Cheap"]
    assert body["saved_properties"][0]["property"]["primary_photo"] == {"photo_url": "https://img/p.jpg"}
    assert body["saved_properties"][1]["property"]["primary_photo"] is None

    body = client.get("/saved-properties", params={"sort_by": "price_low_high"}, headers=buyer["headers"]).json()
    assert [s["property"]["price"] for s in body["saved_properties"]] == [100000, 800000]

    body = client.get("/saved-properties", params={"sort_by": "location"}, headers=buyer["headers"]).json()
    assert [s["property"]["country"] for s in body["saved_properties"]] == ["Iceland", "Portugal"]

    body = client.get("/saved-properties", params={"filter_country": "portu"}, headers=buyer["headers"]).json()
    assert [s["property"]["title"] for s in body["saved_properties"]] == ["Cheap"]


def test_notes_update_is_owner_only(client, seller, buyer):
    pid = create_listing(client, seller["headers"])["property_id"]
    sid = client.post("/saved-properties", json={"property_id": pid}, headers=buyer["headers"]).json()["saved_property_id"]

    assert client.put(f"/saved-properties/{sid}", json={"notes": "mine"}, headers=seller["headers"]).status_code == 403
    r = client.put(f"/saved-properties/{sid}", json={"notes": "call agent"}, headers=buyer["headers"])
    assert r.status_code == 200
    assert r.json()["notes"] == "call agent"
