# backend/tests/test_property_search.py
from __future__ import annotations

from sqlalchemy import select

from app.models import Property, SearchHistory

from conftest import create_listing, register


def _seed_listings(client, headers) -> list[dict]:
    return [
        create_listing(client, headers, title="Fjord Villa", property_type="villa", price=900000, country="Norway",
                       bedrooms=4, natural_features='["fjord", "forest"]'),
        create_listing(client, headers, title="Prairie Farm", property_type="farm", price=450000, country="Canada",
                       bedrooms=3, land_size=120, land_size_unit="acres"),
        create_listing(client, headers, title="Alpine Cabin", property_type="cabin", price=300000, country="Switzerland",
                       bedrooms=2, natural_features='["mountain"]'),
        create_listing(client, headers, title="Coastal Land", property_type="land", price=120000, country="Canada"),
    ]


def test_create_listing_sets_active_and_expiry(client, seller):
    out = create_listing(client, seller["headers"], listing_duration_days=30)
    assert out["status"] == "active"
    assert out["user_id"] == seller["user"]["user_id"]
    assert out["view_count"] == 0
    assert out["expires_at"] is not None


def test_create_listing_requires_auth_and_valid_body(client, seller):
    r = client.post("/properties", json={"title": "x"})
    assert r.status_code == 401

    r = client.post(
        "/properties",
        json={"title": "x", "description": "y", "property_type": "castle", "price": -1, "country": "Peru"},
        headers=seller["headers"],
    )
    assert r.status_code == 400
    assert r.json()["error"] == "validation_error"

    r = client.post(
        "/properties",
        json={"title": "x", "description": "y", "property_type": "land", "price": 1, "country": "Peru", "year_built": 1700},
        headers=seller["headers"],
    )
    assert r.status_code == 400


def test_search_envelope_and_filters(client, seller):
    _seed_listings(client, seller["headers"])

    r = client.get("/properties", params={"country": "canada"})
    assert r.status_code == 200
    body = r.json()
    assert set(body) == {"properties", "total_count", "page", "per_page", "total_pages"}
    assert body["total_count"] == 2
    assert {p["title"] for p in body["properties"]} == {"Prairie Farm", "Coastal Land"}

    r = client.get("/properties", params={"price_min": "200000", "price_max": "500000"})
    assert {p["title"] for p in r.json()["properties"]} == {"Prairie Farm", "Alpine Cabin"}

    r = client.get("/properties", params={"natural_features": "forest", "bedrooms_min": "3"})
    assert [p["title"] for p in r.json()["properties"]] == ["Fjord Villa"]

    r = client.get("/properties", params={"property_type": "farm", "land_size_min": "100"})
    assert [p["title"] for p in r.json()["properties"]] == ["Prairie Farm"]


def test_search_sort_and_paging(client, seller):
    _seed_listings(client, seller["headers"])

    r = client.get("/properties", params={"sort_by": "price", "sort_order": "asc", "limit": "3"})
    body = r.json()
    assert [p["price"] for p in body["properties"]] == [120000, 300000, 450000]
    assert body["total_count"] == 4
    assert body["per_page"] == 3
    assert body["total_pages"] == 2

    r = client.get("/properties", params={"sort_by": "price", "sort_order": "asc", "limit": "3", "offset": "3"})
    body = r.json()
    assert [p["price"] for p in body["properties"]] == [900000]
    assert body["page"] == 2


def test_status_filter_is_not_implicit(client, seller, db):
    listings = _seed_listings(client, seller["headers"])
    r = client.put(f"/properties/{listings[0]['property_id']}", json={"status": "sold"}, headers=seller["headers"])
    assert r.status_code == 200

    assert client.get("/properties").json()["total_count"] == 4
    assert client.get("/properties", params={"status": "active"}).json()["total_count"] == 3
    assert client.get("/properties", params={"status": "sold"}).json()["total_count"] == 1


def test_malformed_filter_values_are_400(client):
    r = client.get("/properties", params={"price_min": "lots"})
    assert r.status_code == 400
    body = r.json()
    assert body["error"] == "validation_error"
    assert body["errors"][0]["field"] == "price_min"

    assert client.get("/properties", params={"limit": "many"}).status_code == 400
    assert client.get("/properties", params={"property_type": "castle"}).status_code == 400


def test_out_of_range_integers_are_400(client, seller):
    huge = "9" * 25
    for name in ("bedrooms_min", "year_built_max", "offset", "limit"):
        r = client.get("/properties", params={name: huge})
        assert r.status_code == 400, name
        assert r.json()["errors"][0]["field"] == name

    r = client.get("/properties", params={"square_footage_min": "-" + huge})
    assert r.status_code == 400

    base = {"title": "x", "description": "y", "property_type": "land", "price": 1, "country": "Peru"}
    r = client.post("/properties", json={**base, "listing_duration_days": 10**9}, headers=seller["headers"])
    assert r.status_code == 400
    assert r.json()["error"] == "validation_error"

    pid = create_listing(client, seller["headers"])["property_id"]
    r = client.put(f"/properties/{pid}", json={"listing_duration_days": 10**9}, headers=seller["headers"])
    assert r.status_code == 400
    r = client.put(f"/properties/{pid}", json={"bedrooms": 10**12}, headers=seller["headers"])
    assert r.status_code == 400


def test_conflicting_range_is_empty_success(client, seller):
    _seed_listings(client, seller["headers"])
    r = client.get("/properties", params={"price_min": "500000", "price_max": "100000"})
    assert r.status_code == 200
    body = r.json()
    assert body["properties"] == []
    assert body["total_count"] == 0
    assert body["total_pages"] == 0


def test_unrecognized_params_do_not_change_results(client, seller):
    _seed_listings(client, seller["headers"])
    params = {"country": "canada", "sort_by": "price", "sort_order": "asc"}
    plain = client.get("/properties", params=params).json()
    noisy = client.get(
        "/properties",
        params={**params, "owner_id": "someone", "price_minimum": "999999999", "1=1": "true"},
    ).json()

    assert noisy["total_count"] == plain["total_count"] == 2
    assert [p["property_id"] for p in noisy["properties"]] == [p["property_id"] for p in plain["properties"]]


def test_login_then_search(client):
    register(client, "norway@example.com", user_type="seller")
    r = client.post("/auth/login", json={"email": "norway@example.com", "password": "correct-horse-1"})
    assert r.status_code == 200
    headers = {"Authorization": f"Bearer {r.json()['token']}"}

    pid = create_listing(client, headers, title="Fjord House", price=500000, country="Norway")["property_id"]
    cheap = create_listing(client, headers, title="Forest Plot", property_type="land", price=80000,
                           country="Sweden")["property_id"]

    body = client.get("/properties", params={"country": "Norway", "price_max": "600000"}).json()
    assert pid in [p["property_id"] for p in body["properties"]]

    body = client.get("/properties", params={"price_max": "100000"}).json()
    ids = [p["property_id"] for p in body["properties"]]
    assert pid not in ids
    assert ids == [cheap]
    assert body["total_count"] == 1


def test_injection_attempts_are_plain_values(client, seller, db):
    _seed_listings(client, seller["headers"])
    r = client.get("/properties", params={"query": "x' OR '1'='1", "sort_by": "price; DROP TABLE properties"})
    assert r.status_code == 200
    assert r.json()["total_count"] == 0
    assert db.scalar(select(Property).limit(1)) is not None


def test_primary_photo_in_results(client, seller):
    prop = create_listing(client, seller["headers"])
    pid = prop["property_id"]
    client.post(f"/properties/{pid}/photos", json={"photo_url": "https://img/a.jpg", "photo_order": 1}, headers=seller["headers"])
    client.post(f"/properties/{pid}/photos", json={"photo_url": "https://img/b.jpg", "is_primary": True}, headers=seller["headers"])

    item = client.get("/properties").json()["properties"][0]
    assert item["primary_photo"]["photo_url"] == "https://img/b.jpg"


def test_authenticated_search_is_recorded(client, seller, buyer, db):
    _seed_listings(client, seller["headers"])
    client.get("/properties", params={"country": "Canada", "price_max": "500000"}, headers=buyer["headers"])
    client.get("/properties", params={"country": "Norway"})  # anonymous, not recorded

    rows = db.scalars(select(SearchHistory)).all()
    assert len(rows) == 1
    assert rows[0].user_id == buyer["user"]["user_id"]
    assert rows[0].country == "Canada"
    assert rows[0].price_max == 500000
    assert rows[0].results_count == 2

    r = client.get("/search-history", headers=buyer["headers"])
    assert r.status_code == 200
    assert r.json()[0]["country"] == "Canada"


def test_anonymous_search_history_post(client):
    r = client.post("/search-history", json={"search_query": "lake", "country": "Finland", "results_count": 3})
    assert r.status_code == 201
    assert r.json()["user_id"] is None


def test_get_property_counts_views(client, seller, buyer, db):
    prop = create_listing(client, seller["headers"])
    pid = prop["property_id"]

    client.get(f"/properties/{pid}")
    r = client.get(f"/properties/{pid}", headers=buyer["headers"])
    body = r.json()
    assert body["view_count"] == 2
    assert body["owner"]["name"] == "Sam Seller"
    assert "email" not in body["owner"]
    assert body["photos"] == []

    analytics = client.get(f"/properties/{pid}/analytics", headers=seller["headers"]).json()
    assert analytics[0]["views_count"] == 2

    assert client.get("/properties/does-not-exist").status_code == 404


def test_track_view(client, seller):
    pid = create_listing(client, seller["headers"])["property_id"]
    r = client.post(f"/properties/{pid}/view", json={"session_id": "anon-1", "view_duration_seconds": 12})
    assert r.status_code == 201
    assert client.post("/properties/nope/view", json={}).status_code == 404
