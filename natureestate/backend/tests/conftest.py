# backend/tests/conftest.py
from __future__ import annotations

import os

# app.main builds a module-level app on import; keep it off the working directory
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.main import create_app


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        app_env="test",
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        jwt_secret="test-secret",
        pbkdf2_iterations=1_000,
        auto_create_schema=True,
    )


@pytest.fixture()
def app(settings):
    return create_app(settings)


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def db(app):
    s = app.state.db.SessionLocal()
    try:
        yield s
    finally:
        s.close()


def register(client: TestClient, email: str, *, user_type: str = "buyer", name: str | None = None,
             password: str = "correct-horse-1") -> dict:
    r = client.post(
        "/auth/register",
        json={"email": email, "password": password, "name": name or email.split("@")[0], "user_type": user_type},
    )
    assert r.status_code == 201, r.text
    body = r.json()
    body["headers"] = {"Authorization": f"Bearer {body['token']}"}
    return body


def create_listing(client: TestClient, headers: dict, **overrides) -> dict:
    payload = {
        "title": "Lakeside Cabin",
        "description": "Quiet cabin with a dock and old-growth forest.",
        "property_type": "cabin",
        "price": 250000,
        "country": "Canada",
        "region": "Ontario",
        "city": "Muskoka",
    }
    payload.update(overrides)
    r = client.post("/properties", json=payload, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


@pytest.fixture()
def seller(client):
    return register(client, "seller@example.com", user_type="seller", name="Sam Seller")


@pytest.fixture()
def buyer(client):
    return register(client, "buyer@example.com", user_type="buyer", name="Bea Buyer")
