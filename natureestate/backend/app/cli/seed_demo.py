# backend/app/cli/seed_demo.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.config import Settings
from app.db import Database
from app.models import Property, PropertyPhoto, User, utcnow
from app.services.auth_service import hash_password


@dataclass(frozen=True)
class SeedResult:
    user_email: str
    user_id: str
    property_id: Optional[str]


def _get_or_create_user(db: Session, *, email: str, name: str, password: str, iterations: int) -> User:
    row = db.scalar(select(User).where(User.email == email.lower()))
    if row:
        return row
    row = User(
        email=email.lower(),
        name=name,
        user_type="seller",
        password_hash=hash_password(password, iterations=iterations),
        is_verified=True,
        email_verified=True,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def _create_sample_property(db: Session, *, owner: User) -> Property:
    existing = db.scalar(select(Property).where(Property.user_id == owner.user_id).limit(1))
    if existing:
        return existing

    prop = Property(
        user_id=owner.user_id,
        title="Cedar Ridge Cabin",
        description="Two-bedroom cabin on a wooded lot with a creek along the north boundary.",
        property_type="cabin",
        status="active",
        price=385000.0,
        currency="USD",
        country="United States",
        region="Montana",
        city="Whitefish",
        square_footage=1450,
        land_size=4.5,
        land_size_unit="acres",
        bedrooms=2,
        bathrooms=1.5,
        year_built=1998,
        natural_features='["forest", "creek"]',
        outdoor_amenities='["deck", "fire pit"]',
        view_types='["mountain"]',
        property_condition="good",
        expires_at=utcnow() + timedelta(days=90),
    )
    db.add(prop)
    db.flush()
    db.add(
        PropertyPhoto(
            property_id=prop.property_id,
            photo_url="https://images.natureestate.local/demo/cedar-ridge-front.jpg",
            caption="Front elevation",
            photo_order=0,
            is_primary=True,
            photo_type="exterior",
        )
    )
    db.commit()
    db.refresh(prop)
    return prop


def seed_demo(
    *,
    settings: Settings,
    user_email: str,
    user_name: str,
    password: str,
    create_sample_property: bool = True,
) -> SeedResult:
    database = Database.from_settings(settings)
    database.create_all()
    db = database.SessionLocal()
    try:
        user = _get_or_create_user(
            db,
            email=user_email,
            name=user_name,
            password=password,
            iterations=settings.pbkdf2_iterations,
        )
        prop_id = None
        if create_sample_property:
            prop_id = _create_sample_property(db, owner=user).property_id
        return SeedResult(user_email=user.email, user_id=user.user_id, property_id=prop_id)
    finally:
        db.close()
        database.dispose()
