# backend/app/services/dashboard.py
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any

from sqlalchemy import case, desc, func, select
from sqlalchemy.orm import Session

from ..models import (
    Property,
    PropertyInquiry,
    PropertyView,
    SavedProperty,
    SavedSearch,
)

RECENT_PER_SOURCE = 5
RECENT_TOTAL = 10


@dataclass
class DashboardStats:
    total_properties: int = 0
    total_inquiries: int = 0
    total_views: int = 0
    total_favorites: int = 0
    active_listings: int = 0
    pending_inquiries: int = 0
    saved_searches: int = 0
    recent_activity: list[dict[str, Any]] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def _activity(kind: str, description: str, ts: datetime, related_id: str) -> dict[str, Any]:
    return {"activity_type": kind, "description": description, "timestamp": ts, "related_id": related_id}


def _merge_recent(*streams: list[dict[str, Any]]) -> list[dict[str, Any]]:
    merged = [x for s in streams for x in s]
    merged.sort(key=lambda a: (a["timestamp"], a["related_id"]), reverse=True)
    return merged[:RECENT_TOTAL]


def seller_stats(db: Session, *, user_id: str) -> DashboardStats:
    """Listing owner / agent view: aggregates over the caller's listings."""
    row = db.execute(
        select(
            func.count(Property.property_id),
            func.coalesce(func.sum(case((Property.status == "active", 1), else_=0)), 0),
            func.coalesce(func.sum(Property.view_count), 0),
            func.coalesce(func.sum(Property.inquiry_count), 0),
            func.coalesce(func.sum(Property.favorite_count), 0),
        ).where(Property.user_id == user_id)
    ).one()

    stats = DashboardStats(
        total_properties=int(row[0] or 0),
        active_listings=int(row[1] or 0),
        total_views=int(row[2] or 0),
        total_inquiries=int(row[3] or 0),
        total_favorites=int(row[4] or 0),
    )

    stats.pending_inquiries = int(
        db.scalar(
            select(func.count())
            .select_from(PropertyInquiry)
            .where(PropertyInquiry.recipient_user_id == user_id, PropertyInquiry.status == "unread")
        )
        or 0
    )

    inquiries = [
        _activity("inquiry", f"New inquiry from {i.sender_name}", i.created_at, i.inquiry_id)
        for i in db.scalars(
            select(PropertyInquiry)
            .where(PropertyInquiry.recipient_user_id == user_id)
            .order_by(desc(PropertyInquiry.created_at))
            .limit(RECENT_PER_SOURCE)
        ).all()
    ]
    views = [
        _activity("property_view", "Property viewed", ts, pid)
        for pid, ts in db.execute(
            select(PropertyView.property_id, PropertyView.created_at)
            .join(Property, Property.property_id == PropertyView.property_id)
            .where(Property.user_id == user_id)
            .order_by(desc(PropertyView.created_at))
            .limit(RECENT_PER_SOURCE)
        ).all()
    ]
    stats.recent_activity = _merge_recent(inquiries, views)
    return stats


def buyer_stats(db: Session, *, user_id: str) -> DashboardStats:
    def _count(model, col) -> int:
        return int(db.scalar(select(func.count()).select_from(model).where(col == user_id)) or 0)

    stats = DashboardStats(
        total_favorites=_count(SavedProperty, SavedProperty.user_id),
        total_inquiries=_count(PropertyInquiry, PropertyInquiry.sender_user_id),
        saved_searches=_count(SavedSearch, SavedSearch.user_id),
    )

    sent = [
        _activity("inquiry_sent", "Inquiry sent for property", ts, pid)
        for pid, ts in db.execute(
            select(PropertyInquiry.property_id, PropertyInquiry.created_at)
            .where(PropertyInquiry.sender_user_id == user_id)
            .order_by(desc(PropertyInquiry.created_at))
            .limit(RECENT_PER_SOURCE)
        ).all()
    ]
    saved = [
        _activity("property_saved", "Property saved to favorites", ts, pid)
        for pid, ts in db.execute(
            select(SavedProperty.property_id, SavedProperty.created_at)
            .where(SavedProperty.user_id == user_id)
            .order_by(desc(SavedProperty.created_at))
            .limit(RECENT_PER_SOURCE)
        ).all()
    ]
    stats.recent_activity = _merge_recent(sent, saved)
    return stats


def stats_for(db: Session, *, user_id: str, user_type: str) -> DashboardStats:
    if user_type in ("seller", "agent"):
        return seller_stats(db, user_id=user_id)
    return buyer_stats(db, user_id=user_id)
