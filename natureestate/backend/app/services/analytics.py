# backend/app/services/analytics.py
from __future__ import annotations

import logging

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..models import Property, PropertyAnalytics, utcnow

log = logging.getLogger("natureestate.analytics")

_DAILY_FIELDS = ("views_count", "inquiries_count", "favorites_count", "shares_count", "search_impressions")
_LISTING_COUNTERS = ("view_count", "inquiry_count", "favorite_count")


def bump_listing_counter(db: Session, *, property_id: str, counter: str, delta: int = 1) -> None:
    """
    Server-side `n = n + delta` on the listing row, never below zero.
    Commits immediately; callers write their log row in a separate commit.
    """
    if counter not in _LISTING_COUNTERS:
        raise ValueError(f"unknown listing counter: {counter}")
    col = getattr(Property, counter)
    new_value = col + delta
    if delta < 0:
        # GREATEST() is not portable to SQLite
        stmt = update(Property).where(Property.property_id == property_id, col > 0).values({counter: new_value})
    else:
        stmt = update(Property).where(Property.property_id == property_id).values({counter: new_value})
    db.execute(stmt)
    db.commit()


def bump_daily(db: Session, *, property_id: str, field: str, delta: int = 1) -> None:
    if field not in _DAILY_FIELDS:
        raise ValueError(f"unknown analytics field: {field}")

    today = utcnow().date()
    col = getattr(PropertyAnalytics, field)
    where = (PropertyAnalytics.property_id == property_id, PropertyAnalytics.date == today)

    exists = db.scalar(select(PropertyAnalytics.analytics_id).where(*where))
    if exists is None:
        db.add(PropertyAnalytics(property_id=property_id, date=today, **{field: max(delta, 0)}))
        try:
            db.commit()
            return
        except IntegrityError:
            # another request created today's row first
            db.rollback()

    if delta < 0:
        db.execute(update(PropertyAnalytics).where(*where, col > 0).values({field: col + delta}))
    else:
        db.execute(update(PropertyAnalytics).where(*where).values({field: col + delta}))
    db.commit()
