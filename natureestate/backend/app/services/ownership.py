# backend/app/services/ownership.py
"""
Existence first (404), then ownership (403), and only then may a caller
mutate. Every guarded route goes through one of these.
"""
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..errors import AuthorizationError, NotFoundError
from ..models import (
    Notification,
    Property,
    PropertyInquiry,
    PropertyPhoto,
    SavedProperty,
    SavedSearch,
)


def must_get_property(db: Session, *, property_id: str) -> Property:
    row = db.get(Property, property_id)
    if not row:
        raise NotFoundError("property not found")
    return row


def must_own_property(db: Session, *, user_id: str, property_id: str) -> Property:
    row = must_get_property(db, property_id=property_id)
    if row.user_id != user_id:
        raise AuthorizationError("not authorized to modify this property")
    return row


def must_get_photo(db: Session, *, property_id: str, photo_id: str) -> PropertyPhoto:
    row = db.scalar(
        select(PropertyPhoto).where(PropertyPhoto.photo_id == photo_id, PropertyPhoto.property_id == property_id)
    )
    if not row:
        raise NotFoundError("photo not found")
    return row


def must_get_inquiry(db: Session, *, inquiry_id: str) -> PropertyInquiry:
    row = db.get(PropertyInquiry, inquiry_id)
    if not row:
        raise NotFoundError("inquiry not found")
    return row


def must_see_inquiry(db: Session, *, user_id: str, inquiry_id: str) -> PropertyInquiry:
    row = must_get_inquiry(db, inquiry_id=inquiry_id)
    if user_id not in (row.sender_user_id, row.recipient_user_id):
        raise AuthorizationError("not authorized to view this inquiry")
    return row


def must_receive_inquiry(db: Session, *, user_id: str, inquiry_id: str) -> PropertyInquiry:
    row = must_get_inquiry(db, inquiry_id=inquiry_id)
    if row.recipient_user_id != user_id:
        raise AuthorizationError("only the recipient can update this inquiry")
    return row


def must_own_saved_property(db: Session, *, user_id: str, saved_property_id: str) -> SavedProperty:
    row = db.get(SavedProperty, saved_property_id)
    if not row:
        raise NotFoundError("saved property not found")
    if row.user_id != user_id:
        raise AuthorizationError("not authorized to modify this saved property")
    return row


def must_own_saved_search(db: Session, *, user_id: str, saved_search_id: str) -> SavedSearch:
    row = db.get(SavedSearch, saved_search_id)
    if not row:
        raise NotFoundError("saved search not found")
    if row.user_id != user_id:
        raise AuthorizationError("not authorized to modify this saved search")
    return row


def must_own_notification(db: Session, *, user_id: str, notification_id: str) -> Notification:
    row = db.get(Notification, notification_id)
    if not row:
        raise NotFoundError("notification not found")
    if row.user_id != user_id:
        raise AuthorizationError("not authorized to modify this notification")
    return row
