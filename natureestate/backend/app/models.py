# backend/app/models.py
from __future__ import annotations

import uuid
from datetime import date as date_type, datetime, timezone
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Index,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .db import Base


def utcnow() -> datetime:
    # naive UTC everywhere; SQLite has no tz-aware DateTime
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_id() -> str:
    return str(uuid.uuid4())


USER_TYPES = ("buyer", "seller", "agent", "admin")
PROPERTY_TYPES = ("villa", "cabin", "condominium", "farm", "land", "mansion", "house", "apartment", "commercial")
PROPERTY_STATUSES = ("active", "inactive", "sold", "pending", "withdrawn")
PROPERTY_CONDITIONS = ("excellent", "very good", "good", "fair", "needs work", "pristine", "restored")
LAND_SIZE_UNITS = ("acres", "hectares", "sqft", "sqm")
PHOTO_TYPES = ("exterior", "interior", "aerial", "floor_plan", "amenity")
INQUIRY_STATUSES = ("unread", "read", "responded", "archived")
PRIORITIES = ("low", "normal", "high")
NOTIFICATION_TYPES = ("inquiry", "saved_search", "property_update", "system", "marketing")
ALERT_FREQUENCIES = ("daily", "weekly", "monthly", "never")


# -----------------------------
# Users / sessions
# -----------------------------
class User(Base):
    __tablename__ = "users"

    user_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    user_type: Mapped[str] = mapped_column(String(20), nullable=False, default="buyer")  # buyer|seller|agent|admin
    profile_photo_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    email_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    email_verification_token: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    password_reset_token: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    password_reset_expires: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    notification_preferences: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    countries_of_interest: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
    last_login_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)


class UserSession(Base):
    __tablename__ = "user_sessions"

    session_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)

    # sha256 digests only; raw tokens are never stored
    token_hash: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    refresh_token_hash: Mapped[str] = mapped_column(String(64), nullable=False, unique=True, index=True)

    device_info: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    ip_address: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    last_activity_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)


# -----------------------------
# Listings
# -----------------------------
class Property(Base):
    __tablename__ = "properties"
    __table_args__ = (
        Index("ix_properties_status_created", "status", "created_at"),
        Index("ix_properties_country_type", "country", "property_type"),
    )

    property_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    property_type: Mapped[str] = mapped_column(String(30), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    price: Mapped[float] = mapped_column(Float, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")

    country: Mapped[str] = mapped_column(String(100), nullable=False)
    region: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    latitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    square_footage: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    land_size: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    land_size_unit: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    bedrooms: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    bathrooms: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    year_built: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    natural_features: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    outdoor_amenities: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    indoor_amenities: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    view_types: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    nearby_attractions: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    distance_to_landmarks: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    environmental_features: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    outdoor_activities: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    special_features: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    property_condition: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    listing_duration_days: Mapped[int] = mapped_column(Integer, nullable=False, default=90)
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    featured_until: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    inquiry_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    favorite_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
    expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    owner: Mapped["User"] = relationship("User")
    photos: Mapped[List["PropertyPhoto"]] = relationship(
        "PropertyPhoto",
        back_populates="property",
        order_by="[PropertyPhoto.photo_order, PropertyPhoto.created_at, PropertyPhoto.photo_id]",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class PropertyPhoto(Base):
    __tablename__ = "property_photos"

    photo_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    property_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("properties.property_id", ondelete="CASCADE"), nullable=False, index=True
    )
    photo_url: Mapped[str] = mapped_column(String(500), nullable=False)
    caption: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    photo_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    photo_type: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    file_size: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    property: Mapped["Property"] = relationship("Property", back_populates="photos")


# -----------------------------
# Inquiries
# -----------------------------
class PropertyInquiry(Base):
    __tablename__ = "property_inquiries"

    inquiry_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    property_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("properties.property_id", ondelete="CASCADE"), nullable=False, index=True
    )
    sender_user_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("users.user_id", ondelete="SET NULL"), nullable=True, index=True
    )
    recipient_user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True
    )

    sender_name: Mapped[str] = mapped_column(String(255), nullable=False)
    sender_email: Mapped[str] = mapped_column(String(255), nullable=False)
    sender_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="unread")
    is_interested_in_viewing: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    wants_similar_properties: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    response_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    responded_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    priority: Mapped[str] = mapped_column(String(10), nullable=False, default="normal")

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    property: Mapped["Property"] = relationship("Property", lazy="joined")


class InquiryResponse(Base):
    __tablename__ = "inquiry_responses"

    response_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    inquiry_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("property_inquiries.inquiry_id", ondelete="CASCADE"), nullable=False, index=True
    )
    sender_user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    attachments: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    sender: Mapped["User"] = relationship("User", lazy="joined")


# -----------------------------
# Saved properties / searches
# -----------------------------
class SavedProperty(Base):
    __tablename__ = "saved_properties"
    __table_args__ = (UniqueConstraint("user_id", "property_id", name="uq_saved_properties_user_property"),)

    saved_property_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    property_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("properties.property_id", ondelete="CASCADE"), nullable=False, index=True
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    property: Mapped["Property"] = relationship("Property", lazy="joined")


class SavedSearch(Base):
    __tablename__ = "saved_searches"

    saved_search_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    search_name: Mapped[str] = mapped_column(String(255), nullable=False)

    country: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    property_type: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    price_min: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    price_max: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    bedrooms_min: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    bathrooms_min: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    square_footage_min: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    square_footage_max: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    land_size_min: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    land_size_max: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    natural_features: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    outdoor_amenities: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    location_text: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    alert_frequency: Mapped[str] = mapped_column(String(10), nullable=False, default="weekly")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    last_alert_sent: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)


# -----------------------------
# Notifications
# -----------------------------
class Notification(Base):
    __tablename__ = "notifications"

    notification_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)

    related_property_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("properties.property_id", ondelete="CASCADE"), nullable=True
    )
    related_inquiry_id: Mapped[Optional[str]] = mapped_column(
        String(36), ForeignKey("property_inquiries.inquiry_id", ondelete="CASCADE"), nullable=True
    )

    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_email_sent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    email_sent_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    action_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    priority: Mapped[str] = mapped_column(String(10), nullable=False, default="normal")
    expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, index=True)


# -----------------------------
# Activity logs / analytics
# -----------------------------
class PropertyView(Base):
    __tablename__ = "property_views"

    view_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    property_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("properties.property_id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[Optional[str]] = mapped_column(String(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=True, index=True)
    session_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    ip_address: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    user_agent: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    referrer_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    view_duration_seconds: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, index=True)

    property: Mapped["Property"] = relationship("Property", lazy="joined")


class SearchHistory(Base):
    __tablename__ = "search_history"

    search_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[Optional[str]] = mapped_column(String(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=True, index=True)
    session_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    search_query: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    property_type: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    price_min: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    price_max: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    bedrooms_min: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    bathrooms_min: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    square_footage_min: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    square_footage_max: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    land_size_min: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    land_size_max: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    natural_features: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    outdoor_amenities: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    location_text: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    sort_by: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    results_count: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, index=True)


class PropertyAnalytics(Base):
    __tablename__ = "property_analytics"
    __table_args__ = (UniqueConstraint("property_id", "date", name="uq_property_analytics_property_date"),)

    analytics_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    property_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("properties.property_id", ondelete="CASCADE"), nullable=False, index=True
    )
    date: Mapped[date_type] = mapped_column(Date, nullable=False)
    views_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    inquiries_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    favorites_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    shares_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    search_impressions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
