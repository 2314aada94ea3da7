# backend/app/schemas.py
from __future__ import annotations

from datetime import date as date_type, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator

from .models import utcnow

# Integer columns are 32-bit on Postgres
INT32_MAX = 2_147_483_647

UserType = Literal["buyer", "seller", "agent", "admin"]
PropertyType = Literal["villa", "cabin", "condominium", "farm", "land", "mansion", "house", "apartment", "commercial"]
PropertyStatus = Literal["active", "inactive", "sold", "pending", "withdrawn"]
PropertyCondition = Literal["excellent", "very good", "good", "fair", "needs work", "pristine", "restored"]
LandSizeUnit = Literal["acres", "hectares", "sqft", "sqm"]
PhotoType = Literal["exterior", "interior", "aerial", "floor_plan", "amenity"]
InquiryStatus = Literal["unread", "read", "responded", "archived"]
Priority = Literal["low", "normal", "high"]
AlertFrequency = Literal["daily", "weekly", "monthly", "never"]


class MessageOut(BaseModel):
    success: bool = True
    message: str


# -------------------- Users / Auth --------------------

class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    name: str = Field(min_length=1, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    user_type: UserType = "buyer"
    countries_of_interest: Optional[str] = None
    notification_preferences: Optional[str] = None


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class RefreshIn(BaseModel):
    refresh_token: str = Field(min_length=1)


class ForgotPasswordIn(BaseModel):
    email: EmailStr


class ResetPasswordIn(BaseModel):
    token: str = Field(min_length=1)
    password: str = Field(min_length=8, max_length=128)


class VerifyEmailIn(BaseModel):
    token: str = Field(min_length=1)


class UserOut(BaseModel):
    user_id: str
    email: str
    name: str
    phone: Optional[str] = None
    user_type: str
    profile_photo_url: Optional[str] = None
    is_verified: bool
    email_verified: bool
    notification_preferences: Optional[str] = None
    countries_of_interest: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    last_login_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class UserPublicOut(BaseModel):
    user_id: str
    name: str
    user_type: str
    profile_photo_url: Optional[str] = None
    is_verified: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    user_type: Optional[UserType] = None
    profile_photo_url: Optional[str] = Field(default=None, max_length=500)
    notification_preferences: Optional[str] = None
    countries_of_interest: Optional[str] = None


class AuthOut(BaseModel):
    user: UserOut
    token: str
    refresh_token: str
    expires_at: datetime


# -------------------- Properties --------------------

class _PropertyFields(BaseModel):
    description: Optional[str] = None
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    region: Optional[str] = Field(default=None, max_length=100)
    city: Optional[str] = Field(default=None, max_length=100)
    address: Optional[str] = None
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    square_footage: Optional[int] = Field(default=None, gt=0, le=INT32_MAX)
    land_size: Optional[float] = Field(default=None, gt=0)
    land_size_unit: Optional[LandSizeUnit] = None
    bedrooms: Optional[int] = Field(default=None, ge=0, le=INT32_MAX)
    bathrooms: Optional[float] = Field(default=None, ge=0)
    year_built: Optional[int] = None
    natural_features: Optional[str] = None
    outdoor_amenities: Optional[str] = None
    indoor_amenities: Optional[str] = None
    view_types: Optional[str] = None
    nearby_attractions: Optional[str] = None
    distance_to_landmarks: Optional[str] = None
    environmental_features: Optional[str] = None
    outdoor_activities: Optional[str] = None
    special_features: Optional[str] = None
    property_condition: Optional[PropertyCondition] = None
    is_featured: Optional[bool] = None
    featured_until: Optional[datetime] = None

    @model_validator(mode="after")
    def _year_built_range(self):
        if self.year_built is not None and not (1800 <= self.year_built <= utcnow().year):
            raise ValueError("year_built must be between 1800 and the current year")
        return self


class PropertyCreate(_PropertyFields):
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    property_type: PropertyType
    price: float = Field(gt=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    country: str = Field(min_length=1, max_length=100)
    listing_duration_days: int = Field(default=90, gt=0, le=3650)


class PropertyUpdate(_PropertyFields):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    property_type: Optional[PropertyType] = None
    status: Optional[PropertyStatus] = None
    price: Optional[float] = Field(default=None, gt=0)
    country: Optional[str] = Field(default=None, min_length=1, max_length=100)
    listing_duration_days: Optional[int] = Field(default=None, gt=0, le=3650)


class PhotoOut(BaseModel):
    photo_id: str
    property_id: str
    photo_url: str
    caption: Optional[str] = None
    photo_order: int
    is_primary: bool
    photo_type: Optional[str] = None
    file_size: Optional[int] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PhotoCreate(BaseModel):
    photo_url: str = Field(min_length=1, max_length=500)
    caption: Optional[str] = None
    photo_order: int = Field(default=0, ge=0, le=INT32_MAX)
    is_primary: bool = False
    photo_type: Optional[PhotoType] = None
    file_size: Optional[int] = Field(default=None, ge=0, le=INT32_MAX)


class PhotoUpdate(BaseModel):
    caption: Optional[str] = None
    photo_order: Optional[int] = Field(default=None, ge=0, le=INT32_MAX)
    is_primary: Optional[bool] = None
    photo_type: Optional[PhotoType] = None


class PropertyOut(BaseModel):
    property_id: str
    user_id: str
    title: str
    description: str
    property_type: str
    status: str
    price: float
    currency: str
    country: str
    region: Optional[str] = None
    city: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    square_footage: Optional[int] = None
    land_size: Optional[float] = None
    land_size_unit: Optional[str] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[float] = None
    year_built: Optional[int] = None
    natural_features: Optional[str] = None
    outdoor_amenities: Optional[str] = None
    indoor_amenities: Optional[str] = None
    view_types: Optional[str] = None
    nearby_attractions: Optional[str] = None
    distance_to_landmarks: Optional[str] = None
    environmental_features: Optional[str] = None
    outdoor_activities: Optional[str] = None
    special_features: Optional[str] = None
    property_condition: Optional[str] = None
    listing_duration_days: int
    is_featured: bool
    featured_until: Optional[datetime] = None
    view_count: int
    inquiry_count: int
    favorite_count: int
    created_at: datetime
    updated_at: datetime
    expires_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PropertyViewCreate(BaseModel):
    session_id: Optional[str] = Field(default=None, max_length=255)
    referrer_url: Optional[str] = Field(default=None, max_length=500)
    view_duration_seconds: Optional[int] = Field(default=None, ge=0, le=INT32_MAX)


class PropertyViewOut(BaseModel):
    view_id: str
    property_id: str
    user_id: Optional[str] = None
    session_id: Optional[str] = None
    referrer_url: Optional[str] = None
    view_duration_seconds: Optional[int] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PropertyAnalyticsOut(BaseModel):
    analytics_id: str
    property_id: str
    date: date_type
    views_count: int
    inquiries_count: int
    favorites_count: int
    shares_count: int
    search_impressions: int

    model_config = ConfigDict(from_attributes=True)


# -------------------- Inquiries --------------------

class InquiryCreate(BaseModel):
    sender_name: str = Field(min_length=1, max_length=255)
    sender_email: EmailStr
    sender_phone: Optional[str] = Field(default=None, max_length=50)
    message: str = Field(min_length=1)
    is_interested_in_viewing: bool = False
    wants_similar_properties: bool = False
    priority: Priority = "normal"


class InquiryUpdate(BaseModel):
    status: Optional[InquiryStatus] = None
    response_message: Optional[str] = None
    priority: Optional[Priority] = None


class InquiryOut(BaseModel):
    inquiry_id: str
    property_id: str
    sender_user_id: Optional[str] = None
    recipient_user_id: str
    sender_name: str
    sender_email: str
    sender_phone: Optional[str] = None
    message: str
    status: str
    is_interested_in_viewing: bool
    wants_similar_properties: bool
    response_message: Optional[str] = None
    responded_at: Optional[datetime] = None
    priority: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class InquiryResponseCreate(BaseModel):
    message: str = Field(min_length=1)
    attachments: Optional[str] = None


class InquiryResponseOut(BaseModel):
    response_id: str
    inquiry_id: str
    sender_user_id: str
    message: str
    attachments: Optional[str] = None
    is_read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# -------------------- Saved properties / searches --------------------

class SavedPropertyCreate(BaseModel):
    property_id: str = Field(min_length=1)
    notes: Optional[str] = None


class SavedPropertyUpdate(BaseModel):
    notes: Optional[str] = None


class SavedPropertyOut(BaseModel):
    saved_property_id: str
    user_id: str
    property_id: str
    notes: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class _SavedSearchFields(BaseModel):
    country: Optional[str] = None
    property_type: Optional[PropertyType] = None
    price_min: Optional[float] = Field(default=None, ge=0)
    price_max: Optional[float] = Field(default=None, ge=0)
    bedrooms_min: Optional[int] = Field(default=None, ge=0, le=INT32_MAX)
    bathrooms_min: Optional[float] = Field(default=None, ge=0)
    square_footage_min: Optional[int] = Field(default=None, ge=0, le=INT32_MAX)
    square_footage_max: Optional[int] = Field(default=None, ge=0, le=INT32_MAX)
    land_size_min: Optional[float] = Field(default=None, ge=0)
    land_size_max: Optional[float] = Field(default=None, ge=0)
    natural_features: Optional[str] = None
    outdoor_amenities: Optional[str] = None
    location_text: Optional[str] = Field(default=None, max_length=255)


class SavedSearchCreate(_SavedSearchFields):
    search_name: str = Field(min_length=1, max_length=255)
    alert_frequency: AlertFrequency = "weekly"
    is_active: bool = True


class SavedSearchUpdate(_SavedSearchFields):
    search_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    alert_frequency: Optional[AlertFrequency] = None
    is_active: Optional[bool] = None


class SavedSearchOut(_SavedSearchFields):
    saved_search_id: str
    user_id: str
    search_name: str
    property_type: Optional[str] = None
    alert_frequency: str
    is_active: bool
    last_alert_sent: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# -------------------- Notifications --------------------

class NotificationOut(BaseModel):
    notification_id: str
    user_id: str
    type: str
    title: str
    message: str
    related_property_id: Optional[str] = None
    related_inquiry_id: Optional[str] = None
    is_read: bool
    is_email_sent: bool
    email_sent_at: Optional[datetime] = None
    action_url: Optional[str] = None
    priority: str
    expires_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# -------------------- Search history --------------------

class SearchHistoryCreate(BaseModel):
    session_id: Optional[str] = Field(default=None, max_length=255)
    search_query: Optional[str] = None
    country: Optional[str] = None
    property_type: Optional[PropertyType] = None
    price_min: Optional[float] = None
    price_max: Optional[float] = None
    bedrooms_min: Optional[int] = Field(default=None, ge=0, le=INT32_MAX)
    bathrooms_min: Optional[float] = None
    square_footage_min: Optional[int] = Field(default=None, ge=0, le=INT32_MAX)
    square_footage_max: Optional[int] = Field(default=None, ge=0, le=INT32_MAX)
    land_size_min: Optional[float] = None
    land_size_max: Optional[float] = None
    natural_features: Optional[str] = None
    outdoor_amenities: Optional[str] = None
    location_text: Optional[str] = Field(default=None, max_length=255)
    sort_by: Optional[str] = Field(default=None, max_length=50)
    results_count: Optional[int] = Field(default=None, ge=0, le=INT32_MAX)


class SearchHistoryOut(BaseModel):
    search_id: str
    user_id: Optional[str] = None
    session_id: Optional[str] = None
    search_query: Optional[str] = None
    country: Optional[str] = None
    property_type: Optional[str] = None
    price_min: Optional[float] = None
    price_max: Optional[float] = None
    bedrooms_min: Optional[int] = None
    bathrooms_min: Optional[float] = None
    square_footage_min: Optional[int] = None
    square_footage_max: Optional[int] = None
    land_size_min: Optional[float] = None
    land_size_max: Optional[float] = None
    natural_features: Optional[str] = None
    outdoor_amenities: Optional[str] = None
    location_text: Optional[str] = None
    sort_by: Optional[str] = None
    results_count: Optional[int] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
