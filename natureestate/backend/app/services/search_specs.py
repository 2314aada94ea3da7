# backend/app/services/search_specs.py
from __future__ import annotations

from ..models import (
    INQUIRY_STATUSES,
    NOTIFICATION_TYPES,
    PRIORITIES,
    PROPERTY_STATUSES,
    PROPERTY_TYPES,
    Notification,
    Property,
    PropertyInquiry,
    SavedProperty,
)
from .query_builder import FilterSpec as F, SearchSpec, SortSpec as S


PROPERTY_SEARCH = SearchSpec(
    "properties",
    filters=(
        F("query", (Property.title, Property.description), "contains"),
        F("country", Property.country, "contains"),
        F("region", Property.region, "contains"),
        F("city", Property.city, "contains"),
        F("property_type", Property.property_type, "eq", "choice", PROPERTY_TYPES),
        F("status", Property.status, "eq", "choice", PROPERTY_STATUSES),
        F("price_min", Property.price, "gte", "number"),
        F("price_max", Property.price, "lte", "number"),
        F("bedrooms_min", Property.bedrooms, "gte", "int"),
        F("bathrooms_min", Property.bathrooms, "gte", "number"),
        F("square_footage_min", Property.square_footage, "gte", "int"),
        F("square_footage_max", Property.square_footage, "lte", "int"),
        F("land_size_min", Property.land_size, "gte", "number"),
        F("land_size_max", Property.land_size, "lte", "number"),
        F("year_built_min", Property.year_built, "gte", "int"),
        F("year_built_max", Property.year_built, "lte", "int"),
        F("natural_features", Property.natural_features, "contains"),
        F("outdoor_amenities", Property.outdoor_amenities, "contains"),
        F(
            "location_text",
            (Property.country, Property.region, Property.city, Property.address),
            "contains",
        ),
        F("is_featured", Property.is_featured, "eq", "bool"),
    ),
    sorts=(
        S("created_at", Property.created_at),
        S("price", Property.price),
        S("view_count", Property.view_count),
        S("title", Property.title),
        S("square_footage", Property.square_footage),
    ),
    tiebreak=Property.property_id,
    default_limit=20,
)


INQUIRY_SEARCH = SearchSpec(
    "inquiries",
    filters=(
        F("property_id", PropertyInquiry.property_id, "eq"),
        F("status", PropertyInquiry.status, "eq", "choice", INQUIRY_STATUSES),
        F("priority", PropertyInquiry.priority, "eq", "choice", PRIORITIES),
        F("is_interested_in_viewing", PropertyInquiry.is_interested_in_viewing, "eq", "bool"),
        F("date_from", PropertyInquiry.created_at, "gte", "datetime"),
        F("date_to", PropertyInquiry.created_at, "lte", "datetime"),
    ),
    sorts=(
        S("created_at", PropertyInquiry.created_at),
        S("priority", PropertyInquiry.priority),
        S("status", PropertyInquiry.status),
    ),
    tiebreak=PropertyInquiry.inquiry_id,
    default_limit=10,
)


# owner view of one listing's inquiries
PROPERTY_INQUIRY_SEARCH = SearchSpec(
    "property_inquiries",
    filters=(F("status", PropertyInquiry.status, "eq", "choice", INQUIRY_STATUSES),),
    sorts=(S("created_at", PropertyInquiry.created_at),),
    tiebreak=PropertyInquiry.inquiry_id,
    default_limit=20,
)


NOTIFICATION_SEARCH = SearchSpec(
    "notifications",
    filters=(
        F("type", Notification.type, "eq", "choice", NOTIFICATION_TYPES),
        F("priority", Notification.priority, "eq", "choice", PRIORITIES),
        F("is_read", Notification.is_read, "eq", "bool"),
        F("date_from", Notification.created_at, "gte", "datetime"),
        F("date_to", Notification.created_at, "lte", "datetime"),
    ),
    sorts=(
        S("created_at", Notification.created_at),
        S("priority", Notification.priority),
        S("type", Notification.type),
    ),
    tiebreak=Notification.notification_id,
    default_limit=20,
)


SAVED_PROPERTY_SEARCH = SearchSpec(
    "saved_properties",
    filters=(F("filter_country", Property.country, "contains"),),
    sorts=(
        S("date_saved", SavedProperty.created_at),
        S("price_low_high", Property.price, "asc"),
        S("location", (Property.country, Property.region, Property.city), "asc"),
    ),
    tiebreak=SavedProperty.saved_property_id,
    default_sort="date_saved",
    default_limit=20,
)
