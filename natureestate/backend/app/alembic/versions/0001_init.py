"""init schema

Revision ID: 0001_init
Revises:
Create Date: 2026-10-18
"""
from alembic import op
import sqlalchemy as sa


revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None


def _id(name: str) -> sa.Column:
    return sa.Column(name, sa.String(length=36), primary_key=True)


def _fk(name: str, target: str, *, ondelete: str = "CASCADE", nullable: bool = False) -> sa.Column:
    return sa.Column(name, sa.String(length=36), sa.ForeignKey(target, ondelete=ondelete), nullable=nullable)


def _search_criteria() -> list[sa.Column]:
    # shared by saved_searches and search_history
    return [
        sa.Column("country", sa.String(length=100), nullable=True),
        sa.Column("property_type", sa.String(length=30), nullable=True),
        sa.Column("price_min", sa.Float(), nullable=True),
        sa.Column("price_max", sa.Float(), nullable=True),
        sa.Column("bedrooms_min", sa.Integer(), nullable=True),
        sa.Column("bathrooms_min", sa.Float(), nullable=True),
        sa.Column("square_footage_min", sa.Integer(), nullable=True),
        sa.Column("square_footage_max", sa.Integer(), nullable=True),
        sa.Column("land_size_min", sa.Float(), nullable=True),
        sa.Column("land_size_max", sa.Float(), nullable=True),
        sa.Column("natural_features", sa.Text(), nullable=True),
        sa.Column("outdoor_amenities", sa.Text(), nullable=True),
        sa.Column("location_text", sa.String(length=255), nullable=True),
    ]


def upgrade():
    op.create_table(
        "users",
        _id("user_id"),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("user_type", sa.String(length=20), nullable=False, server_default="buyer"),
        sa.Column("profile_photo_url", sa.String(length=500), nullable=True),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("email_verified", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("email_verification_token", sa.String(length=255), nullable=True),
        sa.Column("password_reset_token", sa.String(length=255), nullable=True),
        sa.Column("password_reset_expires", sa.DateTime(), nullable=True),
        sa.Column("notification_preferences", sa.Text(), nullable=True),
        sa.Column("countries_of_interest", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("last_login_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_email_verification_token", "users", ["email_verification_token"])
    op.create_index("ix_users_password_reset_token", "users", ["password_reset_token"])

    op.create_table(
        "user_sessions",
        _id("session_id"),
        _fk("user_id", "users.user_id"),
        sa.Column("token_hash", sa.String(length=64), nullable=False),
        sa.Column("refresh_token_hash", sa.String(length=64), nullable=False),
        sa.Column("device_info", sa.Text(), nullable=True),
        sa.Column("ip_address", sa.String(length=64), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("last_activity_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_user_sessions_user_id", "user_sessions", ["user_id"])
    op.create_index("ix_user_sessions_token_hash", "user_sessions", ["token_hash"])
    op.create_index("ix_user_sessions_refresh_token_hash", "user_sessions", ["refresh_token_hash"], unique=True)

    op.create_table(
        "properties",
        _id("property_id"),
        _fk("user_id", "users.user_id"),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("property_type", sa.String(length=30), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
        sa.Column("price", sa.Float(), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False, server_default="USD"),
        sa.Column("country", sa.String(length=100), nullable=False),
        sa.Column("region", sa.String(length=100), nullable=True),
        sa.Column("city", sa.String(length=100), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("square_footage", sa.Integer(), nullable=True),
        sa.Column("land_size", sa.Float(), nullable=True),
        sa.Column("land_size_unit", sa.String(length=20), nullable=True),
        sa.Column("bedrooms", sa.Integer(), nullable=True),
        sa.Column("bathrooms", sa.Float(), nullable=True),
        sa.Column("year_built", sa.Integer(), nullable=True),
        sa.Column("natural_features", sa.Text(), nullable=True),
        sa.Column("outdoor_amenities", sa.Text(), nullable=True),
        sa.Column("indoor_amenities", sa.Text(), nullable=True),
        sa.Column("view_types", sa.Text(), nullable=True),
        sa.Column("nearby_attractions", sa.Text(), nullable=True),
        sa.Column("distance_to_landmarks", sa.Text(), nullable=True),
        sa.Column("environmental_features", sa.Text(), nullable=True),
        sa.Column("outdoor_activities", sa.Text(), nullable=True),
        sa.Column("special_features", sa.Text(), nullable=True),
        sa.Column("property_condition", sa.String(length=20), nullable=True),
        sa.Column("listing_duration_days", sa.Integer(), nullable=False, server_default="90"),
        sa.Column("is_featured", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("featured_until", sa.DateTime(), nullable=True),
        sa.Column("view_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("inquiry_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("favorite_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_properties_user_id", "properties", ["user_id"])
    op.create_index("ix_properties_created_at", "properties", ["created_at"])
    op.create_index("ix_properties_status_created", "properties", ["status", "created_at"])
    op.create_index("ix_properties_country_type", "properties", ["country", "property_type"])

    op.create_table(
        "property_photos",
        _id("photo_id"),
        _fk("property_id", "properties.property_id"),
        sa.Column("photo_url", sa.String(length=500), nullable=False),
        sa.Column("caption", sa.Text(), nullable=True),
        sa.Column("photo_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_primary", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("photo_type", sa.String(length=20), nullable=True),
        sa.Column("file_size", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_property_photos_property_id", "property_photos", ["property_id"])

    op.create_table(
        "property_inquiries",
        _id("inquiry_id"),
        _fk("property_id", "properties.property_id"),
        _fk("sender_user_id", "users.user_id", ondelete="SET NULL", nullable=True),
        _fk("recipient_user_id", "users.user_id"),
        sa.Column("sender_name", sa.String(length=255), nullable=False),
        sa.Column("sender_email", sa.String(length=255), nullable=False),
        sa.Column("sender_phone", sa.String(length=50), nullable=True),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="unread"),
        sa.Column("is_interested_in_viewing", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("wants_similar_properties", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("response_message", sa.Text(), nullable=True),
        sa.Column("responded_at", sa.DateTime(), nullable=True),
        sa.Column("priority", sa.String(length=10), nullable=False, server_default="normal"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_property_inquiries_property_id", "property_inquiries", ["property_id"])
    op.create_index("ix_property_inquiries_sender_user_id", "property_inquiries", ["sender_user_id"])
    op.create_index("ix_property_inquiries_recipient_user_id", "property_inquiries", ["recipient_user_id"])
    op.create_index("ix_property_inquiries_created_at", "property_inquiries", ["created_at"])

    op.create_table(
        "inquiry_responses",
        _id("response_id"),
        _fk("inquiry_id", "property_inquiries.inquiry_id"),
        _fk("sender_user_id", "users.user_id"),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("attachments", sa.Text(), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_inquiry_responses_inquiry_id", "inquiry_responses", ["inquiry_id"])

    op.create_table(
        "saved_properties",
        _id("saved_property_id"),
        _fk("user_id", "users.user_id"),
        _fk("property_id", "properties.property_id"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("user_id", "property_id", name="uq_saved_properties_user_property"),
    )
    op.create_index("ix_saved_properties_user_id", "saved_properties", ["user_id"])
    op.create_index("ix_saved_properties_property_id", "saved_properties", ["property_id"])

    op.create_table(
        "saved_searches",
        _id("saved_search_id"),
        _fk("user_id", "users.user_id"),
        sa.Column("search_name", sa.String(length=255), nullable=False),
        *_search_criteria(),
        sa.Column("alert_frequency", sa.String(length=10), nullable=False, server_default="weekly"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("last_alert_sent", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_saved_searches_user_id", "saved_searches", ["user_id"])

    op.create_table(
        "notifications",
        _id("notification_id"),
        _fk("user_id", "users.user_id"),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        _fk("related_property_id", "properties.property_id", nullable=True),
        _fk("related_inquiry_id", "property_inquiries.inquiry_id", nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("is_email_sent", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("email_sent_at", sa.DateTime(), nullable=True),
        sa.Column("action_url", sa.String(length=500), nullable=True),
        sa.Column("priority", sa.String(length=10), nullable=False, server_default="normal"),
        sa.Column("expires_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"])
    op.create_index("ix_notifications_created_at", "notifications", ["created_at"])

    op.create_table(
        "property_views",
        _id("view_id"),
        _fk("property_id", "properties.property_id"),
        _fk("user_id", "users.user_id", nullable=True),
        sa.Column("session_id", sa.String(length=255), nullable=True),
        sa.Column("ip_address", sa.String(length=64), nullable=True),
        sa.Column("user_agent", sa.Text(), nullable=True),
        sa.Column("referrer_url", sa.String(length=500), nullable=True),
        sa.Column("view_duration_seconds", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_property_views_property_id", "property_views", ["property_id"])
    op.create_index("ix_property_views_user_id", "property_views", ["user_id"])
    op.create_index("ix_property_views_created_at", "property_views", ["created_at"])

    op.create_table(
        "search_history",
        _id("search_id"),
        _fk("user_id", "users.user_id", nullable=True),
        sa.Column("session_id", sa.String(length=255), nullable=True),
        sa.Column("search_query", sa.Text(), nullable=True),
        *_search_criteria(),
        sa.Column("sort_by", sa.String(length=50), nullable=True),
        sa.Column("results_count", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_search_history_user_id", "search_history", ["user_id"])
    op.create_index("ix_search_history_created_at", "search_history", ["created_at"])

    op.create_table(
        "property_analytics",
        _id("analytics_id"),
        _fk("property_id", "properties.property_id"),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("views_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("inquiries_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("favorites_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("shares_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("search_impressions", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint("property_id", "date", name="uq_property_analytics_property_date"),
    )
    op.create_index("ix_property_analytics_property_id", "property_analytics", ["property_id"])


def downgrade():
    op.drop_table("property_analytics")
    op.drop_table("search_history")
    op.drop_table("property_views")
    op.drop_table("notifications")
    op.drop_table("saved_searches")
    op.drop_table("saved_properties")
    op.drop_table("inquiry_responses")
    op.drop_table("property_inquiries")
    op.drop_table("property_photos")
    op.drop_table("properties")
    op.drop_table("user_sessions")
    op.drop_table("users")
