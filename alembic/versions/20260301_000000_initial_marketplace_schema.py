"""Initial marketplace schema for QwikSale

Revision ID: 20260301_000000
Revises: None
Create Date: 2026-03-01 00:00:00.000000

Creates the marketplace tables:
- Accounts (users) and the admin audit trail
- Listings (products, services) with seller snapshots
- Carriers (carrier_profiles, carrier_vehicles)
- Favorites, payments, support tickets and listing reports

Demo and catalog data are loaded by ``qwiksale-seed``, not by migrations.

Revision format: YYYYMMDD_HHMMSS_description

"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20260301_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _listing_columns() -> list:
    """Columns shared by products and services."""
    return [
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("image", sa.Text(), nullable=True),
        sa.Column("gallery", JSONB(), nullable=False, server_default="[]"),
        sa.Column("location", sa.String(120), nullable=True),
        sa.Column("price", sa.Integer(), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default="ACTIVE"),
        sa.Column("featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("seller_id", sa.String(64), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("seller_name", sa.String(120), nullable=True),
        sa.Column("seller_phone", sa.String(20), nullable=True),
        sa.Column("seller_location", sa.String(120), nullable=True),
        sa.Column("seller_member_since", sa.String(16), nullable=True),
        sa.Column("seller_rating", sa.Float(), nullable=True),
        sa.Column("seller_sales", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    """Create all marketplace tables."""

    # Create users table
    op.create_table(
        "users",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("email", sa.String(254), nullable=True),
        sa.Column("name", sa.String(120), nullable=True),
        sa.Column("username", sa.String(64), nullable=True),
        sa.Column("image", sa.Text(), nullable=True),
        sa.Column("role", sa.String(16), nullable=False, server_default="USER"),
        sa.Column("subscription", sa.String(16), nullable=False, server_default="FREE"),
        sa.Column("verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("email_verified", sa.DateTime(), nullable=True),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("location", sa.String(120), nullable=True),
        sa.Column("rating", sa.Float(), nullable=True),
        sa.Column("sales", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("request_ban_until", sa.DateTime(), nullable=True),
        sa.Column("request_ban_reason", sa.String(240), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_users_email", "email", unique=True),
        sa.Index("ix_users_username", "username", unique=True),
        sa.Index("ix_users_role", "role"),
        sa.Index("ix_users_created_at", "created_at"),
    )

    # Create products table
    op.create_table(
        "products",
        *_listing_columns(),
        sa.Column("category", sa.String(80), nullable=False),
        sa.Column("subcategory", sa.String(80), nullable=False),
        sa.Column("brand", sa.String(80), nullable=True),
        sa.Column("condition", sa.String(32), nullable=True),
        sa.Column("negotiable", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_products_name", "name"),
        sa.Index("ix_products_category", "category"),
        sa.Index("ix_products_status", "status"),
        sa.Index("ix_products_featured", "featured"),
        sa.Index("ix_products_seller_id", "seller_id"),
        sa.Index("ix_products_created_at", "created_at"),
    )

    # Create services table
    op.create_table(
        "services",
        *_listing_columns(),
        sa.Column("category", sa.String(80), nullable=False),
        sa.Column("subcategory", sa.String(80), nullable=True),
        sa.Column("rate_type", sa.String(8), nullable=False, server_default="fixed"),
        sa.Column("service_area", sa.String(120), nullable=True),
        sa.Column("availability", sa.String(120), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_services_name", "name"),
        sa.Index("ix_services_category", "category"),
        sa.Index("ix_services_status", "status"),
        sa.Index("ix_services_featured", "featured"),
        sa.Index("ix_services_seller_id", "seller_id"),
        sa.Index("ix_services_created_at", "created_at"),
    )

    # Create carrier_profiles table
    op.create_table(
        "carrier_profiles",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default="OFFLINE"),
        sa.Column("plan_tier", sa.String(16), nullable=False, server_default="BASIC"),
        sa.Column("verification_status", sa.String(16), nullable=False, server_default="UNVERIFIED"),
        sa.Column("doc_photo_key", sa.Text(), nullable=True),
        sa.Column("banned_at", sa.DateTime(), nullable=True),
        sa.Column("banned_reason", sa.String(240), nullable=True),
        sa.Column("suspended_until", sa.DateTime(), nullable=True),
        sa.Column("station_label", sa.String(120), nullable=True),
        sa.Column("station_lat", sa.Float(), nullable=True),
        sa.Column("station_lng", sa.Float(), nullable=True),
        sa.Column("last_seen_at", sa.DateTime(), nullable=True),
        sa.Column("last_seen_lat", sa.Float(), nullable=True),
        sa.Column("last_seen_lng", sa.Float(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_carrier_profiles_user_id", "user_id", unique=True),
        sa.Index("ix_carrier_profiles_status", "status"),
        sa.Index("ix_carrier_profiles_plan_tier", "plan_tier"),
        sa.Index("ix_carrier_profiles_last_seen_at", "last_seen_at"),
        sa.Index("ix_carrier_profiles_updated_at", "updated_at"),
    )

    # Create carrier_vehicles table
    op.create_table(
        "carrier_vehicles",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("carrier_id", sa.String(64), sa.ForeignKey("carrier_profiles.id"), nullable=False),
        sa.Column("type", sa.String(16), nullable=False, server_default="MOTORBIKE"),
        sa.Column("registration", sa.String(32), nullable=True),
        sa.Column("photo_keys", JSONB(), nullable=False, server_default="[]"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_carrier_vehicles_carrier_id", "carrier_id"),
    )

    # Create favorites table
    op.create_table(
        "favorites",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("product_id", sa.String(64), sa.ForeignKey("products.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "product_id", name="uq_favorites_user_product"),
        sa.Index("ix_favorites_user_id", "user_id"),
        sa.Index("ix_favorites_product_id", "product_id"),
    )

    # Create payments table
    op.create_table(
        "payments",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(64), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("product_id", sa.String(64), sa.ForeignKey("products.id"), nullable=True),
        sa.Column("amount", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(16), nullable=False, server_default="PENDING"),
        sa.Column("method", sa.String(16), nullable=False, server_default="MPESA"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_payments_user_id", "user_id"),
        sa.Index("ix_payments_product_id", "product_id"),
    )

    # Create support_tickets table
    op.create_table(
        "support_tickets",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("reporter_id", sa.String(64), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("type", sa.String(32), nullable=False, server_default="OTHER"),
        sa.Column("status", sa.String(16), nullable=False, server_default="OPEN"),
        sa.Column("subject", sa.String(200), nullable=True),
        sa.Column("message", sa.Text(), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_support_tickets_reporter_id", "reporter_id"),
    )

    # Create reports table
    op.create_table(
        "reports",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(64), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("listing_id", sa.String(64), nullable=False),
        sa.Column("listing_type", sa.String(16), nullable=False, server_default="product"),
        sa.Column("reason", sa.String(64), nullable=False),
        sa.Column("details", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_reports_user_id", "user_id"),
        sa.Index("ix_reports_listing_id", "listing_id"),
    )

    # Create audit_logs table
    op.create_table(
        "audit_logs",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("action", sa.String(64), nullable=False),
        sa.Column("actor_user_id", sa.String(64), nullable=True),
        sa.Column("target_user_id", sa.String(64), nullable=True),
        sa.Column("meta", JSONB(), nullable=False, server_default="{}"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_audit_logs_action", "action"),
        sa.Index("ix_audit_logs_actor_user_id", "actor_user_id"),
        sa.Index("ix_audit_logs_target_user_id", "target_user_id"),
    )


def downgrade() -> None:
    """Drop all marketplace tables."""
    op.drop_table("audit_logs")
    op.drop_table("reports")
    op.drop_table("support_tickets")
    op.drop_table("payments")
    op.drop_table("favorites")
    op.drop_table("carrier_vehicles")
    op.drop_table("carrier_profiles")
    op.drop_table("services")
    op.drop_table("products")
    op.drop_table("users")
