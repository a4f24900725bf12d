"""delivery schema

Revision ID: 0001_delivery
Revises:
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa

revision = "0001_delivery"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "delivery_schedules",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("day_of_week", sa.Integer(), nullable=False),
        sa.Column("cutoff_day", sa.Integer(), nullable=False),
        sa.Column("cutoff_time", sa.String(length=5), nullable=False),
        sa.Column("lead_time_days", sa.Integer(), nullable=False, server_default=sa.text("2")),
        sa.Column("delivery_time_window", sa.String(length=100), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_delivery_schedules_day_of_week", "delivery_schedules", ["day_of_week"])
    op.create_index("ix_delivery_schedules_is_active", "delivery_schedules", ["is_active"])

    op.create_table(
        "pickup_locations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("address", sa.String(length=1000), nullable=False),
        sa.Column("pickup_days", sa.JSON(), nullable=False),
        sa.Column("pickup_time_windows", sa.String(length=255), nullable=False),
        sa.Column("instructions", sa.String(length=1000), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        sa.Column("requires_preorder", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("cutoff_day", sa.Integer(), nullable=True),
        sa.Column("cutoff_time", sa.String(length=5), nullable=True),
        sa.Column("lead_time_days", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_pickup_locations_is_active", "pickup_locations", ["is_active"])

    op.create_table(
        "delivery_calendar_closures",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("closure_date", sa.String(length=10), nullable=False),
        sa.Column("reason", sa.String(length=500), nullable=False),
        sa.Column("affects_delivery", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        sa.Column("affects_pickup", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        "ix_delivery_calendar_closures_closure_date",
        "delivery_calendar_closures",
        ["closure_date"],
        unique=True,
    )

    op.create_table(
        "delivery_one_off_dates",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("date", sa.String(length=10), nullable=False),
        sa.Column("type", sa.String(length=20), nullable=False),
        sa.Column("reason", sa.String(length=500), nullable=True),
        sa.Column("time_window_start", sa.String(length=5), nullable=True),
        sa.Column("time_window_end", sa.String(length=5), nullable=True),
        sa.Column("lead_time_days", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        sa.UniqueConstraint("date", "type", name="uq_delivery_one_off_date_type"),
    )
    op.create_index("ix_delivery_one_off_dates_date", "delivery_one_off_dates", ["date"])

    op.create_table(
        "delivery_zones",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("zip_codes", sa.JSON(), nullable=False),
        sa.Column("fee_cents", sa.Integer(), nullable=False),
        sa.Column("priority", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("1")),
    )
    op.create_index("ix_delivery_zones_priority", "delivery_zones", ["priority"])
    op.create_index("ix_delivery_zones_is_active", "delivery_zones", ["is_active"])

    op.create_table(
        "product_delivery_rules",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("product_id", sa.String(length=64), nullable=False),
        sa.Column("allowed_delivery_days", sa.JSON(), nullable=True),
        sa.Column("minimum_lead_time_days", sa.Integer(), nullable=True),
        sa.Column("allow_pickup", sa.Boolean(), nullable=False, server_default=sa.text("1")),
        sa.Column("allow_delivery", sa.Boolean(), nullable=False, server_default=sa.text("1")),
    )
    op.create_index("ix_product_delivery_rules_product_id", "product_delivery_rules", ["product_id"], unique=True)

    op.create_table(
        "orders",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("order_number", sa.String(length=16), nullable=True, unique=True),
        sa.Column("customer_name", sa.String(length=255), nullable=False),
        sa.Column("customer_email", sa.String(length=255), nullable=True),
        sa.Column("fulfillment_method", sa.String(length=16), nullable=False),
        sa.Column("delivery_date", sa.String(length=10), nullable=True),
        sa.Column("delivery_time_window", sa.String(length=100), nullable=True),
        sa.Column("delivery_address", sa.String(length=1000), nullable=True),
        sa.Column("delivery_zip", sa.String(length=16), nullable=True),
        sa.Column("delivery_zone_id", sa.Integer(), sa.ForeignKey("delivery_zones.id"), nullable=True),
        sa.Column("delivery_fee_cents", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("delivery_status", sa.String(length=32), nullable=True),
        sa.Column("pickup_location_id", sa.Integer(), sa.ForeignKey("pickup_locations.id"), nullable=True),
        sa.Column("pickup_date", sa.String(length=10), nullable=True),
        sa.Column("pickup_time_window", sa.String(length=100), nullable=True),
        sa.Column("pickup_status", sa.String(length=32), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("total_cents", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("status_updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_orders_fulfillment_method", "orders", ["fulfillment_method"])
    op.create_index("ix_orders_delivery_date", "orders", ["delivery_date"])
    op.create_index("ix_orders_pickup_date", "orders", ["pickup_date"])


def downgrade() -> None:
    op.drop_index("ix_orders_pickup_date", table_name="orders")
    op.drop_index("ix_orders_delivery_date", table_name="orders")
    op.drop_index("ix_orders_fulfillment_method", table_name="orders")
    op.drop_table("orders")
    op.drop_index("ix_product_delivery_rules_product_id", table_name="product_delivery_rules")
    op.drop_table("product_delivery_rules")
    op.drop_index("ix_delivery_zones_is_active", table_name="delivery_zones")
    op.drop_index("ix_delivery_zones_priority", table_name="delivery_zones")
    op.drop_table("delivery_zones")
    op.drop_index("ix_delivery_one_off_dates_date", table_name="delivery_one_off_dates")
    op.drop_table("delivery_one_off_dates")
    op.drop_index("ix_delivery_calendar_closures_closure_date", table_name="delivery_calendar_closures")
    op.drop_table("delivery_calendar_closures")
    op.drop_index("ix_pickup_locations_is_active", table_name="pickup_locations")
    op.drop_table("pickup_locations")
    op.drop_index("ix_delivery_schedules_is_active", table_name="delivery_schedules")
    op.drop_index("ix_delivery_schedules_day_of_week", table_name="delivery_schedules")
    op.drop_table("delivery_schedules")
