# backend/alembic/versions/001_studio_schema.py
"""Studio schema: rooms, private classes and reservations

Revision ID: 001_studio_schema
Revises:
Create Date: 2025-06-01 00:00:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ARRAY

# revision identifiers, used by Alembic.
revision: str = "001_studio_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_RESERVATION_TABLES = (
    # table, resource column, exclusion constraint
    ("bookings", "room_id", "bookings_no_overlap_per_room"),
    ("class_bookings", "class_id", "class_bookings_no_overlap_per_class"),
)


def _create_extension_prefer_extensions_schema(extension_name: str) -> None:
    """Create extension using extensions schema when available."""

    bind = op.get_bind()
    if bind is None or bind.dialect.name != "postgresql":
        return

    op.execute(
        f"""
        DO $$
        DECLARE
            extensions_schema_exists BOOLEAN;
            extension_installed BOOLEAN;
        BEGIN
            SELECT EXISTS (
                SELECT 1 FROM pg_namespace WHERE nspname = 'extensions'
            ) INTO extensions_schema_exists;

            SELECT EXISTS (
                SELECT 1 FROM pg_extension WHERE extname = '{extension_name}'
            ) INTO extension_installed;

            IF NOT extension_installed THEN
                IF extensions_schema_exists THEN
                    EXECUTE 'CREATE EXTENSION IF NOT EXISTS {extension_name} WITH SCHEMA extensions';
                ELSE
                    EXECUTE 'CREATE EXTENSION IF NOT EXISTS {extension_name}';
                END IF;
            END IF;
        END
        $$;
        """
    )


def _reservation_columns() -> list:
    return [
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("booking_date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("total_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("payment_status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("payment_slip_url", sa.Text(), nullable=True),
        sa.Column("terms_accepted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("confirmed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
    ]


def _reservation_checks(table: str) -> list:
    return [
        sa.CheckConstraint(
            "status IN ('pending', 'confirmed', 'completed', 'cancelled')",
            name=f"ck_{table}_status",
        ),
        sa.CheckConstraint(
            "payment_status IN ('pending', 'paid', 'refunded')",
            name=f"ck_{table}_payment_status",
        ),
        sa.CheckConstraint("start_time < end_time", name=f"ck_{table}_time_order"),
        sa.CheckConstraint("total_price >= 0", name=f"ck_{table}_price_non_negative"),
    ]


def upgrade() -> None:
    """Create catalog and reservation tables."""
    bind = op.get_bind()
    dialect_name = bind.dialect.name if bind is not None else "postgresql"
    is_postgres = dialect_name == "postgresql"

    print("Creating rooms table...")
    amenities_type = ARRAY(sa.String()) if is_postgres else sa.String(2048)
    op.create_table(
        "rooms",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("capacity", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("hourly_rate", sa.Numeric(10, 2), nullable=False),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("amenities", amenities_type, nullable=False),
        sa.Column("is_available", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("type IN ('practice', 'recording', 'rehearsal')", name="ck_rooms_type"),
        sa.CheckConstraint("capacity > 0", name="ck_rooms_capacity_positive"),
        sa.CheckConstraint("hourly_rate >= 0", name="ck_rooms_rate_non_negative"),
    )
    op.create_index("ix_rooms_type", "rooms", ["type"])
    op.create_index("ix_rooms_is_available", "rooms", ["is_available"])

    op.create_table(
        "room_images",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("room_id", sa.String(26), nullable=False),
        sa.Column("image_url", sa.Text(), nullable=False),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True
        ),
        sa.ForeignKeyConstraint(["room_id"], ["rooms.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_room_images_room_id", "room_images", ["room_id"])

    print("Creating private_classes table...")
    op.create_table(
        "private_classes",
        sa.Column("id", sa.String(26), nullable=False),
        sa.Column("instructor_name", sa.String(200), nullable=False),
        sa.Column("instrument", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("lesson_rate", sa.Numeric(10, 2), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False, server_default="60"),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("is_available", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("duration_minutes > 0", name="ck_private_classes_duration_positive"),
        sa.CheckConstraint("lesson_rate >= 0", name="ck_private_classes_rate_non_negative"),
    )
    op.create_index("ix_private_classes_instrument", "private_classes", ["instrument"])
    op.create_index("ix_private_classes_is_available", "private_classes", ["is_available"])

    print("Creating reservation tables...")
    op.create_table(
        "bookings",
        *_reservation_columns(),
        sa.Column("room_id", sa.String(26), nullable=False),
        sa.Column("total_hours", sa.Numeric(5, 2), nullable=False),
        sa.ForeignKeyConstraint(["room_id"], ["rooms.id"]),
        sa.PrimaryKeyConstraint("id"),
        *_reservation_checks("bookings"),
        sa.CheckConstraint("total_hours > 0", name="ck_bookings_hours_positive"),
    )
    op.create_table(
        "class_bookings",
        *_reservation_columns(),
        sa.Column("class_id", sa.String(26), nullable=False),
        sa.ForeignKeyConstraint(["class_id"], ["private_classes.id"]),
        sa.PrimaryKeyConstraint("id"),
        *_reservation_checks("class_bookings"),
    )

    for table, resource_column, _ in _RESERVATION_TABLES:
        op.create_index(f"ix_{table}_id", table, ["id"])
        op.create_index(f"ix_{table}_user_id", table, ["user_id"])
        op.create_index(f"ix_{table}_booking_date", table, ["booking_date"])
        op.create_index(f"ix_{table}_status", table, ["status"])
        short = "room" if resource_column == "room_id" else "class"
        op.create_index(f"ix_{table}_{short}_date", table, [resource_column, "booking_date"])

    if is_postgres:
        # Final guard against double booking: two active reservations of one
        # resource can never hold overlapping [start, end) spans.
        _create_extension_prefer_extensions_schema("btree_gist")
        for table, resource_column, constraint in _RESERVATION_TABLES:
            op.execute(
                f"""
                ALTER TABLE {table}
                  ADD COLUMN IF NOT EXISTS booking_span tsrange
                  GENERATED ALWAYS AS (
                    tsrange(
                      (booking_date::timestamp + start_time),
                      (booking_date::timestamp + end_time),
                      '[)'
                    )
                  ) STORED
                """
            )
            op.execute(
                f"""
                ALTER TABLE {table}
                  ADD CONSTRAINT {constraint}
                  EXCLUDE USING gist (
                    {resource_column} WITH =,
                    booking_span WITH &&
                  )
                  WHERE (status IN ('pending', 'confirmed'))
                """
            )

    print("Studio schema created")


def downgrade() -> None:
    """Drop all studio tables."""
    bind = op.get_bind()
    if bind is not None and bind.dialect.name == "postgresql":
        for table, _, constraint in _RESERVATION_TABLES:
            op.execute(f"ALTER TABLE {table} DROP CONSTRAINT IF EXISTS {constraint}")

    op.drop_table("class_bookings")
    op.drop_table("bookings")
    op.drop_index("ix_private_classes_is_available", table_name="private_classes")
    op.drop_index("ix_private_classes_instrument", table_name="private_classes")
    op.drop_table("private_classes")
    op.drop_index("ix_room_images_room_id", table_name="room_images")
    op.drop_table("room_images")
    op.drop_index("ix_rooms_is_available", table_name="rooms")
    op.drop_index("ix_rooms_type", table_name="rooms")
    op.drop_table("rooms")
