"""initial schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001_initial"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("role", sa.String(length=50), nullable=False, server_default="admin"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "room_types",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("price", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("capacity", sa.Integer(), nullable=True),
        sa.Column("image_url", sa.String(length=512), nullable=True),
        sa.Column("assigned_rooms", sa.JSON(), nullable=False),
    )
    op.create_index("ix_room_types_name", "room_types", ["name"], unique=True)

    op.create_table(
        "site_documents",
        sa.Column("key", sa.String(length=64), primary_key=True),
        sa.Column("data", sa.JSON(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "bookings",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=False),
        sa.Column("guest_name", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=50), nullable=False, server_default=""),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("check_in", sa.Date(), nullable=False),
        sa.Column("check_out", sa.Date(), nullable=False),
        sa.Column("adults", sa.String(length=20), nullable=False, server_default=""),
        sa.Column("children", sa.String(length=20), nullable=False, server_default=""),
        sa.Column("room_type", sa.String(length=255), nullable=False),
        sa.Column("breakfast", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("pickup", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("flight_no", sa.String(length=50), nullable=False, server_default=""),
        sa.Column("arrival_time", sa.String(length=50), nullable=False, server_default=""),
        sa.Column("special_requests", sa.Text(), nullable=False, server_default=""),
        sa.Column("total_price", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("utr", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="Pending"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("pre_arrival_email_sent", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("last_notification_kind", sa.String(length=50), nullable=True),
        sa.Column("last_notification_ok", sa.Boolean(), nullable=True),
        sa.Column("last_notification_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_bookings_status", "bookings", ["status"])
    op.create_index("ix_bookings_check_in", "bookings", ["check_in"])


def downgrade() -> None:
    op.drop_index("ix_bookings_check_in", table_name="bookings")
    op.drop_index("ix_bookings_status", table_name="bookings")
    op.drop_table("bookings")
    op.drop_table("site_documents")
    op.drop_index("ix_room_types_name", table_name="room_types")
    op.drop_table("room_types")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
