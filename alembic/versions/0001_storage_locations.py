"""storage location tables

Revision ID: 0001_storage_locations
Revises:
Create Date: 2026-10-19 10:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001_storage_locations"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "clients",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_names", sa.String(length=150), nullable=False),
        sa.Column("phone", sa.String(length=30), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
    )
    op.create_index("ix_clients_id", "clients", ["id"])
    op.create_index("ix_clients_email", "clients", ["email"])

    op.create_table(
        "service_statuses",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False, unique=True),
    )
    op.create_index("ix_service_statuses_id", "service_statuses", ["id"])

    op.create_table(
        "services",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=150), nullable=False),
    )
    op.create_index("ix_services_id", "services", ["id"])

    op.create_table(
        "employees",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_names", sa.String(length=150), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False),
    )
    op.create_index("ix_employees_id", "employees", ["id"])
    op.create_index("ix_employees_email", "employees", ["email"], unique=True)

    op.create_table(
        "orders",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("code", sa.String(length=50), nullable=False),
        sa.Column("client_id", sa.Integer(), sa.ForeignKey("clients.id"), nullable=False),
        sa.Column("status_id", sa.Integer(), sa.ForeignKey("service_statuses.id"), nullable=False),
        sa.Column("received_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_orders_id", "orders", ["id"])
    op.create_index("ix_orders_code", "orders", ["code"], unique=True)
    op.create_index("ix_orders_client_id", "orders", ["client_id"])
    op.create_index("ix_orders_status_id", "orders", ["status_id"])

    op.create_table(
        "service_details",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("order_id", sa.Integer(), sa.ForeignKey("orders.id"), nullable=False),
        sa.Column("service_id", sa.Integer(), sa.ForeignKey("services.id"), nullable=True),
        sa.Column("brand", sa.String(length=100), nullable=True),
        sa.Column("model", sa.String(length=100), nullable=True),
        sa.Column("shoe_description", sa.Text(), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("box_code", sa.String(length=50), nullable=True),
        sa.Column("slot_code", sa.String(length=50), nullable=True),
        sa.Column("special_notes", sa.Text(), nullable=True),
        sa.Column("stored_at", sa.DateTime(), nullable=True),
        sa.Column("stored_by_id", sa.Integer(), sa.ForeignKey("employees.id"), nullable=True),
    )
    op.create_index("ix_service_details_id", "service_details", ["id"])
    op.create_index("ix_service_details_order_id", "service_details", ["order_id"])
    op.create_index("ix_service_details_brand", "service_details", ["brand"])
    op.create_index("ix_service_details_model", "service_details", ["model"])
    op.create_index("ix_service_details_box_code", "service_details", ["box_code"])
    op.create_index("ix_service_details_slot_code", "service_details", ["slot_code"])

    op.create_table(
        "location_history",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("service_detail_id", sa.Integer(), sa.ForeignKey("service_details.id"), nullable=False),
        sa.Column("order_id", sa.Integer(), sa.ForeignKey("orders.id"), nullable=False),
        sa.Column("box_code", sa.String(length=50), nullable=True),
        sa.Column("slot_code", sa.String(length=50), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("employee_id", sa.Integer(), sa.ForeignKey("employees.id"), nullable=False),
        sa.Column("recorded_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_location_history_id", "location_history", ["id"])
    op.create_index("ix_location_history_service_detail_id", "location_history", ["service_detail_id"])
    op.create_index("ix_location_history_order_id", "location_history", ["order_id"])
    op.create_index("ix_location_history_employee_id", "location_history", ["employee_id"])
    op.create_index("ix_location_history_recorded_at", "location_history", ["recorded_at"])


def downgrade() -> None:
    op.drop_table("location_history")
    op.drop_table("service_details")
    op.drop_table("orders")
    op.drop_table("employees")
    op.drop_table("services")
    op.drop_table("service_statuses")
    op.drop_table("clients")
