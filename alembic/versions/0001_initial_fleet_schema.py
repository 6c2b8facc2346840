"""initial fleet schema: users, vehicles, incidents, telemetry

Revision ID: 0001_initial
Revises:
Create Date: 2024-02-01 09:00:00
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def _insp():
    return sa.inspect(op.get_bind())


def _has_table(name: str) -> bool:
    return name in _insp().get_table_names()


def _ix(table: str, cols, name: str = None, unique: bool = False) -> None:
    op.create_index(name or f"ix_{table}_{cols[0]}", table, list(cols), unique=unique)


def upgrade():
    # --- users ---
    if not _has_table("users"):
        op.create_table(
            "users",
            sa.Column("id", sa.Integer, primary_key=True),
            sa.Column("email", sa.String(length=255), nullable=False),
            sa.Column("hashed_password", sa.String, nullable=False),
            sa.Column("full_name", sa.String(length=255), nullable=True),
            sa.Column("role", sa.String(length=20), nullable=False),
            sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.text("1")),
            sa.Column("created_at", sa.DateTime, nullable=False),
            sa.Column("updated_at", sa.DateTime, nullable=False),
        )
        _ix("users", ["email"], unique=True)
        _ix("users", ["role"])

    # --- vehicles ---
    if not _has_table("vehicles"):
        op.create_table(
            "vehicles",
            sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
            sa.Column("vehicle_number", sa.String(length=20), nullable=False),
            sa.Column("vehicle_type", sa.String(length=20), nullable=False),
            sa.Column("capacity_tons", sa.Float, nullable=True),
            sa.Column("gps_number", sa.String(length=50), nullable=True),
            sa.Column("gps_id", sa.String(length=50), nullable=True),
            sa.Column("owner_name", sa.String(length=255), nullable=False),
            sa.Column("owner_phone", sa.String(length=20), nullable=False),
            sa.Column("owner_address", sa.Text, nullable=False),
            sa.Column("license_number", sa.String(length=50), nullable=True),
            sa.Column("registration_date", sa.Date, nullable=False),
            sa.Column("status", sa.String(length=20), nullable=False, server_default="active"),
            sa.Column("last_activity", sa.DateTime, nullable=True),
            sa.Column("notes", sa.Text, nullable=True),
            sa.Column("created_at", sa.DateTime, nullable=False),
            sa.Column("updated_at", sa.DateTime, nullable=False),
            sa.UniqueConstraint("vehicle_number", name="uq_vehicles_vehicle_number"),
        )
        _ix("vehicles", ["vehicle_type"])
        _ix("vehicles", ["owner_name"])
        _ix("vehicles", ["status"])
        _ix("vehicles", ["created_at"])
        _ix("vehicles", ["status", "vehicle_type"], name="ix_vehicles_status_type")

    # --- incidents (vehicle_id intentionally without FK) ---
    if not _has_table("incidents"):
        op.create_table(
            "incidents",
            sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
            sa.Column("vehicle_id", sa.Integer, nullable=True),
            sa.Column("vehicle_number", sa.String(length=20), nullable=True),
            sa.Column("incident_type", sa.String(length=30), nullable=False),
            sa.Column("severity", sa.String(length=20), nullable=False, server_default="medium"),
            sa.Column("description", sa.Text, nullable=False),
            sa.Column("location", sa.String(length=255), nullable=False),
            sa.Column("incident_date", sa.DateTime, nullable=False),
            sa.Column("status", sa.String(length=20), nullable=False, server_default="reported"),
            sa.Column("reported_by", sa.String(length=255), nullable=False),
            sa.Column("assigned_to", sa.String(length=255), nullable=True),
            sa.Column("resolution_notes", sa.Text, nullable=True),
            sa.Column("evidence_files", sa.JSON, nullable=True),
            sa.Column("estimated_damage", sa.Numeric(10, 2), nullable=True),
            sa.Column("created_at", sa.DateTime, nullable=False),
            sa.Column("updated_at", sa.DateTime, nullable=False),
        )
        for col in (
            "vehicle_id",
            "vehicle_number",
            "incident_type",
            "severity",
            "incident_date",
            "status",
            "reported_by",
            "created_at",
        ):
            _ix("incidents", [col])
        _ix("incidents", ["status", "severity"], name="ix_incidents_status_severity")

    # --- telemetry (append-only) ---
    if not _has_table("telemetry"):
        op.create_table(
            "telemetry",
            sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
            sa.Column("vehicle_number", sa.String(length=50), nullable=False),
            sa.Column("lat", sa.Float, nullable=False),
            sa.Column("lng", sa.Float, nullable=False),
            sa.Column("speed", sa.Float, nullable=True),
            sa.Column("ts", sa.DateTime, nullable=False),
        )
        _ix("telemetry", ["vehicle_number"])
        _ix("telemetry", ["ts"])
        _ix("telemetry", ["vehicle_number", "ts"], name="ix_telemetry_vehicle_ts")


def downgrade():
    for table in ("telemetry", "incidents", "vehicles", "users"):
        if _has_table(table):
            op.drop_table(table)
