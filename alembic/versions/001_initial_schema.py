"""Initial schema — clients, module catalog, modules, tickets, documents.

Revision ID: 001
Revises: None
Create Date: 2026-10-17
"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import ARRAY

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Clients
    op.create_table(
        "clients",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("fantasy_name", sa.String(200), nullable=True),
        sa.Column("email", sa.String(200), nullable=False),
        sa.Column("phone", sa.String(50), nullable=False),
        sa.Column("secondary_phone", sa.String(50), nullable=True),
        sa.Column("website", sa.String(200), nullable=True),
        sa.Column("address", sa.Text, nullable=True),
        sa.Column("country", sa.String(100), nullable=True),
        sa.Column("province", sa.String(100), nullable=True),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("zip_code", sa.String(20), nullable=True),
        sa.Column("tax_id", sa.String(30), nullable=True),
        sa.Column("tax_condition", sa.String(50), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column(
            "created_at", sa.DateTime, nullable=False, server_default=sa.func.now()
        ),
    )

    # Module catalog
    op.create_table(
        "module_types",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("image_url", sa.String(1000), nullable=True),
        sa.Column(
            "created_at", sa.DateTime, nullable=False, server_default=sa.func.now()
        ),
    )

    # Installed modules (no FKs: cascades are run by the application)
    op.create_table(
        "modules",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("client_id", sa.Integer, nullable=False),
        sa.Column("module_type_id", sa.Integer, nullable=False),
        sa.Column("model_name", sa.String(200), nullable=False),
        sa.Column("serial_number", sa.String(100), nullable=False),
        sa.Column("installation_date", sa.Date, nullable=False),
        sa.Column("delivery_date", sa.Date, nullable=True),
        sa.Column("warranty_expiration", sa.Date, nullable=True),
        sa.Column("latitude", sa.Float, nullable=True),
        sa.Column("longitude", sa.Float, nullable=True),
        sa.Column("address", sa.Text, nullable=True),
    )
    op.create_index("idx_modules_client", "modules", ["client_id"])
    op.create_index("idx_modules_type", "modules", ["module_type_id"])

    # Tickets
    op.create_table(
        "tickets",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("client_id", sa.Integer, nullable=False),
        sa.Column("module_id", sa.Integer, nullable=False),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("description", sa.Text, nullable=False, server_default=""),
        sa.Column("status", sa.String(20), nullable=False, server_default="New"),
        sa.Column("priority", sa.String(20), nullable=False, server_default="Medium"),
        sa.Column("affected_part", sa.String(200), nullable=True),
        sa.Column("scheduled_date", sa.Date, nullable=True),
        sa.Column("photos", ARRAY(sa.Text), nullable=False, server_default="{}"),
        sa.Column("audio_url", sa.String(1000), nullable=True),
        sa.Column("closure_description", sa.Text, nullable=True),
        sa.Column("closure_photos", ARRAY(sa.Text), nullable=False, server_default="{}"),
        sa.Column("closure_audio_url", sa.String(1000), nullable=True),
        sa.Column("invoices", ARRAY(sa.Text), nullable=False, server_default="{}"),
        sa.Column(
            "created_at", sa.DateTime, nullable=False, server_default=sa.func.now()
        ),
    )
    op.create_index("idx_tickets_client", "tickets", ["client_id"])
    op.create_index("idx_tickets_module", "tickets", ["module_id"])
    op.create_index("idx_tickets_status", "tickets", ["status"])
    op.create_index("idx_tickets_scheduled", "tickets", ["scheduled_date"])

    # Documents (exactly one of module_id / module_type_id / client_id)
    op.create_table(
        "documents",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(300), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("version", sa.String(50), nullable=True),
        sa.Column("url", sa.String(1000), nullable=False),
        sa.Column("module_id", sa.Integer, nullable=True),
        sa.Column("module_type_id", sa.Integer, nullable=True),
        sa.Column("client_id", sa.Integer, nullable=True),
        sa.Column(
            "uploaded_at", sa.DateTime, nullable=False, server_default=sa.func.now()
        ),
    )
    op.create_index("idx_documents_module", "documents", ["module_id"])
    op.create_index("idx_documents_module_type", "documents", ["module_type_id"])
    op.create_index("idx_documents_client", "documents", ["client_id"])


def downgrade() -> None:
    op.drop_table("documents")
    op.drop_table("tickets")
    op.drop_table("modules")
    op.drop_table("module_types")
    op.drop_table("clients")
