"""Create shipments table.

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    op.execute(
        "CREATE TYPE shipment_status AS ENUM ('pending', 'in_transit', 'delivered', 'cancelled')"
    )

    op.create_table(
        "shipments",
        sa.Column("id", sa.UUID(), nullable=False, server_default=sa.text("uuid_generate_v4()")),
        sa.Column("user_id", sa.String(255), nullable=False),
        sa.Column("origin_city", sa.String(255), nullable=False),
        sa.Column("origin_state", sa.String(2), nullable=False),
        sa.Column("destination_city", sa.String(255), nullable=False),
        sa.Column("destination_state", sa.String(2), nullable=False),
        sa.Column("shipper_name", sa.String(255), nullable=False),
        sa.Column("consignee_name", sa.String(255), nullable=False),
        sa.Column("weight", sa.Float(), nullable=True),
        sa.Column(
            "status",
            postgresql.ENUM(
                "pending",
                "in_transit",
                "delivered",
                "cancelled",
                name="shipment_status",
                create_type=False,
            ),
            nullable=False,
            server_default="pending",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_shipments")),
        sa.CheckConstraint(
            "weight IS NULL OR weight >= 0",
            name=op.f("ck_shipments_weight_non_negative"),
        ),
    )
    op.create_index(op.f("ix_shipments_user_id"), "shipments", ["user_id"], unique=False)
    op.create_index(op.f("ix_shipments_status"), "shipments", ["status"], unique=False)
    op.create_index(
        "ix_shipments_user_id_created_at",
        "shipments",
        ["user_id", "created_at"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_shipments_user_id_created_at", table_name="shipments")
    op.drop_index(op.f("ix_shipments_status"), table_name="shipments")
    op.drop_index(op.f("ix_shipments_user_id"), table_name="shipments")
    op.drop_table("shipments")
    op.execute("DROP TYPE shipment_status")
