"""Settings and custom-location tables with default delivery fees.

Revision ID: 001
Create Date: 2025-12-20
"""

from alembic import op
import sqlalchemy as sa


revision = "001"
down_revision = None
branch_labels = None
depends_on = None


DEFAULT_FEES = [
    ("delivery", "0", "food"),
    ("padala", "3", "parcel"),
    ("pabili", "3", "errand"),
]


def upgrade() -> None:
    # ── site_settings ─────────────────────────────────────────────────
    site_settings = op.create_table(
        "site_settings",
        sa.Column("id", sa.String(100), primary_key=True),
        sa.Column("value", sa.Text, nullable=False),
        sa.Column("type", sa.String(20), nullable=False, server_default="text"),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )

    # ── custom_locations ──────────────────────────────────────────────
    op.create_table(
        "custom_locations",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("latitude", sa.Float, nullable=False),
        sa.Column("longitude", sa.Float, nullable=False),
        sa.Column("active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("sort_order", sa.Integer, nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )
    op.create_index("idx_custom_locations_active", "custom_locations", ["active"])
    op.create_index("idx_custom_locations_sort", "custom_locations", ["sort_order"])

    # ── default fees per service line ─────────────────────────────────
    rows = []
    for prefix, base_distance, service in DEFAULT_FEES:
        rows += [
            {
                "id": f"{prefix}_base_fee",
                "value": "60",
                "type": "number",
                "description": f"Base delivery fee for {service} in Pesos",
            },
            {
                "id": f"{prefix}_per_km_fee",
                "value": "13",
                "type": "number",
                "description": f"Fee per kilometer for {service} in Pesos",
            },
            {
                "id": f"{prefix}_base_distance",
                "value": base_distance,
                "type": "number",
                "description": f"Base distance included in base fee for {service} (km)",
            },
        ]
    op.bulk_insert(site_settings, rows)


def downgrade() -> None:
    op.drop_index("idx_custom_locations_sort", table_name="custom_locations")
    op.drop_index("idx_custom_locations_active", table_name="custom_locations")
    op.drop_table("custom_locations")
    op.drop_table("site_settings")
