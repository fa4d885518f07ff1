"""initial schema: materials, projects, line items, amortization assets

Revision ID: 5c0f1e9a7b21
Revises:
Create Date: 2026-10-19 09:12:44.318207

Idempotent: tables created earlier by Base.metadata.create_all() are skipped.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '5c0f1e9a7b21'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _table_exists(table_name):
    """Check if a table exists."""
    bind = op.get_bind()
    insp = inspect(bind)
    return table_name in insp.get_table_names()


def upgrade() -> None:
    if not _table_exists("materials"):
        op.create_table(
            "materials",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("name", sa.String(), nullable=False),
            sa.Column("price_per_kg", sa.Float(), nullable=False),
            sa.Column("color", sa.String(), nullable=True),
            sa.Column("is_favorite", sa.Boolean(), nullable=True),
            sa.Column("notes", sa.Text(), nullable=True),
            sa.Column("created_at", sa.DateTime(), nullable=True),
            sa.Column("updated_at", sa.DateTime(), nullable=True),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_materials_id", "materials", ["id"])

    if not _table_exists("projects"):
        op.create_table(
            "projects",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("name", sa.String(), nullable=False),
            sa.Column("print_time_hours", sa.Float(), nullable=True),
            sa.Column("profit_margin", sa.Float(), nullable=True),
            sa.Column("notes", sa.Text(), nullable=True),
            sa.Column("weight_grams", sa.Float(), nullable=True),
            sa.Column("material_cost", sa.Float(), nullable=True),
            sa.Column("labor_cost", sa.Float(), nullable=True),
            sa.Column("amortization_cost", sa.Float(), nullable=True),
            sa.Column("subtotal", sa.Float(), nullable=True),
            sa.Column("total_price", sa.Float(), nullable=True),
            sa.Column("profit", sa.Float(), nullable=True),
            sa.Column("created_at", sa.DateTime(), nullable=True),
            sa.Column("updated_at", sa.DateTime(), nullable=True),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_projects_id", "projects", ["id"])

    if not _table_exists("project_line_items"):
        op.create_table(
            "project_line_items",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("project_id", sa.Integer(), nullable=False),
            sa.Column("position", sa.Integer(), nullable=False),
            sa.Column("kind", sa.String(), nullable=False),
            sa.Column("description", sa.String(), nullable=True),
            sa.Column("quantity", sa.Float(), nullable=True),
            sa.Column("unit_price", sa.Float(), nullable=True),
            sa.Column("material_id", sa.Integer(), nullable=True),
            sa.ForeignKeyConstraint(["project_id"], ["projects.id"]),
            sa.ForeignKeyConstraint(["material_id"], ["materials.id"], ondelete="SET NULL"),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_project_line_items_id", "project_line_items", ["id"])

    if not _table_exists("amortization_assets"):
        op.create_table(
            "amortization_assets",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("name", sa.String(), nullable=False),
            sa.Column("acquisition_cost", sa.Float(), nullable=True),
            sa.Column("prints_per_month", sa.Float(), nullable=True),
            sa.Column("avg_profit_per_print", sa.Float(), nullable=True),
            sa.Column("notes", sa.Text(), nullable=True),
            sa.Column("created_at", sa.DateTime(), nullable=True),
            sa.Column("updated_at", sa.DateTime(), nullable=True),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index("ix_amortization_assets_id", "amortization_assets", ["id"])


def downgrade() -> None:
    for table in ["project_line_items", "amortization_assets", "projects", "materials"]:
        if _table_exists(table):
            op.drop_table(table)
