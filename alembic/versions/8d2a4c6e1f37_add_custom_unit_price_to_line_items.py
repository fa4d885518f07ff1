"""add custom_unit_price to project_line_items

Revision ID: 8d2a4c6e1f37
Revises: 5c0f1e9a7b21
Create Date: 2026-10-19 15:40:03.127554

Multicolor layers priced by hand (no catalog material) keep their €/kg price
on the stored row so a reload still counts them as priced. Adds the column
idempotently for tables created by Base.metadata.create_all().
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '8d2a4c6e1f37'
down_revision: Union[str, None] = '5c0f1e9a7b21'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _column_exists(table_name, column_name):
    """Check if a column already exists in the table."""
    bind = op.get_bind()
    insp = inspect(bind)
    columns = [c["name"] for c in insp.get_columns(table_name)]
    return column_name in columns


def upgrade() -> None:
    if not _column_exists("project_line_items", "custom_unit_price"):
        op.add_column("project_line_items", sa.Column("custom_unit_price", sa.Float(), nullable=True))


def downgrade() -> None:
    if _column_exists("project_line_items", "custom_unit_price"):
        with op.batch_alter_table("project_line_items") as batch_op:
            batch_op.drop_column("custom_unit_price")
