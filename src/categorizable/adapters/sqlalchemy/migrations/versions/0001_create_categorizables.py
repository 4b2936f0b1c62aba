"""create categories, owners and the categorizables association

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

from categorizable.adapters.sqlalchemy.mappings import UTCDateTime

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "categories",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_categories"),
        sa.UniqueConstraint("slug", name="uq_categories_slug"),
    )
    op.create_table(
        "articles",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_articles"),
    )
    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("sku", sa.String(length=64), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_products"),
    )
    op.create_table(
        "categorizables",
        sa.Column("categorizable_id", sa.Integer(), nullable=False),
        sa.Column("categorizable_type", sa.String(length=64), nullable=False),
        sa.Column("category_id", sa.Integer(), nullable=False),
        sa.Column("created_at", UTCDateTime(), nullable=True),
        sa.Column("updated_at", UTCDateTime(), nullable=True),
        sa.ForeignKeyConstraint(
            ["category_id"],
            ["categories.id"],
            name="fk_categorizables_category_id_categories",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint(
            "categorizable_id",
            "categorizable_type",
            "category_id",
            name="uq_categorizables_owner_category",
        ),
    )
    op.create_index(
        "ix_categorizables_owner",
        "categorizables",
        ["categorizable_type", "categorizable_id"],
    )


def downgrade() -> None:
    op.drop_index("ix_categorizables_owner", table_name="categorizables")
    op.drop_table("categorizables")
    op.drop_table("products")
    op.drop_table("articles")
    op.drop_table("categories")
