from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_create_catalog_schema"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps(with_updated_at: bool = True) -> list[sa.Column]:
    columns = [sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)]
    if with_updated_at:
        columns.append(sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False))
    return columns


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "categories",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("parent_id", sa.Integer(), sa.ForeignKey("categories.id", ondelete="CASCADE"), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )
    op.create_index("ix_categories_parent_id", "categories", ["parent_id"])
    op.create_index("ix_categories_sort_order", "categories", ["sort_order"])

    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("category_id", sa.Integer(), sa.ForeignKey("categories.id", ondelete="SET NULL"), nullable=True),
        sa.Column("available", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("can_be_sold_separately", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("image_url", sa.String(), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_products_category_id", "products", ["category_id"])
    op.create_index("ix_products_available", "products", ["available"])

    op.create_table(
        "product_modifiers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("products.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("required", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("min_selections", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("max_selections", sa.Integer(), nullable=False, server_default="1"),
        *_timestamps(),
    )
    op.create_index("ix_product_modifiers_product_id", "product_modifiers", ["product_id"])

    op.create_table(
        "product_modifier_options",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "product_modifier_id",
            sa.Integer(),
            sa.ForeignKey("product_modifiers.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("product_id", sa.Integer(), sa.ForeignKey("products.id", ondelete="CASCADE"), nullable=False),
        sa.Column("additional_price", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("default_selected", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(with_updated_at=False),
    )
    op.create_index(
        "ix_product_modifier_options_product_modifier_id",
        "product_modifier_options",
        ["product_modifier_id"],
    )
    op.create_index("ix_product_modifier_options_product_id", "product_modifier_options", ["product_id"])
    op.create_index(
        "ix_product_modifier_options_modifier_product",
        "product_modifier_options",
        ["product_modifier_id", "product_id"],
        unique=True,
    )


def downgrade() -> None:
    op.drop_table("product_modifier_options")
    op.drop_table("product_modifiers")
    op.drop_table("products")
    op.drop_table("categories")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_index("ix_users_id", table_name="users")
    op.drop_table("users")
