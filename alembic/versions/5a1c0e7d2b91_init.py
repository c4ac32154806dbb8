"""init

Revision ID: 5a1c0e7d2b91
Revises:
Create Date: 2025-10-20 09:12:31.402117

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "5a1c0e7d2b91"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSONType = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def _ts(name: str, nullable: bool = True, server_now: bool = False) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        server_default=sa.text("(CURRENT_TIMESTAMP)") if server_now else None,
        nullable=nullable,
    )


def upgrade() -> None:
    """Upgrade schema."""

    # ===== Users / sessions =====
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("username", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("role", sa.String(), nullable=False),
        _ts("created_at", nullable=False, server_now=True),
        sa.CheckConstraint("role IN ('admin', 'customer')", name="ck_users_role"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_username"), "users", ["username"], unique=True)
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    op.create_table(
        "user_sessions",
        sa.Column("sid", sa.String(length=64), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        _ts("created_at", nullable=False, server_now=True),
        _ts("expires_at", nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("sid"),
    )
    op.create_index(op.f("ix_user_sessions_user_id"), "user_sessions", ["user_id"], unique=False)
    op.create_index(op.f("ix_user_sessions_expires_at"), "user_sessions", ["expires_at"], unique=False)

    # ===== Catalog =====
    op.create_table(
        "categories",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        _ts("created_at", nullable=False, server_now=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "subcategories",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("category_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        _ts("created_at", nullable=False, server_now=True),
        sa.ForeignKeyConstraint(["category_id"], ["categories.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_subcategories_category_id"), "subcategories", ["category_id"], unique=False)

    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("category", sa.String(), nullable=True),
        sa.Column("category_id", sa.Integer(), nullable=True),
        sa.Column("subcategory_id", sa.Integer(), nullable=True),
        sa.Column("price", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("image", sa.String(), nullable=True),
        sa.Column("stock", sa.Integer(), nullable=False),
        sa.Column("specifications", JSONType, nullable=True),
        sa.Column("status", sa.String(), nullable=False),
        _ts("created_at", nullable=False, server_now=True),
        _ts("updated_at", server_now=True),
        sa.CheckConstraint("stock >= 0", name="ck_products_stock_nonneg"),
        sa.CheckConstraint("status IN ('active', 'inactive', 'out_of_stock')", name="ck_products_status"),
        sa.ForeignKeyConstraint(["category_id"], ["categories.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["subcategory_id"], ["subcategories.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_products_name"), "products", ["name"], unique=False)
    op.create_index("ix_products_category", "products", ["category_id", "subcategory_id"], unique=False)

    # ===== Orders =====
    op.create_table(
        "orders",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("order_number", sa.String(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("total_amount", sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column("items_count", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("payment_method", sa.String(), nullable=True),
        sa.Column("payment_amount", sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column("payment_transfer_id", sa.String(), nullable=True),
        _ts("payment_transfer_date"),
        sa.Column("customer_info", JSONType, nullable=True),
        _ts("assembly_scheduled_date"),
        sa.Column("assembly_status", sa.String(), nullable=True),
        _ts("assembly_completed_date"),
        _ts("created_at", nullable=False, server_now=True),
        _ts("updated_at", server_now=True),
        sa.CheckConstraint(
            "status IN ('pending', 'paid', 'processing', 'completed', 'failed', 'cancelled')",
            name="ck_orders_status",
        ),
        sa.CheckConstraint(
            "assembly_status IS NULL OR assembly_status IN ('scheduled', 'completed')",
            name="ck_orders_assembly_status",
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_orders_order_number"), "orders", ["order_number"], unique=True)
    op.create_index(op.f("ix_orders_user_id"), "orders", ["user_id"], unique=False)
    op.create_index("ix_orders_status", "orders", ["status"], unique=False)

    op.create_table(
        "order_items",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("order_id", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("price", sa.Numeric(precision=10, scale=2), nullable=False),
        _ts("created_at", nullable=False, server_now=True),
        sa.ForeignKeyConstraint(["order_id"], ["orders.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_order_items_order_id"), "order_items", ["order_id"], unique=False)
    op.create_index(op.f("ix_order_items_product_id"), "order_items", ["product_id"], unique=False)

    # ===== Operations =====
    op.create_table(
        "deliveries",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("delivery_number", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        _ts("delivery_date"),
        sa.Column("items", JSONType, nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("driver_name", sa.String(), nullable=True),
        sa.Column("tracking_info", JSONType, nullable=True),
        _ts("created_at", nullable=False, server_now=True),
        _ts("updated_at", server_now=True),
        sa.CheckConstraint(
            "status IN ('pending', 'in_transit', 'delivered', 'cancelled')", name="ck_deliveries_status"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_deliveries_delivery_number"), "deliveries", ["delivery_number"], unique=True)

    op.create_table(
        "assemblies",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("components", JSONType, nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("priority", sa.String(), nullable=False),
        sa.Column("assigned_to", sa.String(), nullable=True),
        sa.Column("estimated_time", sa.Integer(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        _ts("created_at", nullable=False, server_now=True),
        _ts("updated_at", server_now=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_assemblies_status", "assemblies", ["status"], unique=False)

    op.create_table(
        "maintenance_records",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("priority", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        _ts("scheduled_date", nullable=False),
        _ts("completed_date"),
        sa.Column("technician", sa.String(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("cost", sa.Numeric(precision=10, scale=2), nullable=True),
        _ts("created_at", nullable=False, server_now=True),
        _ts("updated_at", server_now=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_maintenance_scheduled", "maintenance_records", ["scheduled_date"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_maintenance_scheduled", table_name="maintenance_records")
    op.drop_table("maintenance_records")

    op.drop_index("ix_assemblies_status", table_name="assemblies")
    op.drop_table("assemblies")

    op.drop_index(op.f("ix_deliveries_delivery_number"), table_name="deliveries")
    op.drop_table("deliveries")

    op.drop_index(op.f("ix_order_items_product_id"), table_name="order_items")
    op.drop_index(op.f("ix_order_items_order_id"), table_name="order_items")
    op.drop_table("order_items")

    op.drop_index("ix_orders_status", table_name="orders")
    op.drop_index(op.f("ix_orders_user_id"), table_name="orders")
    op.drop_index(op.f("ix_orders_order_number"), table_name="orders")
    op.drop_table("orders")

    op.drop_index("ix_products_category", table_name="products")
    op.drop_index(op.f("ix_products_name"), table_name="products")
    op.drop_table("products")

    op.drop_index(op.f("ix_subcategories_category_id"), table_name="subcategories")
    op.drop_table("subcategories")
    op.drop_table("categories")

    op.drop_index(op.f("ix_user_sessions_expires_at"), table_name="user_sessions")
    op.drop_index(op.f("ix_user_sessions_user_id"), table_name="user_sessions")
    op.drop_table("user_sessions")

    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_index(op.f("ix_users_username"), table_name="users")
    op.drop_table("users")
