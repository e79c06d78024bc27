"""initial ledger schema

Revision ID: 3f9c1d2e7a10
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "3f9c1d2e7a10"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "accounts",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("username", sa.String(length=50), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("role", sa.String(length=20)),
        sa.Column("is_active", sa.Boolean()),
        sa.Column("email", sa.String(length=100), unique=True),
        sa.Column("created_at", sa.DateTime(timezone=True)),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.Column("last_login_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_accounts_username", "accounts", ["username"], unique=True)

    op.create_table(
        "owner_wallets",
        sa.Column("owner_id", sa.String(length=36), primary_key=True),
        sa.Column("owner_email", sa.String(length=100)),
        sa.Column("balance", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_charged", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_used", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_fee", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("version", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True)),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.CheckConstraint("balance >= 0", name="chk_owner_wallet_balance_nonneg"),
    )

    op.create_table(
        "wallet_transactions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("owner_id", sa.String(length=36), sa.ForeignKey("owner_wallets.owner_id"), nullable=False),
        sa.Column("type", sa.String(length=30), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("balance_after", sa.Integer(), nullable=False),
        sa.Column("description", sa.String(length=255)),
        sa.Column("reference_id", sa.String(length=36)),
        sa.Column("created_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_wallet_transactions_owner_id", "wallet_transactions", ["owner_id"])
    op.create_index("ix_wallet_transactions_reference_id", "wallet_transactions", ["reference_id"])
    op.create_index("ix_wallet_transactions_created_at", "wallet_transactions", ["created_at"])

    op.create_table(
        "owner_charges",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("owner_id", sa.String(length=36)),
        sa.Column("owner_email", sa.String(length=100)),
        sa.Column("points", sa.Integer(), nullable=False),
        sa.Column("fee", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_payment", sa.Integer(), nullable=False),
        sa.Column("payment_method", sa.String(length=20), nullable=False, server_default="manual"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("processed_by", sa.String(length=36)),
        sa.Column("reject_reason", sa.String(length=255)),
        sa.Column("created_at", sa.DateTime(timezone=True)),
        sa.Column("approved_at", sa.DateTime(timezone=True)),
        sa.Column("rejected_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_owner_charges_owner_id", "owner_charges", ["owner_id"])
    op.create_index("ix_owner_charges_status", "owner_charges", ["status"])
    op.create_index("ix_owner_charges_created_at", "owner_charges", ["created_at"])

    op.create_table(
        "owner_stores",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("owner_id", sa.String(length=36)),
        sa.Column("owner_email", sa.String(length=100)),
        sa.Column("name", sa.String(length=150), nullable=False),
        sa.Column("place_id", sa.String(length=50), unique=True),
        sa.Column("address", sa.String(length=255)),
        sa.Column("category", sa.String(length=100)),
        sa.Column("phone", sa.String(length=30)),
        sa.Column("is_sponsored", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("priority_level", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("priority_weight", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("sponsor_activated_at", sa.DateTime(timezone=True)),
        sa.Column("sponsor_expires_at", sa.DateTime(timezone=True)),
        sa.Column("sponsor_bonus_points", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("sponsor_bonus_active", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("bonus_points_per_visit", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("bonus_points_active", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("total_bonus_given", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True)),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_owner_stores_owner_id", "owner_stores", ["owner_id"])

    op.create_table(
        "sponsor_level_payments",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("store_id", sa.String(length=36), sa.ForeignKey("owner_stores.id"), nullable=False),
        sa.Column("store_name", sa.String(length=150)),
        sa.Column("owner_id", sa.String(length=36), nullable=False),
        sa.Column("owner_email", sa.String(length=100)),
        sa.Column("previous_level", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("new_level", sa.Integer(), nullable=False),
        sa.Column("plan_label", sa.String(length=30), nullable=False),
        sa.Column("price", sa.Integer(), nullable=False),
        sa.Column("weight", sa.Integer(), nullable=False),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_sponsor_level_payments_store_id", "sponsor_level_payments", ["store_id"])
    op.create_index("ix_sponsor_level_payments_owner_id", "sponsor_level_payments", ["owner_id"])

    op.create_table(
        "members",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("nickname", sa.String(length=50)),
        sa.Column("email", sa.String(length=100)),
        sa.Column("points", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("blocked", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True)),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.CheckConstraint("points >= 0", name="chk_member_points_nonneg"),
    )

    op.create_table(
        "point_history",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("member_id", sa.String(length=36), sa.ForeignKey("members.id"), nullable=False),
        sa.Column("type", sa.String(length=30), nullable=False),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("description", sa.String(length=255)),
        sa.Column("order_id", sa.String(length=36)),
        sa.Column("created_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_point_history_member_id", "point_history", ["member_id"])
    op.create_index("ix_point_history_order_id", "point_history", ["order_id"])

    op.create_table(
        "products",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("name", sa.String(length=150), nullable=False),
        sa.Column("point_cost", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("stock", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True)),
    )

    op.create_table(
        "orders",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36)),
        sa.Column("user_nickname", sa.String(length=50)),
        sa.Column("product_id", sa.String(length=64)),
        sa.Column("product_name", sa.String(length=150)),
        sa.Column("point_cost", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column("note", sa.Text()),
        sa.Column("created_at", sa.DateTime(timezone=True)),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_orders_user_id", "orders", ["user_id"])
    op.create_index("ix_orders_status", "orders", ["status"])
    op.create_index("ix_orders_created_at", "orders", ["created_at"])

    op.create_table(
        "bonus_payments",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("store_id", sa.String(length=36), sa.ForeignKey("owner_stores.id"), nullable=False),
        sa.Column("owner_id", sa.String(length=36), nullable=False),
        sa.Column("member_id", sa.String(length=36), sa.ForeignKey("members.id"), nullable=False),
        sa.Column("owner_points", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("sponsor_points", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_points", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_bonus_payments_store_id", "bonus_payments", ["store_id"])
    op.create_index("ix_bonus_payments_member_id", "bonus_payments", ["member_id"])

    op.create_table(
        "notifications",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("recipient_id", sa.String(length=36), nullable=False),
        sa.Column("title", sa.String(length=100), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_notifications_recipient_id", "notifications", ["recipient_id"])


def downgrade() -> None:
    op.drop_index("ix_notifications_recipient_id", table_name="notifications")
    op.drop_table("notifications")
    op.drop_index("ix_bonus_payments_member_id", table_name="bonus_payments")
    op.drop_index("ix_bonus_payments_store_id", table_name="bonus_payments")
    op.drop_table("bonus_payments")
    op.drop_index("ix_orders_created_at", table_name="orders")
    op.drop_index("ix_orders_status", table_name="orders")
    op.drop_index("ix_orders_user_id", table_name="orders")
    op.drop_table("orders")
    op.drop_table("products")
    op.drop_index("ix_point_history_order_id", table_name="point_history")
    op.drop_index("ix_point_history_member_id", table_name="point_history")
    op.drop_table("point_history")
    op.drop_table("members")
    op.drop_index("ix_sponsor_level_payments_owner_id", table_name="sponsor_level_payments")
    op.drop_index("ix_sponsor_level_payments_store_id", table_name="sponsor_level_payments")
    op.drop_table("sponsor_level_payments")
    op.drop_index("ix_owner_stores_owner_id", table_name="owner_stores")
    op.drop_table("owner_stores")
    op.drop_index("ix_owner_charges_created_at", table_name="owner_charges")
    op.drop_index("ix_owner_charges_status", table_name="owner_charges")
    op.drop_index("ix_owner_charges_owner_id", table_name="owner_charges")
    op.drop_table("owner_charges")
    op.drop_index("ix_wallet_transactions_created_at", table_name="wallet_transactions")
    op.drop_index("ix_wallet_transactions_reference_id", table_name="wallet_transactions")
    op.drop_index("ix_wallet_transactions_owner_id", table_name="wallet_transactions")
    op.drop_table("wallet_transactions")
    op.drop_table("owner_wallets")
    op.drop_index("ix_accounts_username", table_name="accounts")
    op.drop_table("accounts")
