"""create seller, order, payment and payout tables

Revision ID: 3b1f0c7a9d21
Revises:
Create Date: 2026-10-19 10:12:31.402113

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3b1f0c7a9d21'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("public_id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(320), nullable=True, unique=True),
        sa.Column("name", sa.String(128), nullable=True),
        sa.Column("role_version", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_users_public_id", "users", ["public_id"], unique=True)

    op.create_table(
        "role",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False, unique=True),
        sa.Column("description", sa.String(), nullable=True),
    )

    op.create_table(
        "userrole",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False, index=True),
        sa.Column("role_id", sa.Integer(), sa.ForeignKey("role.id"), nullable=False, index=True),
        sa.UniqueConstraint("user_id", "role_id", name="uq_user_role_user_id_role_id"),
    )

    op.create_table(
        "sellerprofile",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, unique=True),
        sa.Column("business_name", sa.String(255), nullable=False),
        sa.Column("business_type", sa.String(32), nullable=False, server_default="individual"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("business_email", sa.String(320), nullable=True),
        sa.Column("business_phone", sa.String(32), nullable=True),
        sa.Column("business_address", sa.JSON(), nullable=True),
        sa.Column("kyc_status", sa.String(32), nullable=False, server_default="pending"),
        sa.Column("commission_rate_bps", sa.Integer(), nullable=False, server_default="1000"),
        sa.Column("total_sales", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("total_orders", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("settings", sa.JSON(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.CheckConstraint("kyc_status IN ('pending', 'verified', 'rejected')", name="ck_sellerprofile_kyc_status"),
        sa.CheckConstraint("business_type IN ('individual', 'business', 'organization')", name="ck_sellerprofile_business_type"),
    )

    op.create_table(
        "product",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("seller_id", sa.Integer(), sa.ForeignKey("sellerprofile.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("price_cents", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("stock", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(32), nullable=False, server_default="active", index=True),
        *_timestamps(),
    )

    op.create_table(
        "orders",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("order_number", sa.String(64), nullable=False, unique=True),
        sa.Column("seller_id", sa.Integer(), sa.ForeignKey("sellerprofile.id", ondelete="RESTRICT"), nullable=False, index=True),
        sa.Column("buyer_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True),
        sa.Column("status", sa.String(32), nullable=False, server_default="pending", index=True),
        sa.Column("total_cents", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("tracking_number", sa.String(128), nullable=True),
        sa.Column("seller_notes", sa.Text(), nullable=True),
        sa.Column("shipped_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("delivered_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('pending', 'confirmed', 'processing', 'shipped', 'delivered', 'cancelled')",
            name="ck_orders_status",
        ),
    )
    op.create_index("ix_orders_seller_created", "orders", ["seller_id", "created_at"])

    op.create_table(
        "payment",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("order_id", sa.Integer(), sa.ForeignKey("orders.id", ondelete="RESTRICT"), nullable=False, unique=True),
        sa.Column("status", sa.String(32), nullable=False, server_default="pending", index=True),
        sa.Column("amount_cents", sa.BigInteger(), nullable=False),
        sa.Column("platform_fee_cents", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "payout",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("seller_id", sa.Integer(), sa.ForeignKey("sellerprofile.id", ondelete="RESTRICT"), nullable=False, index=True),
        sa.Column("status", sa.String(32), nullable=False, server_default="requested", index=True),
        sa.Column("amount_cents", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "payoutorder",
        sa.Column("payout_id", sa.Integer(), sa.ForeignKey("payout.id", ondelete="RESTRICT"), primary_key=True),
        sa.Column("order_id", sa.Integer(), sa.ForeignKey("orders.id", ondelete="RESTRICT"), primary_key=True),
    )
    op.create_index("ix_payoutorder_order_id", "payoutorder", ["order_id"])

    op.bulk_insert(
        sa.table("role", sa.column("name", sa.String), sa.column("description", sa.String)),
        [
            {"name": "buyer", "description": "default role for every account"},
            {"name": "seller", "description": "manages a seller profile ,its products and orders"},
            {"name": "admin", "description": "platform administration"},
        ],
    )


def downgrade():
    op.drop_index("ix_payoutorder_order_id", table_name="payoutorder")
    op.drop_table("payoutorder")
    op.drop_table("payout")
    op.drop_table("payment")
    op.drop_index("ix_orders_seller_created", table_name="orders")
    op.drop_table("orders")
    op.drop_table("product")
    op.drop_table("sellerprofile")
    op.drop_table("userrole")
    op.drop_table("role")
    op.drop_index("ix_users_public_id", table_name="users")
    op.drop_table("users")
