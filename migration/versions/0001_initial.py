"""storefront and legacy analytics tables

Revision ID: 0001
Revises:
Create Date: 2024-05-12 10:21:07
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql
from pgvector.sqlalchemy import Vector

from storefront.vector import vector_extension_ddl

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def money():
    return sa.Numeric(12, 2)


def upgrade() -> None:
    for statement in vector_extension_ddl(op.get_context().dialect.name):
        op.execute(statement)

    op.create_table(
        "user",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.Text(), server_default="NO_NAME", nullable=False),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column("role", sa.Text(), server_default="user", nullable=False),
        sa.Column("password", sa.Text(), nullable=True),
        sa.Column("emailVerified", sa.DateTime(), nullable=True),
        sa.Column("image", sa.Text(), nullable=True),
        sa.Column("address", sa.JSON(), nullable=True),
        sa.Column("paymentMethod", sa.Text(), nullable=True),
        sa.Column("createdAt", sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_user"),
    )
    op.create_index("user_email_idx", "user", ["email"], unique=True)

    op.create_table(
        "account",
        sa.Column("userId", sa.Uuid(), nullable=False),
        sa.Column("type", sa.Text(), nullable=False),
        sa.Column("provider", sa.Text(), nullable=False),
        sa.Column("providerAccountId", sa.Text(), nullable=False),
        sa.Column("refresh_token", sa.Text(), nullable=True),
        sa.Column("access_token", sa.Text(), nullable=True),
        sa.Column("expires_at", sa.Integer(), nullable=True),
        sa.Column("token_type", sa.Text(), nullable=True),
        sa.Column("scope", sa.Text(), nullable=True),
        sa.Column("id_token", sa.Text(), nullable=True),
        sa.Column("session_state", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["userId"], ["user.id"], name="fk_account_userId_user", ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("provider", "providerAccountId", name="pk_account"),
    )
    op.create_index("ix_account_userId", "account", ["userId"])

    op.create_table(
        "session",
        sa.Column("sessionToken", sa.Text(), nullable=False),
        sa.Column("userId", sa.Uuid(), nullable=False),
        sa.Column("expires", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["userId"], ["user.id"], name="fk_session_userId_user", ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("sessionToken", name="pk_session"),
    )
    op.create_index("ix_session_userId", "session", ["userId"])

    op.create_table(
        "verificationToken",
        sa.Column("identifier", sa.Text(), nullable=False),
        sa.Column("token", sa.Text(), nullable=False),
        sa.Column("expires", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("identifier", "token", name="pk_verificationToken"),
    )

    op.create_table(
        "product",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("slug", sa.Text(), nullable=False),
        sa.Column("category", sa.Text(), nullable=False),
        sa.Column("images", sa.JSON().with_variant(postgresql.ARRAY(sa.Text()), "postgresql"), nullable=False),
        sa.Column("brand", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("stock", sa.Integer(), nullable=False),
        sa.Column("price", money(), server_default="0", nullable=False),
        sa.Column("rating", sa.Numeric(3, 2), server_default="0", nullable=False),
        sa.Column("numReviews", sa.Integer(), server_default="0", nullable=False),
        sa.Column("isFeatured", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("banner", sa.Text(), nullable=True),
        sa.Column("embedding", sa.JSON().with_variant(Vector(1536), "postgresql"), nullable=True),
        sa.Column("createdAt", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_product"),
    )
    op.create_index("product_slug_idx", "product", ["slug"], unique=True)

    op.create_table(
        "reviews",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("userId", sa.Uuid(), nullable=False),
        sa.Column("productId", sa.Uuid(), nullable=False),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("isVerifiedPurchase", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("createdAt", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["userId"], ["user.id"], name="fk_reviews_userId_user", ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["productId"], ["product.id"], name="fk_reviews_productId_product", ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id", name="pk_reviews"),
    )
    op.create_index("ix_reviews_userId", "reviews", ["userId"])
    op.create_index("ix_reviews_productId", "reviews", ["productId"])

    op.create_table(
        "cart",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("userId", sa.Uuid(), nullable=True),
        sa.Column("sessionCartId", sa.Text(), nullable=False),
        sa.Column("items", sa.JSON(), nullable=False),
        sa.Column("itemsPrice", money(), nullable=False),
        sa.Column("shippingPrice", money(), nullable=False),
        sa.Column("taxPrice", money(), nullable=False),
        sa.Column("totalPrice", money(), nullable=False),
        sa.Column("createdAt", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["userId"], ["user.id"], name="fk_cart_userId_user", ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id", name="pk_cart"),
    )
    op.create_index("ix_cart_userId", "cart", ["userId"])
    op.create_index("ix_cart_sessionCartId", "cart", ["sessionCartId"])

    op.create_table(
        "order",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("userId", sa.Uuid(), nullable=False),
        sa.Column("shippingAddress", sa.JSON(), nullable=False),
        sa.Column("paymentMethod", sa.Text(), nullable=False),
        sa.Column("paymentResult", sa.JSON(), nullable=True),
        sa.Column("itemsPrice", money(), nullable=False),
        sa.Column("shippingPrice", money(), nullable=False),
        sa.Column("taxPrice", money(), nullable=False),
        sa.Column("totalPrice", money(), nullable=False),
        sa.Column("isPaid", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("paidAt", sa.DateTime(), nullable=True),
        sa.Column("isDelivered", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("deliveredAt", sa.DateTime(), nullable=True),
        sa.Column("createdAt", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["userId"], ["user.id"], name="fk_order_userId_user", ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id", name="pk_order"),
    )
    op.create_index("ix_order_userId", "order", ["userId"])

    op.create_table(
        "orderItems",
        sa.Column("orderId", sa.Uuid(), nullable=False),
        sa.Column("productId", sa.Uuid(), nullable=False),
        sa.Column("qty", sa.Integer(), nullable=False),
        sa.Column("price", money(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("slug", sa.Text(), nullable=False),
        sa.Column("image", sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(["orderId"], ["order.id"], name="fk_orderItems_orderId_order", ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["productId"], ["product.id"], name="fk_orderItems_productId_product", ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("orderId", "productId", name="pk_orderItems"),
    )
    op.create_index("ix_orderItems_productId", "orderItems", ["productId"])

    # Legacy analytics tables
    op.create_table(
        "project_logs",
        sa.Column("project", sa.String(255), nullable=False),
        sa.Column("visit_count", sa.BigInteger(), server_default="0", nullable=True),
        sa.Column("github_stars_count", sa.BigInteger(), server_default="0", nullable=True),
        sa.Column("tx_count", sa.BigInteger(), server_default="0", nullable=True),
        sa.Column("like_count", sa.BigInteger(), server_default="0", nullable=True),
        sa.Column("members_count", sa.BigInteger(), server_default="0", nullable=True),
        sa.Column("profit", sa.BigInteger(), server_default="0", nullable=True),
        sa.Column("createdAt", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint("project", name="pk_project_logs"),
    )
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("project", sa.String(255), nullable=False),
        sa.Column("image", sa.String(255), nullable=True),
        sa.Column("createdAt", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="users_email_key"),
    )
    op.create_table(
        "projects",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("project", sa.String(255), nullable=False),
        sa.Column("project_link", sa.String(255), nullable=True),
        sa.Column("code_repo_link", sa.String(255), nullable=True),
        sa.Column("visit_count", sa.BigInteger(), server_default="0", nullable=True),
        sa.Column("tx_count", sa.BigInteger(), server_default="0", nullable=True),
        sa.Column("members_count", sa.BigInteger(), server_default="0", nullable=True),
        sa.Column("stars_count", sa.BigInteger(), server_default="0", nullable=True),
        sa.Column("earnings", sa.Double(), nullable=True),
        sa.Column("high_score", sa.BigInteger(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_projects"),
        sa.UniqueConstraint("project", name="project_unique"),
    )


def downgrade() -> None:
    op.drop_table("projects")
    op.drop_table("users")
    op.drop_table("project_logs")
    op.drop_index("ix_orderItems_productId", table_name="orderItems")
    op.drop_table("orderItems")
    op.drop_index("ix_order_userId", table_name="order")
    op.drop_table("order")
    op.drop_index("ix_cart_sessionCartId", table_name="cart")
    op.drop_index("ix_cart_userId", table_name="cart")
    op.drop_table("cart")
    op.drop_index("ix_reviews_productId", table_name="reviews")
    op.drop_index("ix_reviews_userId", table_name="reviews")
    op.drop_table("reviews")
    op.drop_index("product_slug_idx", table_name="product")
    op.drop_table("product")
    op.drop_table("verificationToken")
    op.drop_index("ix_session_userId", table_name="session")
    op.drop_table("session")
    op.drop_index("ix_account_userId", table_name="account")
    op.drop_table("account")
    op.drop_index("user_email_idx", table_name="user")
    op.drop_table("user")
