import uuid
from typing import List

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    PrimaryKeyConstraint,
    Text,
    Uuid,
    false,
    func,
    true,
)
from sqlalchemy.orm import relationship

from .db import Base
from .schemas import CartItem, PaymentResult, ShippingAddress
from .types import VersionedJSON, text_array
from .vector import embedding_type

# Money columns: numeric(12, 2) everywhere prices are stored
Money = Numeric(12, 2)


# -------------------- Auth --------------------


class User(Base):
    __tablename__ = "user"
    __table_args__ = (Index("user_email_idx", "email", unique=True),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False, default="NO_NAME", server_default="NO_NAME")
    email = Column(Text, nullable=False)
    # 'user' or 'admin'
    role = Column(Text, nullable=False, default="user", server_default="user")
    # passlib hash; NULL for users who only sign in through an OAuth provider
    password = Column(Text, nullable=True)
    email_verified = Column("emailVerified", DateTime, nullable=True)
    image = Column(Text, nullable=True)
    address = Column(VersionedJSON(ShippingAddress), nullable=True)
    payment_method = Column("paymentMethod", Text, nullable=True)
    created_at = Column("createdAt", DateTime, server_default=func.now())

    accounts = relationship("Account", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    sessions = relationship("AuthSession", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    reviews = relationship("Review", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    orders = relationship("Order", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    # carts outlive their owner; the database nulls cart.userId
    carts = relationship("Cart", back_populates="user", passive_deletes=True)

    def __repr__(self):
        return f"<User {self.email}>"


class Account(Base):
    __tablename__ = "account"
    __table_args__ = (PrimaryKeyConstraint("provider", "providerAccountId"),)

    user_id = Column("userId", Uuid, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(Text, nullable=False)
    provider = Column(Text, nullable=False)
    provider_account_id = Column("providerAccountId", Text, nullable=False)
    refresh_token = Column(Text)
    access_token = Column(Text)
    expires_at = Column(Integer)
    token_type = Column(Text)
    scope = Column(Text)
    id_token = Column(Text)
    session_state = Column(Text)

    user = relationship("User", back_populates="accounts")


class AuthSession(Base):
    __tablename__ = "session"

    session_token = Column("sessionToken", Text, primary_key=True)
    user_id = Column("userId", Uuid, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)
    expires = Column(DateTime, nullable=False)

    user = relationship("User", back_populates="sessions")


class VerificationToken(Base):
    __tablename__ = "verificationToken"
    __table_args__ = (PrimaryKeyConstraint("identifier", "token"),)

    identifier = Column(Text, nullable=False)
    token = Column(Text, nullable=False)
    expires = Column(DateTime, nullable=False)


# -------------------- Catalog --------------------


class Product(Base):
    __tablename__ = "product"
    __table_args__ = (Index("product_slug_idx", "slug", unique=True),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    slug = Column(Text, nullable=False)
    category = Column(Text, nullable=False)
    images = Column(text_array(), nullable=False)
    brand = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    stock = Column(Integer, nullable=False)
    price = Column(Money, nullable=False, default=0, server_default="0")
    rating = Column(Numeric(3, 2), nullable=False, default=0, server_default="0")
    num_reviews = Column("numReviews", Integer, nullable=False, default=0, server_default="0")
    is_featured = Column("isFeatured", Boolean, nullable=False, default=False, server_default=false())
    banner = Column(Text, nullable=True)
    # indexed by product_embedding_idx (HNSW, cosine) on PostgreSQL
    embedding = Column(embedding_type(), nullable=True)
    created_at = Column("createdAt", DateTime, nullable=False, server_default=func.now())

    reviews = relationship("Review", back_populates="product", cascade="all, delete-orphan", passive_deletes=True)
    order_items = relationship("OrderItem", back_populates="product", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<Product {self.slug}>"


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column("userId", Uuid, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column("productId", Uuid, ForeignKey("product.id", ondelete="CASCADE"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    is_verified_purchase = Column("isVerifiedPurchase", Boolean, nullable=False, default=True, server_default=true())
    created_at = Column("createdAt", DateTime, nullable=False, server_default=func.now())

    user = relationship("User", back_populates="reviews")
    product = relationship("Product", back_populates="reviews")


# -------------------- Checkout --------------------


class Cart(Base):
    __tablename__ = "cart"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column("userId", Uuid, ForeignKey("user.id", ondelete="SET NULL"), nullable=True, index=True)
    session_cart_id = Column("sessionCartId", Text, nullable=False, index=True)
    items = Column(VersionedJSON(List[CartItem]), nullable=False, default=list)
    items_price = Column("itemsPrice", Money, nullable=False)
    shipping_price = Column("shippingPrice", Money, nullable=False)
    tax_price = Column("taxPrice", Money, nullable=False)
    total_price = Column("totalPrice", Money, nullable=False)
    created_at = Column("createdAt", DateTime, nullable=False, server_default=func.now())

    user = relationship("User", back_populates="carts")


class Order(Base):
    __tablename__ = "order"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column("userId", Uuid, ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True)
    shipping_address = Column("shippingAddress", VersionedJSON(ShippingAddress), nullable=False)
    payment_method = Column("paymentMethod", Text, nullable=False)
    payment_result = Column("paymentResult", VersionedJSON(PaymentResult), nullable=True)
    items_price = Column("itemsPrice", Money, nullable=False)
    shipping_price = Column("shippingPrice", Money, nullable=False)
    tax_price = Column("taxPrice", Money, nullable=False)
    total_price = Column("totalPrice", Money, nullable=False)
    is_paid = Column("isPaid", Boolean, nullable=False, default=False, server_default=false())
    paid_at = Column("paidAt", DateTime, nullable=True)
    is_delivered = Column("isDelivered", Boolean, nullable=False, default=False, server_default=false())
    delivered_at = Column("deliveredAt", DateTime, nullable=True)
    created_at = Column("createdAt", DateTime, nullable=False, server_default=func.now())

    user = relationship("User", back_populates="orders")
    order_items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan", passive_deletes=True)


class OrderItem(Base):
    __tablename__ = "orderItems"
    __table_args__ = (PrimaryKeyConstraint("orderId", "productId"),)

    order_id = Column("orderId", Uuid, ForeignKey("order.id", ondelete="CASCADE"), nullable=False)
    product_id = Column("productId", Uuid, ForeignKey("product.id", ondelete="CASCADE"), nullable=False, index=True)
    qty = Column(Integer, nullable=False)
    price = Column(Money, nullable=False)
    # snapshot of the product at order time
    name = Column(Text, nullable=False)
    slug = Column(Text, nullable=False)
    image = Column(Text, nullable=False)

    order = relationship("Order", back_populates="order_items")
    product = relationship("Product", back_populates="order_items")
