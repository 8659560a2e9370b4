from decimal import Decimal
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, PositiveInt, field_validator
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict

# ---------------------------------------------------------------------------
# Structures stored in JSON columns. Each carries a version tag so the stored
# shape can evolve; loading a payload with an unknown version fails.
# ---------------------------------------------------------------------------


class StoredJSON(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    version: Literal[1] = 1


class ShippingAddress(StoredJSON):
    full_name: str = Field(..., min_length=1)
    street_address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    postal_code: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)
    lat: Optional[float] = None
    lng: Optional[float] = None


class PaymentResult(StoredJSON):
    id: str
    status: str
    # PayPal's field name, kept as-is
    email_address: str = Field(..., alias="email_address")
    price_paid: str


class CartItem(StoredJSON):
    product_id: UUID
    name: str
    slug: str
    qty: PositiveInt
    image: str
    price: Decimal = Field(..., ge=0)


# ---------------------------------------------------------------------------
# Inputs for the data access helpers
# ---------------------------------------------------------------------------


class UserCreate(BaseModel):
    name: str = Field(default="NO_NAME", min_length=1, max_length=100)
    email: EmailStr
    role: str = Field(default="user")
    password: Optional[str] = Field(default=None, min_length=6)

    @field_validator("role")
    def known_role(cls, v: str):
        if v not in ("user", "admin"):
            raise ValueError("role must be 'user' or 'admin'")
        return v


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    images: List[str] = Field(..., min_length=1)
    brand: str
    description: str
    stock: int = Field(..., ge=0)
    price: Decimal = Field(default=Decimal("0"), ge=0)
    is_featured: bool = False
    banner: Optional[str] = None


class ReviewCreate(BaseModel):
    user_id: UUID
    product_id: UUID
    rating: int = Field(..., ge=1, le=5)
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    is_verified_purchase: bool = True


class OrderItemCreate(BaseModel):
    product_id: UUID
    qty: PositiveInt


class OrderCreate(BaseModel):
    user_id: UUID
    shipping_address: ShippingAddress
    payment_method: str = Field(..., min_length=1)
    items: List[OrderItemCreate] = Field(..., min_length=1)

    @field_validator("items")
    def distinct_products(cls, v: List[OrderItemCreate]):
        # orderItems is keyed by (orderId, productId)
        ids = [item.product_id for item in v]
        if len(ids) != len(set(ids)):
            raise ValueError("each product may appear only once per order")
        return v
