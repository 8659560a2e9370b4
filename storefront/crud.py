import logging
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, NamedTuple, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import models, schemas
from .auth import hash_password, verify_password

logger = logging.getLogger(__name__)

FREE_SHIPPING_THRESHOLD = Decimal("100")
SHIPPING_FEE = Decimal("10")
TAX_RATE = Decimal("0.15")

# Business rule: money stored rounded to 2 decimals, half up


def round_amount(value: Decimal) -> Decimal:
    return Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


class Prices(NamedTuple):
    items_price: Decimal
    shipping_price: Decimal
    tax_price: Decimal
    total_price: Decimal


def calc_prices(items: Iterable) -> Prices:
    """Price breakdown for anything with `price` and `qty` (cart or order lines)."""
    items_price = round_amount(sum((Decimal(i.price) * i.qty for i in items), Decimal("0")))
    shipping_price = Decimal("0.00") if items_price > FREE_SHIPPING_THRESHOLD else round_amount(SHIPPING_FEE)
    tax_price = round_amount(items_price * TAX_RATE)
    total_price = round_amount(items_price + shipping_price + tax_price)
    return Prices(items_price, shipping_price, tax_price, total_price)


def _commit(db: Session, message: str, flush_only: bool = False) -> None:
    try:
        if flush_only:
            db.flush()
        else:
            db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning("%s: %s", message, e.orig)
        raise ValueError(message) from e


# -------------------- Users --------------------


def create_user(db: Session, user: schemas.UserCreate) -> models.User:
    db_user = models.User(
        name=user.name,
        email=user.email.lower(),
        role=user.role,
        password=hash_password(user.password) if user.password else None,
    )
    db.add(db_user)
    _commit(db, "email already registered")
    db.refresh(db_user)
    return db_user


def get_user_by_email(db: Session, email: str) -> Optional[models.User]:
    return db.scalars(select(models.User).where(models.User.email == email.lower())).first()


def authenticate(db: Session, email: str, password: str) -> Optional[models.User]:
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.password):
        return None
    return user


def delete_user(db: Session, user_id: UUID) -> bool:
    user = db.get(models.User, user_id)
    if not user:
        return False
    db.delete(user)
    db.commit()
    return True


# -------------------- Products & reviews --------------------


def create_product(db: Session, product: schemas.ProductCreate) -> models.Product:
    db_product = models.Product(
        name=product.name,
        slug=product.slug,
        category=product.category,
        images=list(product.images),
        brand=product.brand,
        description=product.description,
        stock=product.stock,
        price=round_amount(product.price),
        is_featured=product.is_featured,
        banner=product.banner,
    )
    db.add(db_product)
    _commit(db, "slug already exists")
    db.refresh(db_product)
    return db_product


def get_product_by_slug(db: Session, slug: str) -> Optional[models.Product]:
    return db.scalars(select(models.Product).where(models.Product.slug == slug)).first()


def delete_product(db: Session, product_id: UUID) -> bool:
    product = db.get(models.Product, product_id)
    if not product:
        return False
    db.delete(product)
    db.commit()
    return True


def create_review(db: Session, review: schemas.ReviewCreate) -> models.Review:
    """Insert a review and refresh the product's rating and review count."""
    product = db.get(models.Product, review.product_id)
    if not product:
        raise ValueError("product does not exist")

    db_review = models.Review(
        user_id=review.user_id,
        product_id=review.product_id,
        rating=review.rating,
        title=review.title,
        description=review.description,
        is_verified_purchase=review.is_verified_purchase,
    )
    db.add(db_review)
    _commit(db, "foreign key violation: user does not exist", flush_only=True)

    count, average = db.execute(
        select(func.count(models.Review.id), func.avg(models.Review.rating)).where(
            models.Review.product_id == review.product_id
        )
    ).one()
    product.num_reviews = count
    product.rating = round_amount(Decimal(str(average or 0)))
    db.commit()
    db.refresh(db_review)
    return db_review


# -------------------- Carts --------------------


def save_cart(
    db: Session,
    session_cart_id: str,
    items: List[schemas.CartItem],
    user_id: Optional[UUID] = None,
) -> models.Cart:
    """Create or replace the cart belonging to a browser session."""
    cart = db.scalars(select(models.Cart).where(models.Cart.session_cart_id == session_cart_id)).first()
    if cart is None:
        cart = models.Cart(session_cart_id=session_cart_id)
        db.add(cart)
    prices = calc_prices(items)
    cart.items = list(items)
    if user_id is not None:
        cart.user_id = user_id
    cart.items_price = prices.items_price
    cart.shipping_price = prices.shipping_price
    cart.tax_price = prices.tax_price
    cart.total_price = prices.total_price
    _commit(db, "foreign key violation: user does not exist")
    db.refresh(cart)
    return cart


# -------------------- Orders --------------------


def create_order(db: Session, order: schemas.OrderCreate) -> models.Order:
    # User existence is left to the foreign key; products must be loaded anyway
    # to snapshot their name, slug, image and price.
    lines = []
    for item in order.items:
        product = db.get(models.Product, item.product_id)
        if not product:
            raise ValueError(f"product {item.product_id} does not exist")
        if not product.images:
            raise ValueError(f"product {item.product_id} has no image")
        lines.append((product, item.qty))

    db_order = models.Order(
        user_id=order.user_id,
        shipping_address=order.shipping_address,
        payment_method=order.payment_method,
    )
    for product, qty in lines:
        db_order.order_items.append(
            models.OrderItem(
                product=product,
                qty=qty,
                price=round_amount(product.price),
                name=product.name,
                slug=product.slug,
                image=product.images[0],
            )
        )
    prices = calc_prices(db_order.order_items)
    db_order.items_price = prices.items_price
    db_order.shipping_price = prices.shipping_price
    db_order.tax_price = prices.tax_price
    db_order.total_price = prices.total_price

    db.add(db_order)
    _commit(db, "foreign key violation: user does not exist")
    db.refresh(db_order)
    return db_order


def mark_order_paid(db: Session, order_id: UUID, payment_result: schemas.PaymentResult) -> Optional[models.Order]:
    order = db.get(models.Order, order_id)
    if not order:
        return None
    if order.is_paid:
        raise ValueError("order is already paid")
    order.is_paid = True
    order.paid_at = datetime.now(timezone.utc).replace(tzinfo=None)
    order.payment_result = payment_result
    db.commit()
    db.refresh(order)
    return order


def mark_order_delivered(db: Session, order_id: UUID) -> Optional[models.Order]:
    order = db.get(models.Order, order_id)
    if not order:
        return None
    if not order.is_paid:
        raise ValueError("order is not paid")
    order.is_delivered = True
    order.delivered_at = datetime.now(timezone.utc).replace(tzinfo=None)
    db.commit()
    db.refresh(order)
    return order


def delete_order(db: Session, order_id: UUID) -> bool:
    order = db.get(models.Order, order_id)
    if not order:
        return False
    db.delete(order)
    db.commit()
    return True
