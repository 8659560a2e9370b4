import uuid
from decimal import Decimal

from pytest import raises
from sqlalchemy import func, select

from storefront import crud, models, schemas


def _order(user_id, product_id, address, qty=2):
    return schemas.OrderCreate(
        user_id=user_id,
        shipping_address=address,
        payment_method="PayPal",
        items=[schemas.OrderItemCreate(product_id=product_id, qty=qty)],
    )


def test_create_user_hashes_password(db_session, user):
    assert user.id is not None
    assert user.role == "user"
    assert user.password and user.password != "secret123"
    assert crud.authenticate(db_session, "A@example.com", "secret123").id == user.id
    assert crud.authenticate(db_session, "a@example.com", "wrong-password") is None


def test_duplicate_email_raises_value_error(db_session, user):
    with raises(ValueError, match="email already registered"):
        crud.create_user(db_session, schemas.UserCreate(name="Other", email="a@example.com"))
    # session is usable after the rollback
    assert crud.get_user_by_email(db_session, "a@example.com").name == "Alice"


def test_duplicate_slug_raises_value_error(db_session, product):
    dup = schemas.ProductCreate(
        name="Widget 2", slug="widget", category="Gadgets", images=["/x.jpg"], brand="Acme", description="d", stock=1
    )
    with raises(ValueError, match="slug already exists"):
        crud.create_product(db_session, dup)


def test_create_order_snapshots_products(db_session, user, product, address):
    order = crud.create_order(db_session, _order(user.id, product.id, address))
    assert len(order.order_items) == 1
    item = order.order_items[0]
    assert (item.name, item.slug, item.image) == ("Widget", "widget", "/images/widget-1.jpg")
    assert item.price == Decimal("19.99")
    assert order.items_price == Decimal("39.98")
    assert order.shipping_price == Decimal("10.00")
    assert order.tax_price == Decimal("6.00")
    assert order.total_price == Decimal("55.98")
    assert order.shipping_address.city == "London"
    assert not order.is_paid and not order.is_delivered


def test_create_order_fk_violation(db_session, product, address):
    with raises(ValueError, match="foreign key"):
        crud.create_order(db_session, _order(uuid.uuid4(), product.id, address))
    assert db_session.scalar(select(func.count()).select_from(models.Order)) == 0


def test_create_order_unknown_product(db_session, user, address):
    with raises(ValueError, match="does not exist"):
        crud.create_order(db_session, _order(user.id, uuid.uuid4(), address))


def test_delete_product_removes_order_items(db_session, user, product, address):
    order = crud.create_order(db_session, _order(user.id, product.id, address))
    order_id = order.id
    assert crud.delete_product(db_session, product.id)
    db_session.expire_all()
    assert db_session.scalar(select(func.count()).select_from(models.OrderItem)) == 0
    assert db_session.get(models.Order, order_id) is not None
    assert not crud.delete_product(db_session, product.id)


def test_review_updates_product_rating(db_session, user, product):
    other = crud.create_user(db_session, schemas.UserCreate(name="Bob", email="bob@example.com"))
    crud.create_review(
        db_session, schemas.ReviewCreate(user_id=user.id, product_id=product.id, rating=5, title="Great", description="Love it")
    )
    crud.create_review(
        db_session, schemas.ReviewCreate(user_id=other.id, product_id=product.id, rating=4, title="Good", description="Fine")
    )
    db_session.refresh(product)
    assert product.num_reviews == 2
    assert product.rating == Decimal("4.50")


def test_review_for_missing_user(db_session, product):
    with raises(ValueError, match="foreign key"):
        crud.create_review(
            db_session,
            schemas.ReviewCreate(user_id=uuid.uuid4(), product_id=product.id, rating=3, title="Meh", description="ok"),
        )


def test_pay_then_deliver(db_session, user, product, address):
    order = crud.create_order(db_session, _order(user.id, product.id, address))
    with raises(ValueError, match="not paid"):
        crud.mark_order_delivered(db_session, order.id)

    result = schemas.PaymentResult(id="PAY-1", status="COMPLETED", email_address="a@example.com", price_paid="55.98")
    paid = crud.mark_order_paid(db_session, order.id, result)
    assert paid.is_paid and paid.paid_at is not None
    assert paid.payment_result.id == "PAY-1"
    with raises(ValueError, match="already paid"):
        crud.mark_order_paid(db_session, order.id, result)

    delivered = crud.mark_order_delivered(db_session, order.id)
    assert delivered.is_delivered and delivered.delivered_at is not None
    assert crud.mark_order_paid(db_session, uuid.uuid4(), result) is None


def test_save_cart_replaces_items(db_session, user, product):
    line = schemas.CartItem(
        product_id=product.id, name="Widget", slug="widget", qty=6, image="/images/widget-1.jpg", price=Decimal("19.99")
    )
    cart = crud.save_cart(db_session, "session-1", [line])
    assert cart.user_id is None
    assert cart.items_price == Decimal("119.94")
    assert cart.shipping_price == Decimal("0.00")

    cart = crud.save_cart(db_session, "session-1", [line.model_copy(update={"qty": 1})], user_id=user.id)
    assert cart.user_id == user.id
    assert [i.qty for i in cart.items] == [1]
    assert db_session.scalar(select(func.count()).select_from(models.Cart)) == 1


def test_delete_user_keeps_cart(db_session, user, product, address):
    crud.create_order(db_session, _order(user.id, product.id, address))
    crud.save_cart(db_session, "session-1", [], user_id=user.id)
    assert crud.delete_user(db_session, user.id)
    db_session.expire_all()
    assert db_session.scalar(select(func.count()).select_from(models.Order)) == 0
    assert db_session.scalars(select(models.Cart)).one().user_id is None


def test_create_order_product_without_image(db_session, user, address):
    bare = models.Product(
        name="Bare", slug="bare", category="Gadgets", images=[], brand="Acme", description="d", stock=1, price=Decimal("1.00")
    )
    db_session.add(bare)
    db_session.commit()
    with raises(ValueError, match="has no image"):
        crud.create_order(db_session, _order(user.id, bare.id, address))
    assert db_session.scalar(select(func.count()).select_from(models.Order)) == 0
