from datetime import datetime, timedelta

import pytest

from shopfront.app.extensions import db
from shopfront.app.models import Cart, Category, Coupon, Order, OrderItem, Product, User
from shopfront.modules.coupon.routes import coupon_discount
from conftest import ADMIN_PASSWORD, login_as, reload


def test_admin_pages_require_admin(client):
    r = client.get("/admin/")
    assert r.status_code == 302
    assert r.headers["Location"].endswith("/admin/login")


def test_user_identity_is_not_admin(logged_in):
    assert logged_in.get("/admin/category/").status_code == 302


def test_admin_login(client, admin):
    r = client.post("/admin/login", data={"email": "admin@test.com", "password": ADMIN_PASSWORD})
    assert r.status_code == 302
    with client.session_transaction() as sess:
        assert sess["admin"] == {"id": admin.id, "email": "admin@test.com"}
        assert "user" not in sess


def test_dashboard_stats(admin_client, user, captured_templates):
    db.session.add(Order(user_id=user.id, status="delivered", total_cents=4200, shipping_address="x"))
    db.session.add(Order(user_id=user.id, status="pending", total_cents=999, shipping_address="x"))
    db.session.commit()

    r = admin_client.get("/admin/")

    assert r.status_code == 200
    _, context = captured_templates[-1]
    assert context["stats"] == {"users": 1, "products": 0, "orders": 2, "revenue_cents": 4200}


def test_block_and_unblock_user(admin_client, user):
    admin_client.post(f"/admin/users/{user.id}/block")
    assert reload(User, user.id).is_blocked is True
    admin_client.post(f"/admin/users/{user.id}/unblock")
    assert reload(User, user.id).is_blocked is False


def test_block_ends_an_open_shopper_session(admin_client, user, catalog):
    login_as(admin_client, user)
    admin_client.post(f"/admin/users/{user.id}/block")

    r = admin_client.post("/cart/add", json={"product_id": catalog["sneaker"].id})

    assert r.status_code == 403
    assert r.json["error"]["code"] == "account_blocked"
    assert Cart.query.filter_by(user_id=user.id).count() == 0
    with admin_client.session_transaction() as sess:
        assert "user" not in sess
        assert "admin" in sess


def test_blocked_shopper_page_redirects_to_login(logged_in, user):
    user.is_blocked = True
    db.session.commit()

    r = logged_in.get("/orders/", follow_redirects=True)

    assert b"Your account has been blocked." in r.data
    with logged_in.session_transaction() as sess:
        assert "user" not in sess


def test_create_category_and_reject_duplicate(admin_client):
    admin_client.post("/admin/category/", data={"name": "Bags"})
    r = admin_client.post("/admin/category/", data={"name": "bags"}, follow_redirects=True)

    assert b"already exists" in r.data
    assert Category.query.count() == 1


def test_toggle_category_hides_its_products(admin_client, client, catalog):
    admin_client.post(f"/admin/category/{catalog['category'].id}/toggle")

    assert reload(Category, catalog["category"].id).is_listed is False
    assert client.get(f"/products/{catalog['sneaker'].id}").status_code == 404


def test_create_product(admin_client, catalog):
    r = admin_client.post(
        "/admin/product/",
        data={"name": "Sandal", "price": "19.99", "stock": "7", "category_id": catalog["category"].id},
    )
    assert r.status_code == 302

    product = Product.query.filter_by(name="Sandal").one()
    assert product.price_cents == 1999
    assert product.stock == 7
    assert product.is_listed is True


@pytest.mark.parametrize(
    "form, message",
    [
        ({"name": "", "price": "1", "stock": "1"}, b"Product name is required."),
        ({"name": "X", "price": "0", "stock": "1"}, b"Price must be a positive amount."),
        ({"name": "X", "price": "1", "stock": "-2"}, b"Stock must be zero or more."),
        ({"name": "X", "price": "1", "stock": "1", "category_id": "999"}, b"Choose an existing category."),
    ],
)
def test_create_product_validation(admin_client, form, message):
    r = admin_client.post("/admin/product/", data=form, follow_redirects=True)
    assert message in r.data
    assert Product.query.count() == 0


def test_edit_product(admin_client, catalog):
    product_id = catalog["sneaker"].id
    admin_client.post(
        f"/admin/product/{product_id}/edit",
        data={"name": "Canvas Sneaker II", "price": "55", "stock": "3", "category_id": catalog["category"].id},
    )
    product = reload(Product, product_id)
    assert (product.name, product.price_cents, product.stock) == ("Canvas Sneaker II", 5500, 3)


def test_unknown_product_renders_admin_not_found(admin_client, captured_templates):
    r = admin_client.get("/admin/product/999/edit")
    assert r.status_code == 404
    template, _ = captured_templates[-1]
    assert template.name == "admin/404.html"


def _order(user, product, quantity=2):
    order = Order(user_id=user.id, subtotal_cents=product.price_cents * quantity, total_cents=product.price_cents * quantity, shipping_address="x")
    order.items.append(OrderItem(product_id=product.id, product_name=product.name, unit_price_cents=product.price_cents, quantity=quantity))
    product.stock -= quantity
    db.session.add(order)
    db.session.commit()
    return order


def test_order_status_walks_the_lifecycle(admin_client, user, catalog):
    order = _order(user, catalog["sneaker"])

    for status in ("shipped", "delivered"):
        admin_client.post(f"/admin/orders/{order.id}/status", data={"status": status})
        assert reload(Order, order.id).status == status


def test_illegal_status_change_is_refused(admin_client, user, catalog):
    order = _order(user, catalog["sneaker"])

    r = admin_client.post(f"/admin/orders/{order.id}/status", data={"status": "delivered"}, follow_redirects=True)

    assert b"Cannot change order from pending to delivered" in r.data
    assert reload(Order, order.id).status == "pending"


def test_admin_cancel_restocks(admin_client, user, catalog):
    order = _order(user, catalog["sneaker"])
    assert reload(Product, catalog["sneaker"].id).stock == 8

    admin_client.post(f"/admin/orders/{order.id}/status", data={"status": "cancelled"})

    assert reload(Product, catalog["sneaker"].id).stock == 10


def test_order_list_filter(admin_client, user, catalog, captured_templates):
    pending = _order(user, catalog["sneaker"], 1)
    shipped = _order(user, catalog["sneaker"], 1)
    shipped.status = "shipped"
    db.session.commit()

    admin_client.get("/admin/orders/?status=pending")

    _, context = captured_templates[-1]
    assert [o.id for o in context["orders"]] == [pending.id]


def test_create_coupon(admin_client):
    admin_client.post(
        "/admin/coupon/",
        data={"code": "welcome5", "discount_percent": "5", "min_purchase": "20", "expires_at": "2030-01-31"},
    )
    coupon = Coupon.query.one()
    assert coupon.code == "WELCOME5"
    assert coupon.min_purchase_cents == 2000
    assert coupon.expires_at == datetime(2030, 1, 31)


@pytest.mark.parametrize(
    "form",
    [
        {"code": "", "discount_percent": "5"},
        {"code": "BIG", "discount_percent": "95"},
        {"code": "BAD", "discount_percent": "5", "expires_at": "31/01/2030"},
    ],
)
def test_create_coupon_validation(admin_client, form):
    admin_client.post("/admin/coupon/", data=form)
    assert Coupon.query.count() == 0


def test_toggle_and_delete_coupon(admin_client):
    coupon = Coupon(code="X1", discount_percent=5)
    db.session.add(coupon)
    db.session.commit()
    coupon_id = coupon.id

    admin_client.post(f"/admin/coupon/{coupon_id}/toggle")
    assert reload(Coupon, coupon_id).is_active is False

    admin_client.post(f"/admin/coupon/{coupon_id}/delete")
    assert reload(Coupon, coupon_id) is None


def test_coupon_discount_rules():
    now = datetime(2026, 1, 1)
    coupon = Coupon(code="C", discount_percent=25, min_purchase_cents=1000, max_discount_cents=None, is_active=True)

    assert coupon_discount(coupon, 4000, now) == (1000, None)
    assert coupon_discount(coupon, 999, now) == (0, "Order total is below the coupon minimum.")

    coupon.max_discount_cents = 300
    assert coupon_discount(coupon, 4000, now) == (300, None)

    coupon.expires_at = now - timedelta(seconds=1)
    assert coupon_discount(coupon, 4000, now) == (0, "Coupon has expired.")

    coupon.is_active = False
    assert coupon_discount(coupon, 4000, now)[1] == "Coupon is not valid."
    assert coupon_discount(None, 4000, now)[1] == "Coupon is not valid."


def test_coupon_is_valid_through_its_expiry_date():
    coupon = Coupon(code="LAST", discount_percent=10, min_purchase_cents=0, is_active=True, expires_at=datetime(2030, 1, 31))

    assert coupon_discount(coupon, 1000, datetime(2030, 1, 31, 12)) == (100, None)
    assert coupon_discount(coupon, 1000, datetime(2030, 1, 31, 23, 59, 59)) == (100, None)
    assert coupon_discount(coupon, 1000, datetime(2030, 2, 1)) == (0, "Coupon has expired.")


@pytest.mark.parametrize("price", ["inf", "-inf", "nan", "1e400", "1e300"])
def test_non_finite_price_is_rejected(admin_client, catalog, price):
    form = {"name": "Sandal", "price": price, "stock": "1", "category_id": catalog["category"].id}

    r = admin_client.post("/admin/product/", data=form)
    assert r.status_code == 302
    assert r.headers["Location"].endswith("/admin/product/new")

    page = admin_client.get(r.headers["Location"])
    assert b"Price must be a positive amount." in page.data
    assert Product.query.filter_by(name="Sandal").count() == 0
