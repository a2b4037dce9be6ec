from __future__ import annotations

import logging
from datetime import datetime

from flask import Blueprint, abort, flash, redirect, render_template, request, url_for

from shopfront.app.extensions import db
from shopfront.app.models import Address, Coupon, Order, OrderItem
from shopfront.app.common.auth import current_user, login_required
from shopfront.app.common.lookups import find_cart, item_counts
from shopfront.app.common.validation import to_int
from shopfront.modules.cart.routes import cart_summary
from shopfront.modules.coupon.routes import coupon_discount
from shopfront.modules.order.status import CANCELLED, RETURNED, StatusChangeError, change_status

log = logging.getLogger(__name__)

bp = Blueprint("order", __name__)


def _own_order(order_id: int) -> Order:
    order = Order.query.filter_by(id=order_id, user_id=current_user()["id"]).first()
    if not order:
        abort(404)
    return order


def _render(template: str, **context):
    user = current_user()
    count, wishcount = item_counts(user)
    return render_template(template, user=user, count=count, wishcount=wishcount, **context)


@bp.get("/")
@login_required
def list_orders():
    orders = (
        Order.query.filter_by(user_id=current_user()["id"])
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )
    return _render("user/orders.html", orders=orders)


@bp.get("/checkout")
@login_required
def checkout():
    user_id = current_user()["id"]
    summary = cart_summary(find_cart(user_id))
    if not summary["items"]:
        flash("Your cart is empty.", "info")
        return redirect(url_for("cart.view_cart"))
    addresses = Address.query.filter_by(user_id=user_id).all()
    return _render("user/checkout.html", cart=summary, addresses=addresses)


@bp.post("/checkout")
@login_required
def place_order():
    """
    Checkout:
    - requires a non-empty cart and one of the user's addresses
    - validates stock for every line
    - applies an optional coupon
    - converts cart lines -> Order + OrderItems, decrements stock
    - clears cart
    """
    user_id = current_user()["id"]

    def bad(msg: str, to: str = "order.checkout"):
        db.session.rollback()
        flash(msg, "error")
        return redirect(url_for(to))

    cart = find_cart(user_id)
    if not cart or not cart.items:
        return bad("Your cart is empty.", "cart.view_cart")

    address_id = to_int(request.form.get("address_id"))
    address = Address.query.filter_by(id=address_id, user_id=user_id).first() if address_id else None
    if not address:
        return bad("Choose a shipping address.")

    for line in cart.items:
        product = line.product
        if not product.is_visible:
            return bad(f"{product.name} is no longer available.", "cart.view_cart")
        if product.stock < line.quantity:
            return bad(f"Only {product.stock} of {product.name} left in stock.", "cart.view_cart")

    subtotal = sum(line.quantity * line.product.price_cents for line in cart.items)

    discount = 0
    code = (request.form.get("coupon_code") or "").strip().upper() or None
    if code:
        discount, reason = coupon_discount(Coupon.query.filter_by(code=code).first(), subtotal)
        if reason:
            return bad(reason)

    order = Order(
        user_id=user_id,
        subtotal_cents=subtotal,
        discount_cents=discount,
        total_cents=subtotal - discount,
        coupon_code=code,
        shipping_address=address.one_line(),
        payment_method="cod",
    )
    for line in cart.items:
        order.items.append(
            OrderItem(
                product_id=line.product_id,
                product_name=line.product.name,
                unit_price_cents=line.product.price_cents,
                quantity=line.quantity,
            )
        )
        line.product.stock -= line.quantity

    db.session.add(order)
    cart.items.clear()
    cart.updated_at = datetime.utcnow()
    db.session.commit()

    log.info("Order %s placed by user %s total=%s", order.id, user_id, order.total_cents)
    flash(f"Order #{order.id} placed.", "success")
    return redirect(url_for("order.order_detail", order_id=order.id))


@bp.get("/<int:order_id>")
@login_required
def order_detail(order_id: int):
    return _render("user/order_detail.html", order=_own_order(order_id))


def _user_status_change(order_id: int, new_status: str, done: str):
    order = _own_order(order_id)
    try:
        change_status(order, new_status)
    except StatusChangeError as exc:
        flash(str(exc), "error")
        return redirect(url_for("order.order_detail", order_id=order.id))

    db.session.commit()
    log.info("Order %s %s by user %s", order.id, new_status, order.user_id)
    flash(done, "success")
    return redirect(url_for("order.order_detail", order_id=order.id))


@bp.post("/<int:order_id>/cancel")
@login_required
def cancel_order(order_id: int):
    return _user_status_change(order_id, CANCELLED, "Order cancelled.")


@bp.post("/<int:order_id>/return")
@login_required
def return_order(order_id: int):
    return _user_status_change(order_id, RETURNED, "Return requested.")
