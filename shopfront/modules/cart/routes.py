from __future__ import annotations

from datetime import datetime
from flask import Blueprint, flash, redirect, render_template, url_for

from shopfront.app.extensions import db
from shopfront.app.models import Cart, CartItem, Product
from shopfront.app.common.auth import current_user, login_required
from shopfront.app.common.errors import abort_json
from shopfront.app.common.json import ok, wants_json
from shopfront.app.common.lookups import find_cart, get_or_create_cart, item_counts
from shopfront.app.common.validation import get_payload, missing_fields, require_fields, to_int

bp = Blueprint("cart", __name__)


def cart_summary(cart: Cart | None) -> dict:
    items = cart.items if cart else []
    subtotal = sum(i.quantity * i.product.price_cents for i in items)
    return {
        "items": [
            {
                "id": i.id,
                "product_id": i.product_id,
                "name": i.product.name,
                "image_url": i.product.image_url,
                "price_cents": i.product.price_cents,
                "quantity": i.quantity,
                "line_total_cents": i.quantity * i.product.price_cents,
                "in_stock": i.product.stock >= i.quantity,
            }
            for i in items
        ],
        "subtotal_cents": subtotal,
    }


def _done(message: str, status: int = 200):
    if wants_json():
        count, wishcount = item_counts(current_user())
        return ok({"success": True, "message": message, "count": count or 0, "wishcount": wishcount or 0}, status)
    flash(message, "success")
    return redirect(url_for("cart.view_cart"))


def _fail(status: int, code: str, message: str):
    if wants_json():
        abort_json(status, code, message)
    flash(message, "error")
    return redirect(url_for("cart.view_cart"))


def add_product(user_id: int, product: Product, qty: int) -> str | None:
    """Add ``qty`` of ``product`` to the user's cart. Returns an error message or None.

    Caller commits.
    """
    cart = get_or_create_cart(user_id)
    item = CartItem.query.filter_by(cart_id=cart.id, product_id=product.id).first()
    new_qty = qty + (item.quantity if item else 0)
    if product.stock < new_qty:
        return f"Only {product.stock} of {product.name} left in stock."

    if item:
        item.quantity = new_qty
    else:
        cart.items.append(CartItem(product_id=product.id, quantity=qty))
    cart.updated_at = datetime.utcnow()
    return None


@bp.get("/")
@login_required
def view_cart():
    user = current_user()
    count, wishcount = item_counts(user)
    summary = cart_summary(find_cart(user["id"]))
    if wants_json():
        return ok(summary)
    return render_template("user/cart.html", user=user, count=count, wishcount=wishcount, cart=summary)


@bp.post("/add")
@login_required
def add_to_cart():
    data = get_payload()
    if not wants_json() and missing_fields(data, ["product_id"]):
        return _fail(400, "validation_error", "Choose a product first.")
    require_fields(data, ["product_id"])

    product_id = to_int(data["product_id"])
    qty = to_int(data.get("quantity", 1))
    if qty is None or qty <= 0:
        return _fail(400, "validation_error", "Quantity must be at least 1.")

    product = db.session.get(Product, product_id) if product_id is not None else None
    if not product or not product.is_visible:
        return _fail(404, "not_found", "Product not found.")

    err = add_product(current_user()["id"], product, qty)
    if err:
        db.session.rollback()
        return _fail(409, "out_of_stock", err)

    db.session.commit()
    return _done(f"{product.name} added to cart.", 201)


@bp.post("/update")
@login_required
def update_item():
    data = get_payload()
    if not wants_json() and missing_fields(data, ["product_id", "quantity"]):
        return _fail(400, "validation_error", "Choose a product and a quantity.")
    require_fields(data, ["product_id", "quantity"])

    product_id = to_int(data["product_id"])
    qty = to_int(data["quantity"])
    if qty is None:
        return _fail(400, "validation_error", "Quantity must be a number.")

    cart = find_cart(current_user()["id"])
    item = CartItem.query.filter_by(cart_id=cart.id, product_id=product_id).first() if cart else None
    if not item:
        return _fail(404, "not_found", "Cart item not found.")

    if qty <= 0:
        db.session.delete(item)
    else:
        if item.product.stock < qty:
            return _fail(409, "out_of_stock", f"Only {item.product.stock} of {item.product.name} left in stock.")
        item.quantity = qty

    cart.updated_at = datetime.utcnow()
    db.session.commit()
    return _done("Cart updated.")


@bp.post("/remove/<int:product_id>")
@login_required
def remove_item(product_id: int):
    cart = find_cart(current_user()["id"])
    item = CartItem.query.filter_by(cart_id=cart.id, product_id=product_id).first() if cart else None
    if not item:
        return _fail(404, "not_found", "Cart item not found.")

    db.session.delete(item)
    cart.updated_at = datetime.utcnow()
    db.session.commit()
    return _done("Item removed from cart.")
