from __future__ import annotations

from flask import Blueprint, flash, redirect, render_template, url_for

from shopfront.app.extensions import db
from shopfront.app.models import Product, WishlistItem
from shopfront.app.common.auth import current_user, login_required
from shopfront.app.common.errors import abort_json
from shopfront.app.common.json import ok, wants_json
from shopfront.app.common.lookups import find_wishlist, get_or_create_wishlist, item_counts
from shopfront.app.common.validation import get_payload, missing_fields, require_fields, to_int
from shopfront.modules.cart.routes import add_product

bp = Blueprint("wishlist", __name__)


def _done(message: str, status: int = 200):
    if wants_json():
        count, wishcount = item_counts(current_user())
        return ok({"success": True, "message": message, "count": count or 0, "wishcount": wishcount or 0}, status)
    flash(message, "success")
    return redirect(url_for("wishlist.view_wishlist"))


def _fail(status: int, code: str, message: str):
    if wants_json():
        abort_json(status, code, message)
    flash(message, "error")
    return redirect(url_for("wishlist.view_wishlist"))


def _find_item(product_id: int) -> WishlistItem | None:
    wishlist = find_wishlist(current_user()["id"])
    if not wishlist:
        return None
    return WishlistItem.query.filter_by(wishlist_id=wishlist.id, product_id=product_id).first()


@bp.get("/")
@login_required
def view_wishlist():
    user = current_user()
    wishlist = find_wishlist(user["id"])
    items = wishlist.items if wishlist else []
    if wants_json():
        return ok({
            "items": [
                {"product_id": i.product_id, "name": i.product.name, "price_cents": i.product.price_cents}
                for i in items
            ]
        })
    count, wishcount = item_counts(user)
    return render_template("user/wishlist.html", user=user, count=count, wishcount=wishcount, items=items)


@bp.post("/add")
@login_required
def add_to_wishlist():
    data = get_payload()
    if not wants_json() and missing_fields(data, ["product_id"]):
        return _fail(400, "validation_error", "Choose a product first.")
    require_fields(data, ["product_id"])

    product_id = to_int(data["product_id"])
    product = db.session.get(Product, product_id) if product_id is not None else None
    if not product or not product.is_visible:
        return _fail(404, "not_found", "Product not found.")

    wishlist = get_or_create_wishlist(current_user()["id"])
    exists = WishlistItem.query.filter_by(wishlist_id=wishlist.id, product_id=product.id).first()
    if exists:
        db.session.commit()
        return _done(f"{product.name} is already in your wishlist.")

    wishlist.items.append(WishlistItem(product_id=product.id))
    db.session.commit()
    return _done(f"{product.name} added to wishlist.", 201)


@bp.post("/remove/<int:product_id>")
@login_required
def remove_from_wishlist(product_id: int):
    item = _find_item(product_id)
    if not item:
        return _fail(404, "not_found", "Wishlist item not found.")

    db.session.delete(item)
    db.session.commit()
    return _done("Item removed from wishlist.")


@bp.post("/move-to-cart/<int:product_id>")
@login_required
def move_to_cart(product_id: int):
    item = _find_item(product_id)
    if not item:
        return _fail(404, "not_found", "Wishlist item not found.")

    product = item.product
    if not product.is_visible:
        return _fail(404, "not_found", "Product not found.")

    err = add_product(current_user()["id"], product, 1)
    if err:
        db.session.rollback()
        return _fail(409, "out_of_stock", err)

    db.session.delete(item)
    db.session.commit()
    return _done(f"{product.name} moved to cart.")
