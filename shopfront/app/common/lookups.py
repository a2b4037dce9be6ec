from __future__ import annotations

from datetime import datetime

from shopfront.app.extensions import db
from shopfront.app.models import Cart, Wishlist


def find_cart(user_id: int) -> Cart | None:
    return Cart.query.filter_by(user_id=user_id).first()


def find_wishlist(user_id: int) -> Wishlist | None:
    return Wishlist.query.filter_by(user_id=user_id).first()


def get_or_create_cart(user_id: int) -> Cart:
    cart = find_cart(user_id)
    if not cart:
        cart = Cart(user_id=user_id, updated_at=datetime.utcnow())
        db.session.add(cart)
        db.session.flush()
    return cart


def get_or_create_wishlist(user_id: int) -> Wishlist:
    wishlist = find_wishlist(user_id)
    if not wishlist:
        wishlist = Wishlist(user_id=user_id)
        db.session.add(wishlist)
        db.session.flush()
    return wishlist


def item_counts(user: dict | None) -> tuple[int | None, int | None]:
    """Cart and wishlist line counts for the navbar badges.

    ``None`` means the user is anonymous or has no such document yet; an
    anonymous caller never reaches the database.
    """
    if not user:
        return None, None
    cart = find_cart(user["id"])
    wishlist = find_wishlist(user["id"])
    count = len(cart.items) if cart else None
    wishcount = len(wishlist.items) if wishlist else None
    return count, wishcount
