from __future__ import annotations

from datetime import datetime

from flask import Blueprint, flash, redirect, render_template, request, url_for

from shopfront.app.extensions import db
from shopfront.app.models import Coupon
from shopfront.app.common.auth import admin_required, current_admin
from shopfront.app.common.validation import to_cents, to_date, to_int

bp = Blueprint("coupon", __name__)

MAX_DISCOUNT_PERCENT = 90


def coupon_discount(coupon: Coupon | None, subtotal_cents: int, now: datetime | None = None) -> tuple[int, str | None]:
    """Discount in cents for ``subtotal_cents``, or (0, reason) when the coupon does not apply."""
    if coupon is None or not coupon.is_active:
        return 0, "Coupon is not valid."
    now = now or datetime.utcnow()
    # Valid through the whole of its expiry date.
    if coupon.expires_at is not None and coupon.expires_at.date() < now.date():
        return 0, "Coupon has expired."
    if subtotal_cents < coupon.min_purchase_cents:
        return 0, "Order total is below the coupon minimum."

    discount = subtotal_cents * coupon.discount_percent // 100
    if coupon.max_discount_cents is not None:
        discount = min(discount, coupon.max_discount_cents)
    return discount, None


@bp.get("/")
@admin_required
def list_coupons():
    coupons = Coupon.query.order_by(Coupon.created_at.desc(), Coupon.id.desc()).all()
    return render_template("admin/coupons.html", admin=current_admin(), coupons=coupons)


@bp.post("/")
@admin_required
def create_coupon():
    def bad(msg: str):
        flash(msg, "error")
        return redirect(url_for("coupon.list_coupons"))

    code = (request.form.get("code") or "").strip().upper()
    percent = to_int(request.form.get("discount_percent"))
    min_purchase = to_cents(request.form.get("min_purchase")) or 0
    max_discount = to_cents(request.form.get("max_discount"))
    raw_expiry = (request.form.get("expires_at") or "").strip()
    expires_at = to_date(raw_expiry)

    if not code:
        return bad("Coupon code is required.")
    if percent is None or not 1 <= percent <= MAX_DISCOUNT_PERCENT:
        return bad(f"Discount must be between 1 and {MAX_DISCOUNT_PERCENT} percent.")
    if min_purchase < 0 or (max_discount is not None and max_discount <= 0):
        return bad("Amounts must be positive.")
    if raw_expiry and expires_at is None:
        return bad("Expiry date must look like YYYY-MM-DD.")
    if Coupon.query.filter_by(code=code).first():
        return bad(f"Coupon {code} already exists.")

    db.session.add(
        Coupon(
            code=code,
            discount_percent=percent,
            min_purchase_cents=min_purchase,
            max_discount_cents=max_discount,
            expires_at=expires_at,
        )
    )
    db.session.commit()
    flash(f"Coupon {code} created.", "success")
    return redirect(url_for("coupon.list_coupons"))


@bp.post("/<int:coupon_id>/toggle")
@admin_required
def toggle_coupon(coupon_id: int):
    coupon = db.get_or_404(Coupon, coupon_id)
    coupon.is_active = not coupon.is_active
    db.session.commit()
    flash(f"Coupon {coupon.code} {'activated' if coupon.is_active else 'deactivated'}.", "success")
    return redirect(url_for("coupon.list_coupons"))


@bp.post("/<int:coupon_id>/delete")
@admin_required
def delete_coupon(coupon_id: int):
    coupon = db.get_or_404(Coupon, coupon_id)
    code = coupon.code
    db.session.delete(coupon)
    db.session.commit()
    flash(f"Coupon {code} deleted.", "success")
    return redirect(url_for("coupon.list_coupons"))
