from __future__ import annotations

import logging

from flask import Blueprint, flash, redirect, render_template, request, url_for

from shopfront.app.extensions import db
from shopfront.app.models import Order
from shopfront.app.common.auth import admin_required, current_admin
from shopfront.modules.order.status import STATUSES, TRANSITIONS, StatusChangeError, change_status

log = logging.getLogger(__name__)

bp = Blueprint("order_status", __name__)


@bp.get("/")
@admin_required
def list_orders():
    status = (request.args.get("status") or "").strip()
    q = Order.query
    if status in STATUSES:
        q = q.filter(Order.status == status)
    orders = q.order_by(Order.created_at.desc(), Order.id.desc()).all()
    return render_template(
        "admin/orders.html",
        admin=current_admin(),
        orders=orders,
        status=status,
        statuses=STATUSES,
    )


@bp.get("/<int:order_id>")
@admin_required
def order_detail(order_id: int):
    order = db.get_or_404(Order, order_id)
    return render_template(
        "admin/order_detail.html",
        admin=current_admin(),
        order=order,
        next_statuses=sorted(TRANSITIONS.get(order.status, set())),
    )


@bp.post("/<int:order_id>/status")
@admin_required
def update_status(order_id: int):
    order = db.get_or_404(Order, order_id)
    new_status = (request.form.get("status") or "").strip().lower()
    previous = order.status

    try:
        change_status(order, new_status)
    except StatusChangeError as exc:
        flash(str(exc), "error")
        return redirect(url_for("order_status.order_detail", order_id=order.id))

    db.session.commit()
    log.info("Order %s moved %s -> %s by admin %s", order.id, previous, new_status, current_admin()["id"])
    flash(f"Order #{order.id} is now {new_status}.", "success")
    return redirect(url_for("order_status.order_detail", order_id=order.id))
