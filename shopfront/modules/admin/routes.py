from __future__ import annotations

import logging

from flask import Blueprint, flash, redirect, render_template, request, url_for
from sqlalchemy import func
from werkzeug.security import check_password_hash

from shopfront.app.extensions import db
from shopfront.app.models import Admin, Order, Product, User
from shopfront.app.common.auth import admin_required, current_admin, login_admin, logout_admin

log = logging.getLogger(__name__)

bp = Blueprint("admin", __name__)


@bp.get("/login")
def login():
    if current_admin():
        return redirect(url_for("admin.dashboard"))
    return render_template("admin/login.html")


@bp.post("/login")
def login_post():
    email = (request.form.get("email") or "").strip().lower()
    password = request.form.get("password") or ""

    admin = Admin.query.filter_by(email=email).first()
    if not admin or not check_password_hash(admin.password_hash, password):
        log.warning("Failed admin login for %s", email)
        flash("Invalid email or password.", "error")
        return redirect(url_for("admin.login"))

    login_admin(admin.identity())
    return redirect(url_for("admin.dashboard"))


@bp.get("/logout")
def logout():
    logout_admin()
    flash("Logged out.", "success")
    return redirect(url_for("admin.login"))


@bp.get("/")
@admin_required
def dashboard():
    revenue = (
        db.session.query(func.coalesce(func.sum(Order.total_cents), 0))
        .filter(Order.status == "delivered")
        .scalar()
    )
    stats = {
        "users": User.query.count(),
        "products": Product.query.count(),
        "orders": Order.query.count(),
        "revenue_cents": int(revenue or 0),
    }
    return render_template("admin/dashboard.html", admin=current_admin(), stats=stats)


@bp.get("/users")
@admin_required
def users():
    rows = User.query.order_by(User.created_at.desc(), User.id.desc()).all()
    return render_template("admin/users.html", admin=current_admin(), users=rows)


def _set_blocked(user_id: int, blocked: bool):
    user = db.get_or_404(User, user_id)
    user.is_blocked = blocked
    db.session.commit()
    log.info("User %s %s by admin %s", user.id, "blocked" if blocked else "unblocked", current_admin()["id"])
    flash(f"{user.email} {'blocked' if blocked else 'unblocked'}.", "success")
    return redirect(url_for("admin.users"))


@bp.post("/users/<int:user_id>/block")
@admin_required
def block_user(user_id: int):
    return _set_blocked(user_id, True)


@bp.post("/users/<int:user_id>/unblock")
@admin_required
def unblock_user(user_id: int):
    return _set_blocked(user_id, False)
