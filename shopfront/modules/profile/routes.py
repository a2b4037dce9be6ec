from __future__ import annotations

from flask import Blueprint, abort, flash, redirect, render_template, request, url_for
from werkzeug.security import generate_password_hash, check_password_hash

from shopfront.app.extensions import db
from shopfront.app.models import Address, User
from shopfront.app.common.auth import current_user, login_required, login_user
from shopfront.app.common.lookups import item_counts
from shopfront.modules.user.routes import MIN_PASSWORD_LENGTH

bp = Blueprint("profile", __name__)


def _load_user() -> User:
    user = db.session.get(User, current_user()["id"])
    if not user:
        abort(404)
    return user


@bp.get("/")
@login_required
def show_profile():
    user = _load_user()
    count, wishcount = item_counts(current_user())
    return render_template(
        "user/profile.html",
        user=current_user(),
        account=user,
        addresses=user.addresses,
        count=count,
        wishcount=wishcount,
    )


@bp.post("/")
@login_required
def update_profile():
    user = _load_user()
    name = (request.form.get("name") or "").strip()
    if not name:
        flash("Name is required.", "error")
        return redirect(url_for("profile.show_profile"))

    user.name = name
    user.phone = (request.form.get("phone") or "").strip() or None
    db.session.commit()

    login_user(user.identity())
    flash("Profile updated.", "success")
    return redirect(url_for("profile.show_profile"))


@bp.post("/password")
@login_required
def change_password():
    user = _load_user()
    current_password = request.form.get("current_password") or ""
    new_password = request.form.get("new_password") or ""

    if not check_password_hash(user.password_hash, current_password):
        flash("Current password is incorrect.", "error")
    elif len(new_password) < MIN_PASSWORD_LENGTH:
        flash(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.", "error")
    else:
        user.password_hash = generate_password_hash(new_password)
        db.session.commit()
        flash("Password changed.", "success")
    return redirect(url_for("profile.show_profile"))


@bp.post("/addresses")
@login_required
def add_address():
    user = _load_user()
    fields = {k: (request.form.get(k) or "").strip() for k in ("line1", "city", "state", "postal_code", "country")}
    missing = [k for k in ("line1", "city", "postal_code", "country") if not fields[k]]
    if missing:
        flash("Address is missing: " + ", ".join(missing), "error")
        return redirect(url_for("profile.show_profile"))

    fields["state"] = fields["state"] or None
    db.session.add(Address(user_id=user.id, **fields))
    db.session.commit()
    flash("Address added.", "success")
    return redirect(url_for("profile.show_profile"))


@bp.post("/addresses/<int:address_id>/delete")
@login_required
def delete_address(address_id: int):
    address = Address.query.filter_by(id=address_id, user_id=current_user()["id"]).first()
    if not address:
        abort(404)
    db.session.delete(address)
    db.session.commit()
    flash("Address removed.", "success")
    return redirect(url_for("profile.show_profile"))
