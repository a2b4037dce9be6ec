from __future__ import annotations

import logging
import re

from flask import Blueprint, flash, redirect, render_template, request, url_for
from werkzeug.security import generate_password_hash, check_password_hash

from shopfront.app.extensions import db
from shopfront.app.models import Category, Product, User
from shopfront.app.common.auth import current_user, login_user, logout_user
from shopfront.app.common.lookups import item_counts

log = logging.getLogger(__name__)

bp = Blueprint("user", __name__)

EMAIL_REGEX = r"^[^\s@]+@[^\s@]+\.[^\s@]{2,}$"
MIN_PASSWORD_LENGTH = 8


def visible_products():
    """Listed products whose category is listed too."""
    return Product.query.join(Category).filter(Product.is_listed.is_(True), Category.is_listed.is_(True))


@bp.get("/")
def home():
    user = current_user()
    count, wishcount = item_counts(user)
    featured = visible_products().order_by(Product.created_at.desc(), Product.id.desc()).limit(8).all()
    return render_template("user/home.html", user=user, count=count, wishcount=wishcount, products=featured)


@bp.get("/signup")
def signup():
    return render_template("user/signup.html")


@bp.post("/signup")
def signup_post():
    name = (request.form.get("name") or "").strip()
    email = (request.form.get("email") or "").strip().lower()
    password = request.form.get("password") or ""
    phone = (request.form.get("phone") or "").strip() or None

    def bad(msg: str):
        flash(msg, "error")
        return redirect(url_for("user.signup"))

    if not name or not email or not password:
        return bad("Name, email and password are required.")
    if not re.match(EMAIL_REGEX, email):
        return bad("Invalid email address.")
    if len(password) < MIN_PASSWORD_LENGTH:
        return bad(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
    if User.query.filter_by(email=email).first():
        return bad("Email already registered.")

    user = User(name=name, email=email, phone=phone, password_hash=generate_password_hash(password))
    db.session.add(user)
    db.session.commit()

    login_user(user.identity())
    log.info("User %s signed up", user.id)
    flash("Account created.", "success")
    return redirect(url_for("user.home"))


@bp.get("/login")
def login():
    if current_user():
        return redirect(url_for("user.home"))
    return render_template("user/login.html")


@bp.post("/login")
def login_post():
    email = (request.form.get("email") or "").strip().lower()
    password = request.form.get("password") or ""

    user = User.query.filter_by(email=email).first()
    if not user or not check_password_hash(user.password_hash, password):
        log.info("Failed login for %s", email)
        flash("Invalid email or password.", "error")
        return redirect(url_for("user.login"))
    if user.is_blocked:
        flash("This account has been blocked.", "error")
        return redirect(url_for("user.login"))

    login_user(user.identity())
    flash("Logged in.", "success")
    return redirect(url_for("user.home"))


@bp.get("/logout")
def logout():
    logout_user()
    flash("Logged out.", "success")
    return redirect(url_for("user.home"))
