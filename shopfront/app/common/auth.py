"""Session based identity for shoppers and admins.

The session carries two independent slots: ``user`` and ``admin``. Each
holds a small identity dict written at login, so reading who is logged in
never touches the database. Guarded shopper routes still re-check the
account row so a block applies to sessions that are already open.
"""

from functools import wraps
from typing import Callable, TypeVar, Any

from flask import flash, redirect, session, url_for

from shopfront.app.extensions import db
from shopfront.app.models import User
from shopfront.app.common.errors import abort_json
from shopfront.app.common.json import wants_json

F = TypeVar("F", bound=Callable[..., Any])


def current_user() -> dict | None:
    return session.get("user")


def current_admin() -> dict | None:
    return session.get("admin")


def login_user(identity: dict) -> None:
    session.permanent = True
    session["user"] = identity


def logout_user() -> None:
    session.pop("user", None)


def login_admin(identity: dict) -> None:
    session.permanent = True
    session["admin"] = identity


def logout_admin() -> None:
    session.pop("admin", None)


def login_required(fn: F) -> F:
    @wraps(fn)
    def wrapper(*args, **kwargs):
        identity = current_user()
        if not identity:
            if wants_json():
                abort_json(401, "unauthorized", "Authentication required")
            flash("Please log in to continue.", "info")
            return redirect(url_for("user.login"))
        account = db.session.get(User, identity["id"])
        if account is None or account.is_blocked:
            logout_user()
            if wants_json():
                abort_json(403, "account_blocked", "This account has been blocked")
            flash("Your account has been blocked.", "error")
            return redirect(url_for("user.login"))
        return fn(*args, **kwargs)

    return wrapper  # type: ignore


def admin_required(fn: F) -> F:
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if not current_admin():
            if wants_json():
                abort_json(401, "unauthorized", "Admin authentication required")
            flash("Please log in as an administrator.", "info")
            return redirect(url_for("admin.login"))
        return fn(*args, **kwargs)

    return wrapper  # type: ignore
