"""Not-found pages, registered as the 404 handler after every route."""

from __future__ import annotations

import logging

from flask import Flask, render_template, request

from shopfront.app.common.auth import current_admin, current_user
from shopfront.app.common.errors import ApiError
from shopfront.app.common.lookups import item_counts
from shopfront.app.common.request_context import current_request_id
from shopfront.app.extensions import db

log = logging.getLogger(__name__)


def is_admin_path(path: str) -> bool:
    return path == "/admin" or path.startswith("/admin/")


def admin_not_found():
    return render_template("admin/404.html", admin=current_admin()), 404


def user_not_found():
    user = current_user()
    count, wishcount = item_counts(user)
    return render_template("user/404.html", user=user, count=count, wishcount=wishcount), 404


def register_fallbacks(app: Flask) -> None:
    @app.errorhandler(404)
    def no_route_matched(err):
        if is_admin_path(request.path):
            return admin_not_found()
        try:
            return user_not_found()
        except Exception:
            log.exception("Not-found page failed for %s", request.path)
            db.session.rollback()
            api_err = ApiError(500, "internal_error", "An unexpected error occurred")
            return api_err.to_dict(current_request_id()), 500
