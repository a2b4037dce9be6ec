from __future__ import annotations

from flask import jsonify, request


def ok(data=None, status=200):
    if data is None:
        return ("", status)
    return jsonify(data), status


def wants_json() -> bool:
    """True for fetch/XHR callers that expect JSON instead of a redirect."""
    return request.is_json or request.accept_mimetypes.best == "application/json"
