from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable, List
from flask import request

from shopfront.app.common.errors import abort_json

MAX_CENTS = 2 ** 63


def get_payload() -> Dict[str, Any]:
    """Request body as a dict, from JSON or from a submitted form."""
    if request.is_json:
        data = request.get_json(silent=True)
        if data is None or not isinstance(data, dict):
            abort_json(400, "invalid_json", "Malformed JSON body")
        return data
    return request.form.to_dict()


def missing_fields(data: Dict[str, Any], fields: Iterable[str]) -> List[str]:
    return [f for f in fields if f not in data or str(data[f]).strip() == ""]


def require_fields(data: Dict[str, Any], fields: Iterable[str]) -> None:
    missing = missing_fields(data, fields)
    if missing:
        abort_json(400, "validation_error", "Missing required fields", {"missing": missing})


def to_int(value: Any, default: int | None = None) -> int | None:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def to_cents(value: Any) -> int | None:
    """Parse a price like ``"12.50"`` or ``12`` into integer cents.

    Returns None for blank or malformed input, and for amounts that are not
    finite or do not fit a 64-bit column (``"inf"``, ``"nan"``, ``"1e300"``).
    """
    raw = str(value if value is not None else "").strip()
    if not raw:
        return None
    try:
        cents = int(round(float(raw) * 100))
    except (ValueError, OverflowError):
        return None
    return cents if abs(cents) < MAX_CENTS else None


def to_date(value: Any) -> datetime | None:
    raw = str(value or "").strip()
    if not raw:
        return None
    try:
        return datetime.strptime(raw, "%Y-%m-%d")
    except ValueError:
        return None
