from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class ApiError(Exception):
    """A failure answered as ``{"error": {...}}`` with ``status_code``."""

    status_code: int
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None

    def to_dict(self, request_id: str | None = None) -> Dict[str, Any]:
        details = self.details or {}
        return {"error": {"code": self.code, "message": self.message, "details": details, "request_id": request_id}}


class DatabaseUnavailable(RuntimeError):
    """The database could not be reached at startup under the fail-fast policy."""


def abort_json(status_code: int, code: str, message: str, details: Optional[Dict[str, Any]] = None) -> None:
    """Raise an :class:`ApiError`; the factory renders it as the JSON error body."""
    raise ApiError(status_code=status_code, code=code, message=message, details=details)
