"""Stable response envelopes for callers surfacing results and Riot API errors."""

from typing import Any, Dict, Optional

from pydantic import BaseModel

from .riot_api.errors import RiotAPIError, RiotErrorCode


def ok_payload(data: Any) -> Dict[str, Any]:
    """Wrap a successful result; pydantic models are dumped in JSON mode."""
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json")
    return {"ok": True, "data": data}


def error_payload(
    code: str,
    message: str,
    status: int = 500,
    detail: Optional[str] = None,
) -> Dict[str, Any]:
    """Build the error envelope ``{"ok": False, "error": {...}}``."""
    return {
        "ok": False,
        "error": {"code": code, "message": message, "status": status, "detail": detail},
    }


def error_payload_from_exception(exc: Exception) -> Dict[str, Any]:
    """
    Map an exception to the error envelope.

    RiotAPIError keeps its code and the upstream HTTP status when one was
    received; transport failures (status 0) and anything else report 500.
    """
    if isinstance(exc, RiotAPIError):
        status = exc.status_code if exc.status_code else 500
        return error_payload(exc.code.value, exc.detail, status)
    return error_payload(RiotErrorCode.UNKNOWN.value, "Unexpected error", 500, str(exc))
