"""Unified API response wrapper.

All API endpoints return this format:
{
    "code": 0,           // 0=success, non-0=error code
    "message": "success",
    "data": { ... },     // null on error
    "timestamp": "...",
    "request_id": "..."
}
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


def _new_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    request_id: str = Field(default_factory=_new_request_id)


def success_response(data: Any = None, request_id: str | None = None) -> ApiResponse:
    """Wrap data; reuse the middleware's request id when the router passes one."""
    return ApiResponse(
        code=0, message="success", data=data, request_id=request_id or _new_request_id()
    )


def error_response(code: int, message: str, request_id: str | None = None) -> ApiResponse:
    return ApiResponse(
        code=code, message=message, data=None, request_id=request_id or _new_request_id()
    )
