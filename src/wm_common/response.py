"""Response envelope shared by every endpoint and the error handler.

    {"code": 0, "message": "success", "data": {...}, "category": null,
     "timestamp": "2026-10-16T01:15:00+00:00", "request_id": "req_a1b2c3d4e5f6"}

code 0 is success; errors carry their numeric code, the message and the
category, with data null.
"""

import uuid
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field
from starlette.requests import Request


def new_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    category: str | None = None
    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    request_id: str = Field(default_factory=new_request_id)


def _request_id_of(request: Request | None) -> str:
    """Reuse the id RequestLogMiddleware stamped so logs and bodies correlate."""
    if request is not None:
        rid = getattr(request.state, "request_id", None)
        if rid:
            return str(rid)
    return new_request_id()


def success_response(data: Any = None, request: Request | None = None) -> ApiResponse:
    return ApiResponse(data=data, request_id=_request_id_of(request))


def error_response(
    code: int, message: str, category: str | None = None, request: Request | None = None
) -> ApiResponse:
    return ApiResponse(
        code=code,
        message=message,
        data=None,
        category=category,
        request_id=_request_id_of(request),
    )
