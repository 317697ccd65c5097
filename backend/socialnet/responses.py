"""
SocialNet Backend — Error Envelope
====================================

Every error body, whether built by an exception handler or by middleware
that answers before routing, goes through `error_response`:

    {"success": false, "error": <code>, "message": <text>,
     "request_id": <id>, "details": {...}}

`details` is omitted when empty.
"""

from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse

from socialnet.middleware.request_id import request_id_var


def error_response(
    status_code: int,
    error: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    content: Dict[str, Any] = {
        "success": False,
        "error": error,
        "message": message,
        "request_id": request_id_var.get(""),
    }
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)
