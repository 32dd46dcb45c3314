"""
Errors returned (never raised) by terminal query calls.
"""

from __future__ import annotations

import httpx


class QueryError(Exception):
    def __init__(self, message: str, *, status: int | None = None, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code


class UnsupportedResourceError(QueryError):
    """
    The table has no route descriptor, so no request is attempted.
    """


def error_from_response(response: httpx.Response) -> QueryError:
    """
    Build a `QueryError` from a non-2xx response, preferring the server's message.
    """
    try:
        body = response.json()
    except ValueError:
        body = None

    message = None
    code = None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            message = error.get("message")
            code = error.get("code")
        elif isinstance(error, str):
            message = error
        elif isinstance(body.get("detail"), str):
            message = body["detail"]
        elif isinstance(body.get("detail"), list):
            # FastAPI validation errors: [{"loc": [...], "msg": "..."}, ...]
            msgs = [item.get("msg") for item in body["detail"] if isinstance(item, dict) and item.get("msg")]
            message = "; ".join(msgs) or None

    if not message:
        message = response.reason_phrase or f"HTTP {response.status_code}"
    return QueryError(str(message), status=response.status_code, code=code)
