"""Client-side error types."""
from typing import Any

import httpx


class FormValidationError(ValueError):
    """Local form input was rejected before any request was issued."""


class RemoteError(Exception):
    """The API answered with a non-success status."""

    def __init__(self, status_code: int, detail: str):
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail

    @classmethod
    def from_response(cls, resp: httpx.Response) -> "RemoteError":
        detail: Any = None
        try:
            detail = resp.json().get("detail")
        except ValueError:
            pass
        if isinstance(detail, list):
            # FastAPI request validation errors
            detail = "; ".join(str(e.get("msg", e)) for e in detail)
        return cls(resp.status_code, str(detail or resp.reason_phrase or "Request failed"))
