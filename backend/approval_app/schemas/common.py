"""Response envelope and problem body shared by every route."""
from typing import Any, Literal

from pydantic import BaseModel


class APIResponse(BaseModel):
    status: Literal["success", "error"]
    data: Any = None
    message: str | None = None


class ErrorDetail(BaseModel):
    """RFC 7807 problem body returned for every failed request."""
    type: str = "about:blank"
    title: str
    status: int
    detail: str
    instance: str | None = None
