"""
Common schemas for API responses.
"""
from typing import Any, Dict

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Error response schema."""

    detail: str
    error_code: str
    extra: Dict[str, Any] = {}
