"""
Pydantic schemas for question bank categories.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict


class Category(BaseModel):
    """Schema for category response."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    color: str
    description: Optional[str] = None
