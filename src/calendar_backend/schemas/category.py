"""
Category Pydantic Schemas
"""

from datetime import datetime
from typing import Optional
from pydantic import Field, field_validator

from calendar_backend.schemas.common import CamelModel


class CreateCategoryRequest(CamelModel):
    """Request schema for creating a category."""

    name: str = Field(..., min_length=1, max_length=100)
    color: Optional[str] = Field(None, max_length=32)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class CategoryResponse(CamelModel):
    """Response schema for a category."""

    id: int
    name: str
    color: str
    is_default: bool = False
    owner_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime
