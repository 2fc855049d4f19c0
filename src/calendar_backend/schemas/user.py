"""
User Pydantic Schemas
"""

from datetime import datetime
from typing import Optional

from calendar_backend.schemas.common import CamelModel


class UserResponse(CamelModel):
    """Public profile of the signed-in user (never includes the refresh token)."""

    id: int
    google_id: str
    email: str
    display_name: Optional[str] = None
    avatar: Optional[str] = None
    created_at: datetime
    updated_at: datetime
