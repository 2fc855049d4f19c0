"""
Common/shared Pydantic schemas.

This module contains reusable schemas used across the application:
- The camelCase base model used on the wire
- Message responses
- Health check response
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Any, Dict, Optional
from datetime import datetime, timezone


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys, accepting either spelling on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(BaseModel):
    """Plain acknowledgement."""
    message: str


class HealthCheckResponse(CamelModel):
    """Health check response."""
    status: str
    auth_mode: str
    database: Dict[str, Any]
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    version: Optional[str] = None
