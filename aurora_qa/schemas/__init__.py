"""
Pydantic schemas for upstream payloads and API request/response bodies.
"""

from datetime import datetime
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class MessageItem(BaseModel):
    """Individual chat message returned from external API."""

    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    user_name: str
    timestamp: str = Field(..., description="ISO-8601 timestamp as sent upstream")
    message: str


class FetchBatch(BaseModel):
    """One page of the upstream /messages/ listing."""

    total: Optional[int] = Field(None, ge=0)
    items: List[Any] = Field(default_factory=list)


class AskResponse(BaseModel):
    """Answer response schema."""

    answer: str


class ErrorResponse(BaseModel):
    """Error payload returned for failed requests."""

    error: str
    details: Optional[str] = None


class UsageResponse(BaseModel):
    """Static help text served on GET /ask."""

    message: str
    usage: str
    examples: List[str]


class CacheStatsResponse(BaseModel):
    """Snapshot of the message cache state."""

    model_config = ConfigDict(populate_by_name=True)

    message_count: int = Field(..., ge=0, alias="messageCount")
    is_populated: bool = Field(..., alias="isPopulated")
    last_fetched: Optional[datetime] = Field(None, alias="lastFetched")
    age_ms: Optional[int] = Field(None, alias="ageMs")


class HealthCheckResponse(BaseModel):
    """Health check response schema."""

    status: str = Field(..., description="Health status")
    version: str = Field(..., description="Application version")
    configured: bool = Field(..., description="Whether the upstream base URL is set")
