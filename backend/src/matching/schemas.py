"""Pydantic schemas for matching endpoints."""

from datetime import datetime
from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .status import MatchStatus


class MatchSchema(BaseModel):
    """Match as returned to buyer or seller."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    buy_request_id: UUID
    product_id: UUID
    buyer_id: UUID
    seller_id: UUID
    ai_score: int = Field(ge=0, le=100)
    match_reason: str
    status: MatchStatus
    buyer_viewed: bool
    seller_viewed: bool
    buyer_viewed_at: Optional[datetime] = None
    seller_viewed_at: Optional[datetime] = None
    created_at: datetime


class MatchListResponse(BaseModel):
    """Paginated list of matches."""
    matches: List[MatchSchema]
    total: int
    limit: int
    offset: int


class MatchActionRequest(BaseModel):
    """Request to accept or reject a match."""
    action: Literal["accept", "reject"]


class CreatedMatchSchema(BaseModel):
    """Match created by a matching run."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    product_id: UUID
    seller_id: UUID
    score: int = Field(ge=0, le=100)
    reason: str
    status: MatchStatus


class MatchRunResponse(BaseModel):
    """Result of a manually triggered matching run."""
    buy_request_id: UUID
    matches_found: int
    candidates_scored: int
    duplicates_skipped: int
    failed_writes: int
    matches: List[CreatedMatchSchema]
