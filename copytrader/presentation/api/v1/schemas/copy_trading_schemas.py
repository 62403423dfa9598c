"""Pydantic schemas for Copy Trading API requests/responses."""

import re
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{1,64}$")


# ============================================================================
# REQUEST SCHEMAS
# ============================================================================


class StartCopyTradingRequest(BaseModel):
    """Request schema для старту copy trading.

    Example:
        {"master_address": "0x9a1b...e3f2"}
    """

    master_address: str = Field(..., description="Aptos account to copy (0x...)")

    @field_validator("master_address")
    @classmethod
    def validate_master_address(cls, v: str) -> str:
        v = v.strip()
        if not _ADDRESS_RE.match(v):
            raise ValueError("master_address must be 0x followed by 1-64 hex characters")
        return v.lower()


# ============================================================================
# RESPONSE SCHEMAS
# ============================================================================


class CopyTradeSessionResponse(BaseModel):
    id: int
    follower_id: int
    master_address: str
    active: bool
    last_seen_version: int | None = None
    runner_state: str | None = Field(
        default=None, description="starting | polling | dispatching | stopped"
    )
    created_at: datetime
    updated_at: datetime


class CopyTradeSessionListResponse(BaseModel):
    sessions: list[CopyTradeSessionResponse]
    total: int


class ErrorResponse(BaseModel):
    """Error response schema."""

    error: str
    message: str
    details: dict | None = None
