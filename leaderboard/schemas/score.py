from __future__ import annotations
from typing import Optional
from pydantic import BaseModel, Field

# signed 64-bit range the scores table stores ids and points in
BIGINT_MIN = -(2**63)
BIGINT_MAX = 2**63 - 1


class ScoreIn(BaseModel):
    """Request body for create and update; ``id`` decides which one is allowed."""

    id: Optional[int] = Field(default=None, ge=BIGINT_MIN, le=BIGINT_MAX)
    name: str = Field(min_length=1, max_length=100)
    points: int = Field(ge=BIGINT_MIN, le=BIGINT_MAX)


class ScoreOut(BaseModel):
    id: int
    name: str
    points: int
    model_config = {"from_attributes": True}
