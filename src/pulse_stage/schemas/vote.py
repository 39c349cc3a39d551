# src/pulse_stage/schemas/vote.py
"""Vote and tip Pydantic schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class VoteCreate(BaseModel):
    """Schema for casting a vote."""

    post_id: int
    direction: Literal[-1, 1] = Field(..., description="1 for upvote, -1 for downvote")


class TipCreate(BaseModel):
    """Schema for tipping a post's author."""

    post_id: int


class MyVoteResponse(BaseModel):
    """Caller's current vote direction on a post (0 when not voted)."""

    direction: Literal[-1, 0, 1]


class TipResponse(BaseModel):
    """Result of a tip."""

    post_id: int
    count: int = Field(..., description="Cumulative tips from the caller on this post")
