"""User-facing Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UserResponse(BaseModel):
    """Private view of the current user."""

    id: int
    username: str
    display_name: str | None = Field(None, alias="displayName")
    avatar: str | None = None
    balance: int
    reputation: float
    created_at: datetime = Field(..., alias="createdAt")

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class UserStats(BaseModel):
    """Engagement counters for the current user."""

    bookmarks_count: int = Field(0, alias="bookmarksCount")
    upvotes_count: int = Field(0, alias="upvotesCount")
    downvotes_count: int = Field(0, alias="downvotesCount")
    total_posts: int = Field(0, alias="totalPosts")
    tips_count: int = Field(0, alias="tipsCount")

    model_config = ConfigDict(populate_by_name=True)


class UserEarnings(BaseModel):
    """Balance flow summary: tips received versus tips and downvotes given."""

    total_income: int = Field(0, alias="totalIncome")
    total_spendings: int = Field(0, alias="totalSpendings")

    model_config = ConfigDict(populate_by_name=True)


class UserPublicProfile(BaseModel):
    """Public view of any user, with totals over the posts they wrote."""

    id: int
    username: str
    display_name: str | None = Field(None, alias="displayName")
    avatar: str | None = None
    reputation: float
    posts_count: int = Field(0, alias="postsCount")
    upvotes: int = 0
    downvotes: int = 0

    model_config = ConfigDict(populate_by_name=True)
