"""Post-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class PostCreate(BaseModel):
    """Schema for creating a new post or reply."""

    title: str | None = Field(None, max_length=300, description="Post title")
    text: str | None = Field(None, max_length=20000, description="HTML body")
    images: list[str] = Field(default_factory=list, description="Attached image URLs")
    preview_id: int | None = Field(None, alias="previewId", description="Resolved link preview")

    model_config = ConfigDict(populate_by_name=True)


class PostUpdate(BaseModel):
    """Schema for editing a post; omitted fields are left unchanged."""

    title: str | None = Field(None, max_length=300)
    text: str | None = Field(None, max_length=20000)
    images: list[str] | None = None
    preview_id: int | None = Field(None, alias="previewId")

    model_config = ConfigDict(populate_by_name=True)


class PostAuthor(BaseModel):
    """Public summary of a post's author."""

    id: int
    username: str
    display_name: str | None = Field(None, alias="displayName")
    avatar: str | None = None
    reputation: float

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class PreviewSummary(BaseModel):
    """Preview fields embedded in post listings."""

    id: int
    url: str
    title: str | None = None
    description: str | None = None
    site_name: str | None = Field(None, alias="siteName")
    favicon: str | None = None
    image: str | None = None
    youtube_id: str | None = Field(None, alias="youtubeId")

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class TipEntry(BaseModel):
    """Cumulative tip count one user has given a post."""

    user_id: int = Field(..., alias="userId")
    count: int

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    id: int
    user_id: int = Field(..., alias="userId")
    author: PostAuthor | None = None
    replied_to: int | None = Field(None, alias="repliedTo")
    replies: list[int] = Field(default_factory=list)
    preview: PreviewSummary | None = None
    title: str | None = None
    text: str | None = None
    images: list[str] = Field(default_factory=list)
    upvotes: list[int] = Field(default_factory=list)
    downvotes: list[int] = Field(default_factory=list)
    total_votes: int = Field(0, alias="totalVotes")
    reputation: float
    last_upvotes_weight: float = Field(0.0, alias="lastUpvotesWeight")
    last_downvotes_weight: float = Field(0.0, alias="lastDownvotesWeight")
    tips: list[TipEntry] = Field(default_factory=list)
    book_marks: list[int] = Field(default_factory=list, alias="bookMarks")
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime | None = Field(None, alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True)


class BookmarkResponse(BaseModel):
    """Result of toggling a bookmark."""

    post_id: int
    bookmarked: bool
