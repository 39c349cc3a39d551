"""Link preview Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class SourcePostSummary(BaseModel):
    """The oldest post that introduced a preview."""

    id: int
    user_id: int = Field(..., alias="userId")
    created_at: datetime = Field(..., alias="createdAt")

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class PreviewResponse(BaseModel):
    """Schema for a resolved link preview."""

    id: int
    url: str
    canonicals: list[str] = Field(default_factory=list)
    title: str | None = None
    description: str | None = None
    site_name: str | None = Field(None, alias="siteName")
    favicon: str | None = None
    image: str | None = None
    youtube_id: str | None = Field(None, alias="youtubeId")
    source_post: SourcePostSummary | None = Field(None, alias="sourcePost")

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)
