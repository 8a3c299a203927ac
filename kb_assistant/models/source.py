"""
Knowledge source schemas.

A source is one ingested URL, aggregated over all of its chunks.

Dependencies: pydantic
System role: Source management API contracts
"""

from pydantic import BaseModel, Field


class SourceItem(BaseModel):
    """Aggregated view of one ingested URL."""

    url: str
    title: str
    chunks_count: int
    last_updated: str


class SourceListResponse(BaseModel):
    """Response schema for listing sources."""

    success: bool = True
    sources: list[SourceItem] = Field(default_factory=list)
    count: int = 0


class DeleteSourceRequest(BaseModel):
    """Request schema for deleting a source."""

    url: str = Field(description="Source URL whose chunks should be removed")


class DeleteSourceResponse(BaseModel):
    """Response schema for a deleted source."""

    success: bool = True
    message: str
    url: str
    chunks_deleted: int = 0
