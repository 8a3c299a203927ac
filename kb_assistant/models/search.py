"""
Search request/response schemas.

Dependencies: pydantic
System role: Raw semantic search API contracts
"""

from typing import Any

from pydantic import BaseModel, Field


class SearchRequest(BaseModel):
    """Request schema for semantic search."""

    query: str = Field(description="Search text")
    k: int | None = Field(default=None, description="Number of results", ge=1, le=50)
    filter: dict[str, Any] | None = Field(default=None, description="Metadata equality filter")


class SearchResult(BaseModel):
    """Single ranked search hit."""

    content: str
    metadata: dict[str, Any]
    score: float


class SearchResponse(BaseModel):
    """Response schema for semantic search."""

    success: bool = True
    results: list[SearchResult] = Field(default_factory=list)
