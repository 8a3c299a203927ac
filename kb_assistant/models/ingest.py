"""
Ingestion request/response schemas.

Dependencies: pydantic
System role: Ingestion API contracts
"""

from pydantic import BaseModel, Field


class IngestRequest(BaseModel):
    """Request schema for ingesting a web page."""

    url: str = Field(description="Page URL to ingest")
    source_name: str | None = Field(default=None, description="Display name (defaults to page title)")


class IngestResponse(BaseModel):
    """Response schema for a completed ingestion."""

    success: bool = True
    message: str
    chunks_processed: int
    url: str
    title: str | None = None
