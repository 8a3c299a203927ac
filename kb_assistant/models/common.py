"""
Common response models and utilities.

Success/failure envelope shared by every API response.

Dependencies: pydantic
System role: Common API response structures
"""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error response schema."""

    success: bool = False
    message: str = Field(description="Error message")
    details: dict | None = Field(default=None, description="Additional error context")
