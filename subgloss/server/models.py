"""Pydantic response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for response serialization
and automatic OpenAPI documentation.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- Response models never expose internal implementation details
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class AnnotationResponse(BaseModel):
    """Result of annotating one uploaded subtitle file.

    RULES:
    - content is the annotated ASS script
    - content is null when no caption received an annotation; clients
      should keep their original file in that case
    """

    filename: str = Field(description="Original uploaded filename.")
    captions: int = Field(description="Number of captions in the file.")
    annotated_captions: int = Field(description="Captions that received at least one definition.")
    content: Optional[str] = Field(
        default=None,
        description="Annotated ASS subtitle content, or null when nothing was annotated.",
    )

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "filename": "episode01.srt",
                "captions": 312,
                "annotated_captions": 187,
                "content": "[Script Info]\n...",
            }
        ]
    }}


class ErrorResponse(BaseModel):
    """Standard error response body.

    RULES:
    - detail is always a human-readable error message
    """

    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
    dictionary_entries: int = Field(description="Number of entries in the loaded dictionary.")
