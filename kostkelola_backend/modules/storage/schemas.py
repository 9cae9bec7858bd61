"""Storage schemas."""

from pydantic import BaseModel, Field


class ImageUploadResponse(BaseModel):
    url: str


class ImageDeleteRequest(BaseModel):
    url: str = Field(..., min_length=1)
