"""Common schemas shared across all modules."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class SortDirection(str, Enum):
    """Sort direction enum."""

    ASC = "asc"
    DESC = "desc"


class BaseResponse(BaseModel, Generic[T]):
    """Base response schema for API responses."""

    success: bool = Field(
        default=True, description="Whether the request was successful"
    )
    message: str | None = Field(default=None, description="Response message")
    data: T | None = Field(default=None, description="Response data")
    error: Any | None = Field(default=None, description="Error details if any")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Response timestamp",
    )


class ListParams(BaseModel):
    """Search and sort parameters for list endpoints.

    Lists are returned whole; there is no pagination.
    """

    search: str | None = Field(default=None, description="Case-insensitive search")
    sort_field: str | None = Field(default=None, description="Field to sort by")
    sort_direction: SortDirection | None = Field(
        default=None, description="Sort direction"
    )
