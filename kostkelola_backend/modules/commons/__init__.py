"""Common schemas and utilities shared across modules."""

from .dependencies import ListQuery, list_params
from .schemas import (
    BaseResponse,
    ListParams,
    SortDirection,
)

__all__ = [
    "BaseResponse",
    "ListParams",
    "ListQuery",
    "SortDirection",
    "list_params",
]
