"""Shared request dependencies."""

from typing import Annotated

from fastapi import Depends, Query

from .schemas import ListParams, SortDirection


def list_params(
    search: str | None = Query(None, max_length=200),
    sort_field: str | None = Query(None, max_length=64),
    sort_direction: SortDirection | None = Query(None),
) -> ListParams:
    """Search and sort query parameters of list endpoints."""
    return ListParams(
        search=search or None, sort_field=sort_field, sort_direction=sort_direction
    )


ListQuery = Annotated[ListParams, Depends(list_params)]
