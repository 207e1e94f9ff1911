from typing import Generic, TypeVar

from fastapi import Query
from pydantic import BaseModel, ConfigDict, Field, computed_field

T = TypeVar("T")


class PaginationParams(BaseModel):
    """Query params for list endpoints."""

    model_config = ConfigDict(extra="forbid")

    page: int = Field(1, ge=1, description="Page number (1-based)")
    size: int = Field(50, ge=1, le=100, description="Items per page")


def pagination_params(
    page: int = Query(1, ge=1, description="Page number (1-based)"),
    size: int = Query(50, ge=1, le=100, description="Items per page"),
) -> PaginationParams:
    return PaginationParams(page=page, size=size)


class PaginatedResponse(BaseModel, Generic[T]):
    """Wrapped list with total and pagination metadata."""

    model_config = ConfigDict(from_attributes=True)

    items: list[T]
    total: int
    page: int
    size: int

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_more(self) -> bool:
        return self.page * self.size < self.total
