"""Response envelope shared by all endpoints."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel

DataT = TypeVar("DataT")


class ApiResponse(BaseModel, Generic[DataT]):
    success: bool = True
    message: str | None = None
    data: DataT | None = None


class PageRef(BaseModel):
    page: int
    limit: int


class Pagination(BaseModel):
    next: PageRef | None = None
    prev: PageRef | None = None
