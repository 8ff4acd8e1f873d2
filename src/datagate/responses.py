"""Response shapes handed to the HTTP layer and other collaborators."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

FindOneResponseObject = dict[str, Any]


class PageLinks(BaseModel):
    """Opaque page tokens relative to the current page."""

    current: str
    prev: str | None = None
    next: str | None = None
    first: str | None = None
    last: str


class PaginationBlock(BaseModel):
    total: int
    page: PageLinks


class FindManyResponse(BaseModel):
    """A page of records plus paging metadata."""

    limit: int
    offset: int
    total: int
    pagination: PaginationBlock
    data: list[dict[str, Any]] = Field(default_factory=list)


class DeleteResponse(BaseModel):
    deleted: int


class IsUniqueResponse(BaseModel):
    valid: bool
    message: str | None = None
