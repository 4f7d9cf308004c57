"""Pagination helpers."""

import math
from dataclasses import dataclass
from typing import Generic, TypeVar

from sqlalchemy.orm import Query

T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    """Zero-based page number and page size."""

    page: int
    size: int

    @property
    def offset(self) -> int:
        return self.page * self.size


@dataclass
class Page(Generic[T]):
    """One page of results plus totals over the whole result set."""

    content: list[T]
    page: int
    size: int
    total_elements: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_elements / self.size) if self.size else 0


def build_page_request(page: int | None, size: int | None, default_size: int) -> PageRequest:
    """Build a page request, falling back to page 0 and the default size."""
    if page is None or page < 0:
        page = 0
    if size is None or size <= 0:
        size = default_size
    return PageRequest(page=page, size=size)


def paginate(query: Query, page_request: PageRequest) -> Page:
    """Run an ordered query for one page and count the full result set."""
    total = query.order_by(None).count()
    content = query.offset(page_request.offset).limit(page_request.size).all()
    return Page(
        content=content,
        page=page_request.page,
        size=page_request.size,
        total_elements=total,
    )
