"""Page window arithmetic shared by the public search and the dashboard."""

from __future__ import annotations

import math
from dataclasses import dataclass

PAGE_SIZE = 10


def total_pages_for(total: int, page_size: int = PAGE_SIZE) -> int:
    return math.ceil(max(total, 0) / page_size)


def clamp_page(page: int, total_pages: int) -> int:
    """Clamp to [1, total_pages], or 1 when there are no pages."""
    if total_pages <= 0:
        return 1
    return min(max(page, 1), total_pages)


@dataclass(frozen=True)
class PageWindow:
    """Inclusive row range ``[start, end]`` for one page."""

    page: int = 1
    page_size: int = PAGE_SIZE

    def __post_init__(self):
        if self.page < 1:
            raise ValueError(f"page must be >= 1, got {self.page}")
        if self.page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {self.page_size}")

    @property
    def start(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def end(self) -> int:
        return self.page * self.page_size - 1

    @property
    def offset(self) -> int:
        return self.start

    @property
    def limit(self) -> int:
        return self.end - self.start + 1
