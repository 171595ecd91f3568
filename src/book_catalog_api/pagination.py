"""
Page arithmetic for the book listing.

Pages are 1-indexed and of fixed size. A page past the end is not an error:
it simply holds no records.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Optional

DEFAULT_PER_PAGE = 25

# Leading integer of a query value, e.g. "2", "+3", "-1", "4abc"
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_page_number(value: Optional[str]) -> int:
    """
    Interpret a raw ``page`` query value.

    Args:
        value: The raw query string value, or None when absent

    Returns:
        The requested page, never less than 1

    Example:
        >>> parse_page_number("3")
        3
        >>> parse_page_number("abc")
        1
        >>> parse_page_number("-2")
        1
    """
    if value is None:
        return 1
    match = _LEADING_INT.match(value)
    if not match:
        return 1
    return max(1, int(match.group(1)))


@dataclass(frozen=True)
class PageWindow:
    """Position of one page within a collection of ``total`` records."""

    page: int
    per_page: int
    total: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page

    @property
    def limit(self) -> int:
        return self.per_page

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.per_page)

    @property
    def descriptor(self) -> str:
        return f"{self.page} of {self.total_pages}"


def page_window(page: int, total: int, per_page: int = DEFAULT_PER_PAGE) -> PageWindow:
    if per_page < 1:
        raise ValueError(f"per_page must be positive, got {per_page}")
    return PageWindow(page=max(1, page), per_page=per_page, total=max(0, total))
