"""Filter & pagination engine shared by both catalog verticals.

A filter is a bundle of optional predicates plus ``page``/``page_size``.
Absent predicates (``None`` or empty string) are vacuously true; present
ones are ANDed by the concrete ``matches`` implementation.
"""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, TypeVar

T = TypeVar("T")
F = TypeVar("F", bound="BaseFilter")

MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class BaseFilter(ABC):
    """Pagination fields common to every entity filter.

    ``page`` is zero-based.  ``page_size == 0`` disables pagination.
    """

    page: int = 0
    page_size: int = 0

    def __post_init__(self) -> None:
        if self.page < 0:
            raise ValueError("page must be zero or greater.")
        if self.page_size < 0:
            raise ValueError("page_size must be zero or greater.")

    @property
    def paginated(self) -> bool:
        return self.page_size > 0

    def without_pagination(self: F) -> F:
        """Same selective predicates, paging fields cleared."""
        return dataclasses.replace(self, page=0, page_size=0)

    @abstractmethod
    def matches(self, entity: Any) -> bool:
        """True iff every present predicate holds for ``entity``."""


def in_range(value: float, low: Optional[float], high: Optional[float]) -> bool:
    """Inclusive range check; a missing bound is unconstrained."""
    if low is not None and value < low:
        return False
    if high is not None and value > high:
        return False
    return True


def contains_ignore_case(value: Optional[str], needle: str) -> bool:
    return needle.casefold() in (value or "").casefold()


def paginate(items: Sequence[T], page: int, page_size: int) -> List[T]:
    """Slice ``items`` to the requested window.

    The window is ``[page * page_size, page * page_size + page_size)``,
    clamped to the sequence end; a start past the end yields ``[]``.
    """
    if page_size <= 0:
        return list(items)
    start = page * page_size
    if start >= len(items):
        return []
    return list(items[start : start + page_size])
