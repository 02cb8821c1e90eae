"""Page requests, pages and the pagination response headers.

Clients window list results with ``page`` (0-based), ``size`` and any number
of ``sort=property[,asc|desc]`` query parameters. The response advertises the
total row count in ``X-Total-Count`` and neighbouring pages in an RFC 5988
``Link`` header::

    Link: </api/scores?page=1&size=20>; rel="next",</api/scores?page=4&size=20>; rel="last",</api/scores?page=0&size=20>; rel="first"
"""

from __future__ import annotations

from dataclasses import dataclass, field
from math import ceil
from typing import Generic, Iterable, List, Literal, Sequence, TypeVar

T = TypeVar("T")

Direction = Literal["asc", "desc"]

TOTAL_COUNT_HEADER = "X-Total-Count"
LINK_HEADER = "Link"

# OFFSET is bound as a signed 64-bit integer
MAX_OFFSET = 2**63 - 1


@dataclass(frozen=True, slots=True)
class SortOrder:
    prop: str
    direction: Direction = "asc"

    @classmethod
    def parse(cls, raw: str) -> "SortOrder":
        """Parse ``"points,desc"``; direction defaults to ascending."""
        prop, _, direction = raw.partition(",")
        prop = prop.strip()
        direction = direction.strip().lower() or "asc"
        if direction not in ("asc", "desc"):
            raise ValueError(f"Unknown sort direction: {direction!r}")
        return cls(prop=prop, direction=direction)  # type: ignore[arg-type]


@dataclass(frozen=True, slots=True)
class PageRequest:
    page: int = 0
    size: int = 20
    sort: tuple[SortOrder, ...] = ()

    def __post_init__(self) -> None:
        if self.page < 0:
            raise ValueError("page must not be negative")
        if self.size < 1:
            raise ValueError("size must be at least 1")
        if self.page * self.size > MAX_OFFSET:
            raise ValueError("page is out of range")

    @property
    def offset(self) -> int:
        return self.page * self.size

    @classmethod
    def from_params(cls, page: int, size: int, sort: Iterable[str] | None = None) -> "PageRequest":
        orders = tuple(SortOrder.parse(item) for item in (sort or ()) if item.strip())
        return cls(page=page, size=size, sort=orders)


@dataclass(slots=True)
class Page(Generic[T]):
    content: List[T]
    number: int
    size: int
    total_elements: int
    sort: Sequence[SortOrder] = field(default_factory=tuple)

    @property
    def total_pages(self) -> int:
        if self.size <= 0:
            return 1
        return ceil(self.total_elements / self.size)

    @property
    def has_next(self) -> bool:
        return self.number + 1 < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.number > 0


def _page_uri(base_url: str, page: int, size: int) -> str:
    return f"{base_url}?page={page}&size={size}"


def generate_pagination_headers(page: Page, base_url: str) -> dict[str, str]:
    """Build ``X-Total-Count`` and ``Link`` headers for ``page``."""

    links: list[str] = []
    if page.has_next:
        links.append(f'<{_page_uri(base_url, page.number + 1, page.size)}>; rel="next"')
    if page.has_previous:
        links.append(f'<{_page_uri(base_url, page.number - 1, page.size)}>; rel="prev"')
    last_page = page.total_pages - 1 if page.total_pages > 0 else 0
    links.append(f'<{_page_uri(base_url, last_page, page.size)}>; rel="last"')
    links.append(f'<{_page_uri(base_url, 0, page.size)}>; rel="first"')
    return {
        TOTAL_COUNT_HEADER: str(page.total_elements),
        LINK_HEADER: ",".join(links),
    }


__all__ = [
    "SortOrder",
    "PageRequest",
    "Page",
    "generate_pagination_headers",
    "TOTAL_COUNT_HEADER",
    "LINK_HEADER",
]
