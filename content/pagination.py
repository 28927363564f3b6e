"""Page math and the listing request/result descriptor."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import NamedTuple

from config import PAGE_DEFAULT_LIMIT, PAGE_MAX_LIMIT
from content.models import POST_TYPE_NAMES, PostType


class PageWindow(NamedTuple):
    total: int
    has_previous: bool
    has_next: bool


@dataclass
class PageInfo:
    """What a listing asked for and what it found.

    ``item_limit`` is the page size, ``item_total`` the number of matching
    items, ``item_count`` the number of items on this page and ``total`` the
    number of pages.
    """

    current: int = 1
    item_limit: int = PAGE_DEFAULT_LIMIT
    post_type: PostType = PostType.ALL
    tag: str = ""
    date_filter: datetime = field(default_factory=datetime.utcnow)
    total: int = 0
    item_total: int = 0
    item_count: int = 0

    @property
    def previous(self) -> int:
        return self.current - 1

    @property
    def next(self) -> int:
        return self.current + 1

    @property
    def has_previous(self) -> bool:
        return compute_page(self.item_total, self.item_limit, self.current).has_previous

    @property
    def has_next(self) -> bool:
        return compute_page(self.item_total, self.item_limit, self.current).has_next


def compute_page(item_total: int, item_limit: int, current: int) -> PageWindow:
    """Number of pages and neighbour flags. item_limit must already be >= 1."""
    total = math.ceil(item_total / item_limit)
    return PageWindow(total=total, has_previous=current > 1, has_next=current < total)


def clamp_limit(value: int) -> int:
    return max(1, min(value, PAGE_MAX_LIMIT))


def _parse_int(raw: str | int | None, default: int, minimum: int) -> int:
    try:
        value = int(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    return default if value < minimum else value


def parse_page(
    page: str | int | None = None,
    limit: str | int | None = None,
    post_type: str | None = None,
    tag: str | None = None,
    include_scheduled: bool = False,
    now: datetime | None = None,
) -> PageInfo:
    """Build a PageInfo from raw query values.

    A missing or non-positive page means page 1; the limit defaults to
    PAGE_DEFAULT_LIMIT and is clamped to [1, PAGE_MAX_LIMIT]; an unknown type
    name means every type. Scheduled posts are only listed when
    include_scheduled is set.
    """
    now = now or datetime.utcnow()
    date_filter = datetime.max if include_scheduled else now
    return PageInfo(
        current=_parse_int(page, 1, 1),
        item_limit=clamp_limit(_parse_int(limit, PAGE_DEFAULT_LIMIT, 1)),
        post_type=POST_TYPE_NAMES.get(post_type or "", PostType.ALL),
        tag=tag or "",
        date_filter=date_filter,
    )
