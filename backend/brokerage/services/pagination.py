"""
Pagination over an already-filtered listing sequence.

Out-of-range pages are lenient: they slice to an empty page rather than erroring.
"""

import math
from dataclasses import dataclass
from typing import Callable, Generic, List, Sequence, TypeVar, Union

from brokerage.services.filters.codec import build_url, encode
from brokerage.services.filters.criteria import FilterCriteria
from brokerage.services.filters.manifest import ListingManifest

T = TypeVar("T")

ELLIPSIS_START = "ellipsis-start"
ELLIPSIS_END = "ellipsis-end"


@dataclass(frozen=True)
class Page(Generic[T]):
    items: List[T]
    total: int
    total_pages: int
    current_page: int
    page_size: int
    start: int  # zero-based, inclusive
    end: int  # zero-based, exclusive
    url_builder: Callable[[int], str]

    def page_url(self, page_number: int) -> str:
        return self.url_builder(page_number)

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages


def paginate(
    items: Sequence[T],
    page_size: int,
    page_number: int,
    url_builder: Callable[[int], str],
) -> Page[T]:
    total = len(items)
    total_pages = math.ceil(total / page_size) if page_size > 0 else 0
    start = max(page_number - 1, 0) * page_size
    end = min(start + page_size, total)
    return Page(
        items=list(items[start:end]),
        total=total,
        total_pages=total_pages,
        current_page=page_number,
        page_size=page_size,
        start=start,
        end=max(end, start),
        url_builder=url_builder,
    )


def page_url(criteria: FilterCriteria, manifest: ListingManifest, page_number: int) -> str:
    """Every other active filter, plus page=n."""
    pairs = encode(criteria, include_page=False)
    pairs.append(("page", str(page_number)))
    return build_url(manifest.path, pairs)


def market_type_url(criteria: FilterCriteria, manifest: ListingManifest, market_type: str) -> str:
    """URL for a market-type tab: keeps other filters, drops the page."""
    updated = criteria.replace(market_type=market_type, page=1)
    return build_url(manifest.path, encode(updated, include_page=False))


def page_window(current_page: int, total_pages: int, max_visible: int = 5) -> List[Union[int, str]]:
    """
    Page numbers to show as buttons. First and last are always shown, with a
    three-page window around the current page and ellipsis markers for gaps.
    """
    if total_pages <= 1:
        return []
    if total_pages <= max_visible:
        return list(range(1, total_pages + 1))

    pages: List[Union[int, str]] = [1]
    start_page = max(2, current_page - 1)
    end_page = min(total_pages - 1, current_page + 1)

    if current_page <= 3:
        end_page = 4
    elif current_page >= total_pages - 2:
        start_page = total_pages - 3

    if start_page > 2:
        pages.append(ELLIPSIS_START)
    pages.extend(range(start_page, end_page + 1))
    if end_page < total_pages - 1:
        pages.append(ELLIPSIS_END)
    pages.append(total_pages)
    return pages
