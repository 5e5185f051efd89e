"""
Filter-state controller.

The URL is the source of truth: committed criteria are always `decode(query)`,
and the controller only holds a draft on top of it. Coarse dimensions
(category, lifestyle, developer, market type) commit as soon as they change;
fine dimensions (sliders, checkbox lists, dropdown buckets) wait for `apply()`.
"""

import logging
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Tuple

from brokerage.services.filters.codec import build_url, decode, encode
from brokerage.services.filters.criteria import ALL, ANY, FilterCriteria
from brokerage.services.filters.manifest import ListingManifest

logger = logging.getLogger(__name__)


class FilterState(str, Enum):
    IDLE = "idle"
    EDITING = "editing"  # draft differs from committed
    COMMITTED = "committed"


def _toggle(values: Tuple[str, ...], value: str) -> Tuple[str, ...]:
    if value in values:
        return tuple(v for v in values if v != value)
    return values + (value,)


class FilterStateController:
    def __init__(
        self,
        manifest: ListingManifest,
        query: Optional[Mapping[str, Any]] = None,
        navigate: Optional[Callable[[str], None]] = None,
        on_filter_change: Optional[Callable[[FilterCriteria], None]] = None,
    ):
        self.manifest = manifest
        self.navigate = navigate
        self.on_filter_change = on_filter_change
        self.committed = decode(query or {}, manifest)
        self.draft = self.committed
        self.url = build_url(manifest.path, encode(self.committed))
        self.state = FilterState.IDLE

    # --- Committing ---

    def _commit(self, criteria: FilterCriteria) -> FilterCriteria:
        self.committed = criteria
        self.draft = criteria
        self.url = build_url(self.manifest.path, encode(criteria))
        self.state = FilterState.COMMITTED
        logger.debug(f"Committed {self.manifest.listing_type} filters: {self.url}")
        if self.navigate:
            self.navigate(self.url)
        if self.on_filter_change:
            self.on_filter_change(criteria)
        return criteria

    def _edit(self, **changes: Any) -> FilterCriteria:
        self.draft = self.draft.replace(**changes)
        self.state = FilterState.EDITING if self.draft != self.committed else FilterState.IDLE
        return self.draft

    def _set_coarse(self, dimension: str, value: str) -> FilterCriteria:
        if getattr(self.committed, dimension) == value:
            return self.committed
        pending = self.draft.replace(**{dimension: value, "page": 1})
        committed = self._commit(self.committed.replace(**{dimension: value, "page": 1}))
        # Uncommitted fine edits survive a coarse commit
        self.draft = pending
        if self.draft != self.committed:
            self.state = FilterState.EDITING
        return committed

    def apply(self) -> FilterCriteria:
        """Commit every pending draft change."""
        return self._commit(self.draft.replace(page=1))

    def reset(self) -> FilterCriteria:
        """Back to every default; the URL becomes the bare path."""
        defaults = self._commit(FilterCriteria.defaults(self.manifest))
        self.state = FilterState.IDLE
        return defaults

    def discard(self) -> FilterCriteria:
        """Drop the draft without committing."""
        self.draft = self.committed
        self.state = FilterState.IDLE
        return self.draft

    def go_to_page(self, page_number: int) -> FilterCriteria:
        return self._commit(self.committed.replace(page=page_number))

    # --- Coarse dimensions: commit immediately ---

    def set_category(self, category: str) -> FilterCriteria:
        return self._set_coarse("category", category or ALL)

    def set_lifestyle(self, lifestyle: str) -> FilterCriteria:
        return self._set_coarse("lifestyle", lifestyle or ALL)

    def set_developer(self, developer: str) -> FilterCriteria:
        return self._set_coarse("developer", developer or ALL)

    def set_market_type(self, market_type: str) -> FilterCriteria:
        return self._set_coarse("market_type", market_type or ALL)

    def submit_keyword(self, keyword: str) -> FilterCriteria:
        """Search box submit."""
        return self._set_coarse("keyword", (keyword or "").strip())

    # --- Fine dimensions: draft only until apply() ---

    def toggle_location(self, location: str) -> FilterCriteria:
        return self._edit(locations=_toggle(self.draft.locations, location))

    def toggle_neighborhood(self, neighborhood_id: str) -> FilterCriteria:
        return self._edit(neighborhoods=_toggle(self.draft.neighborhoods, neighborhood_id))

    def toggle_amenity(self, amenity: str) -> FilterCriteria:
        return self._edit(amenities=_toggle(self.draft.amenities, amenity))

    def toggle_view(self, view: str) -> FilterCriteria:
        return self._edit(views=_toggle(self.draft.views, view))

    def set_price_range(self, low: int, high: int) -> FilterCriteria:
        return self._edit(price=self.draft.price.with_bounds(low, high))

    def set_area_range(self, low: int, high: int) -> FilterCriteria:
        return self._edit(area=self.draft.area.with_bounds(low, high))

    def enable_price_filter(self, enabled: bool) -> FilterCriteria:
        return self._edit(price=self.draft.price.with_enabled(enabled))

    def enable_area_filter(self, enabled: bool) -> FilterCriteria:
        return self._edit(area=self.draft.area.with_enabled(enabled))

    def set_bedrooms(self, bedrooms: str) -> FilterCriteria:
        return self._edit(bedrooms=bedrooms or ANY)

    def set_bathrooms(self, bathrooms: str) -> FilterCriteria:
        return self._edit(bathrooms=bathrooms or ANY)

    def set_completion_year(self, year: str) -> FilterCriteria:
        return self._edit(completion_year=year or ANY)

    def set_furnishing_status(self, status: str) -> FilterCriteria:
        return self._edit(furnishing_status=status or ANY)

    def set_rental_period(self, period: str) -> FilterCriteria:
        return self._edit(rental_period=period or ANY)
