"""Filter criteria: one immutable value per request, every dimension either set or at its sentinel."""

import re
from typing import Any, List, Tuple

from pydantic import BaseModel, field_validator, model_validator

from brokerage.services.filters.manifest import ListingManifest

ALL = "all"
ANY = "any"

# Sentinel per single-valued dimension
SCALAR_SENTINELS = {
    "keyword": "",
    "category": ALL,
    "lifestyle": ALL,
    "developer": ALL,
    "market_type": ALL,
    "bedrooms": ANY,
    "bathrooms": ANY,
    "completion_year": ANY,
    "furnishing_status": ANY,
    "rental_period": ANY,
}
SET_DIMENSIONS = ("locations", "neighborhoods", "amenities", "views")
RANGE_DIMENSIONS = ("price", "area")

_BEDROOMS_RE = re.compile(r"^(any|studio|\d+\+?)$")
_BATHROOMS_RE = re.compile(r"^(any|\d+\+?)$")


class NumericRange(BaseModel):
    """Closed interval behind a slider; only filters when enabled and moved off its defaults."""

    low: int
    high: int
    enabled: bool = True
    default_low: int
    default_high: int

    class Config:
        frozen = True

    @model_validator(mode="before")
    @classmethod
    def _ordered_bounds(cls, data: Any) -> Any:
        # Negative bounds clamp to 0; a reversed pair is swapped
        if isinstance(data, dict) and isinstance(data.get("low"), int) and isinstance(data.get("high"), int):
            low, high = max(data["low"], 0), max(data["high"], 0)
            data = dict(data, low=min(low, high), high=max(low, high))
        return data

    @classmethod
    def default(cls, bounds: Tuple[int, int]) -> "NumericRange":
        return cls(low=bounds[0], high=bounds[1], default_low=bounds[0], default_high=bounds[1])

    @property
    def at_default_bounds(self) -> bool:
        return self.low == self.default_low and self.high == self.default_high

    @property
    def is_default(self) -> bool:
        return self.enabled and self.at_default_bounds

    @property
    def active(self) -> bool:
        return self.enabled and not self.at_default_bounds

    def contains(self, value: float) -> bool:
        return self.low <= value <= self.high

    def with_bounds(self, low: int, high: int) -> "NumericRange":
        return NumericRange(**dict(self.model_dump(), low=low, high=high))

    def with_enabled(self, enabled: bool) -> "NumericRange":
        return self.model_copy(update={"enabled": enabled})


class FilterCriteria(BaseModel):
    """
    User-selected constraints for one listing view.

    Never mutated: `replace()` returns a new instance, so a change always
    produces a new value that is re-encoded to a new URL.
    """

    keyword: str = ""
    category: str = ALL
    lifestyle: str = ALL
    developer: str = ALL
    market_type: str = ALL
    locations: Tuple[str, ...] = ()
    neighborhoods: Tuple[str, ...] = ()
    price: NumericRange
    area: NumericRange
    bedrooms: str = ANY
    bathrooms: str = ANY
    amenities: Tuple[str, ...] = ()
    views: Tuple[str, ...] = ()
    completion_year: str = ANY
    furnishing_status: str = ANY
    rental_period: str = ANY
    page: int = 1

    class Config:
        frozen = True

    @field_validator("keyword", mode="before")
    @classmethod
    def _strip_keyword(cls, v: Any) -> str:
        return str(v or "").strip()

    @field_validator("category", "lifestyle", "developer", "market_type", mode="before")
    @classmethod
    def _default_all(cls, v: Any) -> str:
        v = str(v or "").strip()
        return v or ALL

    @field_validator("completion_year", "furnishing_status", "rental_period", mode="before")
    @classmethod
    def _default_any(cls, v: Any) -> str:
        v = str(v or "").strip()
        return v or ANY

    @field_validator("bedrooms", mode="before")
    @classmethod
    def _bedroom_bucket(cls, v: Any) -> str:
        v = str(v or "").strip().lower()
        return v if _BEDROOMS_RE.match(v) else ANY

    @field_validator("bathrooms", mode="before")
    @classmethod
    def _bathroom_bucket(cls, v: Any) -> str:
        v = str(v or "").strip().lower()
        return v if _BATHROOMS_RE.match(v) else ANY

    @field_validator(*SET_DIMENSIONS, mode="before")
    @classmethod
    def _clean_set(cls, v: Any) -> Tuple[str, ...]:
        if v is None:
            return ()
        if isinstance(v, str):
            v = v.split(",")
        seen: List[str] = []
        for item in v:
            item = str(item).strip()
            if item and item not in seen:
                seen.append(item)
        return tuple(seen)

    @field_validator("page", mode="before")
    @classmethod
    def _positive_page(cls, v: Any) -> int:
        try:
            page = int(v)
        except (TypeError, ValueError):
            return 1
        return page if page >= 1 else 1

    @classmethod
    def defaults(cls, manifest: ListingManifest) -> "FilterCriteria":
        return cls(
            price=NumericRange.default(manifest.price_bounds),
            area=NumericRange.default(manifest.area_bounds),
        )

    def replace(self, **changes: Any) -> "FilterCriteria":
        data = {name: getattr(self, name) for name in type(self).model_fields}
        data.update(changes)
        return type(self).model_validate(data)

    def is_default(self, dimension: str) -> bool:
        if dimension in SCALAR_SENTINELS:
            return getattr(self, dimension) == SCALAR_SENTINELS[dimension]
        if dimension in SET_DIMENSIONS:
            return not getattr(self, dimension)
        if dimension in RANGE_DIMENSIONS:
            return getattr(self, dimension).is_default
        if dimension == "page":
            return self.page == 1
        raise KeyError(dimension)

    def is_active(self, dimension: str) -> bool:
        """True when the dimension constrains results (a disabled range never does)."""
        if dimension in RANGE_DIMENSIONS:
            return getattr(self, dimension).active
        return not self.is_default(dimension)

    def active_dimensions(self) -> List[str]:
        names = list(SCALAR_SENTINELS) + list(SET_DIMENSIONS) + list(RANGE_DIMENSIONS)
        return [name for name in names if self.is_active(name)]
