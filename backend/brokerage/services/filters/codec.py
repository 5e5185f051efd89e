"""
Criteria <-> query-string codec.

Wire form: set-valued dimensions are comma-joined (a comma or percent sign inside
a token is percent-escaped), numbers are decimal strings, and anything at its
unset/default value is left out entirely so URLs stay canonical and shareable.
"""

import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import unquote, urlencode

from brokerage.services.filters.criteria import ALL, FilterCriteria, NumericRange
from brokerage.services.filters.manifest import ListingManifest

logger = logging.getLogger(__name__)

# (criteria field, query key, shape) in emit order
FIELDS: Tuple[Tuple[str, str, str], ...] = (
    ("keyword", "keyword", "scalar"),
    ("category", "category", "scalar"),
    ("lifestyle", "lifestyle", "scalar"),
    ("developer", "developer", "scalar"),
    ("market_type", "marketType", "scalar"),
    ("locations", "locations", "set"),
    ("neighborhoods", "neighborhoods", "set"),
    ("price", "", "range"),
    ("area", "", "range"),
    ("bedrooms", "bedrooms", "scalar"),
    ("bathrooms", "bathrooms", "scalar"),
    ("amenities", "amenities", "set"),
    ("views", "views", "set"),
    ("completion_year", "completionYear", "scalar"),
    ("furnishing_status", "furnishingStatus", "scalar"),
    ("rental_period", "rentalPeriod", "scalar"),
)
RANGE_KEYS = {
    "price": ("minPrice", "maxPrice", "enablePriceFilter"),
    "area": ("minArea", "maxArea", "enableAreaFilter"),
}

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")

Pairs = List[Tuple[str, str]]


def parse_int(value: Optional[str], default: int) -> int:
    """
    Parse the leading integer of a query value the way browsers' parseInt does.
    Unparseable or negative input yields `default`, never an exception.
    """
    if value is None:
        return default
    match = _LEADING_INT_RE.match(str(value))
    if not match:
        logger.debug(f"Unparseable numeric filter value {value!r}, using {default}")
        return default
    number = int(match.group(1))
    if number < 0:
        logger.debug(f"Negative numeric filter value {value!r}, using {default}")
        return default
    return number


def _values(params: Any, key: str) -> List[str]:
    """All raw values for `key`, whether params is a QueryParams/MultiDict or a plain mapping."""
    if hasattr(params, "getlist"):
        raw = params.getlist(key)
    else:
        raw = params.get(key)
        if raw is None:
            raw = []
        elif isinstance(raw, str):
            raw = [raw]
        else:
            raw = list(raw)
    return [str(v) for v in raw if v is not None]


def _first(params: Any, key: str) -> Optional[str]:
    values = _values(params, key)
    return values[0] if values else None


def escape_token(token: str) -> str:
    """Escape the characters that would otherwise split or corrupt a joined token."""
    return token.replace("%", "%25").replace(",", "%2C")


def join_list(tokens: Tuple[str, ...]) -> str:
    return ",".join(escape_token(token) for token in tokens)


def split_list(values: List[str]) -> List[str]:
    """Split comma-joined values, dropping empty tokens (a trailing comma adds nothing)."""
    tokens: List[str] = []
    for value in values:
        for token in value.split(","):
            token = unquote(token).strip()
            if token:
                tokens.append(token)
    return tokens


def _decode_range(params: Any, dimension: str, bounds: Tuple[int, int]) -> NumericRange:
    min_key, max_key, enable_key = RANGE_KEYS[dimension]
    enabled = (_first(params, enable_key) or "").lower() != "false"
    low = parse_int(_first(params, min_key), bounds[0])
    high = parse_int(_first(params, max_key), bounds[1])
    return NumericRange(
        low=low,
        high=high,
        enabled=enabled,
        default_low=bounds[0],
        default_high=bounds[1],
    )


def decode(params: Mapping[str, Any], manifest: ListingManifest) -> FilterCriteria:
    """Build criteria from query parameters; unknown keys are ignored."""
    bounds = {"price": manifest.price_bounds, "area": manifest.area_bounds}
    data: Dict[str, Any] = {}
    for field, key, shape in FIELDS:
        if shape == "scalar":
            data[field] = _first(params, key)
        elif shape == "set":
            data[field] = split_list(_values(params, key))
        else:
            data[field] = _decode_range(params, field, bounds[field])
    data["page"] = parse_int(_first(params, "page"), 1) or 1
    return FilterCriteria(**data)


def _encode_range(pairs: Pairs, value: NumericRange, dimension: str) -> None:
    min_key, max_key, enable_key = RANGE_KEYS[dimension]
    if not value.enabled:
        pairs.append((enable_key, "false"))
        return
    if not value.at_default_bounds:
        pairs.append((min_key, str(value.low)))
        pairs.append((max_key, str(value.high)))


def encode(criteria: FilterCriteria, include_page: bool = True) -> Pairs:
    """Canonical (key, value) pairs for criteria; defaults are omitted."""
    pairs: Pairs = []
    for field, key, shape in FIELDS:
        value = getattr(criteria, field)
        if shape == "range":
            _encode_range(pairs, value, field)
        elif not criteria.is_default(field):
            pairs.append((key, join_list(value) if shape == "set" else value))
    if include_page and criteria.page != 1:
        pairs.append(("page", str(criteria.page)))
    return pairs


def to_query_string(criteria: FilterCriteria, include_page: bool = True) -> str:
    return urlencode(encode(criteria, include_page=include_page))


def build_url(path: str, pairs: Pairs) -> str:
    query = urlencode(pairs)
    return f"{path}?{query}" if query else path


def pushdown_filters(criteria: FilterCriteria, manifest: ListingManifest) -> Dict[str, Any]:
    """
    The coarse subset of criteria the content source can evaluate itself.
    Everything else is applied in memory after the fetch.
    """
    filters: Dict[str, Any] = {}
    if manifest.market_type:
        filters["marketType"] = manifest.market_type
    elif manifest.applies("market_type") and criteria.market_type != ALL:
        filters["marketType"] = criteria.market_type

    if manifest.applies("neighborhoods") and len(criteria.neighborhoods) == 1:
        # The source filters on a single neighborhood; several are matched in memory
        filters["neighborhood"] = criteria.neighborhoods[0]

    for field in ("developer", "category", "lifestyle"):
        value = getattr(criteria, field)
        if manifest.applies(field) and value != ALL:
            filters[field] = value

    if manifest.applies("price") and criteria.price.active:
        filters["minPrice"] = criteria.price.low
        filters["maxPrice"] = criteria.price.high
    return filters
