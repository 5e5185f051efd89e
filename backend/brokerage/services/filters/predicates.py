"""
Per-dimension listing predicates.

Each predicate answers one question: does this listing satisfy this one
dimension of the criteria? They are only called for active dimensions, so
none of them needs to check for the "all" / "any" sentinels.
"""

import re
from datetime import datetime
from typing import Callable, Dict, Optional

from brokerage.schemas.listing import Listing
from brokerage.services.filters.criteria import FilterCriteria

Predicate = Callable[[Listing, FilterCriteria], bool]

_YEAR_RE = re.compile(r"\d{4}")


def match_count_bucket(count: Optional[int], bucket: str) -> bool:
    """`"3"` is an exact match, `"4+"` an open-ended lower bound."""
    if count is None:
        return False
    if bucket.endswith("+"):
        return count >= int(bucket[:-1])
    return count == int(bucket)


def completion_year_of(listing: Listing) -> str:
    """
    Completion year of a listing: explicit field first, then the year of the
    parsed completion date, then the first 4-digit run in the date string.
    """
    if listing.completion_year:
        return listing.completion_year
    raw = listing.completion_date.strip()
    if not raw:
        return ""
    try:
        return str(datetime.fromisoformat(raw.replace("Z", "+00:00")).year)
    except ValueError:
        match = _YEAR_RE.search(raw)
        return match.group(0) if match else ""


def match_keyword(listing: Listing, criteria: FilterCriteria) -> bool:
    keyword = criteria.keyword.lower()
    fields = (
        listing.title,
        listing.location,
        listing.description,
        listing.type,
        listing.category,
        listing.developer_name,
    )
    return any(keyword in (field or "").lower() for field in fields)


def match_category(listing: Listing, criteria: FilterCriteria) -> bool:
    return listing.category == criteria.category


def match_market_type(listing: Listing, criteria: FilterCriteria) -> bool:
    return listing.market_type == criteria.market_type


def match_lifestyle(listing: Listing, criteria: FilterCriteria) -> bool:
    return listing.lifestyle is not None and listing.lifestyle.matches(criteria.lifestyle)


def match_developer(listing: Listing, criteria: FilterCriteria) -> bool:
    return listing.developer is not None and listing.developer.matches(criteria.developer)


def match_locations(listing: Listing, criteria: FilterCriteria) -> bool:
    # Substring, so "Palm" matches "Palm Jumeirah, Dubai"
    return any(location in listing.location for location in criteria.locations)


def match_neighborhoods(listing: Listing, criteria: FilterCriteria) -> bool:
    if listing.neighborhood is None or not listing.neighborhood.id:
        return False
    return listing.neighborhood.id in criteria.neighborhoods


def match_amenities(listing: Listing, criteria: FilterCriteria) -> bool:
    # Every selected amenity must be present
    return all(amenity in listing.amenities for amenity in criteria.amenities)


def match_views(listing: Listing, criteria: FilterCriteria) -> bool:
    # Any one selected view is enough
    return any(view in listing.views for view in criteria.views)


def match_bedrooms(listing: Listing, criteria: FilterCriteria) -> bool:
    if criteria.bedrooms == "studio":
        if listing.bedrooms == 0:
            return True
        return "studio" in (listing.type.lower(), listing.category.lower())
    return match_count_bucket(listing.bedrooms, criteria.bedrooms)


def match_bathrooms(listing: Listing, criteria: FilterCriteria) -> bool:
    return match_count_bucket(listing.bathrooms, criteria.bathrooms)


def match_price(listing: Listing, criteria: FilterCriteria) -> bool:
    return listing.price is not None and criteria.price.contains(listing.price)


def match_area(listing: Listing, criteria: FilterCriteria) -> bool:
    return listing.area is not None and criteria.area.contains(listing.area)


def match_furnishing_status(listing: Listing, criteria: FilterCriteria) -> bool:
    return listing.furnishing_status == criteria.furnishing_status


def match_rental_period(listing: Listing, criteria: FilterCriteria) -> bool:
    return listing.default_rental_period == criteria.rental_period


def match_completion_year(listing: Listing, criteria: FilterCriteria) -> bool:
    return completion_year_of(listing) == criteria.completion_year


PREDICATES: Dict[str, Predicate] = {
    "market_type": match_market_type,
    "category": match_category,
    "lifestyle": match_lifestyle,
    "developer": match_developer,
    "furnishing_status": match_furnishing_status,
    "rental_period": match_rental_period,
    "bedrooms": match_bedrooms,
    "bathrooms": match_bathrooms,
    "price": match_price,
    "area": match_area,
    "completion_year": match_completion_year,
    "neighborhoods": match_neighborhoods,
    "locations": match_locations,
    "views": match_views,
    "amenities": match_amenities,
    "keyword": match_keyword,
}
