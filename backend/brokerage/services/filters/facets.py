"""Filter options offered to the visitor, taken from the fetched (unfiltered) collection."""

from typing import Iterable, List

from brokerage.schemas.listing import Facets, Listing
from brokerage.services.filters.predicates import completion_year_of


def _add(seen: List[str], value: str) -> None:
    if value and value not in seen:
        seen.append(value)


def collect_facets(listings: Iterable[Listing]) -> Facets:
    """Distinct locations, developers, amenities, views and completion years, first-seen order."""
    locations: List[str] = []
    developers: List[str] = []
    amenities: List[str] = []
    views: List[str] = []
    years: List[str] = []

    for listing in listings:
        _add(locations, listing.location)
        _add(developers, listing.developer_name)
        for amenity in listing.amenities:
            _add(amenities, amenity)
        for view in listing.views:
            _add(views, view)
        _add(years, completion_year_of(listing))

    return Facets(
        locations=locations,
        developers=developers,
        amenities=amenities,
        views=views,
        completion_years=years,
    )
