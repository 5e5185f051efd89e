"""
Per listing-type filter manifests.

Buy, rent, off-plan and projects pages share one evaluator; what differs between
them (which dimensions apply, fixed market type, slider default bounds) lives here.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Tuple

# Every dimension the evaluator knows about, cheapest checks first
ALL_DIMENSIONS: Tuple[str, ...] = (
    "market_type",
    "category",
    "lifestyle",
    "developer",
    "furnishing_status",
    "rental_period",
    "bedrooms",
    "bathrooms",
    "price",
    "area",
    "completion_year",
    "neighborhoods",
    "locations",
    "views",
    "amenities",
    "keyword",
)

SALE_PRICE_BOUNDS = (500_000, 20_000_000)
RENT_PRICE_BOUNDS = (50_000, 500_000)
AREA_BOUNDS = (500, 10_000)

# Listings per page, the same on every listing type
LISTING_PAGE_SIZE = 9

_BUY_DIMENSIONS = frozenset({
    "keyword", "category", "lifestyle", "developer", "neighborhoods", "locations",
    "price", "area", "bedrooms", "bathrooms", "amenities", "views",
})


@dataclass(frozen=True)
class ListingManifest:
    listing_type: str  # buy, rent, off-plan, projects
    path: str
    content_kind: str  # "property" or "project"
    dimensions: FrozenSet[str]
    price_bounds: Tuple[int, int] = SALE_PRICE_BOUNDS
    area_bounds: Tuple[int, int] = AREA_BOUNDS
    market_type: Optional[str] = None  # Fixed market type pushed to the content source

    def applies(self, dimension: str) -> bool:
        return dimension in self.dimensions


MANIFESTS: Dict[str, ListingManifest] = {
    "buy": ListingManifest(
        listing_type="buy",
        path="/buy",
        content_kind="property",
        market_type="buy",
        dimensions=_BUY_DIMENSIONS,
    ),
    "rent": ListingManifest(
        listing_type="rent",
        path="/rent",
        content_kind="property",
        market_type="rent",
        price_bounds=RENT_PRICE_BOUNDS,
        dimensions=_BUY_DIMENSIONS | {"furnishing_status", "rental_period"},
    ),
    "off-plan": ListingManifest(
        listing_type="off-plan",
        path="/off-plan",
        content_kind="property",
        market_type="off-plan",
        dimensions=frozenset({
            "keyword", "category", "lifestyle", "developer", "neighborhoods", "locations",
            "price", "bedrooms", "amenities", "completion_year",
        }),
    ),
    "projects": ListingManifest(
        listing_type="projects",
        path="/projects",
        content_kind="project",
        dimensions=frozenset({
            "keyword", "lifestyle", "developer", "market_type", "neighborhoods", "locations",
            "price", "completion_year",
        }),
    ),
}

# Market type tabs on the projects page
PROJECT_MARKET_TYPES = (
    {"id": "all", "label": "All Projects"},
    {"id": "off-plan", "label": "Off-Plan"},
    {"id": "secondary-market", "label": "Secondary Market"},
)


def get_manifest(listing_type: str) -> ListingManifest:
    """Look up a manifest; raises KeyError for unknown listing types."""
    return MANIFESTS[listing_type]
