"""
Listing catalog.

Drives one listing page request end to end:
  1. decode the query string into criteria
  2. fetch the collection with the coarse pushdown subset
  3. normalize records into Listings
  4. evaluate every active dimension in memory
  5. slice out the requested page

A content source failure never fails the page: it renders as an empty
collection with `available=False`.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from brokerage.config import settings
from brokerage.schemas.listing import (
    Listing,
    ListingCard,
    ListingDetail,
    ListingPageResponse,
    MarketTypeTab,
    NamedOption,
    NeighborhoodDetail,
    RangeSlider,
)
from brokerage.services.content.sanity import ContentSourceError, SanityClient
from brokerage.services.filters.codec import decode, pushdown_filters, to_query_string
from brokerage.services.filters.criteria import FilterCriteria, NumericRange
from brokerage.services.filters.evaluator import ListingFilter
from brokerage.services.filters.facets import collect_facets
from brokerage.services.filters.manifest import (
    LISTING_PAGE_SIZE,
    PROJECT_MARKET_TYPES,
    ListingManifest,
    get_manifest,
)
from brokerage.services.filters.predicates import completion_year_of
from brokerage.services.formatting import format_area, format_price_short, format_rental_price
from brokerage.services.pagination import market_type_url, page_url, page_window, paginate

logger = logging.getLogger(__name__)


def refine(listings: List[Listing], criteria: FilterCriteria, manifest: ListingManifest) -> List[Listing]:
    """Re-filter an already fetched collection; no fetch happens."""
    return ListingFilter(manifest, criteria).filter_listings(listings)


def to_card(listing: Listing) -> ListingCard:
    return ListingCard(
        id=listing.id,
        kind=listing.kind,
        slug=listing.slug,
        title=listing.title,
        category=listing.category,
        market_type=listing.market_type,
        location=listing.location,
        neighborhood=listing.neighborhood_name,
        developer=listing.developer_name,
        price=listing.price,
        display_price=format_rental_price(listing),
        area=listing.area,
        display_area=format_area(listing.area),
        bedrooms=listing.bedrooms,
        bathrooms=listing.bathrooms,
        completion_year=completion_year_of(listing),
        main_image_url=listing.main_image_url,
        is_featured=listing.is_featured,
    )


def to_detail(listing: Listing) -> ListingDetail:
    card = to_card(listing)
    return ListingDetail(
        **card.model_dump(),
        type=listing.type,
        description=listing.description,
        amenities=listing.amenities,
        views=listing.views,
        features=listing.features,
        furnishing_status=listing.furnishing_status,
        default_rental_period=listing.default_rental_period,
        images=listing.images,
        lifestyle=listing.lifestyle.display_name if listing.lifestyle else "",
        google_maps_url=listing.google_maps_url,
    )


def _option(record: Dict[str, Any]) -> Optional[NamedOption]:
    name = record.get("name") or record.get("title") or ""
    if not record.get("_id") or not name:
        return None
    return NamedOption(id=record["_id"], name=name, slug=record.get("slug") or "")


def _slider(value: NumericRange, label) -> RangeSlider:
    return RangeSlider(
        min=value.default_low,
        max=value.default_high,
        low=value.low,
        high=value.high,
        enabled=value.enabled,
        low_label=label(value.low),
        high_label=label(value.high),
    )


def sliders(criteria: FilterCriteria, manifest: ListingManifest) -> Dict[str, RangeSlider]:
    """Price and area sliders for the dimensions this listing type shows."""
    result: Dict[str, RangeSlider] = {}
    if manifest.applies("price"):
        result["price"] = _slider(criteria.price, format_price_short)
    if manifest.applies("area"):
        result["area"] = _slider(criteria.area, format_area)
    return result


def market_type_tabs(criteria: FilterCriteria, manifest: ListingManifest) -> List[MarketTypeTab]:
    """Tabs for pages where the visitor picks the market type (projects)."""
    if manifest.market_type or not manifest.applies("market_type"):
        return []
    return [
        MarketTypeTab(
            id=tab["id"],
            label=tab["label"],
            url=market_type_url(criteria, manifest, tab["id"]),
            active=criteria.market_type == tab["id"],
        )
        for tab in PROJECT_MARKET_TYPES
    ]


class ListingCatalog:
    """Listing pages, detail lookups and filter options on top of the content client."""

    def __init__(self, client: SanityClient):
        self.client = client
        self.page_size = LISTING_PAGE_SIZE

    def _normalize(self, records: List[Dict[str, Any]]) -> List[Listing]:
        return [
            Listing.from_record(
                record,
                asset_url=self.client.resolve_asset_url,
                placeholder=settings.placeholder_image_url,
            )
            for record in records
        ]

    def fetch(self, manifest: ListingManifest, criteria: FilterCriteria) -> Tuple[List[Listing], bool]:
        """
        Fetch and normalize the coarse-filtered collection for a listing type.

        Returns:
            Tuple of (listings, available); available is False when the
            content source failed and the collection is empty because of it.
        """
        filters = pushdown_filters(criteria, manifest)
        try:
            records = self.client.fetch_collection(manifest.content_kind, filters)
        except ContentSourceError as e:
            logger.warning(f"Could not fetch {manifest.content_kind} collection (filters={filters}): {e}")
            return [], False
        return self._normalize(records), True

    def browse(self, listing_type: str, query: Mapping[str, Any]) -> ListingPageResponse:
        """
        Build a listing page from URL query parameters.
        Raises KeyError for an unknown listing type.
        """
        manifest = get_manifest(listing_type)
        criteria = decode(query, manifest)

        listings, available = self.fetch(manifest, criteria)
        facets = collect_facets(listings)
        matching = refine(listings, criteria, manifest)

        page = paginate(
            matching,
            self.page_size,
            criteria.page,
            lambda n: page_url(criteria, manifest, n),
        )
        page_numbers = page_window(page.current_page, page.total_pages)
        logger.info(
            f"{listing_type}: {page.total} of {len(listings)} listings match, "
            f"page {page.current_page}/{page.total_pages}"
        )

        return ListingPageResponse(
            listing_type=listing_type,
            items=[to_card(listing) for listing in page.items],
            total=page.total,
            page=page.current_page,
            page_size=page.page_size,
            total_pages=page.total_pages,
            page_numbers=page_numbers,
            page_urls={n: page.page_url(n) for n in page_numbers if isinstance(n, int)},
            prev_url=page.page_url(page.current_page - 1) if page.has_previous else None,
            next_url=page.page_url(page.current_page + 1) if page.has_next else None,
            reset_url=manifest.path,
            query=to_query_string(criteria),
            facets=facets,
            sliders=sliders(criteria, manifest),
            market_type_tabs=market_type_tabs(criteria, manifest),
            available=available,
        )

    def get_listing(self, kind: str, slug: str) -> Optional[Listing]:
        """A single property or project by slug or id; None when missing or unreachable."""
        try:
            record = self.client.fetch_one(kind, slug)
        except ContentSourceError as e:
            logger.warning(f"Could not fetch {kind} '{slug}': {e}")
            return None
        if record is None:
            return None
        return self._normalize([record])[0]

    # --- Filter options ---

    def _options(self, name: str, fetch) -> List[NamedOption]:
        try:
            records = fetch()
        except ContentSourceError as e:
            logger.warning(f"Could not fetch {name}: {e}")
            return []
        return [option for option in (_option(r) for r in records if isinstance(r, dict)) if option]

    def neighborhoods(self) -> List[NamedOption]:
        return self._options("neighborhoods", self.client.fetch_neighborhoods)

    def developers(self) -> List[NamedOption]:
        return self._options("developers", self.client.fetch_developers)

    def lifestyles(self) -> List[NamedOption]:
        return self._options("lifestyles", self.client.fetch_lifestyles)

    def neighborhood(self, slug: str) -> Optional[NeighborhoodDetail]:
        """A neighborhood with the properties located in it."""
        try:
            record = self.client.fetch_neighborhood(slug)
            if record is None:
                return None
            properties = self.client.fetch_collection("property", {"neighborhood": record.get("_id")})
        except ContentSourceError as e:
            logger.warning(f"Could not fetch neighborhood '{slug}': {e}")
            return None

        lifestyle = record.get("lifestyle") or {}
        image = record.get("image")
        return NeighborhoodDetail(
            id=record.get("_id") or "",
            name=record.get("name") or "",
            slug=record.get("slug") or "",
            description=record.get("description") or "",
            image_url=self.client.resolve_asset_url(image) if image else settings.placeholder_image_url,
            property_types=[t for t in record.get("propertyTypes") or [] if isinstance(t, str)],
            price_range=record.get("priceRange") or "",
            lifestyle=(lifestyle.get("name") or lifestyle.get("title") or "") if isinstance(lifestyle, dict) else "",
            google_maps_url=record.get("googleMapsUrl") or "",
            properties=[to_card(listing) for listing in self._normalize(properties)],
        )
