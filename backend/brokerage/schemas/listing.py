from pydantic import BaseModel, field_validator
from typing import Optional, List, Any, Dict, Callable, Literal

MARKET_TYPES = ("buy", "rent", "off-plan", "secondary-market")


class ContentRef(BaseModel):
    """
    A CMS reference field resolved once at ingestion.

    The content source hands back developer / neighborhood / lifestyle / amenity
    values either as plain strings or as objects (dereferenced documents or bare
    `{"_ref": ...}` stubs). Both shapes land here so comparisons never branch on type.
    """

    kind: Literal["ref", "plain"]
    id: str = ""
    name: str = ""
    slug: str = ""

    @classmethod
    def parse(cls, value: Any) -> Optional["ContentRef"]:
        if value is None:
            return None
        if isinstance(value, str):
            value = value.strip()
            return cls(kind="plain", name=value) if value else None
        if isinstance(value, dict):
            slug = value.get("slug")
            if isinstance(slug, dict):
                slug = slug.get("current")
            ref_id = value.get("_id") or value.get("_ref") or ""
            name = value.get("name") or value.get("title") or ""
            if not (ref_id or name or slug):
                return None
            return cls(kind="ref", id=str(ref_id), name=str(name), slug=str(slug or ""))
        return None

    @property
    def display_name(self) -> str:
        return self.name or self.id

    def matches(self, value: str) -> bool:
        """Exact match against any of the keys the reference is known by."""
        if not value:
            return False
        return value in (self.id, self.name, self.slug)


def _ref_name(value: Any) -> str:
    ref = ContentRef.parse(value)
    return ref.name if ref else ""


def _number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if number != number or number < 0:  # NaN or negative
        return None
    return number


def _count(value: Any) -> Optional[int]:
    number = _number(value)
    return int(number) if number is not None else None


class Listing(BaseModel):
    """A property or project record, normalized for filtering and display."""

    id: str
    kind: Literal["property", "project"] = "property"
    slug: str = ""
    title: str = ""
    type: str = ""
    category: str = ""
    market_type: Optional[str] = None
    location: str = ""
    neighborhood: Optional[ContentRef] = None
    developer: Optional[ContentRef] = None
    lifestyle: Optional[ContentRef] = None
    price: Optional[float] = None
    area: Optional[float] = None  # sq.ft
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    amenities: List[str] = []
    views: List[str] = []
    features: List[str] = []
    completion_date: str = ""
    completion_year: str = ""
    furnishing_status: str = ""
    default_rental_period: str = ""  # weekly, monthly, yearly (rent only)
    price_weekly: Optional[float] = None
    price_monthly: Optional[float] = None
    price_yearly: Optional[float] = None
    description: str = ""
    images: List[str] = []
    main_image_url: str = ""
    is_featured: bool = False
    google_maps_url: str = ""

    @field_validator("market_type")
    @classmethod
    def _known_market_type(cls, v: Optional[str]) -> Optional[str]:
        return v if v in MARKET_TYPES else None

    @property
    def developer_name(self) -> str:
        return self.developer.display_name if self.developer else ""

    @property
    def neighborhood_name(self) -> str:
        return self.neighborhood.display_name if self.neighborhood else ""

    @classmethod
    def from_record(
        cls,
        record: Dict[str, Any],
        asset_url: Optional[Callable[[Any], str]] = None,
        placeholder: str = "/placeholder.svg",
    ) -> "Listing":
        """
        Build a Listing from a raw CMS record.
        Missing fields coalesce to empty values; image references are resolved
        through `asset_url` when given, otherwise kept only if already URLs.
        """
        def resolve(image: Any) -> str:
            if isinstance(image, str) and image.startswith(("http://", "https://", "/")):
                return image
            return asset_url(image) if asset_url else ""

        kind = "project" if record.get("_type") == "project" else "property"
        slug = record.get("slug")
        if isinstance(slug, dict):
            slug = slug.get("current")

        # amenityDocs lines up with amenities, null where an entry is not a live reference
        docs = record.get("amenityDocs") or []
        amenities = []
        for i, amenity in enumerate(record.get("amenities") or []):
            doc = docs[i] if i < len(docs) else None
            name = _ref_name(doc) or _ref_name(amenity)
            if name:
                amenities.append(name)

        images = [url for url in (resolve(img) for img in record.get("images") or [] if img) if url]
        main_image = record.get("mainImage")
        main_image_url = (resolve(main_image) if main_image else "") or placeholder

        completion_year = record.get("completionYear")

        return cls(
            id=str(record.get("_id") or ""),
            kind=kind,
            slug=str(slug or ""),
            title=record.get("title") or record.get("name") or "",
            type=record.get("type") or "",
            category=record.get("category") or "",
            market_type=record.get("marketType"),
            location=record.get("location") or "",
            neighborhood=ContentRef.parse(record.get("neighborhood")),
            developer=ContentRef.parse(record.get("developer")),
            lifestyle=ContentRef.parse(record.get("lifestyle")),
            price=_number(record.get("price")),
            area=_number(record.get("area")),
            bedrooms=_count(record.get("bedrooms")),
            bathrooms=_count(record.get("bathrooms")),
            amenities=amenities,
            views=[v for v in record.get("views") or [] if isinstance(v, str) and v],
            features=[f for f in record.get("features") or [] if isinstance(f, str) and f],
            completion_date=record.get("completionDate") or "",
            completion_year=str(completion_year) if completion_year not in (None, "") else "",
            furnishing_status=record.get("furnishingStatus") or "",
            default_rental_period=record.get("defaultRentalPeriod") or "",
            price_weekly=_number(record.get("priceWeekly")),
            price_monthly=_number(record.get("priceMonthly")),
            price_yearly=_number(record.get("priceYearly")),
            description=record.get("description") or "",
            images=images,
            main_image_url=main_image_url,
            is_featured=bool(record.get("isFeatured")),
            google_maps_url=record.get("googleMapsUrl") or "",
        )


class ListingCard(BaseModel):
    """Listing as rendered on a results grid."""

    id: str
    kind: str
    slug: str
    title: str
    category: str
    market_type: Optional[str] = None
    location: str
    neighborhood: str
    developer: str
    price: Optional[float] = None
    display_price: str
    area: Optional[float] = None
    display_area: str = ""
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    completion_year: str = ""
    main_image_url: str
    is_featured: bool = False


class ListingDetail(ListingCard):
    type: str = ""
    description: str = ""
    amenities: List[str] = []
    views: List[str] = []
    features: List[str] = []
    furnishing_status: str = ""
    default_rental_period: str = ""
    images: List[str] = []
    lifestyle: str = ""
    google_maps_url: str = ""


class Facets(BaseModel):
    locations: List[str] = []
    developers: List[str] = []
    amenities: List[str] = []
    views: List[str] = []
    completion_years: List[str] = []


class RangeSlider(BaseModel):
    """Price or area slider: its bounds, current position and display labels."""
    min: int
    max: int
    low: int
    high: int
    enabled: bool = True
    low_label: str
    high_label: str


class MarketTypeTab(BaseModel):
    id: str
    label: str
    url: str
    active: bool = False


class ListingPageResponse(BaseModel):
    listing_type: str
    items: List[ListingCard]
    total: int
    page: int
    page_size: int
    total_pages: int
    page_numbers: List[Any] = []  # ints plus "ellipsis-start" / "ellipsis-end"
    page_urls: Dict[int, str] = {}
    prev_url: Optional[str] = None
    next_url: Optional[str] = None
    reset_url: str
    query: str = ""  # canonical query string of the applied filters
    facets: Facets
    sliders: Dict[str, RangeSlider] = {}
    market_type_tabs: List[MarketTypeTab] = []  # projects page only
    available: bool = True  # False when the content source could not be reached


class NamedOption(BaseModel):
    id: str
    name: str
    slug: str = ""


class NeighborhoodDetail(BaseModel):
    id: str
    name: str
    slug: str = ""
    description: str = ""
    image_url: str = ""
    property_types: List[str] = []
    price_range: str = ""
    lifestyle: str = ""
    google_maps_url: str = ""
    properties: List[ListingCard] = []
