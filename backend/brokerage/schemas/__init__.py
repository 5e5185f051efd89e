from brokerage.schemas.listing import (
    ContentRef,
    Listing,
    ListingCard,
    ListingDetail,
    ListingPageResponse,
    Facets,
    MarketTypeTab,
    NamedOption,
    NeighborhoodDetail,
    RangeSlider,
)
from brokerage.schemas.inquiry import (
    ContactRequest,
    ContactResponse,
    NewsletterRequest,
    NewsletterResponse,
)
