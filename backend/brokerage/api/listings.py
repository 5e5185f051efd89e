from fastapi import APIRouter, Depends, HTTPException, Request

from brokerage.api.dependencies import get_catalog
from brokerage.schemas.listing import ListingPageResponse
from brokerage.services.catalog import ListingCatalog
from brokerage.services.filters.manifest import MANIFESTS

router = APIRouter()


@router.get("/{listing_type}", response_model=ListingPageResponse)
def browse_listings(listing_type: str, request: Request, catalog: ListingCatalog = Depends(get_catalog)):
    """
    Filtered, paginated listings for buy / rent / off-plan / projects.
    Filters come from the query string, e.g. ?category=villa&bedrooms=4%2B&page=2
    """
    if listing_type not in MANIFESTS:
        raise HTTPException(status_code=404, detail=f"Unknown listing type: {listing_type}")
    return catalog.browse(listing_type, request.query_params)
