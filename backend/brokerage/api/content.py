from fastapi import APIRouter, Depends, HTTPException
from typing import List

from brokerage.api.dependencies import get_catalog
from brokerage.schemas.listing import ListingDetail, NamedOption, NeighborhoodDetail
from brokerage.services.catalog import ListingCatalog, to_detail

router = APIRouter()


@router.get("/properties/{slug}", response_model=ListingDetail)
def get_property(slug: str, catalog: ListingCatalog = Depends(get_catalog)):
    """Property detail by slug or id."""
    listing = catalog.get_listing("property", slug)
    if not listing:
        raise HTTPException(status_code=404, detail="Property not found")
    return to_detail(listing)


@router.get("/projects/{slug}", response_model=ListingDetail)
def get_project(slug: str, catalog: ListingCatalog = Depends(get_catalog)):
    """Project detail by slug or id."""
    listing = catalog.get_listing("project", slug)
    if not listing:
        raise HTTPException(status_code=404, detail="Project not found")
    return to_detail(listing)


@router.get("/neighborhoods", response_model=List[NamedOption])
def list_neighborhoods(catalog: ListingCatalog = Depends(get_catalog)):
    return catalog.neighborhoods()


@router.get("/neighborhoods/{slug}", response_model=NeighborhoodDetail)
def get_neighborhood(slug: str, catalog: ListingCatalog = Depends(get_catalog)):
    """Neighborhood page payload, including the properties located in it."""
    neighborhood = catalog.neighborhood(slug)
    if not neighborhood:
        raise HTTPException(status_code=404, detail="Neighborhood not found")
    return neighborhood


@router.get("/developers", response_model=List[NamedOption])
def list_developers(catalog: ListingCatalog = Depends(get_catalog)):
    return catalog.developers()


@router.get("/lifestyles", response_model=List[NamedOption])
def list_lifestyles(catalog: ListingCatalog = Depends(get_catalog)):
    return catalog.lifestyles()
