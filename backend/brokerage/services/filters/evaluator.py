"""Combines the per-dimension predicates for one listing type."""

import logging
from typing import Iterable, List, Tuple

from brokerage.schemas.listing import Listing
from brokerage.services.filters.criteria import FilterCriteria
from brokerage.services.filters.manifest import ALL_DIMENSIONS, ListingManifest
from brokerage.services.filters.predicates import PREDICATES

logger = logging.getLogger(__name__)

REJECT = "REJECT"
PASS = "PASS"


class ListingFilter:
    """
    Logical AND over the active dimensions a manifest allows.
    Dimensions run cheapest first and stop at the first miss; order never
    changes the result.
    """

    def __init__(self, manifest: ListingManifest, criteria: FilterCriteria):
        self.manifest = manifest
        self.criteria = criteria
        self.dimensions = [
            name for name in ALL_DIMENSIONS
            if manifest.applies(name) and criteria.is_active(name)
        ]

    def evaluate(self, listing: Listing) -> Tuple[str, str]:
        """
        Returns:
            Tuple of (status, reason); reason names the first dimension that failed.
        """
        for name in self.dimensions:
            if not PREDICATES[name](listing, self.criteria):
                return REJECT, name
        return PASS, ""

    def matches(self, listing: Listing) -> bool:
        return self.evaluate(listing)[0] == PASS

    def filter_listings(self, listings: Iterable[Listing]) -> List[Listing]:
        listings = list(listings)
        matching = [listing for listing in listings if self.matches(listing)]
        logger.debug(
            f"{self.manifest.listing_type}: {len(matching)}/{len(listings)} listings match "
            f"on {', '.join(self.dimensions) or 'no active filters'}"
        )
        return matching
