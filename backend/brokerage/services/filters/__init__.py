from brokerage.services.filters.criteria import FilterCriteria, NumericRange, ALL, ANY
from brokerage.services.filters.manifest import ListingManifest, MANIFESTS, get_manifest
from brokerage.services.filters.codec import decode, encode, to_query_string, pushdown_filters
from brokerage.services.filters.evaluator import ListingFilter
from brokerage.services.filters.facets import collect_facets

__all__ = [
    "FilterCriteria",
    "NumericRange",
    "ALL",
    "ANY",
    "ListingManifest",
    "MANIFESTS",
    "get_manifest",
    "decode",
    "encode",
    "to_query_string",
    "pushdown_filters",
    "ListingFilter",
    "collect_facets",
]
