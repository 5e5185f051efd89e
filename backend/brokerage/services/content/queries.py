"""
GROQ queries for the Sanity content lake.

References are dereferenced in the projection so most records arrive resolved;
stubs that fail to resolve come back as `{"_ref": ...}` and are handled by
`ContentRef.parse` at ingestion. Amenities mix plain strings with references,
so the raw array is kept next to its dereferenced twin `amenityDocs`.
"""

from typing import Any, Dict, List, Tuple

REF_PROJECTION = '{_id, name, title, "slug": slug.current}'

LISTING_PROJECTION = f"""{{
  _id, _type, title, name, "slug": slug.current, type, category, marketType, location,
  price, area, bedrooms, bathrooms, views, features, completionDate, completionYear,
  furnishingStatus, defaultRentalPeriod, priceWeekly, priceMonthly, priceYearly,
  description, images, mainImage, isFeatured, googleMapsUrl,
  "developer": coalesce(developer->{REF_PROJECTION}, project->developer->{REF_PROJECTION}, developer),
  "neighborhood": coalesce(neighborhood->{REF_PROJECTION}, project->neighborhood->{REF_PROJECTION}, neighborhood),
  "lifestyle": coalesce(lifestyle->{REF_PROJECTION}, lifestyle),
  amenities,
  "amenityDocs": amenities[]->{{_id, name}}
}}"""

NEIGHBORHOOD_PROJECTION = f"""{{
  _id, name, "slug": slug.current, description, image, propertyTypes, priceRange,
  googleMapsUrl, "lifestyle": lifestyle->{REF_PROJECTION}
}}"""

# Pushdown filter key -> GROQ condition using a $param of the same name
_CONDITIONS = {
    "marketType": "marketType == $marketType",
    "category": "category == $category",
    "neighborhood": "(neighborhood._ref == $neighborhood || project->neighborhood._ref == $neighborhood)",
    "developer": (
        "(developer == $developer || developer._ref == $developer || developer->name == $developer"
        " || developer->slug.current == $developer || project->developer->name == $developer)"
    ),
    "lifestyle": (
        "(lifestyle == $lifestyle || lifestyle._ref == $lifestyle || lifestyle->name == $lifestyle"
        " || lifestyle->slug.current == $lifestyle)"
    ),
    "minPrice": "price >= $minPrice",
    "maxPrice": "price <= $maxPrice",
}

_ORDER = "order(isFeatured desc, _createdAt desc)"


def collection_query(kind: str, filters: Dict[str, Any]) -> Tuple[str, Dict[str, Any]]:
    """
    Build the GROQ query for a listing collection.

    Args:
        kind: Sanity document type ("property" or "project").
        filters: Pushdown filters; unknown keys are ignored.

    Returns:
        Tuple of (query, params) for the HTTP query API.
    """
    conditions: List[str] = ["_type == $kind", "!(_id in path('drafts.**'))"]
    params: Dict[str, Any] = {"kind": kind}
    for key, condition in _CONDITIONS.items():
        value = filters.get(key)
        if value is None or value == "":
            continue
        conditions.append(condition)
        params[key] = value
    query = f"*[{' && '.join(conditions)}] | {_ORDER} {LISTING_PROJECTION}"
    return query, params


def single_query(kind: str) -> str:
    return (
        f"*[_type == $kind && (slug.current == $slug || _id == $slug) && !(_id in path('drafts.**'))][0] "
        f"{LISTING_PROJECTION}"
    )


NEIGHBORHOODS_QUERY = f"*[_type == 'neighborhood'] | order(name asc) {NEIGHBORHOOD_PROJECTION}"
NEIGHBORHOOD_QUERY = f"*[_type == 'neighborhood' && slug.current == $slug][0] {NEIGHBORHOOD_PROJECTION}"
DEVELOPERS_QUERY = '*[_type == "developer"] | order(name asc) {_id, name, "slug": slug.current, isFeatured}'
LIFESTYLES_QUERY = '*[_type == "lifestyle"] | order(name asc) {_id, name, title, "slug": slug.current}'
