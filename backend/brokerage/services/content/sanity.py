"""
Sanity CMS Client.
Fetches properties, projects, neighborhoods, developers and lifestyles from the
Sanity HTTP query API and builds CDN URLs for image assets.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

import requests

from brokerage.config import settings
from brokerage.services.content.cache import ContentCache
from brokerage.services.content import queries

logger = logging.getLogger(__name__)

SANITY_CDN_IMAGES = "https://cdn.sanity.io/images"

# image-<assetId>-<width>x<height>-<format>
_IMAGE_REF_RE = re.compile(r"^image-(?P<id>[A-Za-z0-9]+)-(?P<dims>\d+x\d+)-(?P<fmt>[a-z0-9]+)$")


class ContentSourceError(Exception):
    """The content source could not be reached or returned an unusable response."""


class SanityClient:
    """Client for the Sanity content lake."""

    def __init__(
        self,
        project_id: Optional[str] = None,
        dataset: Optional[str] = None,
        api_version: Optional[str] = None,
        token: Optional[str] = None,
        use_cdn: Optional[bool] = None,
        timeout: Optional[float] = None,
        cache: Optional[ContentCache] = None,
        session: Optional[requests.Session] = None,
    ):
        self.project_id = project_id if project_id is not None else settings.sanity_project_id
        self.dataset = dataset or settings.sanity_dataset
        self.api_version = api_version or settings.sanity_api_version
        self.token = token if token is not None else settings.sanity_token
        self.use_cdn = settings.sanity_use_cdn if use_cdn is None else use_cdn
        self.timeout = timeout or settings.sanity_timeout_seconds
        self.cache = cache if cache is not None else ContentCache(settings.content_revalidate_seconds)
        self.session = session or requests.Session()
        if self.token:
            self.session.headers["Authorization"] = f"Bearer {self.token}"
        self.enabled = bool(self.project_id)

    @property
    def query_url(self) -> str:
        host = "apicdn.sanity.io" if self.use_cdn and not self.token else "api.sanity.io"
        return f"https://{self.project_id}.{host}/v{self.api_version}/data/query/{self.dataset}"

    def query(self, groq: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Run a GROQ query and return its `result`.
        Raises ContentSourceError on transport or payload problems.
        """
        if not self.enabled:
            raise ContentSourceError("Sanity project id is not configured")

        params = params or {}
        cache_key = (groq, json.dumps(params, sort_keys=True))
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        # Sanity expects each GROQ parameter as a JSON-encoded `$name` query arg
        query_args = {"query": groq}
        query_args.update({f"${name}": json.dumps(value) for name, value in params.items()})

        try:
            resp = self.session.get(self.query_url, params=query_args, timeout=self.timeout)
            resp.raise_for_status()
            payload = resp.json()
        except (requests.RequestException, ValueError) as e:
            raise ContentSourceError(f"Sanity query failed: {e}") from e

        if not isinstance(payload, dict) or "result" not in payload:
            raise ContentSourceError("Sanity response has no result")

        result = payload["result"]
        self.cache.set(cache_key, result)
        return result

    # --- Listings ---

    def fetch_collection(self, kind: str, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Fetch all published records of `kind` matching the pushdown filters."""
        groq, params = queries.collection_query(kind, filters or {})
        logger.info(f"Fetching {kind} collection with filters {json.dumps(filters or {}, sort_keys=True)}")
        result = self.query(groq, params)
        return [record for record in result or [] if isinstance(record, dict)]

    def fetch_one(self, kind: str, slug_or_id: str) -> Optional[Dict[str, Any]]:
        result = self.query(queries.single_query(kind), {"kind": kind, "slug": slug_or_id})
        return result if isinstance(result, dict) else None

    # --- Filter options ---

    def fetch_neighborhoods(self) -> List[Dict[str, Any]]:
        return self.query(queries.NEIGHBORHOODS_QUERY) or []

    def fetch_neighborhood(self, slug: str) -> Optional[Dict[str, Any]]:
        result = self.query(queries.NEIGHBORHOOD_QUERY, {"slug": slug})
        return result if isinstance(result, dict) else None

    def fetch_developers(self) -> List[Dict[str, Any]]:
        return self.query(queries.DEVELOPERS_QUERY) or []

    def fetch_lifestyles(self) -> List[Dict[str, Any]]:
        return self.query(queries.LIFESTYLES_QUERY) or []

    # --- Assets ---

    def resolve_asset_url(
        self,
        image: Any,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> str:
        """
        CDN URL for an image field, asset stub or raw asset reference.
        Returns the placeholder when the reference cannot be resolved.
        """
        ref = image
        if isinstance(image, dict):
            asset = image.get("asset") or image
            if isinstance(asset, dict):
                if asset.get("url"):
                    return _with_size(asset["url"], width, height)
                ref = asset.get("_ref") or asset.get("_id")
        if not isinstance(ref, str):
            return settings.placeholder_image_url

        match = _IMAGE_REF_RE.match(ref)
        if not match or not self.project_id:
            logger.debug(f"Unresolvable image reference {ref!r}")
            return settings.placeholder_image_url

        url = (
            f"{SANITY_CDN_IMAGES}/{self.project_id}/{self.dataset}/"
            f"{match.group('id')}-{match.group('dims')}.{match.group('fmt')}"
        )
        return _with_size(url, width, height)


def _with_size(url: str, width: Optional[int], height: Optional[int]) -> str:
    size = {}
    if width:
        size["w"] = width
    if height:
        size["h"] = height
    if not size:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{urlencode(size)}"
