"""Tests for the Sanity client, GROQ query builder and content cache."""

import json

import pytest
import requests

from brokerage.services.content import queries
from brokerage.services.content.cache import ContentCache
from brokerage.services.content.sanity import ContentSourceError, SanityClient


class StubResponse:
    def __init__(self, payload=None, status_code=200, body=None):
        self.payload = payload
        self.status_code = status_code
        self.body = body

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if self.body is not None:
            return json.loads(self.body)
        return self.payload


class StubSession:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.headers = {}
        self.requests = []

    def get(self, url, params=None, timeout=None):
        self.requests.append((url, params, timeout))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def _client(*responses, **kwargs):
    kwargs.setdefault("cache", ContentCache(0))
    return SanityClient(project_id="abc123", dataset="production", session=StubSession(*responses), **kwargs)


class TestQuery:
    def test_url_and_json_encoded_params(self):
        client = _client(StubResponse({"result": [{"_id": "p1"}]}), use_cdn=True, token="")
        records = client.fetch_collection("property", {"marketType": "buy", "minPrice": 1000000})

        url, params, timeout = client.session.requests[0]
        assert url == "https://abc123.apicdn.sanity.io/v2023-05-03/data/query/production"
        assert params["$kind"] == '"property"'
        assert params["$marketType"] == '"buy"'
        assert params["$minPrice"] == "1000000"
        assert "marketType == $marketType" in params["query"]
        assert timeout == client.timeout
        assert records == [{"_id": "p1"}]

    def test_token_uses_live_api(self):
        client = _client(StubResponse({"result": []}), use_cdn=True, token="secret")
        assert client.query_url.startswith("https://abc123.api.sanity.io/")
        assert client.session.headers["Authorization"] == "Bearer secret"

    def test_transport_error_is_wrapped(self):
        client = _client(requests.ConnectionError("connection refused"))
        with pytest.raises(ContentSourceError):
            client.fetch_collection("property")

    def test_http_error_is_wrapped(self):
        client = _client(StubResponse(status_code=503))
        with pytest.raises(ContentSourceError):
            client.fetch_developers()

    def test_invalid_json_is_wrapped(self):
        client = _client(StubResponse(body="<html>"))
        with pytest.raises(ContentSourceError):
            client.fetch_lifestyles()

    def test_missing_result_key(self):
        client = _client(StubResponse({"error": "bad query"}))
        with pytest.raises(ContentSourceError):
            client.fetch_neighborhoods()

    def test_unconfigured_project(self):
        client = SanityClient(project_id="", session=StubSession())
        with pytest.raises(ContentSourceError):
            client.fetch_collection("property")

    def test_fetch_one_returns_none_for_null(self):
        client = _client(StubResponse({"result": None}))
        assert client.fetch_one("property", "missing") is None
        assert client.session.requests[0][1]["$slug"] == '"missing"'

    def test_results_are_cached(self):
        client = _client(StubResponse({"result": [{"_id": "d1", "name": "Emaar"}]}), cache=ContentCache(60))
        assert client.fetch_developers() == client.fetch_developers()
        assert len(client.session.requests) == 1


class TestQueryBuilder:
    def test_drafts_are_excluded(self):
        query, params = queries.collection_query("project", {})
        assert "!(_id in path('drafts.**'))" in query
        assert params == {"kind": "project"}

    def test_empty_filters_are_skipped(self):
        query, params = queries.collection_query("property", {"category": "", "developer": None, "lifestyle": "golf"})
        assert "$category" not in query
        assert "$developer" not in query
        assert params == {"kind": "property", "lifestyle": "golf"}

    def test_references_are_dereferenced(self):
        query, _ = queries.collection_query("property", {})
        assert "developer->{_id, name, title" in query
        assert '"amenityDocs": amenities[]->{_id, name}' in query

    def test_raw_amenities_are_kept(self):
        query, _ = queries.collection_query("property", {})
        assert "\n  amenities,\n" in query


class TestAssetUrl:
    def test_asset_reference(self):
        client = _client()
        url = client.resolve_asset_url({"asset": {"_ref": "image-Tb9Ew8CXIwaY6R1kjMvI0uRR-2000x3000-jpg"}})
        assert url == "https://cdn.sanity.io/images/abc123/production/Tb9Ew8CXIwaY6R1kjMvI0uRR-2000x3000.jpg"

    def test_size_params(self):
        client = _client()
        url = client.resolve_asset_url("image-abc-800x600-png", width=400, height=300)
        assert url == "https://cdn.sanity.io/images/abc123/production/abc-800x600.png?w=400&h=300"

    def test_expanded_asset_url(self):
        client = _client()
        url = client.resolve_asset_url({"asset": {"url": "https://cdn.sanity.io/images/x/y/z.jpg?auto=format"}}, width=100)
        assert url == "https://cdn.sanity.io/images/x/y/z.jpg?auto=format&w=100"

    @pytest.mark.parametrize("image", [None, {}, {"asset": None}, "not-an-image-ref", 12])
    def test_placeholder(self, image):
        assert _client().resolve_asset_url(image) == "/placeholder.svg"


class TestContentCache:
    def test_expiry(self):
        now = [100.0]
        cache = ContentCache(60, clock=lambda: now[0])
        cache.set("k", [1])
        assert cache.get("k") == [1]
        now[0] = 160.0
        assert cache.get("k") is None
        assert len(cache) == 0

    def test_expired_entries_of_other_keys_are_swept(self):
        now = [100.0]
        cache = ContentCache(60, clock=lambda: now[0])
        for low in range(1_000_000, 1_005_000, 1000):
            cache.set(("query", low), [low])
        assert len(cache) == 5
        now[0] = 130.0
        cache.set(("query", 2_000_000), [])
        assert len(cache) == 6
        now[0] = 161.0
        cache.set(("query", 3_000_000), [])
        assert len(cache) == 2
        assert cache.get(("query", 2_000_000)) == []

    def test_disabled(self):
        cache = ContentCache(0)
        cache.set("k", "v")
        assert cache.get("k") is None

    def test_clear(self):
        cache = ContentCache(60)
        cache.set("a", 1)
        cache.clear()
        assert cache.get("a") is None
