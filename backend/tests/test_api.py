"""HTTP API tests with the content source replaced by the in-memory fake."""

import pytest
from fastapi.testclient import TestClient

from brokerage.api.dependencies import get_content_client
from brokerage.main import app


@pytest.fixture
def client(content_client):
    app.dependency_overrides[get_content_client] = lambda: content_client
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


class TestListingPages:
    def test_buy_defaults(self, client):
        data = client.get("/api/listings/buy").json()
        assert data["listing_type"] == "buy"
        assert data["total"] == 4
        assert data["page_size"] == 9
        assert data["page"] == 1
        assert data["page_numbers"] == []
        assert data["available"] is True
        assert data["items"][0]["display_price"] == "AED 15,000,000"

    def test_query_string_filters(self, client):
        response = client.get("/api/listings/buy?locations=Palm,Marina&bedrooms=4%2B")
        data = response.json()
        assert [item["id"] for item in data["items"]] == ["palm-villa"]
        assert data["query"] == "locations=Palm%2CMarina&bedrooms=4%2B"

    def test_repeated_keys_are_merged(self, client):
        data = client.get("/api/listings/buy?locations=Palm&locations=Downtown").json()
        assert [item["id"] for item in data["items"]] == ["palm-villa", "downtown-penthouse"]

    def test_malformed_numbers_are_ignored(self, client):
        response = client.get("/api/listings/buy?minPrice=abc&page=xyz")
        assert response.status_code == 200
        assert response.json()["total"] == 4

    def test_projects_tab(self, client):
        data = client.get("/api/listings/projects?marketType=off-plan").json()
        assert [item["id"] for item in data["items"]] == ["marina-vista"]
        assert data["items"][0]["title"] == "Marina Vista"
        assert data["items"][0]["completion_year"] == "2027"

    def test_unknown_listing_type(self, client):
        assert client.get("/api/listings/auction").status_code == 404

    def test_unavailable_source_is_not_an_error(self, client, content_client):
        content_client.fail = True
        response = client.get("/api/listings/rent")
        assert response.status_code == 200
        assert response.json()["available"] is False
        assert response.json()["items"] == []


class TestDetailPages:
    def test_property(self, client):
        data = client.get("/api/properties/downtown-penthouse").json()
        assert data["title"] == "Luxury Penthouse"
        assert data["amenities"] == ["Pool", "Gym", "Concierge"]
        assert data["developer"] == "Emaar"

    def test_project_by_id(self, client):
        assert client.get("/api/projects/palm-residences").json()["neighborhood"] == "Palm Jumeirah"

    def test_missing_property_is_404(self, client):
        response = client.get("/api/properties/does-not-exist")
        assert response.status_code == 404
        assert response.json()["detail"] == "Property not found"

    def test_fetch_failure_is_404(self, client, content_client):
        content_client.fail = True
        assert client.get("/api/projects/marina-vista").status_code == 404


class TestFilterOptions:
    def test_neighborhoods(self, client):
        data = client.get("/api/neighborhoods").json()
        assert [n["slug"] for n in data] == ["palm-jumeirah", "downtown-dubai"]

    def test_neighborhood_detail(self, client):
        data = client.get("/api/neighborhoods/palm-jumeirah").json()
        assert data["price_range"] == "AED 2M - 50M"
        assert [p["id"] for p in data["properties"]] == ["palm-villa"]

    def test_missing_neighborhood(self, client):
        assert client.get("/api/neighborhoods/atlantis").status_code == 404

    def test_developers_and_lifestyles(self, client):
        assert [d["name"] for d in client.get("/api/developers").json()] == ["Emaar", "Select Group"]
        assert [s["slug"] for s in client.get("/api/lifestyles").json()] == ["beachfront", "golf"]
