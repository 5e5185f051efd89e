import os

# Settings are read at import time, so configure before importing brokerage
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_FILE"] = ""
os.environ["SANITY_PROJECT_ID"] = "testproj"
os.environ["SANITY_DATASET"] = "production"
os.environ["CONTENT_REVALIDATE_SECONDS"] = "0"
os.environ["SMTP_USERNAME"] = ""
os.environ["SMTP_PASSWORD"] = ""

import pytest

from brokerage.schemas.listing import Listing
from brokerage.services.content.cache import ContentCache
from brokerage.services.content.sanity import ContentSourceError, SanityClient
from brokerage.services.filters.criteria import FilterCriteria
from brokerage.services.filters.manifest import get_manifest


EMAAR = {"_id": "dev-emaar", "name": "Emaar", "slug": "emaar"}
PALM = {"_id": "nb-palm", "name": "Palm Jumeirah", "slug": "palm-jumeirah"}
DOWNTOWN = {"_id": "nb-downtown", "name": "Downtown Dubai", "slug": "downtown-dubai"}
BEACHFRONT = {"_id": "ls-beach", "name": "Beachfront", "slug": "beachfront"}


def property_record(_id, **fields):
    record = {
        "_id": _id,
        "_type": "property",
        "title": f"Property {_id}",
        "slug": _id,
        "type": "Apartment",
        "category": "apartment",
        "marketType": "buy",
        "location": "Dubai Marina, Dubai",
        "price": 1_000_000,
        "area": 1500,
        "bedrooms": 2,
        "bathrooms": 2,
        "amenities": [],
        "views": [],
    }
    record.update(fields)
    return record


def project_record(_id, **fields):
    record = {
        "_id": _id,
        "_type": "project",
        "name": f"Project {_id}",
        "slug": _id,
        "marketType": "off-plan",
        "location": "Dubai Marina, Dubai",
        "price": 2_000_000,
    }
    record.update(fields)
    return record


SAMPLE_RECORDS = [
    property_record(
        "palm-villa",
        title="Signature Palm Villa",
        type="Villa",
        category="villa",
        location="Palm Jumeirah, Dubai",
        price=15_000_000,
        area=8000,
        bedrooms=5,
        bathrooms=6,
        developer=EMAAR,
        neighborhood=PALM,
        lifestyle=BEACHFRONT,
        amenities=[{"_id": "am-pool", "name": "Pool"}, {"_id": "am-gym", "name": "Gym"}],
        views=["Sea View"],
        mainImage={"asset": {"_ref": "image-abc123-1920x1080-jpg"}},
        isFeatured=True,
    ),
    property_record(
        "marina-apartment",
        title="Marina Gate Apartment",
        price=2_500_000,
        area=1400,
        developer="Select Group",
        neighborhood={"_ref": "nb-marina"},
        amenities=["Pool"],
        views=["Marina View"],
    ),
    property_record(
        "downtown-penthouse",
        title="Luxury Penthouse",
        type="Penthouse",
        category="penthouse",
        location="Downtown",
        description="Panoramic views of the Burj Khalifa",
        price=12_000_000,
        area=6000,
        bedrooms=4,
        bathrooms=5,
        developer=EMAAR,
        neighborhood=DOWNTOWN,
        amenities=[{"name": "Pool"}, {"name": "Gym"}, {"name": "Concierge"}],
        views=["Burj Khalifa View", "City View"],
    ),
    property_record(
        "jvc-studio",
        title="Compact Studio",
        location="Jumeirah Village Circle, Dubai",
        price=600_000,
        area=500,
        bedrooms=0,
        bathrooms=1,
        developer={"_ref": "dev-binghatti"},
    ),
    property_record(
        "marina-rental",
        title="Furnished Marina Apartment",
        marketType="rent",
        price=120_000,
        priceYearly=120_000,
        furnishingStatus="furnished",
        defaultRentalPeriod="yearly",
    ),
    property_record(
        "jumeirah-rental-villa",
        title="Jumeirah Family Villa",
        marketType="rent",
        type="Villa",
        category="villa",
        location="Jumeirah, Dubai",
        price=300_000,
        priceMonthly=25_000,
        bedrooms=4,
        bathrooms=4,
        furnishingStatus="unfurnished",
        defaultRentalPeriod="monthly",
    ),
    property_record(
        "creek-offplan",
        title="Creek Horizon",
        marketType="off-plan",
        location="Dubai Creek Harbour, Dubai",
        price=1_800_000,
        developer=EMAAR,
        completionDate="2026-06-30",
    ),
    property_record(
        "hills-offplan",
        title="Hills Estate Villa",
        marketType="off-plan",
        type="Villa",
        category="villa",
        location="Dubai Hills, Dubai",
        price=9_000_000,
        bedrooms=5,
        completionYear="2027",
        completionDate="2026-12-01",
    ),
]

SAMPLE_PROJECTS = [
    project_record(
        "marina-vista",
        name="Marina Vista",
        developer=EMAAR,
        completionDate="Q4 2027",
        lifestyle=BEACHFRONT,
    ),
    project_record(
        "palm-residences",
        name="Palm Residences",
        marketType="secondary-market",
        location="Palm Jumeirah, Dubai",
        price=5_000_000,
        completionYear="2021",
        neighborhood=PALM,
    ),
]

SAMPLE_NEIGHBORHOODS = [
    {
        "_id": "nb-palm",
        "name": "Palm Jumeirah",
        "slug": "palm-jumeirah",
        "description": "Iconic man-made island",
        "image": {"asset": {"_ref": "image-palm99-1200x800-png"}},
        "propertyTypes": ["Villa", "Apartment"],
        "priceRange": "AED 2M - 50M",
        "lifestyle": BEACHFRONT,
    },
    {"_id": "nb-downtown", "name": "Downtown Dubai", "slug": "downtown-dubai"},
]


class FakeContentClient(SanityClient):
    """In-memory content source that evaluates the pushdown subset like the CMS would."""

    def __init__(self, records=None, neighborhoods=None, developers=None, lifestyles=None):
        super().__init__(project_id="testproj", dataset="production", cache=ContentCache(0))
        self.records = list(records or [])
        self.neighborhoods = list(neighborhoods or [])
        self.developers = list(developers or [])
        self.lifestyles = list(lifestyles or [])
        self.fail = False
        self.calls = []

    def _check(self):
        if self.fail:
            raise ContentSourceError("Sanity query failed: connection refused")

    @staticmethod
    def _ref_keys(value):
        if isinstance(value, dict):
            slug = value.get("slug")
            return {value.get("_id"), value.get("_ref"), value.get("name"), slug}
        return {value}

    def _pushdown_match(self, record, filters):
        if "marketType" in filters and record.get("marketType") != filters["marketType"]:
            return False
        if "category" in filters and record.get("category") != filters["category"]:
            return False
        for key in ("developer", "lifestyle"):
            if key in filters and filters[key] not in self._ref_keys(record.get(key)):
                return False
        if "neighborhood" in filters:
            neighborhood = record.get("neighborhood") or {}
            if filters["neighborhood"] not in (neighborhood.get("_id"), neighborhood.get("_ref")):
                return False
        price = record.get("price")
        if "minPrice" in filters and (price is None or price < filters["minPrice"]):
            return False
        if "maxPrice" in filters and (price is None or price > filters["maxPrice"]):
            return False
        return True

    def fetch_collection(self, kind, filters=None):
        filters = filters or {}
        self.calls.append((kind, dict(filters)))
        self._check()
        return [r for r in self.records if r.get("_type") == kind and self._pushdown_match(r, filters)]

    def fetch_one(self, kind, slug_or_id):
        self._check()
        for record in self.records:
            if record.get("_type") == kind and slug_or_id in (record.get("slug"), record.get("_id")):
                return record
        return None

    def fetch_neighborhoods(self):
        self._check()
        return self.neighborhoods

    def fetch_neighborhood(self, slug):
        self._check()
        return next((n for n in self.neighborhoods if n.get("slug") == slug), None)

    def fetch_developers(self):
        self._check()
        return self.developers

    def fetch_lifestyles(self):
        self._check()
        return self.lifestyles


@pytest.fixture
def content_client():
    return FakeContentClient(
        records=SAMPLE_RECORDS + SAMPLE_PROJECTS,
        neighborhoods=SAMPLE_NEIGHBORHOODS,
        developers=[EMAAR, {"_id": "dev-select", "name": "Select Group", "slug": "select-group"}, {"_id": "dev-blank"}],
        lifestyles=[BEACHFRONT, {"_id": "ls-golf", "title": "Golf", "slug": "golf"}],
    )


@pytest.fixture
def listings():
    return [Listing.from_record(r) for r in SAMPLE_RECORDS]


@pytest.fixture
def buy_manifest():
    return get_manifest("buy")


@pytest.fixture
def buy_defaults(buy_manifest):
    return FilterCriteria.defaults(buy_manifest)


@pytest.fixture
def make_listing():
    def _make(**fields):
        return Listing.from_record(property_record(fields.pop("_id", "listing-1"), **fields))
    return _make
