from functools import lru_cache

from fastapi import Depends

from brokerage.services.catalog import ListingCatalog
from brokerage.services.content.sanity import SanityClient
from brokerage.services.notifications import EmailNotifier


@lru_cache()
def get_content_client() -> SanityClient:
    """One client (and content cache) per process."""
    return SanityClient()


def get_catalog(client: SanityClient = Depends(get_content_client)) -> ListingCatalog:
    return ListingCatalog(client)


def get_notifier() -> EmailNotifier:
    return EmailNotifier()
