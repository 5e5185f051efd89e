from brokerage.services.content.cache import ContentCache
from brokerage.services.content.sanity import ContentSourceError, SanityClient
