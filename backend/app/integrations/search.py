"""
app/integrations/search.py - Search index (Algolia) integration.

Builds the Algolia index handle used by the catalog triggers. The admin API key is used
here because the triggers write records; clients only ever receive the search-only key
(see `GET /search/config`).
"""
from algoliasearch.search_client import SearchClient

from app.config import Settings


def init_search_index(settings: Settings):
    """
    Create the Algolia client from settings and return the products index.
    The returned object exposes `save_object(record)` and `delete_object(object_id)`.
    """
    client = SearchClient.create(settings.algolia_app_id, settings.algolia_api_key)
    return client.init_index(settings.algolia_index_name)
