"""Search backend clients."""

from esvectorstore.backends.base import SearchBackendClient
from esvectorstore.backends.elasticsearch import ElasticsearchBackendClient


__all__ = ["ElasticsearchBackendClient", "SearchBackendClient"]
