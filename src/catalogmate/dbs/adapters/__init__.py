"""Catalog store adapters"""

from catalogmate.dbs.adapters.opensearch_catalog_adapter import OpenSearchCatalogAdapter
from catalogmate.dbs.adapters.memory_catalog_adapter import InMemoryCatalogAdapter

__all__ = [
    "OpenSearchCatalogAdapter",
    "InMemoryCatalogAdapter",
]
