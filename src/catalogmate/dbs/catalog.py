"""Store selection for the catalog services"""

from enum import StrEnum

from loguru import logger

from catalogmate.dbs.interfaces.catalog_store import AbstractCatalogStore
from catalogmate.dbs.adapters import InMemoryCatalogAdapter, OpenSearchCatalogAdapter
from catalogmate.utils.settings.core import AppSettings, OpenSearchSettings


class StoreBackend(StrEnum):
    """Document store backends"""

    OPENSEARCH = "opensearch"
    MEMORY = "memory"


def create_catalog_store(app_settings: AppSettings, opensearch_settings: OpenSearchSettings) -> AbstractCatalogStore:
    """Create the catalog store selected by APP_STORE_BACKEND"""
    backend = StoreBackend(app_settings.store_backend)
    logger.info(f"Using '{backend}' catalog store")
    if backend == StoreBackend.MEMORY:
        return InMemoryCatalogAdapter()
    return OpenSearchCatalogAdapter.from_settings(opensearch_settings)
