"""
Wiring of the catalog services.

All services share one store and one business id sequence, so a process
should build a single CatalogServices and reuse it.
"""

from loguru import logger

from catalogmate.dbs.catalog import create_catalog_store
from catalogmate.dbs.interfaces.catalog_store import AbstractCatalogStore
from catalogmate.services.document_service import CatalogDocumentService
from catalogmate.services.factory import ServiceFactoryABC
from catalogmate.services.header_normalizer import HeaderNormalizer
from catalogmate.services.ingestion_service import CatalogIngestionService
from catalogmate.services.search_service import CatalogSearchService
from catalogmate.services.sequence_service import BusinessIdSequence
from catalogmate.utils.settings.core import AppSettings, CatalogSettings, OpenSearchSettings


class CatalogServices:
    """Ingestion, search and document services over one store"""

    def __init__(
        self,
        store: AbstractCatalogStore,
        catalog_settings: CatalogSettings,
        sequence: BusinessIdSequence | None = None,
    ):
        self.store = store
        self.settings = catalog_settings
        self.sequence = sequence or BusinessIdSequence(prefix=catalog_settings.business_id_prefix)
        normalizer = HeaderNormalizer()

        self.ingestion = CatalogIngestionService(store=store, sequence=self.sequence, normalizer=normalizer)
        self.search = CatalogSearchService(store=store, settings=catalog_settings, normalizer=normalizer)
        self.documents = CatalogDocumentService(store=store, detector=self.ingestion.detector)

    def resume_sequence(self) -> None:
        """Continue business id numbering after the highest id already stored this month"""
        try:
            last_business_id = self.store.last_business_id(self.sequence.prefix)
        except Exception as e:
            logger.warning(f"Could not read the last business id, numbering starts fresh: {e}")
            return
        self.sequence.resume_after(last_business_id)


class CatalogServicesFactory(ServiceFactoryABC[CatalogServices]):
    """Factory for creating CatalogServices instances."""

    @classmethod
    def from_settings(
        cls,
        app_settings: AppSettings,
        opensearch_settings: OpenSearchSettings,
        catalog_settings: CatalogSettings,
    ) -> CatalogServices:
        """Create the store, wire the services and resume business id numbering"""
        store = create_catalog_store(app_settings, opensearch_settings)
        services = CatalogServices(store=store, catalog_settings=catalog_settings)
        services.resume_sequence()
        return services
