"""
OpenSearch infrastructure service for the catalog index.

Creates, deletes and inspects the index that backs the OpenSearch catalog store.
"""

from pathlib import Path
from typing import Dict, Any, Optional
from opensearchpy import OpenSearch
from opensearchpy.exceptions import ConnectionError, AuthenticationException, RequestError
from loguru import logger

from catalogmate.dbs.models.index_config import CatalogIndexConfig
from catalogmate.integrations.opensearch import create_opensearch_client
from catalogmate.utils.settings.core import OpenSearchSettings
from catalogmate.utils.settings.factory import SettingsFactory


class OpenSearchInfraService:
    """
    Service for catalog index operations like creating and deleting the index.
    """

    def __init__(self, client: OpenSearch, opensearch_settings: OpenSearchSettings):
        """
        Args:
            client: OpenSearch client instance
            opensearch_settings: Settings providing the default index name
        """
        self.client = client
        self.config = opensearch_settings

    @property
    def default_index_name(self) -> str:
        return self.config.get_index_name()

    def index_exists(self, index_name: str) -> bool:
        try:
            return bool(self.client.indices.exists(index=index_name))
        except Exception as e:
            logger.error(f"Error checking if index '{index_name}' exists: {e}")
            return False

    def create_index(self, index_name: Optional[str] = None, force_recreate: bool = False) -> bool:
        """
        Create the catalog index with its mapping.

        Args:
            index_name: Index to create; the configured catalog index if None
            force_recreate: If True, delete an existing index before creating it

        Returns:
            True if the index exists afterwards, False otherwise
        """
        index_name = index_name or self.default_index_name
        try:
            if self.index_exists(index_name):
                if not force_recreate:
                    logger.info(f"Index '{index_name}' already exists. Skipping creation.")
                    return True
                logger.info(f"Index '{index_name}' exists. force_recreate=True, deleting first...")
                if not self.delete_index(index_name):
                    logger.error(f"Failed to delete existing index '{index_name}'")
                    return False

            logger.info(f"Creating catalog index '{index_name}'")
            response = self.client.indices.create(index=index_name, body=CatalogIndexConfig.get_index_mapping())
            logger.info(f"✅ Successfully created index '{index_name}'")
            logger.debug(f"Create response: {response}")
            return True

        except ConnectionError as e:
            logger.error(f"❌ Connection error creating index '{index_name}': {e}")
            return False
        except AuthenticationException as e:
            logger.error(f"❌ Authentication error creating index '{index_name}': {e}")
            return False
        except RequestError as e:
            logger.error(f"❌ Request error creating index '{index_name}': {e}")
            return False

    def delete_index(self, index_name: Optional[str] = None) -> bool:
        """Delete the catalog index; a missing index counts as deleted"""
        index_name = index_name or self.default_index_name
        try:
            if not self.index_exists(index_name):
                logger.warning(f"⚠️ Index '{index_name}' does not exist. No action taken.")
                return True

            self.client.indices.delete(index=index_name)
            logger.info(f"✅ Successfully deleted index '{index_name}'")
            return True

        except ConnectionError as e:
            logger.error(f"❌ Connection error deleting index '{index_name}': {e}")
            return False
        except AuthenticationException as e:
            logger.error(f"❌ Authentication error deleting index '{index_name}': {e}")
            return False
        except RequestError as e:
            logger.error(f"❌ Request error deleting index '{index_name}': {e}")
            return False

    def get_index_stats(self, index_name: Optional[str] = None) -> Dict[str, Any]:
        """Document count, size and health of the catalog index"""
        index_name = index_name or self.default_index_name
        if not self.index_exists(index_name):
            return {"index_name": index_name, "exists": False, "total_documents": 0}

        try:
            response = self.client.cat.indices(index=index_name, format="json")
        except ConnectionError as e:
            logger.error(f"Connection error getting stats for index '{index_name}': {e}")
            return {"index_name": index_name, "exists": True, "error": f"Connection error: {e}"}

        stats = response[0] if response else {}
        return {
            "index_name": index_name,
            "exists": True,
            "total_documents": int(stats.get("docs.count", 0) or 0),
            "index_size": stats.get("store.size", "unknown"),
            "health": stats.get("health", "unknown"),
            "status": stats.get("status", "unknown"),
        }

    def get_cluster_health(self) -> Dict[str, Any]:
        try:
            health = self.client.cluster.health()
            info = self.client.info()
        except Exception as e:
            logger.error(f"Error getting cluster health: {e}")
            return {"error": str(e), "healthy": False}

        return {
            "cluster_name": health.get('cluster_name'),
            "status": health.get('status'),
            "number_of_nodes": health.get('number_of_nodes'),
            "active_shards": health.get('active_shards'),
            "unassigned_shards": health.get('unassigned_shards'),
            "version": info.get('version', {}).get('number'),
            "healthy": health.get('status') in ['green', 'yellow'],
        }


def create_opensearch_infra_service(
    client: Optional[OpenSearch] = None,
    env_path: Optional[str | Path] = None,
) -> OpenSearchInfraService:
    """
    Create an OpenSearchInfraService from environment settings, or from the
    env file at env_path.

    Args:
        client: Optional OpenSearch client; created from settings if None
    """
    opensearch_settings = SettingsFactory(env_path).create_opensearch_settings()
    return OpenSearchInfraService(
        client=client or create_opensearch_client(opensearch_settings),
        opensearch_settings=opensearch_settings,
    )
