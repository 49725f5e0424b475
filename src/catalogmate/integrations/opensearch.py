"""OpenSearch client for the catalog store"""

from typing import Any, Dict

from opensearchpy import OpenSearch, RequestsHttpConnection
from loguru import logger

from catalogmate.utils.settings.core import OpenSearchSettings


def build_client_config(opensearch_settings: OpenSearchSettings, pool_maxsize: int = 10) -> Dict[str, Any]:
    """Client keyword arguments; credentials are only sent when both are set"""
    config: Dict[str, Any] = {
        "hosts": [{"host": opensearch_settings.host, "port": opensearch_settings.port}],
        "use_ssl": opensearch_settings.use_ssl,
        "verify_certs": opensearch_settings.verify_certs,
        "ssl_show_warn": False,
        "connection_class": RequestsHttpConnection,
        "pool_maxsize": pool_maxsize,
        "timeout": opensearch_settings.timeout,
        "max_retries": opensearch_settings.max_retries,
        "retry_on_timeout": opensearch_settings.max_retries > 0,
    }
    if opensearch_settings.username and opensearch_settings.password:
        config["http_auth"] = (opensearch_settings.username, opensearch_settings.password)
    return config


def create_opensearch_client(opensearch_settings: OpenSearchSettings, pool_maxsize: int = 10) -> OpenSearch:
    """
    Create the OpenSearch client used by the catalog adapter and index tooling.

    Bulk ingestion of large files and catalog scans share one client, so the
    connection pool is sized for concurrent API requests.

    Example:
        >>> from catalogmate.utils.settings.factory import settings_factory
        >>> client = create_opensearch_client(settings_factory.create_opensearch_settings())
    """
    client = OpenSearch(**build_client_config(opensearch_settings, pool_maxsize=pool_maxsize))
    logger.info(f"Created OpenSearch client for {opensearch_settings.endpoint_url}")
    return client
