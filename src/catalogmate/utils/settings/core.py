from typing import List, Literal

from pydantic import Field
from .base import ABCBaseSettings


class OpenSearchSettings(ABCBaseSettings):
    """OpenSearch settings"""
    host: str = Field(default="localhost", description="OpenSearch host")
    port: int = Field(default=9200, description="OpenSearch port")
    use_ssl: bool = Field(default=False, description="Use SSL for OpenSearch connection")
    verify_certs: bool = Field(default=False, description="Verify SSL certificates")
    username: str | None = Field(default=None, description="OpenSearch username")
    password: str | None = Field(default=None, description="OpenSearch password")
    index_name: str | None = Field(default=None, description="Catalog index name")
    timeout: int = Field(default=30, gt=0, description="Request timeout in seconds")
    max_retries: int = Field(default=3, ge=0, description="Retries for failed or timed out requests")

    model_config = ABCBaseSettings.model_config.copy()
    model_config["env_prefix"] = "OPENSEARCH_"

    @property
    def endpoint_url(self) -> str:
        """Get OpenSearch endpoint URL"""
        protocol = "https" if self.use_ssl else "http"
        return f"{protocol}://{self.host}:{self.port}"

    def get_index_name(self) -> str:
        """Get index name from environment or fall back to the catalog default"""
        if self.index_name:
            return self.index_name
        return "catalog-documents"


class AppSettings(ABCBaseSettings):
    """Application settings"""
    app_name: str = Field(default="Catalogmate", description="Application name")
    environment: str = Field(default="local", description="Environment (local, dev, prod)")
    debug: bool = Field(default=True, description="Debug mode")
    host: str = Field(default="0.0.0.0", description="Application host")
    port: int = Field(default=8000, description="Application port")
    store_backend: Literal["opensearch", "memory"] = Field(
        default="opensearch",
        description="Document store backend: 'opensearch' or 'memory' (process-local, for development)"
    )
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Origins allowed by the CORS middleware"
    )

    model_config = ABCBaseSettings.model_config.copy()
    model_config["env_prefix"] = "APP_"


class CatalogSettings(ABCBaseSettings):
    """Catalog ingestion and search settings"""
    keyword_candidate_cap: int = Field(
        default=200, gt=0, description="Maximum number of candidates materialized for keyword ranking"
    )
    business_id_prefix: str = Field(default="DPRD", description="Prefix of generated business identifiers")
    default_page_size: int = Field(default=20, gt=0, description="Page size used when none is requested")
    max_page_size: int = Field(default=100, gt=0, description="Largest page size a caller may request")

    model_config = ABCBaseSettings.model_config.copy()
    model_config["env_prefix"] = "CATALOG_"
