"""OpenSearch adapter for catalog document storage"""

from typing import Any, Dict, Iterator, List, Optional, Union

from opensearchpy import OpenSearch
from opensearchpy.exceptions import NotFoundError
from opensearchpy.helpers import scan as opensearch_scan
from loguru import logger

from catalogmate.dbs.interfaces.catalog_store import AbstractCatalogStore, BulkWriteResult
from catalogmate.models.document import CatalogDocument
from catalogmate.models.query import Predicate, SortField
from catalogmate.utils.settings.core import OpenSearchSettings
from catalogmate.integrations.opensearch import create_opensearch_client


class OpenSearchCatalogAdapter(AbstractCatalogStore):
    """OpenSearch implementation of the catalog document store"""

    def __init__(
        self,
        client: OpenSearch,
        index_name: str,
        refresh: Union[bool, str] = "wait_for",
    ):
        """
        Initialize OpenSearch catalog adapter

        Args:
            client: OpenSearch client instance
            index_name: Catalog index name
            refresh: Refresh policy for writes; "wait_for" makes writes visible to the next search
        """
        self.client = client
        self.index_name = index_name
        self.refresh = refresh

    @classmethod
    def from_settings(cls, opensearch_settings: OpenSearchSettings) -> "OpenSearchCatalogAdapter":
        client = create_opensearch_client(opensearch_settings)
        return cls(client=client, index_name=opensearch_settings.get_index_name())

    def bulk_insert(self, documents: List[CatalogDocument]) -> BulkWriteResult:
        if not documents:
            return BulkWriteResult()

        body: List[Dict[str, Any]] = []
        for document in documents:
            body.append({"index": {"_index": self.index_name}})
            body.append(document.to_opensearch_doc())

        response = self.client.bulk(body=body, refresh=self.refresh)

        result = BulkWriteResult()
        for document, item in zip(documents, response.get("items", [])):
            action = item.get("index", {})
            if action.get("error") or action.get("status", 500) >= 300:
                result.failed += 1
                result.failed_business_ids.append(document.business_id)
                result.errors.append(f"{document.business_id}: {action.get('error')}")
                continue
            result.saved.append(document.model_copy(update={"id": action["_id"]}))

        # Items the response did not account for were not written
        missing = documents[len(response.get("items", [])):]
        if missing:
            result.failed += len(missing)
            result.failed_business_ids.extend(document.business_id for document in missing)
            result.errors.append(f"{len(missing)} documents missing from bulk response")

        if result.failed:
            logger.warning(
                f"Bulk insert into '{self.index_name}' saved {len(result.saved)} of {len(documents)} documents"
            )
        else:
            logger.info(f"✅ Bulk inserted {len(result.saved)} documents into '{self.index_name}'")
        return result

    def save(self, document: CatalogDocument) -> CatalogDocument:
        kwargs: Dict[str, Any] = {
            "index": self.index_name,
            "body": document.to_opensearch_doc(),
            "refresh": self.refresh,
        }
        if document.id:
            kwargs["id"] = document.id

        response = self.client.index(**kwargs)
        logger.debug(f"Saved document {response['_id']} ({response.get('result')})")
        return document.model_copy(update={"id": response["_id"]})

    def get(self, document_id: str) -> Optional[CatalogDocument]:
        try:
            response = self.client.get(index=self.index_name, id=document_id)
        except NotFoundError:
            return None

        if not response.get("found"):
            return None
        return CatalogDocument.from_opensearch_doc(response["_source"], doc_id=response["_id"])

    def delete(self, document_id: str) -> bool:
        try:
            self.client.delete(index=self.index_name, id=document_id, refresh=self.refresh)
            return True
        except NotFoundError:
            logger.info(f"Document {document_id} not found in '{self.index_name}', nothing deleted")
            return False

    def count(self, predicate: Predicate) -> int:
        response = self.client.count(index=self.index_name, body={"query": predicate.to_opensearch()})
        return int(response["count"])

    def find(
        self,
        predicate: Predicate,
        offset: int = 0,
        limit: int = 20,
        sort: Optional[List[SortField]] = None,
    ) -> List[CatalogDocument]:
        body: Dict[str, Any] = {
            "query": predicate.to_opensearch(),
            "from": offset,
            "size": limit,
            "track_total_hits": False,
        }
        if sort:
            body["sort"] = [sort_field.to_opensearch() for sort_field in sort]

        response = self.client.search(index=self.index_name, body=body)
        hits = response.get("hits", {}).get("hits", [])
        return [CatalogDocument.from_opensearch_doc(hit["_source"], doc_id=hit["_id"]) for hit in hits]

    def scan(self, predicate: Predicate) -> Iterator[CatalogDocument]:
        for hit in opensearch_scan(
            self.client,
            index=self.index_name,
            query={"query": predicate.to_opensearch()},
        ):
            yield CatalogDocument.from_opensearch_doc(hit["_source"], doc_id=hit["_id"])

    def last_business_id(self, prefix: str) -> Optional[str]:
        body = {
            "query": {"prefix": {"business_id": f"{prefix}-"}},
            "size": 1,
            "sort": [{"business_id": {"order": "desc"}}],
            "_source": ["business_id"],
        }
        try:
            response = self.client.search(index=self.index_name, body=body)
        except NotFoundError:
            logger.info(f"Index '{self.index_name}' does not exist yet, no business ids issued")
            return None

        hits = response.get("hits", {}).get("hits", [])
        if not hits:
            return None
        return hits[0]["_source"]["business_id"]

    def health_check(self) -> bool:
        try:
            return bool(self.client.ping())
        except Exception as e:
            logger.error(f"OpenSearch health check failed: {e}")
            return False
