"""In-process catalog store evaluating predicates against stored document bodies"""

import threading
import uuid
from typing import Any, Dict, Iterator, List, Optional

from loguru import logger

from catalogmate.dbs.interfaces.catalog_store import AbstractCatalogStore, BulkWriteResult
from catalogmate.models.document import CatalogDocument
from catalogmate.models.query import Predicate, SortField


class InMemoryCatalogAdapter(AbstractCatalogStore):
    """
    Catalog store kept in a dict.

    Documents are held in their OpenSearch body form, so predicates are
    evaluated on exactly what the OpenSearch adapter would index. Used for
    local development (APP_STORE_BACKEND=memory) and tests.
    """

    def __init__(self):
        self._documents: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def _snapshot(self) -> List[tuple]:
        with self._lock:
            return list(self._documents.items())

    def bulk_insert(self, documents: List[CatalogDocument]) -> BulkWriteResult:
        result = BulkWriteResult()
        with self._lock:
            for document in documents:
                document_id = uuid.uuid4().hex
                self._documents[document_id] = document.to_opensearch_doc()
                result.saved.append(document.model_copy(update={"id": document_id}))
        logger.debug(f"Stored {len(result.saved)} documents in memory")
        return result

    def save(self, document: CatalogDocument) -> CatalogDocument:
        document_id = document.id or uuid.uuid4().hex
        with self._lock:
            self._documents[document_id] = document.to_opensearch_doc()
        return document.model_copy(update={"id": document_id})

    def get(self, document_id: str) -> Optional[CatalogDocument]:
        with self._lock:
            body = self._documents.get(document_id)
        if body is None:
            return None
        return CatalogDocument.from_opensearch_doc(body, doc_id=document_id)

    def delete(self, document_id: str) -> bool:
        with self._lock:
            return self._documents.pop(document_id, None) is not None

    def count(self, predicate: Predicate) -> int:
        return sum(1 for _, body in self._snapshot() if predicate.matches(body))

    def find(
        self,
        predicate: Predicate,
        offset: int = 0,
        limit: int = 20,
        sort: Optional[List[SortField]] = None,
    ) -> List[CatalogDocument]:
        matching = [(doc_id, body) for doc_id, body in self._snapshot() if predicate.matches(body)]
        # Stable sorts applied from the least to the most significant field
        for sort_field in reversed(sort or []):
            present = [item for item in matching if item[1].get(sort_field.field) is not None]
            missing = [item for item in matching if item[1].get(sort_field.field) is None]
            present.sort(key=lambda item: item[1][sort_field.field], reverse=sort_field.direction.is_descending())
            matching = present + missing
        window = matching[offset:offset + limit]
        return [CatalogDocument.from_opensearch_doc(body, doc_id=doc_id) for doc_id, body in window]

    def scan(self, predicate: Predicate) -> Iterator[CatalogDocument]:
        for doc_id, body in self._snapshot():
            if predicate.matches(body):
                yield CatalogDocument.from_opensearch_doc(body, doc_id=doc_id)

    def last_business_id(self, prefix: str) -> Optional[str]:
        business_ids = [
            body["business_id"] for _, body in self._snapshot()
            if body.get("business_id", "").startswith(f"{prefix}-")
        ]
        return max(business_ids, default=None)

    def health_check(self) -> bool:
        return True
