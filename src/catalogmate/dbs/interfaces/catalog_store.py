from abc import ABC, abstractmethod
from typing import Iterator, List, Optional

from pydantic import BaseModel, Field

from catalogmate.models.document import CatalogDocument
from catalogmate.models.query import Predicate, SortField


class BulkWriteResult(BaseModel):
    """Outcome of a bulk insert; `saved` carries the store-assigned ids"""

    saved: List[CatalogDocument] = Field(default_factory=list)
    failed: int = 0
    failed_business_ids: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)


class AbstractCatalogStore(ABC):
    """
    Document store for catalog documents.

    Stores do not know about tenants or soft deletion; callers express both as
    predicates.
    """

    @abstractmethod
    def bulk_insert(self, documents: List[CatalogDocument]) -> BulkWriteResult:
        """Insert new documents in one round trip; the store assigns their ids."""
        pass

    @abstractmethod
    def save(self, document: CatalogDocument) -> CatalogDocument:
        """Insert or fully replace one document, returning it with its id."""
        pass

    @abstractmethod
    def get(self, document_id: str) -> Optional[CatalogDocument]:
        """Fetch a document by id, None if it does not exist."""
        pass

    @abstractmethod
    def delete(self, document_id: str) -> bool:
        """Permanently remove a document; False if it did not exist."""
        pass

    @abstractmethod
    def count(self, predicate: Predicate) -> int:
        """Number of documents matching the predicate."""
        pass

    @abstractmethod
    def find(
        self,
        predicate: Predicate,
        offset: int = 0,
        limit: int = 20,
        sort: Optional[List[SortField]] = None,
    ) -> List[CatalogDocument]:
        """One slice of the matching documents; without `sort` the order is store-defined."""
        pass

    @abstractmethod
    def scan(self, predicate: Predicate) -> Iterator[CatalogDocument]:
        """Iterate over every matching document."""
        pass

    @abstractmethod
    def last_business_id(self, prefix: str) -> Optional[str]:
        """Highest business id starting with the prefix, across all tenants."""
        pass

    @abstractmethod
    def health_check(self) -> bool:
        """Check if the store is reachable."""
        pass
