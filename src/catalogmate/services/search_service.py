"""
Catalog search service.

Keyword searches fetch a bounded candidate set without store sorting, score it
in memory and slice the requested page from the ranked list. Filter-only
searches leave pagination and sorting to the store.

Keyword search is not snapshot consistent: documents written between the
count and the candidate fetch can change which candidates are ranked, and the
reported total is the count taken before the fetch.
"""

from typing import Dict, List, Optional, Set

from loguru import logger
from neopipe import Result, Ok, Err

from catalogmate.dbs.interfaces.catalog_store import AbstractCatalogStore
from catalogmate.domain.value_objects.attribute_type import AttributeType
from catalogmate.models.attribute import beautify_key
from catalogmate.models.document import CatalogDocument
from catalogmate.models.errors import CatalogError
from catalogmate.models.query import (
    And,
    AnyOf,
    AttributeMatch,
    Contains,
    Or,
    Predicate,
    SortField,
    Term,
)
from catalogmate.models.results import FilterDescriptor, SearchPage
from catalogmate.models.search import SearchQuery
from catalogmate.services.header_normalizer import HeaderNormalizer
from catalogmate.services.relevance import score_document
from catalogmate.utils.settings.core import CatalogSettings

# Attribute keys whose value always wins as display name in keyword results
RECONCILED_DISPLAY_NAME_KEYS = ("productname", "product_name", "itemname", "item_name", "name")

SORT_FIELDS: Dict[str, str] = {
    "createdat": "created_at",
    "created_at": "created_at",
    "lastmodifiedat": "last_modified_at",
    "last_modified_at": "last_modified_at",
    "displayname": "display_name",
    "display_name": "display_name",
    "category": "category",
    "productid": "business_id",
    "businessid": "business_id",
    "business_id": "business_id",
}

DEFAULT_SORT_FIELD = "created_at"


def active_scope(tenant_id: str) -> List[Predicate]:
    """Predicates every default read carries: own tenant, not soft-deleted"""
    return [Term(field="tenant_id", value=tenant_id), Term(field="is_deleted", value=False)]


def reconcile_display_name(document: CatalogDocument) -> CatalogDocument:
    """Use the value of a name-like attribute as display name when the document has one"""
    for attribute in document.attributes:
        if attribute.key.lower() in RECONCILED_DISPLAY_NAME_KEYS:
            document.display_name = attribute.value
            break
    return document


class CatalogSearchService:
    """Keyword and filter search over a tenant's catalog"""

    def __init__(
        self,
        store: AbstractCatalogStore,
        settings: Optional[CatalogSettings] = None,
        normalizer: Optional[HeaderNormalizer] = None,
    ):
        self.store = store
        self.settings = settings or CatalogSettings()
        self.normalizer = normalizer or HeaderNormalizer()

    def search(self, tenant_id: str, query: SearchQuery) -> Result[SearchPage, CatalogError]:
        """
        Search the tenant's non-deleted documents.

        Args:
            tenant_id: Tenant scope
            query: Keyword, category, filters and paging

        Returns:
            Result with the requested page, BAD_INPUT for an invalid sort field or
            page size, INTERNAL when the store fails
        """
        if not tenant_id:
            return Err(CatalogError.bad_input("Tenant is required"))
        if query.size > self.settings.max_page_size:
            return Err(CatalogError.bad_input(f"Page size must not exceed {self.settings.max_page_size}"))

        clauses = active_scope(tenant_id) + self._filter_clauses(query)

        try:
            if query.has_keyword():
                return Ok(self._keyword_search(tenant_id, query, clauses))

            sort_result = self.resolve_sort(query)
            if sort_result.is_err():
                return sort_result
            predicate = And(clauses=clauses)
            total = self.store.count(predicate)
            items = self.store.find(
                predicate,
                offset=query.page * query.size,
                limit=query.size,
                sort=sort_result.unwrap(),
            )
            logger.info(f"[Tenant: {tenant_id}] Filter search matched {total} documents")
            return Ok(SearchPage(items=items, total=total, page=query.page, size=query.size))
        except Exception as e:
            logger.exception(f"[Tenant: {tenant_id}] ❌ Search failed for keyword={query.keyword!r}: {e}")
            return Err(CatalogError.internal("Search failed"))

    def _filter_clauses(self, query: SearchQuery) -> List[Predicate]:
        clauses: List[Predicate] = []
        if query.category and query.category.strip():
            clauses.append(Term(field="category", value=query.category.strip()))
        for attribute_key, spec in query.filters.items():
            clauses.append(spec.to_predicate(attribute_key))
        return clauses

    def keyword_predicate(self, keyword: str) -> Predicate:
        """
        Documents matching a keyword: display name, search tokens or a searchable
        attribute value contain it, or an alias-expanded token matches.
        """
        normalized_query = self.normalizer.normalize_search_query(keyword)
        tokens = sorted(self.normalizer.create_search_tokens(normalized_query))

        alternatives: List[Predicate] = [
            Contains(field="display_name", text=keyword),
            Contains(field="search_tokens", text=keyword),
        ]
        if tokens:
            alternatives.append(AnyOf(field="normalized_tokens", values=tokens))
        alternatives.append(AttributeMatch(conditions=[
            Term(field="searchable", value=True),
            Contains(field="value", text=keyword),
        ]))
        return Or(clauses=alternatives)

    def _keyword_search(self, tenant_id: str, query: SearchQuery, clauses: List[Predicate]) -> SearchPage:
        keyword = query.keyword.strip()
        predicate = And(clauses=clauses + [self.keyword_predicate(keyword)])

        total = self.store.count(predicate)
        cap = self.settings.keyword_candidate_cap
        if total > cap:
            logger.warning(
                f"[Tenant: {tenant_id}] Keyword '{keyword}' matched {total} documents, "
                f"only the first {cap} candidates are ranked"
            )

        candidates = self.store.find(predicate, offset=0, limit=min(total, cap)) if total else []

        lower_keyword = keyword.lower()
        ranked = sorted(
            (reconcile_display_name(candidate) for candidate in candidates),
            key=lambda candidate: score_document(candidate, lower_keyword),
            reverse=True,
        )

        start = query.page * query.size
        logger.info(f"[Tenant: {tenant_id}] Keyword '{keyword}' matched {total} documents, ranked {len(ranked)}")
        return SearchPage(items=ranked[start:start + query.size], total=total, page=query.page, size=query.size)

    def resolve_sort(self, query: SearchQuery) -> Result[List[SortField], CatalogError]:
        """Map a requested sort field to a document field; created_at by default"""
        requested = (query.sort_by or "").strip()
        if not requested:
            return Ok([SortField(field=DEFAULT_SORT_FIELD, direction=query.sort_direction)])

        field = SORT_FIELDS.get(requested.lower())
        if field is None:
            return Err(CatalogError.bad_input(f"Unsupported sort field '{requested}'"))
        return Ok([SortField(field=field, direction=query.sort_direction)])

    def list_available_filters(self, tenant_id: str) -> Result[List[FilterDescriptor], CatalogError]:
        """
        One filter descriptor per attribute key seen in the tenant's catalog.

        The type of a key is the first type observed for it; keys and values are
        returned sorted.
        """
        if not tenant_id:
            return Err(CatalogError.bad_input("Tenant is required"))

        values_by_key: Dict[str, Set[str]] = {}
        type_by_key: Dict[str, AttributeType] = {}
        try:
            for document in self.store.scan(And(clauses=active_scope(tenant_id))):
                for attribute in document.attributes:
                    values_by_key.setdefault(attribute.key, set()).add(attribute.value)
                    type_by_key.setdefault(attribute.key, attribute.type)
        except Exception as e:
            logger.exception(f"[Tenant: {tenant_id}] ❌ Listing available filters failed: {e}")
            return Err(CatalogError.internal("Failed to list available filters"))

        return Ok([
            FilterDescriptor(
                attribute_key=key,
                display_name=beautify_key(key),
                type=type_by_key[key],
                available_values=sorted(values_by_key[key]),
            )
            for key in sorted(values_by_key)
        ])

    def distinct_values(self, tenant_id: str, attribute_key: str) -> Result[List[str], CatalogError]:
        """Sorted distinct values of one attribute key across the tenant's catalog"""
        if not tenant_id:
            return Err(CatalogError.bad_input("Tenant is required"))

        predicate = And(clauses=active_scope(tenant_id) + [
            AttributeMatch(conditions=[Term(field="key", value=attribute_key)])
        ])
        values: Set[str] = set()
        try:
            for document in self.store.scan(predicate):
                values.update(attribute.value for attribute in document.attributes if attribute.key == attribute_key)
        except Exception as e:
            logger.exception(f"[Tenant: {tenant_id}] ❌ Listing values for '{attribute_key}' failed: {e}")
            return Err(CatalogError.internal("Failed to list attribute values"))

        return Ok(sorted(values))
