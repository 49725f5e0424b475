import pytest

from catalogmate.dbs.adapters.memory_catalog_adapter import InMemoryCatalogAdapter
from catalogmate.domain.value_objects.error_kind import ErrorKind
from catalogmate.domain.value_objects.filter_kind import FilterKind
from catalogmate.domain.value_objects.sort_direction import SortDirection
from catalogmate.models.filters import FilterSpec
from catalogmate.models.query import And
from catalogmate.models.search import SearchQuery
from catalogmate.services.catalog_services import CatalogServices
from catalogmate.services.sequence_service import BusinessIdSequence
from catalogmate.utils.settings.core import CatalogSettings

HEADER = ["Product Name", "Category", "Size (mm)", "Material"]


@pytest.fixture
def pipes(ingest_csv):
    return ingest_csv(
        "acme",
        HEADER,
        ["Copper Pipe Adapter", "Adapters", "21", "Copper"],
        ["Pipe Fitting", "Fittings", "15", "Brass"],
        ["Pipe", "Pipes", "10", "Steel"],
        ["Ball Valve", "Valves", "20", "Brass"],
    )


def _names(page):
    return [document.display_name for document in page.items]


def test_keyword_results_are_ranked(services, pipes):
    page = services.search.search("acme", SearchQuery(keyword="Pipe")).unwrap()

    assert _names(page) == ["Pipe", "Pipe Fitting", "Copper Pipe Adapter"]
    assert page.total == 3


def test_keyword_matches_attribute_values(services, pipes):
    page = services.search.search("acme", SearchQuery(keyword="brass")).unwrap()
    assert sorted(_names(page)) == ["Ball Valve", "Pipe Fitting"]


def test_keyword_paging_slices_ranked_list(services, pipes):
    page = services.search.search("acme", SearchQuery(keyword="pipe", page=1, size=2)).unwrap()
    assert _names(page) == ["Copper Pipe Adapter"]
    assert page.total == 3
    assert page.total_pages == 2


def test_range_filter_is_inclusive(services, pipes):
    query = SearchQuery(filters={"size_millimeter": FilterSpec(type=FilterKind.RANGE, min=10, max=20)})
    page = services.search.search("acme", query).unwrap()

    assert sorted(_names(page)) == ["Ball Valve", "Pipe", "Pipe Fitting"]


def test_exact_in_and_contains_filters(services, pipes):
    exact = SearchQuery(filters={"material": FilterSpec(type=FilterKind.EXACT, value="Brass")})
    assert sorted(_names(services.search.search("acme", exact).unwrap())) == ["Ball Valve", "Pipe Fitting"]

    any_of = SearchQuery(filters={"material": FilterSpec(type=FilterKind.IN, values=["Steel", "Copper"])})
    assert sorted(_names(services.search.search("acme", any_of).unwrap())) == ["Copper Pipe Adapter", "Pipe"]

    contains = SearchQuery(filters={"material": FilterSpec(type=FilterKind.CONTAINS, value="ste")})
    assert _names(services.search.search("acme", contains).unwrap()) == ["Pipe"]


def test_filters_require_same_attribute_element(services, pipes):
    # "Brass" is a material value, never a size value
    query = SearchQuery(filters={"size_millimeter": FilterSpec(type=FilterKind.EXACT, value="Brass")})
    assert services.search.search("acme", query).unwrap().total == 0


def test_category_and_keyword_combine(services, pipes):
    page = services.search.search("acme", SearchQuery(keyword="pipe", category="Fittings")).unwrap()
    assert _names(page) == ["Pipe Fitting"]


def test_filter_search_sorts_by_requested_field(services, pipes):
    query = SearchQuery(sort_by="displayName", sort_direction=SortDirection.ASC)
    page = services.search.search("acme", query).unwrap()
    assert _names(page) == ["Ball Valve", "Copper Pipe Adapter", "Pipe", "Pipe Fitting"]


def test_unknown_sort_field_is_bad_input(services, pipes):
    result = services.search.search("acme", SearchQuery(sort_by="price"))
    assert result.unwrap_err().kind == ErrorKind.BAD_INPUT


def test_page_size_limit(services, pipes):
    result = services.search.search("acme", SearchQuery(size=101))
    assert result.unwrap_err().kind == ErrorKind.BAD_INPUT


def test_soft_deleted_documents_are_excluded(services, store, pipes):
    pipe = next(document for document in store.scan(And()) if document.display_name == "Pipe")
    services.documents.soft_delete("acme", pipe.id, "bob").unwrap()

    page = services.search.search("acme", SearchQuery(keyword="pipe")).unwrap()
    assert _names(page) == ["Pipe Fitting", "Copper Pipe Adapter"]


def test_soft_deleted_documents_are_excluded_from_filter_search(services, store, pipes):
    pipe = next(document for document in store.scan(And()) if document.display_name == "Pipe")
    services.documents.soft_delete("acme", pipe.id, "bob").unwrap()

    page = services.search.search("acme", SearchQuery()).unwrap()
    assert page.total == 3
    assert "Pipe" not in _names(page)

    steel = SearchQuery(filters={"material": FilterSpec(type=FilterKind.EXACT, value="Steel")})
    assert services.search.search("acme", steel).unwrap().total == 0


def test_tenants_are_isolated(services, pipes, ingest_csv):
    ingest_csv("globex", HEADER, ["Pipe", "Pipes", "12", "Steel"])

    assert services.search.search("globex", SearchQuery(keyword="pipe")).unwrap().total == 1
    assert services.search.search("acme", SearchQuery()).unwrap().total == 4
    assert services.search.search("initech", SearchQuery(keyword="pipe")).unwrap().total == 0


def test_candidate_cap_bounds_ranking(store, clock):
    capped = CatalogServices(
        store=store,
        catalog_settings=CatalogSettings(keyword_candidate_cap=2),
        sequence=BusinessIdSequence(clock=clock),
    )
    for name in ["Pipe A", "Pipe B", "Pipe C"]:
        capped.ingestion.ingest("acme", "p.csv", f"Name\n{name}\n".encode(), "alice").unwrap()

    page = capped.search.search("acme", SearchQuery(keyword="pipe", size=10)).unwrap()
    assert page.total == 3
    assert len(page.items) == 2


class InsertAfterCountStore(InMemoryCatalogAdapter):
    """Writes one more matching document right after every count"""

    def __init__(self, extra):
        super().__init__()
        self.extra = extra

    def count(self, predicate):
        total = super().count(predicate)
        if self.extra is not None:
            self.bulk_insert([self.extra])
            self.extra = None
        return total


def test_keyword_total_is_taken_before_fetch(catalog_settings, pipes, store):
    documents = [document.model_copy(update={"id": None}) for document in store.scan(And())]
    late = next(document for document in documents if document.display_name == "Pipe")
    racing_store = InsertAfterCountStore(extra=late)
    racing_store.bulk_insert(documents)
    racing = CatalogServices(store=racing_store, catalog_settings=catalog_settings)

    page = racing.search.search("acme", SearchQuery(keyword="pipe")).unwrap()

    assert page.total == 3
    assert len(page.items) == 3
    assert racing_store.count(racing.search.keyword_predicate("pipe")) == 4


def test_list_available_filters(services, pipes):
    descriptors = services.search.list_available_filters("acme").unwrap()
    by_key = {descriptor.attribute_key: descriptor for descriptor in descriptors}

    assert list(by_key) == sorted(by_key)
    assert by_key["material"].available_values == ["Brass", "Copper", "Steel"]
    assert by_key["size_millimeter"].type == "NUMBER"
    assert by_key["size_millimeter"].display_name == "Size Millimeter"


def test_distinct_values(services, pipes):
    assert services.search.distinct_values("acme", "material").unwrap() == ["Brass", "Copper", "Steel"]
    assert services.search.distinct_values("acme", "unknown").unwrap() == []


def test_filters_and_values_are_tenant_scoped(services, pipes, ingest_csv):
    ingest_csv("globex", ["Name", "Finish", "Material"], ["Flange", "Galvanized", "Titanium"])

    acme_keys = {descriptor.attribute_key for descriptor in services.search.list_available_filters("acme").unwrap()}
    globex_keys = {descriptor.attribute_key for descriptor in services.search.list_available_filters("globex").unwrap()}

    assert "finish" not in acme_keys
    assert "size_millimeter" not in globex_keys
    assert services.search.distinct_values("acme", "material").unwrap() == ["Brass", "Copper", "Steel"]
    assert services.search.distinct_values("globex", "material").unwrap() == ["Titanium"]
    assert services.search.distinct_values("acme", "finish").unwrap() == []
    assert services.search.list_available_filters("initech").unwrap() == []
