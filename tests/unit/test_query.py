import pytest

from catalogmate.domain.value_objects.filter_kind import FilterKind
from catalogmate.domain.value_objects.sort_direction import SortDirection
from catalogmate.models.filters import FilterSpec
from catalogmate.models.query import And, AnyOf, AttributeMatch, Contains, NumericRange, Or, SortField, Term



def test_range_filter_translates_to_nested_query():
    predicate = FilterSpec(type=FilterKind.RANGE, min=10, max=20).to_predicate("size_millimeter")

    assert predicate.to_opensearch() == {
        "nested": {
            "path": "attributes",
            "query": {
                "bool": {
                    "filter": [
                        {"term": {"attributes.key": "size_millimeter"}},
                        {"range": {"attributes.numeric_value": {"gte": 10.0, "lte": 20.0}}},
                    ]
                }
            },
        }
    }


def test_open_range_has_one_bound():
    assert NumericRange(field="price", gte=5).to_opensearch() == {"range": {"price": {"gte": 5.0}}}


def test_contains_is_escaped_case_insensitive_wildcard():
    assert Contains(field="display_name", text="a*b?").to_opensearch() == {
        "wildcard": {"display_name": {"value": "*a\\*b\\?*", "case_insensitive": True}}
    }


def test_or_requires_one_clause():
    clause = Or(clauses=[Term(field="a", value=1), AnyOf(field="b", values=["x", "y"])]).to_opensearch()
    assert clause == {
        "bool": {
            "should": [{"term": {"a": 1}}, {"terms": {"b": ["x", "y"]}}],
            "minimum_should_match": 1,
        }
    }


def test_empty_and_matches_everything():
    assert And().to_opensearch() == {"match_all": {}}
    assert And().matches({})


def test_sort_field_puts_missing_values_last():
    assert SortField(field="created_at", direction=SortDirection.ASC).to_opensearch() == {
        "created_at": {"order": "asc", "missing": "_last"}
    }


def test_in_memory_evaluation():
    doc = {
        "display_name": "Copper Pipe",
        "normalized_tokens": ["copper", "pipe"],
        "attributes": [
            {"key": "size", "value": "25mm", "numeric_value": 25.0},
            {"key": "weight", "value": "2", "numeric_value": 2.0},
        ],
    }

    assert Contains(field="display_name", text="PIPE").matches(doc)
    assert AnyOf(field="normalized_tokens", values=["brass", "pipe"]).matches(doc)
    assert not Term(field="normalized_tokens", value="brass").matches(doc)
    assert AttributeMatch(conditions=[
        Term(field="key", value="size"), NumericRange(field="numeric_value", gte=20)
    ]).matches(doc)
    # The weight is small but the size is not: no single element satisfies both
    assert not AttributeMatch(conditions=[
        Term(field="key", value="size"), NumericRange(field="numeric_value", lte=5)
    ]).matches(doc)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"type": FilterKind.EXACT},
        {"type": FilterKind.CONTAINS},
        {"type": FilterKind.IN, "values": []},
        {"type": FilterKind.RANGE},
        {"type": FilterKind.RANGE, "min": 5, "max": 1},
    ],
)
def test_invalid_filter_specs(kwargs):
    with pytest.raises(ValueError):
        FilterSpec(**kwargs)


def test_filter_values_are_coerced_to_text():
    spec = FilterSpec(type=FilterKind.IN, values=[10, 20])
    assert spec.to_predicate("size").conditions[1] == AnyOf(field="value", values=["10", "20"])
