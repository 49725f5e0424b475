"""
Store-neutral query predicates.

Services describe what they want as a small predicate tree. Each store adapter
either translates the tree (`to_opensearch`) or evaluates it against stored
document bodies (`matches`), so both backends answer the same question.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from catalogmate.domain.value_objects.sort_direction import SortDirection

ATTRIBUTES_PATH = "attributes"


def _field_values(doc: Dict[str, Any], field: str) -> List[Any]:
    """Values of a field as a list; list fields are flattened"""
    value = doc.get(field)
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def _escape_wildcard(text: str) -> str:
    return text.replace("\\", "\\\\").replace("*", "\\*").replace("?", "\\?")


class Predicate(BaseModel, ABC):
    """Base class for all predicate nodes"""

    @abstractmethod
    def to_opensearch(self, prefix: str = "") -> Dict[str, Any]:
        """Translate into an OpenSearch query clause, field names prefixed by `prefix`"""

    @abstractmethod
    def matches(self, doc: Dict[str, Any]) -> bool:
        """Evaluate against a stored document body"""


class Term(Predicate):
    """Field equals a literal (any element for list fields)"""

    field: str
    value: Any

    def to_opensearch(self, prefix: str = "") -> Dict[str, Any]:
        return {"term": {f"{prefix}{self.field}": self.value}}

    def matches(self, doc: Dict[str, Any]) -> bool:
        return self.value in _field_values(doc, self.field)


class AnyOf(Predicate):
    """Field equals one of the literals; for list fields, the sets intersect"""

    field: str
    values: List[Any]

    def to_opensearch(self, prefix: str = "") -> Dict[str, Any]:
        return {"terms": {f"{prefix}{self.field}": list(self.values)}}

    def matches(self, doc: Dict[str, Any]) -> bool:
        wanted = set(self.values)
        return any(value in wanted for value in _field_values(doc, self.field))


class Contains(Predicate):
    """Case-insensitive substring match on a string field"""

    field: str
    text: str

    def to_opensearch(self, prefix: str = "") -> Dict[str, Any]:
        return {
            "wildcard": {
                f"{prefix}{self.field}": {
                    "value": f"*{_escape_wildcard(self.text)}*",
                    "case_insensitive": True,
                }
            }
        }

    def matches(self, doc: Dict[str, Any]) -> bool:
        needle = self.text.lower()
        return any(
            isinstance(value, str) and needle in value.lower()
            for value in _field_values(doc, self.field)
        )


class NumericRange(Predicate):
    """Numeric field within [gte, lte]; an open side is unbounded"""

    field: str
    gte: Optional[float] = None
    lte: Optional[float] = None

    def to_opensearch(self, prefix: str = "") -> Dict[str, Any]:
        bounds = {}
        if self.gte is not None:
            bounds["gte"] = self.gte
        if self.lte is not None:
            bounds["lte"] = self.lte
        return {"range": {f"{prefix}{self.field}": bounds}}

    def matches(self, doc: Dict[str, Any]) -> bool:
        for value in _field_values(doc, self.field):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                continue
            if self.gte is not None and value < self.gte:
                continue
            if self.lte is not None and value > self.lte:
                continue
            return True
        return False


class And(Predicate):
    """All clauses hold; no clauses matches everything"""

    clauses: List[Predicate] = Field(default_factory=list)

    def to_opensearch(self, prefix: str = "") -> Dict[str, Any]:
        if not self.clauses:
            return {"match_all": {}}
        return {"bool": {"filter": [clause.to_opensearch(prefix) for clause in self.clauses]}}

    def matches(self, doc: Dict[str, Any]) -> bool:
        return all(clause.matches(doc) for clause in self.clauses)


class Or(Predicate):
    """At least one clause holds"""

    clauses: List[Predicate] = Field(default_factory=list)

    def to_opensearch(self, prefix: str = "") -> Dict[str, Any]:
        return {
            "bool": {
                "should": [clause.to_opensearch(prefix) for clause in self.clauses],
                "minimum_should_match": 1,
            }
        }

    def matches(self, doc: Dict[str, Any]) -> bool:
        return any(clause.matches(doc) for clause in self.clauses)


class AttributeMatch(Predicate):
    """
    Some single attribute element satisfies every condition.

    Conditions are written against attribute fields (`key`, `value`,
    `numeric_value`, `searchable`); on OpenSearch this becomes a nested query.
    """

    conditions: List[Predicate]

    def to_opensearch(self, prefix: str = "") -> Dict[str, Any]:
        path = f"{prefix}{ATTRIBUTES_PATH}"
        return {
            "nested": {
                "path": path,
                "query": And(clauses=self.conditions).to_opensearch(prefix=f"{path}."),
            }
        }

    def matches(self, doc: Dict[str, Any]) -> bool:
        return any(
            all(condition.matches(attribute) for condition in self.conditions)
            for attribute in doc.get(ATTRIBUTES_PATH) or []
        )


class SortField(BaseModel):
    """Store-side sort on a document field"""

    field: str
    direction: SortDirection = SortDirection.DESC

    def to_opensearch(self) -> Dict[str, Any]:
        return {self.field: {"order": self.direction.value.lower(), "missing": "_last"}}
