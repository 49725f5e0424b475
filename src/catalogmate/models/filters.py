"""
Per-attribute filter specifications.

Each filter translates to "some attribute element has this key and satisfies
this condition"; search ANDs all of them together.
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

from catalogmate.domain.value_objects.filter_kind import FilterKind
from catalogmate.models.query import AnyOf, AttributeMatch, Contains, NumericRange, Term


class FilterSpec(BaseModel):
    """
    Filter on one attribute key.

    Example:
        >>> FilterSpec(type=FilterKind.RANGE, min=10, max=20).to_predicate("weight")
        AttributeMatch(conditions=[Term(field='key', value='weight'), NumericRange(...)])
    """

    model_config = ConfigDict(coerce_numbers_to_str=True)

    type: FilterKind = Field(description="EXACT, RANGE, IN or CONTAINS")
    value: Optional[str] = Field(default=None, description="Literal for EXACT and CONTAINS")
    values: Optional[List[str]] = Field(default=None, description="Accepted literals for IN")
    min: Optional[float] = Field(default=None, description="Inclusive lower bound for RANGE")
    max: Optional[float] = Field(default=None, description="Inclusive upper bound for RANGE")

    @model_validator(mode="after")
    def check_operands(self) -> "FilterSpec":
        if self.type in (FilterKind.EXACT, FilterKind.CONTAINS) and self.value is None:
            raise ValueError(f"{self.type} filter requires 'value'")
        if self.type == FilterKind.IN and not self.values:
            raise ValueError("IN filter requires a non-empty 'values' list")
        if self.type == FilterKind.RANGE:
            if self.min is None and self.max is None:
                raise ValueError("RANGE filter requires 'min' and/or 'max'")
            if self.min is not None and self.max is not None and self.min > self.max:
                raise ValueError(f"RANGE filter min {self.min} is greater than max {self.max}")
        return self

    def to_predicate(self, attribute_key: str) -> AttributeMatch:
        """Build the attribute-element predicate for this filter"""
        key_clause = Term(field="key", value=attribute_key)
        if self.type == FilterKind.EXACT:
            condition = Term(field="value", value=self.value)
        elif self.type == FilterKind.RANGE:
            condition = NumericRange(field="numeric_value", gte=self.min, lte=self.max)
        elif self.type == FilterKind.IN:
            condition = AnyOf(field="value", values=list(self.values))
        else:
            condition = Contains(field="value", text=self.value)
        return AttributeMatch(conditions=[key_clause, condition])
