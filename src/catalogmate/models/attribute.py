"""
Attribute value object.

An attribute is one schema-less key/value entry of a catalog document. The
`type` field is the discriminant: only the typed fields that belong to that
type may be populated.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, model_validator

from catalogmate.domain.value_objects.attribute_type import AttributeType


def beautify_key(key: str) -> str:
    """Turn a normalized key into a label: 'pipe_size' -> 'Pipe Size'"""
    return " ".join(word.capitalize() for word in key.split("_") if word)


class Attribute(BaseModel):
    """Typed attribute extracted from one cell of a source row"""

    key: str = Field(description="Normalized attribute key")
    original_key: str = Field(description="Header as authored in the source file")
    value: str = Field(description="Trimmed original cell value")
    type: AttributeType = Field(default=AttributeType.STRING, description="Detected value type")
    numeric_value: Optional[float] = Field(default=None, description="Parsed number, NUMBER only")
    range_min: Optional[float] = Field(default=None, description="Lower bound, RANGE only")
    range_max: Optional[float] = Field(default=None, description="Upper bound, RANGE only")
    boolean_value: Optional[bool] = Field(default=None, description="Parsed flag, BOOLEAN only")
    unit: Optional[str] = Field(default=None, description="Unit token, NUMBER only")
    searchable: bool = Field(default=True, description="Whether keyword search looks at this value")

    @model_validator(mode="after")
    def check_typed_fields(self) -> "Attribute":
        """Reject typed fields that do not belong to the attribute type"""
        if self.type != AttributeType.NUMBER and (self.numeric_value is not None or self.unit is not None):
            raise ValueError(f"numeric_value and unit are only allowed on NUMBER attributes, got {self.type}")
        if self.type != AttributeType.RANGE and (self.range_min is not None or self.range_max is not None):
            raise ValueError(f"range bounds are only allowed on RANGE attributes, got {self.type}")
        if self.type != AttributeType.BOOLEAN and self.boolean_value is not None:
            raise ValueError(f"boolean_value is only allowed on BOOLEAN attributes, got {self.type}")

        if self.type == AttributeType.NUMBER and self.numeric_value is None:
            raise ValueError("NUMBER attributes require numeric_value")
        if self.type == AttributeType.BOOLEAN and self.boolean_value is None:
            raise ValueError("BOOLEAN attributes require boolean_value")
        if self.type == AttributeType.RANGE:
            if self.range_min is None or self.range_max is None:
                raise ValueError("RANGE attributes require range_min and range_max")
            if self.range_min > self.range_max:
                raise ValueError(f"range_min {self.range_min} is greater than range_max {self.range_max}")
        return self

    @property
    def display_key(self) -> str:
        return beautify_key(self.key)

    def to_opensearch_doc(self) -> Dict[str, Any]:
        """Nested attribute representation stored in the catalog index"""
        return {
            "key": self.key,
            "original_key": self.original_key,
            "value": self.value,
            "type": self.type.value,
            "numeric_value": self.numeric_value,
            "range_min": self.range_min,
            "range_max": self.range_max,
            "boolean_value": self.boolean_value,
            "unit": self.unit,
            "searchable": self.searchable,
        }

    @classmethod
    def from_opensearch_doc(cls, doc: Dict[str, Any]) -> "Attribute":
        return cls(
            key=doc["key"],
            original_key=doc.get("original_key") or doc["key"],
            value=doc.get("value", ""),
            type=AttributeType(doc.get("type", AttributeType.STRING)),
            numeric_value=doc.get("numeric_value"),
            range_min=doc.get("range_min"),
            range_max=doc.get("range_max"),
            boolean_value=doc.get("boolean_value"),
            unit=doc.get("unit"),
            searchable=doc.get("searchable", True),
        )


class AttributeInput(BaseModel):
    """
    Attribute supplied by a caller on update.

    Without `type`, the value is typed the same way ingestion types cells.
    """

    key: str = Field(min_length=1)
    original_key: Optional[str] = None
    value: str
    type: Optional[AttributeType] = None
    numeric_value: Optional[float] = None
    range_min: Optional[float] = None
    range_max: Optional[float] = None
    boolean_value: Optional[bool] = None
    unit: Optional[str] = None
    searchable: bool = True
