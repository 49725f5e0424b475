"""Attribute type value object"""

from enum import StrEnum


class AttributeType(StrEnum):
    """Semantic type inferred for a single attribute value"""

    STRING = "STRING"
    NUMBER = "NUMBER"
    BOOLEAN = "BOOLEAN"
    RANGE = "RANGE"
    DATE = "DATE"
    UNKNOWN = "UNKNOWN"
