"""Filter kind value object"""

from enum import StrEnum


class FilterKind(StrEnum):
    """Kinds of per-attribute filters accepted by search"""

    EXACT = "EXACT"
    RANGE = "RANGE"
    IN = "IN"
    CONTAINS = "CONTAINS"
