"""Sort direction value object"""

from enum import StrEnum


class SortDirection(StrEnum):
    """Direction of a store-side sort"""

    ASC = "ASC"
    DESC = "DESC"

    def is_descending(self) -> bool:
        return self == SortDirection.DESC
