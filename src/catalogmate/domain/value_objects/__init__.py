"""Value objects for the catalog domain"""

from catalogmate.domain.value_objects.attribute_type import AttributeType
from catalogmate.domain.value_objects.filter_kind import FilterKind
from catalogmate.domain.value_objects.file_kind import FileKind
from catalogmate.domain.value_objects.error_kind import ErrorKind
from catalogmate.domain.value_objects.sort_direction import SortDirection

__all__ = ["AttributeType", "FilterKind", "FileKind", "ErrorKind", "SortDirection"]
