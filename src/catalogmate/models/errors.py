"""Error payload returned by catalog services inside neopipe Err results"""

from pydantic import BaseModel

from catalogmate.domain.value_objects.error_kind import ErrorKind


class CatalogError(BaseModel):
    """Caller-safe failure description; internal detail stays in the logs"""

    kind: ErrorKind
    message: str

    @classmethod
    def bad_input(cls, message: str) -> "CatalogError":
        return cls(kind=ErrorKind.BAD_INPUT, message=message)

    @classmethod
    def not_found(cls, message: str) -> "CatalogError":
        return cls(kind=ErrorKind.NOT_FOUND, message=message)

    @classmethod
    def internal(cls, message: str = "Internal error while processing the catalog request") -> "CatalogError":
        return cls(kind=ErrorKind.INTERNAL, message=message)
