"""Error kind value object"""

from enum import StrEnum


class ErrorKind(StrEnum):
    """Failure categories surfaced by catalog services"""

    BAD_INPUT = "BAD_INPUT"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL = "INTERNAL"

    def http_status(self) -> int:
        """HTTP status code that represents this failure"""
        return {
            ErrorKind.BAD_INPUT: 400,
            ErrorKind.NOT_FOUND: 404,
            ErrorKind.INTERNAL: 500,
        }[self]
