"""Source file kind value object"""

from enum import StrEnum
from typing import Optional


class FileKind(StrEnum):
    """Tabular file kinds accepted for ingestion"""

    CSV = "CSV"
    XLSX = "XLSX"

    @classmethod
    def from_file_name(cls, file_name: Optional[str]) -> Optional["FileKind"]:
        """Resolve the file kind from a file name extension, None if unsupported"""
        if not file_name:
            return None
        lower = file_name.lower()
        if lower.endswith(".csv"):
            return cls.CSV
        if lower.endswith(".xlsx") or lower.endswith(".xls"):
            return cls.XLSX
        return None
