"""
Tabular file decoding.

Reads CSV and spreadsheet uploads into a header row plus text data rows.
Values stay untyped here; typing is the attribute detector's job.
"""

import io
from datetime import date, datetime, time
from typing import Any, List, Optional, Tuple

import polars as pl
from loguru import logger
from pydantic import BaseModel, Field

from catalogmate.domain.value_objects.file_kind import FileKind

HEADER_ROW_NUMBER = 1


class TabularFileError(ValueError):
    """The upload cannot be decoded into a header row and data rows"""


class TabularFile(BaseModel):
    """Decoded upload: one header row and zero or more data rows of text cells"""

    file_name: str
    file_kind: FileKind
    headers: List[str]
    rows: List[List[str]] = Field(default_factory=list)

    def numbered_rows(self):
        """Yield (row_number, cells); the header is row 1, so data starts at row 2"""
        for offset, cells in enumerate(self.rows, start=HEADER_ROW_NUMBER + 1):
            yield offset, cells


def cell_to_text(value: Any) -> str:
    """Render one decoded cell as text the way a user would type it"""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return str(value)
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return value.date().isoformat()
        return value.isoformat()
    if isinstance(value, (date, time)):
        return value.isoformat()
    return str(value)


class TabularReader:
    """Decodes CSV and XLSX/XLS uploads with polars"""

    def read(self, file_name: Optional[str], content: bytes) -> TabularFile:
        """
        Decode an upload.

        Args:
            file_name: Original file name, used to pick the decoder
            content: Raw file bytes

        Returns:
            TabularFile with headers and text rows

        Raises:
            TabularFileError: Unsupported or missing file name, empty file, no header
                row or a header row without columns
        """
        file_kind = FileKind.from_file_name(file_name)
        if file_kind is None:
            raise TabularFileError(f"Unsupported file '{file_name}'. Use CSV or Excel (.xlsx, .xls)")
        if not content:
            raise TabularFileError(f"File '{file_name}' is empty")

        try:
            if file_kind == FileKind.CSV:
                headers, rows = self._read_csv(content)
            else:
                headers, rows = self._read_excel(content)
        except pl.exceptions.NoDataError as e:
            raise TabularFileError(f"File '{file_name}' is empty") from e
        except Exception as e:
            logger.error(f"❌ Could not decode {file_kind} file '{file_name}': {e}")
            raise TabularFileError(f"File '{file_name}' could not be read as {file_kind}") from e

        if not headers:
            raise TabularFileError(f"File '{file_name}' has no header row")
        if not any(header.strip() for header in headers):
            raise TabularFileError(f"File '{file_name}' has no header columns")

        logger.info(f"Decoded {file_kind} file '{file_name}': {len(headers)} columns, {len(rows)} data rows")
        return TabularFile(file_name=file_name, file_kind=file_kind, headers=headers, rows=rows)

    def _read_csv(self, content: bytes) -> Tuple[List[str], List[List[str]]]:
        frame = pl.read_csv(
            io.BytesIO(content),
            has_header=False,
            infer_schema_length=0,
            truncate_ragged_lines=True,
            encoding="utf8-lossy",
        )
        all_rows = [[cell_to_text(value) for value in row] for row in frame.iter_rows()]
        if not all_rows:
            return [], []
        return all_rows[0], all_rows[1:]

    def _read_excel(self, content: bytes) -> Tuple[List[str], List[List[str]]]:
        """
        Headers and data rows of the first sheet.

        The header row is read on its own so the data columns keep their cell
        types (dates, numbers, booleans) instead of being widened to text.
        """
        header_frame = pl.read_excel(
            io.BytesIO(content),
            sheet_id=1,
            has_header=False,
            read_options={"n_rows": 1},
            drop_empty_rows=False,
            drop_empty_cols=False,
        )
        if header_frame.height == 0:
            return [], []
        headers = [cell_to_text(value) for value in header_frame.row(0)]

        data_frame = pl.read_excel(
            io.BytesIO(content),
            sheet_id=1,
            has_header=True,
            drop_empty_rows=False,
            drop_empty_cols=False,
            raise_if_empty=False,
        )
        width = len(headers)
        rows = []
        for row in data_frame.iter_rows():
            cells = [cell_to_text(value) for value in row[:width]]
            rows.append(cells + [""] * (width - len(cells)))
        return headers, rows
