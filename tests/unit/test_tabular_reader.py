from datetime import date, datetime

import pytest

from catalogmate.domain.value_objects.file_kind import FileKind
from catalogmate.services.tabular_reader import TabularFileError, TabularReader, cell_to_text


@pytest.fixture
def reader() -> TabularReader:
    return TabularReader()


def test_read_csv_keeps_cells_as_text(reader, csv_content):
    tabular = reader.read("products.csv", csv_content(["Product Name", "Size (mm)"], ["Widget A", "025"]))

    assert tabular.file_kind == FileKind.CSV
    assert tabular.headers == ["Product Name", "Size (mm)"]
    assert tabular.rows == [["Widget A", "025"]]


def test_numbered_rows_start_after_header(reader, csv_content):
    tabular = reader.read("p.csv", csv_content(["a", "b"], ["1", "2"], ["3", "4"]))
    assert [number for number, _ in tabular.numbered_rows()] == [2, 3]


def test_missing_cells_become_empty_text(reader, csv_content):
    tabular = reader.read("p.csv", csv_content(["a", "b", "c"], ["x", "", "z"]))
    assert tabular.rows == [["x", "", "z"]]


@pytest.mark.parametrize("file_name", [None, "", "products.pdf", "products"])
def test_unsupported_file_name(reader, file_name):
    with pytest.raises(TabularFileError):
        reader.read(file_name, b"a,b\n1,2\n")


def test_empty_content(reader):
    with pytest.raises(TabularFileError):
        reader.read("products.csv", b"")


def test_blank_header_row(reader, csv_content):
    with pytest.raises(TabularFileError):
        reader.read("products.csv", csv_content(["", ""], ["x", "y"]))


def test_file_kind_from_file_name():
    assert FileKind.from_file_name("A.CSV") == FileKind.CSV
    assert FileKind.from_file_name("a.xlsx") == FileKind.XLSX
    assert FileKind.from_file_name("a.xls") == FileKind.XLSX
    assert FileKind.from_file_name("a.txt") is None


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, ""),
        (True, "true"),
        (25.0, "25"),
        (2.5, "2.5"),
        (7, "7"),
        (datetime(2024, 3, 15), "2024-03-15"),
        (datetime(2024, 3, 15, 8, 30), "2024-03-15T08:30:00"),
        (date(2024, 3, 15), "2024-03-15"),
        ("text", "text"),
    ],
)
def test_cell_to_text(value, expected):
    assert cell_to_text(value) == expected


def test_read_excel_renders_typed_cells(reader, xlsx_content):
    content = xlsx_content(
        {
            "Product Name": ["Widget A", "Widget B"],
            "Made": [date(2024, 1, 15), None],
            "Size (mm)": [25.0, 30.0],
            "Weight": [2.5, 1.0],
            "Available": [True, False],
        }
    )

    tabular = reader.read("products.xlsx", content)

    assert tabular.file_kind == FileKind.XLSX
    assert tabular.headers == ["Product Name", "Made", "Size (mm)", "Weight", "Available"]
    assert tabular.rows == [
        ["Widget A", "2024-01-15", "25", "2.5", "true"],
        ["Widget B", "", "30", "1", "false"],
    ]
