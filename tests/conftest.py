import io
from datetime import datetime, timezone

import polars as pl
import pytest

from catalogmate.dbs.adapters.memory_catalog_adapter import InMemoryCatalogAdapter
from catalogmate.services.catalog_services import CatalogServices
from catalogmate.services.sequence_service import BusinessIdSequence
from catalogmate.utils.settings.core import CatalogSettings


FIXED_NOW = datetime(2024, 3, 15, 10, 30, tzinfo=timezone.utc)


class MutableClock:
    """Clock a test can move forward"""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock() -> MutableClock:
    return MutableClock()


@pytest.fixture
def store() -> InMemoryCatalogAdapter:
    return InMemoryCatalogAdapter()


@pytest.fixture
def catalog_settings() -> CatalogSettings:
    return CatalogSettings(keyword_candidate_cap=200, business_id_prefix="DPRD", max_page_size=100)


@pytest.fixture
def services(store, catalog_settings, clock) -> CatalogServices:
    sequence = BusinessIdSequence(prefix="DPRD", clock=clock)
    return CatalogServices(store=store, catalog_settings=catalog_settings, sequence=sequence)


def csv_bytes(*rows) -> bytes:
    """Build CSV content from rows of cells"""
    return "\n".join(",".join(row) for row in rows).encode("utf-8") + b"\n"


@pytest.fixture
def ingest_csv(services):
    """Ingest CSV rows for a tenant and return the IngestionResult"""

    def _ingest(tenant_id: str, *rows, file_name: str = "products.csv", user_id: str = "alice"):
        result = services.ingestion.ingest(tenant_id, file_name, csv_bytes(*rows), user_id)
        assert result.is_ok(), result.unwrap_err()
        return result.unwrap()

    return _ingest


@pytest.fixture
def csv_content():
    return csv_bytes


def xlsx_bytes(columns: dict) -> bytes:
    """Build a one-sheet workbook; dict keys become the header row"""
    buffer = io.BytesIO()
    pl.DataFrame(columns).write_excel(buffer, autofit=False)
    return buffer.getvalue()


@pytest.fixture
def xlsx_content():
    return xlsx_bytes
