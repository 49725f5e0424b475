"""
Catalog ingestion service.

Turns an uploaded CSV/Excel file into one catalog document per non-empty row:
headers are normalized once, every populated cell becomes a typed attribute,
and the batch is written to the store in one bulk call.
"""

from datetime import datetime
from typing import Dict, List, Optional, Set, Tuple

from loguru import logger
from neopipe import Result, Ok, Err
from pydantic import BaseModel, Field

from catalogmate.dbs.interfaces.catalog_store import AbstractCatalogStore
from catalogmate.domain.audit import stamp_created, utc_now
from catalogmate.models.attribute import Attribute
from catalogmate.models.document import CatalogDocument, SourceMetadata
from catalogmate.models.errors import CatalogError
from catalogmate.models.results import ColumnPreview, IngestionResult
from catalogmate.services.attribute_type_detector import AttributeTypeDetector
from catalogmate.services.header_normalizer import HeaderNormalizer
from catalogmate.services.sequence_service import BusinessIdSequence
from catalogmate.services.tabular_reader import TabularFile, TabularFileError, TabularReader


class RowContent(BaseModel):
    """Everything derived from one source row before it gets an identifier"""

    row_number: int
    attributes: List[Attribute]
    display_name: Optional[str] = None
    category: Optional[str] = None
    raw_text: str = ""
    search_tokens: str = ""
    normalized_tokens: Set[str] = Field(default_factory=set)


class CatalogIngestionService:
    """Service for ingesting tabular files into the catalog"""

    def __init__(
        self,
        store: AbstractCatalogStore,
        sequence: BusinessIdSequence,
        normalizer: Optional[HeaderNormalizer] = None,
        detector: Optional[AttributeTypeDetector] = None,
        reader: Optional[TabularReader] = None,
    ):
        """
        Initialize the ingestion service.

        Args:
            store: Catalog document store
            sequence: Shared business id sequence
            normalizer: Header normalizer (default instance if None)
            detector: Attribute type detector (default instance if None)
            reader: Tabular file reader (default instance if None)
        """
        self.store = store
        self.sequence = sequence
        self.normalizer = normalizer or HeaderNormalizer()
        self.detector = detector or AttributeTypeDetector()
        self.reader = reader or TabularReader()

    def normalize_headers(self, headers: List[str]) -> List[Tuple[str, str]]:
        """(original header, normalized key) per column index"""
        return [(header, self.normalizer.normalize(header)) for header in headers]

    def preview_headers(self, file_name: Optional[str], content: bytes) -> Result[List[ColumnPreview], CatalogError]:
        """
        Show how each header of a file would be normalized, without storing anything.

        Args:
            file_name: Original file name
            content: Raw file bytes

        Returns:
            Result with one ColumnPreview per column, or a BAD_INPUT error
        """
        try:
            tabular = self.reader.read(file_name, content)
        except TabularFileError as e:
            logger.warning(f"Header preview rejected for '{file_name}': {e}")
            return Err(CatalogError.bad_input(str(e)))

        columns = self.normalize_headers(tabular.headers)
        return Ok([
            ColumnPreview(original_header=original, normalized_key=normalized)
            for original, normalized in columns
        ])

    def ingest(
        self,
        tenant_id: str,
        file_name: Optional[str],
        content: bytes,
        uploader_id: str,
    ) -> Result[IngestionResult, CatalogError]:
        """
        Ingest one uploaded file.

        Args:
            tenant_id: Tenant owning the new documents
            file_name: Original file name (.csv, .xlsx or .xls)
            content: Raw file bytes
            uploader_id: Identity of the uploading user

        Returns:
            Result with the ingestion summary. A partial bulk failure is still Ok;
            `count` is lower than `attempted` and nothing is rolled back.
        """
        if not tenant_id:
            return Err(CatalogError.bad_input("Tenant is required"))

        logger.info(f"[Tenant: {tenant_id}] Starting ingestion for file: {file_name}")
        try:
            tabular = self.reader.read(file_name, content)
        except TabularFileError as e:
            logger.warning(f"[Tenant: {tenant_id}] Rejected file '{file_name}': {e}")
            return Err(CatalogError.bad_input(str(e)))

        uploaded_at = utc_now()
        documents = self.build_documents(tabular, tenant_id, uploader_id, uploaded_at)

        if not documents:
            logger.info(f"[Tenant: {tenant_id}] File '{file_name}' has no non-empty rows, nothing stored")
            return Ok(IngestionResult(
                count=0,
                attempted=0,
                file_name=tabular.file_name,
                uploader_id=uploader_id,
                uploaded_at=uploaded_at,
            ))

        try:
            write_result = self.store.bulk_insert(documents)
        except Exception as e:
            logger.exception(
                f"[Tenant: {tenant_id}] ❌ Bulk insert of {len(documents)} documents from '{file_name}' failed: {e}"
            )
            return Err(CatalogError.internal("Failed to store the ingested products"))

        if write_result.failed:
            rows = {document.business_id: document.source_metadata.row_number for document in documents}
            failed_rows = [rows[business_id] for business_id in write_result.failed_business_ids if business_id in rows]
            for error in write_result.errors:
                logger.error(f"[Tenant: {tenant_id}] File '{file_name}' bulk item failed: {error}")
            logger.warning(
                f"[Tenant: {tenant_id}] Partial ingestion of '{file_name}': "
                f"{len(write_result.saved)} of {len(documents)} rows saved, failed rows: {failed_rows}"
            )

        result = IngestionResult(
            count=len(write_result.saved),
            attempted=len(documents),
            file_name=tabular.file_name,
            uploader_id=uploader_id,
            uploaded_at=uploaded_at,
            business_ids=[document.business_id for document in write_result.saved],
        )
        logger.info(f"[Tenant: {tenant_id}] ✅ Ingestion complete: {result.count} products saved from {file_name}")
        return Ok(result)

    def build_documents(
        self,
        tabular: TabularFile,
        tenant_id: str,
        uploader_id: str,
        uploaded_at: datetime,
    ) -> List[CatalogDocument]:
        """Build the documents of a decoded file; rows without values are skipped"""
        columns = self.normalize_headers(tabular.headers)

        header_map: Dict[str, str] = {}
        for original, normalized in columns:
            header_map.setdefault(normalized, original)

        contents = []
        for row_number, cells in tabular.numbered_rows():
            content = self.extract_row(row_number, cells, columns)
            if content is None:
                logger.debug(f"[Tenant: {tenant_id}] Skipping empty row {row_number} of '{tabular.file_name}'")
                continue
            contents.append(content)

        business_ids = self.sequence.next_ids(len(contents))

        documents = []
        for business_id, content in zip(business_ids, contents):
            document = CatalogDocument(
                business_id=business_id,
                display_name=content.display_name,
                category=content.category,
                attributes=content.attributes,
                raw_text=content.raw_text,
                search_tokens=content.search_tokens,
                normalized_tokens=sorted(content.normalized_tokens),
                source_metadata=SourceMetadata(
                    file_name=tabular.file_name,
                    file_kind=tabular.file_kind,
                    row_number=content.row_number,
                    uploaded_by=uploader_id,
                    uploaded_at=uploaded_at,
                    header_map=header_map,
                ),
            )
            stamp_created(document, tenant_id=tenant_id, user_id=uploader_id, at=uploaded_at)
            documents.append(document)
        return documents

    def extract_row(
        self,
        row_number: int,
        cells: List[str],
        columns: List[Tuple[str, str]],
    ) -> Optional[RowContent]:
        """
        Derive attributes, labels and search keys from one row.

        Returns:
            RowContent, or None when the row has no populated cell
        """
        attributes: List[Attribute] = []
        raw_text_parts: List[str] = []
        search_parts: List[str] = []
        normalized_tokens: Set[str] = set()
        display_name: Optional[str] = None
        category: Optional[str] = None

        for index, (original_key, normalized_key) in enumerate(columns):
            value = cells[index].strip() if index < len(cells) and cells[index] else ""
            if not value:
                continue

            detected = self.detector.detect_type(value)
            attributes.append(detected.to_attribute(normalized_key, original_key, value))

            raw_text_parts.append(f"{original_key}={value}; ")
            search_parts.extend([value, normalized_key])
            normalized_tokens.update(self.normalizer.create_search_tokens(value))

            if display_name is None and self.normalizer.is_display_name_field(normalized_key):
                display_name = value
            if category is None and self.normalizer.is_category_field(normalized_key):
                category = value

        if not attributes:
            return None

        if display_name is None:
            display_name = attributes[0].value

        return RowContent(
            row_number=row_number,
            attributes=attributes,
            display_name=display_name,
            category=category,
            raw_text="".join(raw_text_parts),
            search_tokens=" ".join(search_parts).lower(),
            normalized_tokens=normalized_tokens,
        )
