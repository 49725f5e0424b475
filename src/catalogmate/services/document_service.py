"""
Catalog document read/write service.

Every operation is tenant scoped: a document of another tenant behaves exactly
like a missing one.
"""

from typing import List, Optional

from loguru import logger
from neopipe import Result, Ok, Err
from pydantic import ValidationError

from catalogmate.dbs.interfaces.catalog_store import AbstractCatalogStore
from catalogmate.domain.audit import stamp_modified, utc_now
from catalogmate.models.attribute import Attribute, AttributeInput
from catalogmate.models.document import CatalogDocument
from catalogmate.models.errors import CatalogError
from catalogmate.services.attribute_type_detector import AttributeTypeDetector


class CatalogDocumentService:
    """Get, update and delete catalog documents"""

    def __init__(self, store: AbstractCatalogStore, detector: Optional[AttributeTypeDetector] = None):
        self.store = store
        self.detector = detector or AttributeTypeDetector()

    def _load(self, tenant_id: str, document_id: str, include_deleted: bool = False) -> Optional[CatalogDocument]:
        document = self.store.get(document_id)
        if document is None or document.tenant_id != tenant_id:
            return None
        if document.is_deleted and not include_deleted:
            return None
        return document

    def _not_found(self, document_id: str) -> Err:
        return Err(CatalogError.not_found(f"Product not found: {document_id}"))

    def get(self, tenant_id: str, document_id: str) -> Result[CatalogDocument, CatalogError]:
        """Fetch a non-deleted document of the tenant"""
        logger.info(f"[Tenant: {tenant_id}] Getting catalog document by id: {document_id}")
        try:
            document = self._load(tenant_id, document_id)
        except Exception as e:
            logger.exception(f"[Tenant: {tenant_id}] ❌ Fetching document {document_id} failed: {e}")
            return Err(CatalogError.internal("Failed to fetch product"))

        if document is None:
            return self._not_found(document_id)
        return Ok(document)

    def build_attribute(self, attribute_input: AttributeInput) -> Attribute:
        """
        Turn caller input into an attribute.

        Without a type the value is detected like an ingested cell; with a type
        the typed fields must match it.

        Raises:
            ValidationError: If the typed fields do not match the type
        """
        original_key = attribute_input.original_key or attribute_input.key
        if attribute_input.type is None:
            attribute = self.detector.detect_type(attribute_input.value).to_attribute(
                attribute_input.key, original_key, attribute_input.value
            )
            attribute.searchable = attribute_input.searchable
            return attribute

        return Attribute(
            key=attribute_input.key,
            original_key=original_key,
            value=attribute_input.value.strip(),
            type=attribute_input.type,
            numeric_value=attribute_input.numeric_value,
            range_min=attribute_input.range_min,
            range_max=attribute_input.range_max,
            boolean_value=attribute_input.boolean_value,
            unit=attribute_input.unit,
            searchable=attribute_input.searchable,
        )

    def update(
        self,
        tenant_id: str,
        document_id: str,
        user_id: str,
        display_name: Optional[str] = None,
        attributes: Optional[List[AttributeInput]] = None,
    ) -> Result[CatalogDocument, CatalogError]:
        """
        Replace the display name and/or the attribute list.

        Replacing attributes rebuilds `search_tokens` from the display name and
        the new values. `normalized_tokens` keeps its ingestion-time content.
        """
        logger.info(f"[Tenant: {tenant_id}] Updating catalog document: {document_id}")
        try:
            new_attributes = [self.build_attribute(item) for item in attributes] if attributes is not None else None
        except ValidationError as e:
            logger.warning(f"[Tenant: {tenant_id}] Invalid attributes for {document_id}: {e}")
            return Err(CatalogError.bad_input(f"Invalid attributes: {e.errors()[0]['msg']}"))

        try:
            document = self._load(tenant_id, document_id)
            if document is None:
                return self._not_found(document_id)

            if display_name is not None and display_name.strip():
                document.display_name = display_name.strip()

            if new_attributes is not None:
                document.attributes = new_attributes
                parts = [document.display_name] if document.display_name else []
                parts.extend(attribute.value for attribute in new_attributes)
                document.search_tokens = " ".join(parts).lower()

            stamp_modified(document, user_id)
            saved = self.store.save(document)
        except Exception as e:
            logger.exception(f"[Tenant: {tenant_id}] ❌ Updating document {document_id} failed: {e}")
            return Err(CatalogError.internal("Failed to update product"))

        logger.info(f"[Tenant: {tenant_id}] ✅ Updated catalog document {document_id}")
        return Ok(saved)

    def soft_delete(self, tenant_id: str, document_id: str, user_id: str) -> Result[None, CatalogError]:
        """Flag a document as deleted; it stays in the store"""
        logger.info(f"[Tenant: {tenant_id}] Soft-deleting catalog document: {document_id}")
        try:
            document = self._load(tenant_id, document_id)
            if document is None:
                return self._not_found(document_id)
            self._mark_deleted(document, user_id)
        except Exception as e:
            logger.exception(f"[Tenant: {tenant_id}] ❌ Soft-deleting document {document_id} failed: {e}")
            return Err(CatalogError.internal("Failed to delete product"))
        return Ok(None)

    def hard_delete(self, tenant_id: str, document_id: str) -> Result[None, CatalogError]:
        """
        Permanently remove a document.

        Unlike get, update and soft_delete, the lookup includes soft-deleted
        documents, so a soft-deleted product can still be purged. NotFound is
        returned only when no document of the tenant has the id.
        """
        logger.info(f"[Tenant: {tenant_id}] Hard-deleting catalog document: {document_id}")
        try:
            document = self._load(tenant_id, document_id, include_deleted=True)
            if document is None or not self.store.delete(document_id):
                return self._not_found(document_id)
        except Exception as e:
            logger.exception(f"[Tenant: {tenant_id}] ❌ Hard-deleting document {document_id} failed: {e}")
            return Err(CatalogError.internal("Failed to delete product"))
        return Ok(None)

    def _mark_deleted(self, document: CatalogDocument, user_id: str) -> None:
        now = utc_now()
        document.is_deleted = True
        document.deleted_at = now
        stamp_modified(document, user_id, at=now)
        self.store.save(document)

    def bulk_soft_delete(self, tenant_id: str, document_ids: List[str], user_id: str) -> Result[int, CatalogError]:
        """
        Soft-delete each id independently.

        Returns:
            Result with the number of documents actually deleted; unknown ids and
            per-document store failures are skipped
        """
        logger.info(f"[Tenant: {tenant_id}] Bulk soft-deleting {len(document_ids)} products")
        deleted = 0
        for document_id in dict.fromkeys(document_ids):
            try:
                document = self._load(tenant_id, document_id)
                if document is None:
                    continue
                self._mark_deleted(document, user_id)
                deleted += 1
            except Exception as e:
                logger.error(f"[Tenant: {tenant_id}] Bulk soft-delete skipped {document_id}: {e}")
        return Ok(deleted)

    def bulk_hard_delete(self, tenant_id: str, document_ids: List[str]) -> Result[int, CatalogError]:
        """Hard-delete each id independently, soft-deleted ones included; returns the number actually removed"""
        logger.info(f"[Tenant: {tenant_id}] Bulk hard-deleting {len(document_ids)} products")
        deleted = 0
        for document_id in dict.fromkeys(document_ids):
            try:
                document = self._load(tenant_id, document_id, include_deleted=True)
                if document is not None and self.store.delete(document_id):
                    deleted += 1
            except Exception as e:
                logger.error(f"[Tenant: {tenant_id}] Bulk hard-delete skipped {document_id}: {e}")
        return Ok(deleted)
