"""
Catalog document model.

One document is created per non-empty source row. The store assigns `id`;
`business_id` is the human-readable sequential identifier.
"""

from typing import Any, Dict, List, Optional
from datetime import datetime
from pydantic import BaseModel, Field

from catalogmate.domain.value_objects.file_kind import FileKind
from catalogmate.models.attribute import Attribute


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromisoformat(value.replace('Z', '+00:00'))


def _format_datetime(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


class SourceMetadata(BaseModel):
    """Provenance of a document; never used in queries"""

    file_name: str
    file_kind: FileKind
    row_number: int = Field(ge=2, description="1-based row number, the header is row 1")
    uploaded_by: str
    uploaded_at: datetime
    header_map: Dict[str, str] = Field(
        default_factory=dict, description="normalized_key -> original header"
    )

    def to_opensearch_doc(self) -> Dict[str, Any]:
        return {
            "file_name": self.file_name,
            "file_kind": self.file_kind.value,
            "row_number": self.row_number,
            "uploaded_by": self.uploaded_by,
            "uploaded_at": self.uploaded_at.isoformat(),
            "header_map": dict(self.header_map),
        }

    @classmethod
    def from_opensearch_doc(cls, doc: Dict[str, Any]) -> "SourceMetadata":
        return cls(
            file_name=doc["file_name"],
            file_kind=FileKind(doc["file_kind"]),
            row_number=doc["row_number"],
            uploaded_by=doc["uploaded_by"],
            uploaded_at=_parse_datetime(doc["uploaded_at"]),
            header_map=doc.get("header_map") or {},
        )


class CatalogDocument(BaseModel):
    """
    Persisted catalog entry built from one source row.

    Satisfies the AuditTracked contract: tenant and audit fields are stamped
    by the persistence boundary, not by callers.
    """

    id: Optional[str] = Field(default=None, description="Store-assigned identifier")
    business_id: str = Field(description="Sequential identifier, DPRD-YYYY-MM-NNNNN")
    tenant_id: Optional[str] = Field(default=None, description="Owning tenant")
    display_name: Optional[str] = None
    category: Optional[str] = None
    attributes: List[Attribute] = Field(default_factory=list)
    raw_text: str = ""
    search_tokens: str = ""
    normalized_tokens: List[str] = Field(default_factory=list)
    source_metadata: Optional[SourceMetadata] = None
    is_deleted: bool = False
    deleted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    created_by: Optional[str] = None
    last_modified_at: Optional[datetime] = None
    last_modified_by: Optional[str] = None

    def attribute(self, key: str) -> Optional[Attribute]:
        """First attribute with the given normalized key"""
        return next((attr for attr in self.attributes if attr.key == key), None)

    def to_opensearch_doc(self) -> Dict[str, Any]:
        """
        Convert to the catalog index document format.
        The store identifier is not part of the body, it is the OpenSearch _id.
        """
        return {
            "business_id": self.business_id,
            "tenant_id": self.tenant_id,
            "display_name": self.display_name,
            "category": self.category,
            "attributes": [attr.to_opensearch_doc() for attr in self.attributes],
            "raw_text": self.raw_text,
            "search_tokens": self.search_tokens,
            "normalized_tokens": sorted(self.normalized_tokens),
            "source_metadata": self.source_metadata.to_opensearch_doc() if self.source_metadata else None,
            "is_deleted": self.is_deleted,
            "deleted_at": _format_datetime(self.deleted_at),
            "created_at": _format_datetime(self.created_at),
            "created_by": self.created_by,
            "last_modified_at": _format_datetime(self.last_modified_at),
            "last_modified_by": self.last_modified_by,
        }

    @classmethod
    def from_opensearch_doc(cls, doc: Dict[str, Any], doc_id: Optional[str] = None) -> "CatalogDocument":
        """
        Rebuild a document from its stored body.

        Args:
            doc: Stored document body (OpenSearch _source)
            doc_id: Store identifier (OpenSearch _id)
        """
        source_metadata = doc.get("source_metadata")
        return cls(
            id=doc_id,
            business_id=doc["business_id"],
            tenant_id=doc.get("tenant_id"),
            display_name=doc.get("display_name"),
            category=doc.get("category"),
            attributes=[Attribute.from_opensearch_doc(attr) for attr in doc.get("attributes") or []],
            raw_text=doc.get("raw_text") or "",
            search_tokens=doc.get("search_tokens") or "",
            normalized_tokens=doc.get("normalized_tokens") or [],
            source_metadata=SourceMetadata.from_opensearch_doc(source_metadata) if source_metadata else None,
            is_deleted=doc.get("is_deleted", False),
            deleted_at=_parse_datetime(doc.get("deleted_at")),
            created_at=_parse_datetime(doc.get("created_at")),
            created_by=doc.get("created_by"),
            last_modified_at=_parse_datetime(doc.get("last_modified_at")),
            last_modified_by=doc.get("last_modified_by"),
        )
