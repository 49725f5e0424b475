"""Request and response schemas for the catalog API"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from catalogmate.domain.value_objects.attribute_type import AttributeType
from catalogmate.domain.value_objects.sort_direction import SortDirection
from catalogmate.models.attribute import Attribute, AttributeInput
from catalogmate.models.document import CatalogDocument
from catalogmate.models.filters import FilterSpec
from catalogmate.models.results import ColumnPreview, FilterDescriptor, IngestionResult, SearchPage
from catalogmate.models.search import SearchQuery


class CamelModel(BaseModel):
    """JSON uses camelCase; Python code uses snake_case"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Request Models
class SearchRequest(CamelModel):
    """Request model for catalog search"""

    keyword: Optional[str] = Field(None, description="Free-text keyword")
    category: Optional[str] = Field(None, description="Exact category")
    filters: Dict[str, Dict[str, Any]] = Field(default_factory=dict, description="attribute key -> filter")
    page: int = Field(0, ge=0, description="Zero-based page number")
    size: Optional[int] = Field(None, ge=1, description="Page size, CATALOG_DEFAULT_PAGE_SIZE if omitted")
    sort_by: Optional[str] = Field("createdAt", description="Sort field for searches without keyword")
    sort_direction: SortDirection = Field(SortDirection.DESC, description="ASC or DESC")

    def to_query(self, default_size: int) -> SearchQuery:
        """
        Build the service query.

        Raises:
            ValidationError: If a filter spec is invalid
        """
        return SearchQuery(
            keyword=self.keyword,
            category=self.category,
            filters={key: FilterSpec.model_validate(spec) for key, spec in self.filters.items()},
            page=self.page,
            size=self.size or default_size,
            sort_by=self.sort_by,
            sort_direction=self.sort_direction,
        )


class AttributeRequest(CamelModel):
    """Attribute supplied on update; the type is detected when omitted"""

    key: str = Field(..., min_length=1)
    original_key: Optional[str] = None
    value: str
    type: Optional[AttributeType] = None
    numeric_value: Optional[float] = None
    range_min: Optional[float] = None
    range_max: Optional[float] = None
    boolean_value: Optional[bool] = None
    unit: Optional[str] = None
    searchable: bool = True

    def to_input(self) -> AttributeInput:
        return AttributeInput(**self.model_dump())


class UpdateProductRequest(CamelModel):
    """Request model for updating a product"""

    display_name: Optional[str] = Field(None, description="New display name, ignored when blank")
    attributes: Optional[List[AttributeRequest]] = Field(None, description="Replacement attribute list")


class BulkDeleteRequest(CamelModel):
    """Request model for bulk deletion"""

    ids: List[str] = Field(..., min_length=1, description="Product ids")
    hard: bool = Field(False, description="Permanently remove instead of soft-deleting")


# Response Models
class AttributeResponse(CamelModel):
    key: str
    display_key: str
    original_key: str
    value: str
    type: AttributeType
    numeric_value: Optional[float] = None
    range_min: Optional[float] = None
    range_max: Optional[float] = None
    boolean_value: Optional[bool] = None
    unit: Optional[str] = None

    @classmethod
    def from_attribute(cls, attribute: Attribute) -> "AttributeResponse":
        return cls(
            key=attribute.key,
            display_key=attribute.display_key,
            original_key=attribute.original_key,
            value=attribute.value,
            type=attribute.type,
            numeric_value=attribute.numeric_value,
            range_min=attribute.range_min,
            range_max=attribute.range_max,
            boolean_value=attribute.boolean_value,
            unit=attribute.unit,
        )


class ProductResponse(CamelModel):
    """Response model for a catalog product"""

    id: str
    product_id: str
    display_name: Optional[str] = None
    category: Optional[str] = None
    attributes: List[AttributeResponse]
    source_headers: Dict[str, str] = Field(default_factory=dict)
    created_at: Optional[datetime] = None
    created_by: Optional[str] = None
    last_modified_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, document: CatalogDocument) -> "ProductResponse":
        return cls(
            id=document.id,
            product_id=document.business_id,
            display_name=document.display_name,
            category=document.category,
            attributes=[AttributeResponse.from_attribute(attribute) for attribute in document.attributes],
            source_headers=document.source_metadata.header_map if document.source_metadata else {},
            created_at=document.created_at,
            created_by=document.created_by,
            last_modified_at=document.last_modified_at,
        )


class ProductPageResponse(CamelModel):
    """Response model for one page of products"""

    content: List[ProductResponse]
    total_elements: int
    total_pages: int
    number: int
    size: int

    @classmethod
    def from_page(cls, page: SearchPage) -> "ProductPageResponse":
        return cls(
            content=[ProductResponse.from_document(document) for document in page.items],
            total_elements=page.total,
            total_pages=page.total_pages,
            number=page.page,
            size=page.size,
        )


class UploadResponse(CamelModel):
    """Response model for a file upload"""

    total_products: int
    attempted_products: int
    failed_products: int
    file_name: str
    uploaded_by: str
    uploaded_at: datetime
    product_ids: List[str]

    @classmethod
    def from_result(cls, result: IngestionResult) -> "UploadResponse":
        return cls(
            total_products=result.count,
            attempted_products=result.attempted,
            failed_products=result.failed,
            file_name=result.file_name,
            uploaded_by=result.uploader_id,
            uploaded_at=result.uploaded_at,
            product_ids=result.business_ids,
        )


class ColumnPreviewResponse(CamelModel):
    original_header: str
    normalized_key: str


class HeaderPreviewResponse(CamelModel):
    """Response model for a header preview"""

    file_name: Optional[str] = None
    columns: List[ColumnPreviewResponse]

    @classmethod
    def from_columns(cls, file_name: Optional[str], columns: List[ColumnPreview]) -> "HeaderPreviewResponse":
        return cls(
            file_name=file_name,
            columns=[ColumnPreviewResponse(**column.model_dump()) for column in columns],
        )


class AvailableFilterResponse(CamelModel):
    attribute_key: str
    display_name: str
    type: AttributeType
    available_values: List[str]

    @classmethod
    def from_descriptor(cls, descriptor: FilterDescriptor) -> "AvailableFilterResponse":
        return cls(**descriptor.model_dump())


class ValuesResponse(CamelModel):
    values: List[str]


class BulkDeleteResponse(CamelModel):
    deleted_count: int
