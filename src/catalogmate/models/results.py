"""Result models returned by the ingestion and search services"""

import math
from datetime import datetime
from typing import List
from pydantic import BaseModel, Field, computed_field

from catalogmate.domain.value_objects.attribute_type import AttributeType
from catalogmate.models.document import CatalogDocument


class IngestionResult(BaseModel):
    """Outcome of ingesting one file; `count` is what the store actually saved"""

    count: int
    attempted: int
    file_name: str
    uploader_id: str
    uploaded_at: datetime
    business_ids: List[str] = Field(default_factory=list)

    @computed_field
    @property
    def failed(self) -> int:
        return self.attempted - self.count

    def is_partial(self) -> bool:
        return self.count < self.attempted


class ColumnPreview(BaseModel):
    """How one source header will be stored"""

    original_header: str
    normalized_key: str


class SearchPage(BaseModel):
    """One page of search results plus pagination metadata"""

    items: List[CatalogDocument]
    total: int
    page: int
    size: int

    @computed_field
    @property
    def total_pages(self) -> int:
        if self.size <= 0:
            return 0
        return math.ceil(self.total / self.size)


class FilterDescriptor(BaseModel):
    """Filterable attribute key with the values observed for it"""

    attribute_key: str
    display_name: str
    type: AttributeType
    available_values: List[str] = Field(default_factory=list)
