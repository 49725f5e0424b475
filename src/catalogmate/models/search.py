"""Search request model"""

from typing import Dict, Optional
from pydantic import BaseModel, Field

from catalogmate.domain.value_objects.sort_direction import SortDirection
from catalogmate.models.filters import FilterSpec


class SearchQuery(BaseModel):
    """
    Keyword, category and attribute filters for one search.

    With a keyword, results are ranked by relevance and `sort_by` is ignored;
    without one, the store sorts and paginates.
    """

    keyword: Optional[str] = Field(default=None, description="Free-text keyword")
    category: Optional[str] = Field(default=None, description="Exact category")
    filters: Dict[str, FilterSpec] = Field(default_factory=dict, description="attribute key -> filter")
    page: int = Field(default=0, ge=0, description="Zero-based page number")
    size: int = Field(default=20, ge=1, description="Page size")
    sort_by: Optional[str] = Field(default="createdAt", description="Sort field for filter-only searches")
    sort_direction: SortDirection = Field(default=SortDirection.DESC)

    def has_keyword(self) -> bool:
        return bool(self.keyword and self.keyword.strip())
