"""
Relevance scoring for keyword search.

Only the best display-name rule applies; category adds one bonus; attribute
bonuses add up across all searchable attributes.
"""

from typing import Optional

from catalogmate.models.document import CatalogDocument

DISPLAY_NAME_EXACT = 1000
DISPLAY_NAME_PREFIX = 500
DISPLAY_NAME_CONTAINS = 250
DISPLAY_NAME_SHORTNESS_BASE = 100
DISPLAY_NAME_SUBSEQUENCE = 100

CATEGORY_EXACT = 200
CATEGORY_CONTAINS = 50

ATTRIBUTE_VALUE_EXACT = 150
ATTRIBUTE_VALUE_CONTAINS = 25
ATTRIBUTE_KEY_CONTAINS = 10


def is_subsequence(needle: str, haystack: str) -> bool:
    """True if every character of needle appears in haystack in order"""
    remaining = iter(haystack)
    return all(char in remaining for char in needle)


def display_name_score(display_name: Optional[str], keyword: str) -> int:
    if not display_name:
        return 0
    name = display_name.lower()
    if name == keyword:
        return DISPLAY_NAME_EXACT
    if name.startswith(keyword):
        return DISPLAY_NAME_PREFIX
    if keyword in name:
        return DISPLAY_NAME_CONTAINS + max(0, DISPLAY_NAME_SHORTNESS_BASE - len(display_name))
    if is_subsequence(keyword, name):
        return DISPLAY_NAME_SUBSEQUENCE
    return 0


def category_score(category: Optional[str], keyword: str) -> int:
    if not category:
        return 0
    lower = category.lower()
    if lower == keyword:
        return CATEGORY_EXACT
    if keyword in lower:
        return CATEGORY_CONTAINS
    return 0


def score_document(document: CatalogDocument, keyword: str) -> int:
    """
    Score a candidate against a keyword.

    Args:
        document: Candidate document, display name already reconciled
        keyword: Lower-cased, trimmed keyword
    """
    score = display_name_score(document.display_name, keyword)
    score += category_score(document.category, keyword)

    for attribute in document.attributes:
        if not attribute.searchable:
            continue
        value = attribute.value.lower()
        if value == keyword:
            score += ATTRIBUTE_VALUE_EXACT
        elif keyword in value:
            score += ATTRIBUTE_VALUE_CONTAINS
        if keyword in attribute.key.lower():
            score += ATTRIBUTE_KEY_CONTAINS

    return score
