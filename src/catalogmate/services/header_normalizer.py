"""
Header normalization for schema-less catalog files.

Turns arbitrary, human-authored column headers into stable snake_case
attribute keys, expands unit aliases in values and queries, and classifies
keys as display-name, category or identifier fields.
"""

import re
import uuid
from typing import Dict, List, Set, Tuple

from loguru import logger


UNIT_ALIASES: Dict[str, str] = {
    "mm": "millimeter",
    "millimeter": "millimeter",
    "millimeters": "millimeter",
    "inch": "inch",
    "inches": "inch",
    "in": "inch",
    "cm": "centimeter",
    "centimeter": "centimeter",
    "m": "meter",
    "meter": "meter",
    "kg": "kilogram",
    "kilogram": "kilogram",
    "g": "gram",
    "gram": "gram",
    "lb": "pound",
    "pound": "pound",
    "pn": "pressure_nominal",
    "pressure nominal": "pressure_nominal",
}

# Checked in order; the first synonym that matches wins
SYNONYMS: List[Tuple[str, List[str]]] = [
    ("size", ["dimension", "dia", "diameter"]),
    ("material", ["mat", "mtl"]),
    ("quantity", ["qty", "count"]),
    ("weight", ["wt", "mass"]),
    ("length", ["len", "l"]),
    ("width", ["w"]),
    ("height", ["h", "ht"]),
]

DISPLAY_NAME_FIELDS = frozenset({
    "name",
    "product_name",
    "productname",
    "item_name",
    "itemname",
    "title",
    "description",
    "product_description",
    "productdescription",
})

CATEGORY_FIELDS = frozenset({"category", "type", "product_type", "product_category"})

IDENTIFIER_MARKERS = ("id", "sku", "code", "number")

UNNAMED_COLUMN_PREFIX = "unnamed_column_"

_NON_KEY_CHARS = re.compile(r"[^a-z0-9\s_-]")
_SEPARATOR_RUNS = re.compile(r"[\s_-]+")
_NON_ALNUM_RUNS = re.compile(r"[^a-z0-9]+")


def _key_form(alias: str) -> str:
    return alias.replace(" ", "_")


# Aliases as they appear inside keys, longest first so "millimeters" wins over "m"
_KEY_UNIT_ALIASES: List[Tuple[str, str]] = sorted(
    ((_key_form(alias), canonical) for alias, canonical in UNIT_ALIASES.items()),
    key=lambda pair: len(pair[0]),
    reverse=True,
)

_TEXT_UNIT_PATTERN = re.compile(
    "|".join(re.escape(alias) for alias in sorted(UNIT_ALIASES, key=len, reverse=True))
)


class HeaderNormalizer:
    """Canonicalizes headers, values and queries for catalog indexing"""

    def normalize(self, header: str | None) -> str:
        """
        Normalize a header to a snake_case attribute key.

        Blank headers get a random `unnamed_column_<8 hex>` key so ingestion
        never aborts on them. Normalizing an already normalized key returns it
        unchanged.

        Example:
            >>> HeaderNormalizer().normalize("Size (mm)")
            'size_millimeter'
            >>> HeaderNormalizer().normalize("Pipe Dia")
            'pipe_size'
        """
        stripped = (header or "").strip()
        if not stripped:
            return self._placeholder_key(header)

        key = _NON_KEY_CHARS.sub("", stripped.lower())
        key = _SEPARATOR_RUNS.sub(" ", key).strip().replace(" ", "_")
        if not key:
            return self._placeholder_key(header)

        key = self._normalize_units(key)
        return self._normalize_synonyms(key)

    def _placeholder_key(self, header: str | None) -> str:
        key = f"{UNNAMED_COLUMN_PREFIX}{uuid.uuid4().hex[:8]}"
        logger.debug(f"Header {header!r} has no usable characters, using {key}")
        return key

    def _normalize_units(self, key: str) -> str:
        """Replace a unit alias that is the whole key, its last token or its first token"""
        for alias, canonical in _KEY_UNIT_ALIASES:
            if key == alias:
                return canonical
            if key.endswith(f"_{alias}"):
                key = f"{key[:-len(alias)]}{canonical}"
            if key.startswith(f"{alias}_"):
                key = f"{canonical}{key[len(alias):]}"
        return key

    def _normalize_synonyms(self, key: str) -> str:
        """Apply synonym replacement until no synonym is left at either end of the key"""
        while True:
            replaced = self._replace_first_synonym(key)
            if replaced == key:
                return key
            key = replaced

    def _replace_first_synonym(self, key: str) -> str:
        for canonical, synonyms in SYNONYMS:
            for synonym in synonyms:
                if key == synonym:
                    return canonical
                if key.endswith(f"_{synonym}"):
                    return f"{key[:-len(synonym)]}{canonical}"
                if key.startswith(f"{synonym}_"):
                    return f"{canonical}{key[len(synonym):]}"
        return key

    def create_search_tokens(self, value: str | None) -> Set[str]:
        """
        Build the alias-expanded token set for a value.

        Contains the lower-cased alphanumeric words, the whole value without
        hyphens (when it had any) and, for every unit alias the value contains,
        one copy of the whole value with that alias spelled out.

        Example:
            >>> sorted(HeaderNormalizer().create_search_tokens("PN-16"))
            ['16', 'pn', 'pn16', 'pressure_nominal-16']
        """
        if not value or not value.strip():
            return set()

        lower = value.strip().lower()
        tokens = {token for token in _NON_ALNUM_RUNS.split(lower) if token}

        without_hyphens = lower.replace("-", "")
        if without_hyphens != lower and without_hyphens:
            tokens.add(without_hyphens)

        for alias, canonical in UNIT_ALIASES.items():
            if alias in lower:
                tokens.add(lower.replace(alias, canonical))

        return tokens

    def normalize_search_query(self, query: str | None) -> str:
        """
        Lower-case a query, turn hyphens into spaces and spell out unit aliases.

        Aliases are replaced in one longest-first pass, so "mm" becomes
        "millimeter" and is not rewritten again by "m".
        """
        if not query or not query.strip():
            return ""
        normalized = query.strip().lower().replace("-", " ")
        return self._expand_unit_aliases(normalized)

    def _expand_unit_aliases(self, text: str) -> str:
        return _TEXT_UNIT_PATTERN.sub(lambda match: UNIT_ALIASES[match.group(0)], text)

    def is_display_name_field(self, key: str) -> bool:
        return key.lower() in DISPLAY_NAME_FIELDS

    def is_category_field(self, key: str) -> bool:
        return key.lower() in CATEGORY_FIELDS

    def is_identifier_field(self, key: str) -> bool:
        lower = key.lower()
        return any(marker in lower for marker in IDENTIFIER_MARKERS)
