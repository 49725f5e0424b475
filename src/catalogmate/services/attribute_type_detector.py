"""
Attribute type detection for raw cell values.

Patterns overlap ("1" is both a boolean and a number, "25mm" is a number with
a unit), so the order of the checks in `detect_type` is part of the contract.
"""

import re
from typing import Optional

from pydantic import BaseModel

from catalogmate.domain.value_objects.attribute_type import AttributeType
from catalogmate.models.attribute import Attribute


BOOLEAN_PATTERN = re.compile(r"true|false|yes|no|y|n|1|0", re.IGNORECASE)
RANGE_PATTERN = re.compile(r"(\d+(\.\d+)?)\s*-\s*(\d+(\.\d+)?)", re.ASCII)
UNIT_PATTERN = re.compile(r"(\d+(\.\d+)?)\s*(mm|cm|m|km|inch|ft|kg|g|lb)", re.IGNORECASE | re.ASCII)
NUMBER_PATTERN = re.compile(r"-?\d+(\.\d+)?", re.ASCII)
DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}|\d{2}/\d{2}/\d{4}", re.ASCII)

TRUE_VALUES = frozenset({"true", "yes", "y", "1"})


class DetectedType(BaseModel):
    """Outcome of type detection; only the fields of `type` are set"""

    type: AttributeType
    numeric_value: Optional[float] = None
    range_min: Optional[float] = None
    range_max: Optional[float] = None
    boolean_value: Optional[bool] = None
    unit: Optional[str] = None

    def to_attribute(self, key: str, original_key: str, value: str) -> Attribute:
        """Build the attribute for a cell with this detected type"""
        return Attribute(
            key=key,
            original_key=original_key,
            value=value.strip(),
            type=self.type,
            numeric_value=self.numeric_value,
            range_min=self.range_min,
            range_max=self.range_max,
            boolean_value=self.boolean_value,
            unit=self.unit,
            searchable=True,
        )


class AttributeTypeDetector:
    """Infers STRING, NUMBER, BOOLEAN, RANGE or DATE from a cell value"""

    def detect_type(self, value: Optional[str]) -> DetectedType:
        """
        Detect the type of a raw cell value.

        Checks run in this order and the first match wins: boolean, range,
        number with unit, plain number, date, string. Blank input is UNKNOWN;
        any other input lands in exactly one of the remaining types.

        Example:
            >>> AttributeTypeDetector().detect_type("25mm")
            DetectedType(type=<AttributeType.NUMBER: 'NUMBER'>, numeric_value=25.0, ..., unit='mm')
        """
        if value is None or not value.strip():
            return DetectedType(type=AttributeType.UNKNOWN)

        trimmed = value.strip()

        if BOOLEAN_PATTERN.fullmatch(trimmed):
            return DetectedType(type=AttributeType.BOOLEAN, boolean_value=trimmed.lower() in TRUE_VALUES)

        range_match = RANGE_PATTERN.fullmatch(trimmed)
        if range_match:
            low, high = float(range_match.group(1)), float(range_match.group(3))
            # Reversed bounds ("25-15") are not a range and fall through to the later checks
            if low <= high:
                return DetectedType(type=AttributeType.RANGE, range_min=low, range_max=high)

        unit_match = UNIT_PATTERN.fullmatch(trimmed)
        if unit_match:
            return DetectedType(
                type=AttributeType.NUMBER,
                numeric_value=float(unit_match.group(1)),
                unit=unit_match.group(3).lower(),
            )

        if NUMBER_PATTERN.fullmatch(trimmed):
            return DetectedType(type=AttributeType.NUMBER, numeric_value=float(trimmed))

        if DATE_PATTERN.fullmatch(trimmed):
            return DetectedType(type=AttributeType.DATE)

        return DetectedType(type=AttributeType.STRING)

    def extract_unit(self, value: Optional[str]) -> Optional[str]:
        """Lower-cased unit of a number-with-unit value, None otherwise"""
        if value is None:
            return None
        match = UNIT_PATTERN.fullmatch(value.strip())
        return match.group(3).lower() if match else None

    def extract_numeric_value(self, value: Optional[str]) -> Optional[float]:
        """Numeric part of a plain number or number-with-unit value, None otherwise"""
        if value is None:
            return None
        trimmed = value.strip()
        match = UNIT_PATTERN.fullmatch(trimmed)
        if match:
            return float(match.group(1))
        if NUMBER_PATTERN.fullmatch(trimmed):
            return float(trimmed)
        return None
