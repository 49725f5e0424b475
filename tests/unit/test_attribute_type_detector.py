import pytest

from catalogmate.domain.value_objects.attribute_type import AttributeType
from catalogmate.services.attribute_type_detector import AttributeTypeDetector


@pytest.fixture
def detector() -> AttributeTypeDetector:
    return AttributeTypeDetector()


@pytest.mark.parametrize(
    "value, expected_type",
    [
        ("Yes", AttributeType.BOOLEAN),
        ("n", AttributeType.BOOLEAN),
        ("1", AttributeType.BOOLEAN),
        ("10-20", AttributeType.RANGE),
        ("1.5 - 2.5", AttributeType.RANGE),
        ("25mm", AttributeType.NUMBER),
        ("12.5 KG", AttributeType.NUMBER),
        ("42", AttributeType.NUMBER),
        ("-3.75", AttributeType.NUMBER),
        ("2024-03-15", AttributeType.DATE),
        ("15/03/2024", AttributeType.DATE),
        ("Copper", AttributeType.STRING),
        ("25-15", AttributeType.STRING),
        ("", AttributeType.UNKNOWN),
        ("   ", AttributeType.UNKNOWN),
    ],
)
def test_detect_type(detector, value, expected_type):
    assert detector.detect_type(value).type == expected_type


def test_detect_type_none_is_unknown(detector):
    assert detector.detect_type(None).type == AttributeType.UNKNOWN


def test_boolean_value(detector):
    assert detector.detect_type("TRUE").boolean_value is True
    assert detector.detect_type("0").boolean_value is False


def test_range_bounds(detector):
    detected = detector.detect_type(" 10 - 20 ")
    assert (detected.range_min, detected.range_max) == (10.0, 20.0)
    assert detected.numeric_value is None


def test_number_with_unit(detector):
    detected = detector.detect_type("25MM")
    assert detected.numeric_value == 25.0
    assert detected.unit == "mm"


def test_plain_number_has_no_unit(detector):
    detected = detector.detect_type("42")
    assert detected.numeric_value == 42.0
    assert detected.unit is None


def test_to_attribute_trims_value(detector):
    attribute = detector.detect_type("25mm").to_attribute("size", "Size", "  25mm ")
    assert attribute.value == "25mm"
    assert attribute.type == AttributeType.NUMBER
    assert attribute.searchable is True


def test_extract_helpers(detector):
    assert detector.extract_unit("25 cm") == "cm"
    assert detector.extract_unit("25") is None
    assert detector.extract_numeric_value("25 cm") == 25.0
    assert detector.extract_numeric_value("7") == 7.0
    assert detector.extract_numeric_value("abc") is None
    assert detector.extract_numeric_value(None) is None
