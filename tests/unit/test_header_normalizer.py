import pytest

from catalogmate.services.header_normalizer import HeaderNormalizer, UNNAMED_COLUMN_PREFIX


@pytest.fixture
def normalizer() -> HeaderNormalizer:
    return HeaderNormalizer()


@pytest.mark.parametrize(
    "header, expected",
    [
        ("Product Name", "product_name"),
        ("Size (mm)", "size_millimeter"),
        ("Pipe Dia", "pipe_size"),
        ("  Weight - KG ", "weight_kilogram"),
        ("Qty", "quantity"),
        ("Mat", "material"),
        ("H", "height"),
        ("Length (inches)", "length_inch"),
        ("Category", "category"),
        ("PN Rating", "pressure_nominal_rating"),
    ],
)
def test_normalize_headers(normalizer, header, expected):
    assert normalizer.normalize(header) == expected


@pytest.mark.parametrize("header", ["Product Name", "Size (mm)", "Pipe Dia", "HT W", "Length (inches)"])
def test_normalize_is_idempotent(normalizer, header):
    key = normalizer.normalize(header)
    assert normalizer.normalize(key) == key


def test_synonyms_apply_at_both_ends(normalizer):
    assert normalizer.normalize("HT W") == "height_width"


@pytest.mark.parametrize("header", ["", "   ", None, "(*)"])
def test_blank_header_gets_placeholder_key(normalizer, header):
    key = normalizer.normalize(header)
    assert key.startswith(UNNAMED_COLUMN_PREFIX)
    assert len(key) == len(UNNAMED_COLUMN_PREFIX) + 8


def test_placeholder_keys_are_unique(normalizer):
    assert normalizer.normalize("") != normalizer.normalize("")


def test_create_search_tokens_expands_aliases(normalizer):
    assert normalizer.create_search_tokens("PN-16") == {"pn", "16", "pn16", "pressure_nominal-16"}


def test_create_search_tokens_adds_one_copy_per_alias(normalizer):
    assert normalizer.create_search_tokens("10 kg") == {"10", "kg", "10 kilogram", "10 kgram"}


def test_create_search_tokens_plain_value(normalizer):
    assert normalizer.create_search_tokens("Copper Pipe") == {"copper", "pipe"}


def test_create_search_tokens_blank(normalizer):
    assert normalizer.create_search_tokens("  ") == set()
    assert normalizer.create_search_tokens(None) == set()


def test_normalize_search_query(normalizer):
    assert normalizer.normalize_search_query("  PN-16 ") == "pressure_nominal 16"
    assert normalizer.normalize_search_query("") == ""


def test_field_classification(normalizer):
    assert normalizer.is_display_name_field("Product_Name")
    assert not normalizer.is_display_name_field("size")
    assert normalizer.is_category_field("product_type")
    assert not normalizer.is_category_field("material")
    assert normalizer.is_identifier_field("part_number")
    assert normalizer.is_identifier_field("SKU")
    assert not normalizer.is_identifier_field("material")


def test_normalize_search_query_replaces_each_alias_once(normalizer):
    assert normalizer.normalize_search_query("25 mm") == "25 millimeter"
