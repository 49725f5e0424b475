import pytest

from catalogmate.domain.value_objects.attribute_type import AttributeType
from catalogmate.domain.value_objects.error_kind import ErrorKind
from catalogmate.models.attribute import AttributeInput
from catalogmate.models.query import And


@pytest.fixture
def product_ids(store, ingest_csv):
    ingest_csv("acme", ["Product Name", "Material", "Size"], ["Copper Pipe", "Copper", "25mm"], ["Valve", "Brass", "10"])
    return {document.display_name: document.id for document in store.scan(And())}


def test_get_is_tenant_scoped(services, product_ids):
    document = services.documents.get("acme", product_ids["Valve"]).unwrap()
    assert document.display_name == "Valve"

    other_tenant = services.documents.get("globex", product_ids["Valve"])
    assert other_tenant.unwrap_err().kind == ErrorKind.NOT_FOUND


def test_update_replaces_attributes_and_keeps_normalized_tokens(services, store, product_ids):
    document_id = product_ids["Copper Pipe"]
    before = store.get(document_id)

    updated = services.documents.update(
        "acme",
        document_id,
        "bob",
        display_name="  Copper Pipe XL ",
        attributes=[AttributeInput(key="size", value="32mm"), AttributeInput(key="finish", value="Polished")],
    ).unwrap()

    assert updated.display_name == "Copper Pipe XL"
    assert updated.attribute("size").numeric_value == 32.0
    assert updated.attribute("material") is None
    assert updated.search_tokens == "copper pipe xl 32mm polished"
    assert updated.normalized_tokens == before.normalized_tokens
    assert updated.last_modified_by == "bob"
    assert updated.created_by == "alice"
    assert store.get(document_id).display_name == "Copper Pipe XL"


def test_update_with_blank_display_name_keeps_old_one(services, product_ids):
    updated = services.documents.update("acme", product_ids["Valve"], "bob", display_name="   ").unwrap()
    assert updated.display_name == "Valve"


def test_update_with_explicit_type(services, product_ids):
    updated = services.documents.update(
        "acme",
        product_ids["Valve"],
        "bob",
        attributes=[AttributeInput(key="pressure", value="10-16", type=AttributeType.RANGE, range_min=10, range_max=16)],
    ).unwrap()
    assert updated.attribute("pressure").range_max == 16.0


def test_update_rejects_mismatched_typed_fields(services, product_ids):
    result = services.documents.update(
        "acme",
        product_ids["Valve"],
        "bob",
        attributes=[AttributeInput(key="weight", value="heavy", type=AttributeType.NUMBER)],
    )
    assert result.unwrap_err().kind == ErrorKind.BAD_INPUT


def test_update_unknown_document(services, product_ids):
    result = services.documents.update("acme", "missing", "bob", display_name="x")
    assert result.unwrap_err().kind == ErrorKind.NOT_FOUND


def test_soft_delete_then_hard_delete(services, store, product_ids):
    document_id = product_ids["Valve"]

    assert services.documents.soft_delete("acme", document_id, "bob").is_ok()
    stored = store.get(document_id)
    assert stored.is_deleted
    assert stored.deleted_at is not None
    assert stored.last_modified_by == "bob"

    assert services.documents.get("acme", document_id).unwrap_err().kind == ErrorKind.NOT_FOUND
    assert services.documents.soft_delete("acme", document_id, "bob").unwrap_err().kind == ErrorKind.NOT_FOUND

    assert services.documents.hard_delete("acme", document_id).is_ok()
    assert store.get(document_id) is None
    assert services.documents.hard_delete("acme", document_id).unwrap_err().kind == ErrorKind.NOT_FOUND


def test_hard_delete_of_other_tenant_is_not_found(services, store, product_ids):
    result = services.documents.hard_delete("globex", product_ids["Valve"])
    assert result.unwrap_err().kind == ErrorKind.NOT_FOUND
    assert store.get(product_ids["Valve"]) is not None


def test_bulk_soft_delete_counts_only_deleted(services, product_ids):
    ids = [product_ids["Valve"], product_ids["Valve"], "missing", product_ids["Copper Pipe"]]
    assert services.documents.bulk_soft_delete("acme", ids, "bob").unwrap() == 2
    assert services.documents.bulk_soft_delete("acme", ids, "bob").unwrap() == 0


def test_bulk_hard_delete(services, store, product_ids):
    ids = list(product_ids.values()) + ["missing"]
    assert services.documents.bulk_hard_delete("globex", ids).unwrap() == 0
    assert services.documents.bulk_hard_delete("acme", ids).unwrap() == 2
    assert store.count(And()) == 0
