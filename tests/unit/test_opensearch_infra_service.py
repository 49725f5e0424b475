from unittest.mock import MagicMock

import pytest
from opensearchpy.exceptions import RequestError

from catalogmate.services.opensearch_infra_service import OpenSearchInfraService
from catalogmate.utils.settings.core import OpenSearchSettings


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def infra(client):
    return OpenSearchInfraService(client=client, opensearch_settings=OpenSearchSettings(index_name="catalog-test"))


def test_create_index_uses_configured_name(infra, client):
    client.indices.exists.return_value = False

    assert infra.create_index() is True

    client.indices.create.assert_called_once()
    assert client.indices.create.call_args.kwargs["index"] == "catalog-test"
    assert "mappings" in client.indices.create.call_args.kwargs["body"]


def test_create_index_skips_existing(infra, client):
    client.indices.exists.return_value = True

    assert infra.create_index() is True

    client.indices.create.assert_not_called()
    client.indices.delete.assert_not_called()


def test_force_recreate_deletes_first(infra, client):
    client.indices.exists.return_value = True

    assert infra.create_index(force_recreate=True) is True

    client.indices.delete.assert_called_once_with(index="catalog-test")
    client.indices.create.assert_called_once()


def test_create_index_request_error(infra, client):
    client.indices.exists.return_value = False
    client.indices.create.side_effect = RequestError(400, "resource_already_exists_exception", {})

    assert infra.create_index() is False


def test_delete_missing_index_is_noop(infra, client):
    client.indices.exists.return_value = False

    assert infra.delete_index() is True

    client.indices.delete.assert_not_called()


def test_stats_of_missing_index(infra, client):
    client.indices.exists.return_value = False

    assert infra.get_index_stats() == {"index_name": "catalog-test", "exists": False, "total_documents": 0}


def test_stats_of_existing_index(infra, client):
    client.indices.exists.return_value = True
    client.cat.indices.return_value = [{"docs.count": "12", "store.size": "4kb", "health": "green", "status": "open"}]

    stats = infra.get_index_stats()

    assert stats["total_documents"] == 12
    assert stats["health"] == "green"


def test_cluster_health(infra, client):
    client.cluster.health.return_value = {"cluster_name": "local", "status": "yellow", "number_of_nodes": 1}
    client.info.return_value = {"version": {"number": "2.11.0"}}

    health = infra.get_cluster_health()

    assert health["healthy"] is True
    assert health["version"] == "2.11.0"


def test_cluster_health_error(infra, client):
    client.cluster.health.side_effect = Exception("connection refused")

    assert infra.get_cluster_health()["healthy"] is False
