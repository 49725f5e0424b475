import pytest

from catalogmate.integrations.opensearch import build_client_config
from catalogmate.utils.settings.core import CatalogSettings, OpenSearchSettings
from catalogmate.utils.settings.factory import SettingsFactory


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("OPENSEARCH_HOST", "OPENSEARCH_USERNAME", "OPENSEARCH_PASSWORD", "OPENSEARCH_MAX_RETRIES",
                 "CATALOG_BUSINESS_ID_PREFIX", "CATALOG_DEFAULT_PAGE_SIZE"):
        monkeypatch.delenv(name, raising=False)


def test_settings_read_their_own_prefix(monkeypatch):
    monkeypatch.setenv("OPENSEARCH_HOST", "search.internal")
    monkeypatch.setenv("CATALOG_BUSINESS_ID_PREFIX", "ACME")

    assert OpenSearchSettings().host == "search.internal"
    assert CatalogSettings().business_id_prefix == "ACME"


def test_from_env_file_keeps_prefix(tmp_path):
    env_file = tmp_path / "test.env"
    env_file.write_text("CATALOG_DEFAULT_PAGE_SIZE=5\nOPENSEARCH_HOST=from-file\n")

    factory = SettingsFactory(env_file)

    assert factory.create_catalog_settings().default_page_size == 5
    assert factory.create_opensearch_settings().host == "from-file"


def test_from_env_file_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        CatalogSettings.from_env_file(tmp_path / "missing.env")


def test_client_config_without_credentials():
    config = build_client_config(OpenSearchSettings(host="os", port=9201), pool_maxsize=4)

    assert config["hosts"] == [{"host": "os", "port": 9201}]
    assert config["pool_maxsize"] == 4
    assert config["timeout"] == 30
    assert config["retry_on_timeout"] is True
    assert "http_auth" not in config


def test_client_config_with_credentials_and_no_retries():
    settings = OpenSearchSettings(username="admin", password="secret", max_retries=0)

    config = build_client_config(settings)

    assert config["http_auth"] == ("admin", "secret")
    assert config["max_retries"] == 0
    assert config["retry_on_timeout"] is False
