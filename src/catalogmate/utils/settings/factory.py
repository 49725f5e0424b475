"""
Settings Factory

Creates fresh settings objects on every call, either from the process
environment or from one fixed env file.
"""

from pathlib import Path
from typing import Optional

from catalogmate.utils.settings.base import T
from catalogmate.utils.settings.core import (
    OpenSearchSettings,
    AppSettings,
    CatalogSettings,
)


class SettingsFactory:
    """Factory for creating settings instances"""

    def __init__(self, env_path: Optional[str | Path] = None):
        self.env_path = env_path

    def _create(self, settings_cls: type[T]) -> T:
        if self.env_path is None:
            return settings_cls()
        return settings_cls.from_env_file(self.env_path)

    def create_opensearch_settings(self) -> OpenSearchSettings:
        return self._create(OpenSearchSettings)

    def create_app_settings(self) -> AppSettings:
        return self._create(AppSettings)

    def create_catalog_settings(self) -> CatalogSettings:
        return self._create(CatalogSettings)


# Process environment factory
settings_factory = SettingsFactory()
