"""Base class for service factories."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Generic, TypeVar

from catalogmate.utils.settings.core import AppSettings, CatalogSettings, OpenSearchSettings
from catalogmate.utils.settings.factory import SettingsFactory, settings_factory

T = TypeVar('T')


class ServiceFactoryABC(ABC, Generic[T]):
    """
    Builds a service from the application settings.

    Subclasses implement `from_settings`; `create_default` and `from_env_file`
    only decide where the settings are loaded from.
    """

    @classmethod
    @abstractmethod
    def from_settings(
        cls,
        app_settings: AppSettings,
        opensearch_settings: OpenSearchSettings,
        catalog_settings: CatalogSettings,
    ) -> T:
        """Build the service from already loaded settings."""
        pass

    @classmethod
    def from_factory(cls, factory: SettingsFactory) -> T:
        return cls.from_settings(
            app_settings=factory.create_app_settings(),
            opensearch_settings=factory.create_opensearch_settings(),
            catalog_settings=factory.create_catalog_settings(),
        )

    @classmethod
    def create_default(cls) -> T:
        """Build the service from the process environment and the discovered env file"""
        return cls.from_factory(settings_factory)

    @classmethod
    def from_env_file(cls, env_path: str | Path) -> T:
        """
        Build the service from settings in a specific .env file.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        return cls.from_factory(SettingsFactory(env_path))
