import os
from pathlib import Path
from typing import TypeVar
from pydantic_settings import BaseSettings, SettingsConfigDict
from loguru import logger

T = TypeVar('T', bound='ABCBaseSettings')

ENV_FILE_VARIABLE = "CATALOGMATE_ENV_FILE"
ENV_DIR = Path(".envs")
ENV_FILE_CANDIDATES = (ENV_DIR / "local.env", ENV_DIR / "dev.env")


def resolve_env_file() -> Path | None:
    """
    Env file for settings: $CATALOGMATE_ENV_FILE when set, else the first of
    .envs/local.env and .envs/dev.env that exists. None means process
    environment only.
    """
    explicit = os.environ.get(ENV_FILE_VARIABLE)
    if explicit:
        logger.info(f"Using env file from {ENV_FILE_VARIABLE}: {explicit}")
        return Path(explicit)

    found = next((path for path in ENV_FILE_CANDIDATES if path.exists()), None)
    if found:
        logger.info(f"Found env file: {found}")
    else:
        logger.info("Loading settings from System Environment")
    return found


class ABCBaseSettings(BaseSettings):
    """Common config of all settings classes; subclasses only add an env_prefix"""

    model_config = SettingsConfigDict(
        env_file=resolve_env_file(),
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @classmethod
    def from_env_file(cls: type[T], env_path: str | Path) -> T:
        """
        Load settings from a specific env file, keeping the class's env prefix.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        env_path = Path(env_path)
        if not env_path.exists():
            raise FileNotFoundError(f"Env file {env_path} does not exist.")
        return cls(_env_file=env_path)
