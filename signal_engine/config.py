"""Runtime settings and engine configuration loading.

Settings come from environment variables (``SIGNAL_ENGINE_*``) or a
``.env`` file. Engine thresholds live in an optional YAML file whose keys
are the field names of ``EngineConfig``; no file means defaults.
"""

import logging
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from signal_engine.models.config import EngineConfig

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SIGNAL_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Engine YAML (thresholds, periods, multipliers)
    config_path: Path | None = None

    log_level: str = "INFO"

    # Maximum analyses in flight during a batch scan
    scan_concurrency: int = 5


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def load_engine_config(path: Path | str | None = None) -> EngineConfig:
    """Load engine configuration from a YAML file.

    Falls back to defaults if no path is given or the file doesn't exist.

    Raises:
        ValueError: If the file is not a YAML mapping or holds unknown
            or invalid fields.
    """
    if path is None:
        path = get_settings().config_path
    if path is None:
        return EngineConfig()

    config_path = Path(path)

    if not config_path.exists():
        logger.info("No engine config at %s, using defaults", config_path)
        return EngineConfig()

    with open(config_path) as f:
        try:
            raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"{config_path}: invalid YAML: {e}") from e

    if not isinstance(raw, dict):
        raise ValueError(f"{config_path}: expected a mapping, got {type(raw).__name__}")

    try:
        config = EngineConfig(**raw)
    except ValidationError as e:
        raise ValueError(f"{config_path}: invalid engine config: {e}") from e

    logger.info("Loaded engine config from %s (%d overrides)", config_path, len(raw))
    return config
