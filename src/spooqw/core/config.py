"""SpooqW configuration — reads from spooqw.toml and env vars."""

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict

from pydantic_settings import BaseSettings

logger = logging.getLogger("spooqw")


class SpooqwSettings(BaseSettings):
    """Service and CLI settings."""

    # Server
    host: str = "0.0.0.0"
    port: int = 8410
    log_level: str = "info"

    # Config language
    default_pipeline_id: str = "my-pipeline"
    strict_validation: bool = False

    model_config = {"env_prefix": "SPOOQW_", "env_file": ".env"}


def _read_toml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning(f"Ignoring unreadable config file {path}: {e}")
        return {}
    # Settings may live at top level or under a [spooqw] table
    return data.get("spooqw", data)


def _load_toml_config() -> Dict[str, Any]:
    """Load configuration from spooqw.toml files.

    Searches for spooqw.toml in:
    1. SPOOQW_HOME (~/.spooqw/spooqw.toml by default)
    2. Current directory (./spooqw.toml), which takes precedence

    Returns:
        Combined configuration dict from found files
    """
    config: Dict[str, Any] = {}

    spooqw_home = Path(os.environ.get("SPOOQW_HOME", "~/.spooqw")).expanduser()
    for path in (spooqw_home / "spooqw.toml", Path("spooqw.toml")):
        if path.exists():
            config.update(_read_toml(path))

    return config


def get_settings() -> SpooqwSettings:
    """Resolve settings. Environment variables win over spooqw.toml values."""
    settings = SpooqwSettings()
    toml_config = _load_toml_config()

    updates = {
        key: value
        for key, value in toml_config.items()
        if key in SpooqwSettings.model_fields and key not in settings.model_fields_set
    }
    if updates:
        settings = SpooqwSettings.model_validate({**settings.model_dump(), **updates})
    return settings


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        datefmt="%H:%M:%S",
    )
