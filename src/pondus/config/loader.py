"""Settings loader.

Resolves the configuration file location, reads it through
``Settings.from_toml_file`` and applies the ``AA_API_KEY`` override.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import toml
from pydantic import ValidationError

from pondus.config.models.settings import Settings
from pondus.shared.errors import create_config_error
from pondus.shared.paths import default_config_dir

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.toml"
CONFIG_PATH_ENV = "PONDUS_CONFIG"
AA_API_KEY_ENV = "AA_API_KEY"


def default_config_path() -> Path:
    """Return ``<config dir>/config.toml``, honouring ``PONDUS_CONFIG``."""
    env_path = os.environ.get(CONFIG_PATH_ENV)
    if env_path:
        return Path(env_path).expanduser()
    return default_config_dir() / CONFIG_FILE_NAME


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from the TOML configuration file and the environment.

    A missing default file yields defaults. An explicitly given path that
    does not exist is an error.

    Args:
        config_path: Optional path to the TOML file.

    Returns:
        The loaded Settings instance.

    Raises:
        ConfigError: If the file is missing (explicit path only), malformed,
            or fails validation.
    """
    explicit = config_path is not None
    path = Path(config_path).expanduser() if explicit else default_config_path()

    try:
        if path.exists():
            settings = Settings.from_toml_file(path)
            logger.debug("Loaded configuration from %s", path)
        elif explicit:
            raise create_config_error(
                f"Configuration file not found: {path}",
                file_path=str(path),
            )
        else:
            logger.debug("No configuration file at %s, using defaults", path)
            settings = Settings()
    except toml.TomlDecodeError as e:
        raise create_config_error(
            f"Invalid TOML in {path}: {e}",
            file_path=str(path),
            original_error=e,
        ) from e
    except ValidationError as e:
        first = e.errors()[0] if e.errors() else {}
        config_key = ".".join(str(part) for part in first.get("loc", ()))
        raise create_config_error(
            f"Invalid configuration in {path}: {first.get('msg', e)}",
            file_path=str(path),
            config_key=config_key or None,
            original_error=e,
        ) from e
    except OSError as e:
        raise create_config_error(
            f"Failed to read configuration file {path}: {e}",
            file_path=str(path),
            original_error=e,
        ) from e

    env_api_key = os.environ.get(AA_API_KEY_ENV)
    if env_api_key and env_api_key.strip():
        settings.aa_api_key = env_api_key.strip()

    return settings
