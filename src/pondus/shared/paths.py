"""Per-user directory locations for configuration and cache data."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import typer

from pondus.shared.constants import Cache


def default_config_dir() -> Path:
    """Return the per-user configuration directory (``~/.config/pondus`` on Linux)."""
    return Path(typer.get_app_dir(Cache.APP_DIR_NAME, force_posix=False))


def default_cache_dir() -> Path:
    """Return the per-user cache directory.

    Honours ``XDG_CACHE_HOME`` everywhere, then falls back to the platform
    convention.
    """
    xdg_cache = os.environ.get("XDG_CACHE_HOME")
    if xdg_cache:
        return Path(xdg_cache) / Cache.APP_DIR_NAME

    if sys.platform == "darwin":
        return Path.home() / "Library" / "Caches" / Cache.APP_DIR_NAME

    if sys.platform.startswith("win"):
        local_app_data = os.environ.get("LOCALAPPDATA")
        if local_app_data:
            return Path(local_app_data) / Cache.APP_DIR_NAME

    return Path.home() / ".cache" / Cache.APP_DIR_NAME
