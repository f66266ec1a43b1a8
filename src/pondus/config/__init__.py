"""Pondus Configuration Module

Settings facade, section models and the loader used by the CLI.
"""

from __future__ import annotations

from .loader import default_config_path, load_settings
from .models import (
    AliasSettings,
    BrowserSettings,
    CacheSettings,
    FetchSettings,
    HttpSettings,
    SourceSettings,
)
from .models.settings import Settings

__all__ = [
    "AliasSettings",
    "BrowserSettings",
    "CacheSettings",
    "FetchSettings",
    "HttpSettings",
    "Settings",
    "SourceSettings",
    "default_config_path",
    "load_settings",
]
