"""Configuration domain models.

Each configuration section lives in its own module and is consolidated by
``Settings`` in ``pondus.config.models.settings``.
"""

from .cache_settings import AliasSettings, CacheSettings
from .network_settings import BrowserSettings, FetchSettings, HttpSettings
from .source_settings import SourceSettings

__all__ = [
    "AliasSettings",
    "BrowserSettings",
    "CacheSettings",
    "FetchSettings",
    "HttpSettings",
    "SourceSettings",
]
