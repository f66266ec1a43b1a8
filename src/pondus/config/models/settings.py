"""Pondus Settings Configuration Model.

Main Settings class that consolidates all configuration sections.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import toml
from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from pondus.config.models.cache_settings import AliasSettings, CacheSettings
from pondus.config.models.network_settings import (
    BrowserSettings,
    FetchSettings,
    HttpSettings,
)
from pondus.config.models.source_settings import SourceSettings
from pondus.shared.constants import AgentBrowser, SourceNames

logger = logging.getLogger(__name__)

# Older config files keep the Artificial Analysis key in a top-level table
LEGACY_AA_TABLE = "artificial-analysis"


class Settings(BaseSettings):
    """Settings facade providing unified configuration access.

    Values come from ``config.toml`` and are overridden by ``PONDUS_*``
    environment variables (``PONDUS_CACHE__TTL_HOURS=6``).
    """

    model_config = SettingsConfigDict(
        env_prefix="PONDUS_",
        env_nested_delimiter="__",
        env_ignore_empty=True,
        extra="ignore",
    )

    cache: CacheSettings = Field(default_factory=CacheSettings)
    alias: AliasSettings = Field(default_factory=AliasSettings)
    http: HttpSettings = Field(default_factory=HttpSettings)
    fetch: FetchSettings = Field(default_factory=FetchSettings)
    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    sources: dict[str, SourceSettings] = Field(default_factory=dict)

    # Filled by the loader from AA_API_KEY or the legacy top-level table
    aa_api_key: str | None = Field(default=None, repr=False, exclude=True)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Environment wins over values read from the TOML file
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    @classmethod
    def from_toml_file(cls, file_path: str | Path) -> Settings:
        """Load settings from a TOML file with environment variable overrides."""
        file_path = Path(file_path)
        if not file_path.exists():
            msg = f"Configuration file not found: {file_path}"
            raise FileNotFoundError(msg)

        raw_config: dict[str, Any] = toml.load(file_path)
        legacy = raw_config.get(LEGACY_AA_TABLE)
        settings = cls(**raw_config)
        if isinstance(legacy, dict) and isinstance(legacy.get("api_key"), str):
            settings.aa_api_key = legacy["api_key"]
        return settings

    def source(self, name: str) -> SourceSettings | None:
        """Return the ``[sources.<name>]`` table, if configured."""
        return self.sources.get(name)

    def artificial_analysis_api_key(self) -> str | None:
        """API key for Artificial Analysis.

        Order: ``AA_API_KEY`` / legacy table, then ``[sources.artificial-analysis]``,
        then ``[sources.artificial_analysis]``.
        """
        if self.aa_api_key:
            return self.aa_api_key
        for name in (SourceNames.ARTIFICIAL_ANALYSIS, "artificial_analysis"):
            table = self.source(name)
            if table is not None and table.api_key:
                return table.api_key
        return None

    def agent_browser_path(self) -> str:
        """Executable used for scraped sources."""
        for name in (SourceNames.SEAL, SourceNames.SWE_REBENCH):
            table = self.source(name)
            if table is not None and table.agent_browser_path:
                return table.agent_browser_path
        return AgentBrowser.DEFAULT_EXECUTABLE
