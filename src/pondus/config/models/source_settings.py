"""Per-source configuration model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SourceSettings(BaseModel):
    """Settings for one ``[sources.<name>]`` table.

    Security: api_key is hidden from repr.
    """

    model_config = ConfigDict(extra="ignore")

    api_key: str | None = Field(default=None, repr=False)
    agent_browser_path: str | None = None
