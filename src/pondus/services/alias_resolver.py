"""Model name canonicalization.

Every benchmark source spells model names its own way ("GPT-5 (high)",
"openai/gpt-5", "gpt-5-2025-08-07"). ``AliasResolver`` maps those spellings
onto one lowercase canonical name using the bundled alias dataset merged
with an optional user ``models.toml``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Annotated, Any

import toml
from pydantic import BaseModel, Field, ValidationError

from pondus.shared.errors import create_parsing_error
from pondus.shared.paths import default_config_dir

logger = logging.getLogger(__name__)

BUNDLED_PACKAGE = "pondus.data"
BUNDLED_FILE = "models.toml"
OVERRIDE_FILE = "models.toml"

# Characters that may follow an alias for a longer name to still match it.
# "." is excluded: "gpt-5.2" is a different model from "gpt-5".
PREFIX_SEPARATORS = frozenset("-( ")


class AliasEntry(BaseModel):
    """One ``[entry-id]`` table of an alias dataset."""

    canonical: str = Field(min_length=1)
    aliases: list[Annotated[str, Field(min_length=1)]] = Field(default_factory=list)


def _parse_dataset(text: str, source: str) -> dict[str, AliasEntry]:
    try:
        raw = toml.loads(text)
    except toml.TomlDecodeError as e:
        raise create_parsing_error(
            f"Malformed alias dataset {source}: {e}",
            file_path=source,
            operation="load_aliases",
            original_error=e,
        ) from e

    entries: dict[str, AliasEntry] = {}
    for entry_id, value in raw.items():
        if not isinstance(value, dict):
            raise create_parsing_error(
                f"Alias entry '{entry_id}' in {source} must be a table",
                file_path=source,
                operation="load_aliases",
            )
        try:
            entries[entry_id] = AliasEntry.model_validate(value)
        except ValidationError as e:
            raise create_parsing_error(
                f"Invalid alias entry '{entry_id}' in {source}: {e.errors()[0]['msg']}",
                file_path=source,
                operation="load_aliases",
                original_error=e,
            ) from e
    return entries


def _read_override(path: Path) -> dict[str, AliasEntry]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise create_parsing_error(
            f"Failed to read alias dataset {path}: {e}",
            file_path=str(path),
            operation="load_aliases",
            original_error=e,
        ) from e
    return _parse_dataset(text, str(path))


def _collapse(mapping: dict[str, str]) -> dict[str, str]:
    """Follow alias chains so every value maps to itself."""
    collapsed: dict[str, str] = {}
    for alias, target in mapping.items():
        seen = {alias}
        while target in mapping and mapping[target] != target and target not in seen:
            seen.add(target)
            target = mapping[target]
        collapsed[alias] = target
    return collapsed


class AliasResolver:
    """Read-only alias → canonical lookup.

    Built once at startup and shared by reference; there is no way to
    mutate the map after construction.
    """

    def __init__(self, mapping: Mapping[str, str]) -> None:
        self._map: Mapping[str, str] = MappingProxyType(dict(mapping))
        # Longest alias first, ties broken by the lexicographically smallest
        self._prefix_order: tuple[str, ...] = tuple(sorted(self._map, key=lambda a: (-len(a), a)))

    @classmethod
    def from_entries(cls, *datasets: Mapping[str, AliasEntry | Mapping[str, Any]]) -> AliasResolver:
        """Build a resolver from parsed datasets, later datasets overriding earlier ones.

        Each entry maps its canonical to itself and each alias to the
        canonical. A later definition of the same key replaces the earlier
        one; aliases are never unioned.
        """
        mapping: dict[str, str] = {}
        for dataset in datasets:
            for entry in dataset.values():
                parsed = entry if isinstance(entry, AliasEntry) else AliasEntry.model_validate(entry)
                canonical = parsed.canonical.lower()
                mapping[canonical] = canonical
                for alias in parsed.aliases:
                    mapping[alias.lower()] = canonical
        return cls(_collapse(mapping))

    @classmethod
    def load(
        cls,
        override_path: str | Path | None = None,
        *,
        config_dir: Path | None = None,
    ) -> AliasResolver:
        """Load the bundled aliases and merge a user override on top.

        Args:
            override_path: Explicit override dataset. Skipped silently when it
                does not exist; the default location is then not consulted.
            config_dir: Directory holding the default ``models.toml`` override.

        Raises:
            AliasDatasetError: If any dataset is malformed.
        """
        bundled_text = resources.files(BUNDLED_PACKAGE).joinpath(BUNDLED_FILE).read_text(encoding="utf-8")
        datasets = [_parse_dataset(bundled_text, f"{BUNDLED_PACKAGE}/{BUNDLED_FILE}")]

        if override_path is not None:
            candidate = Path(override_path).expanduser()
        else:
            candidate = (config_dir or default_config_dir()) / OVERRIDE_FILE

        if candidate.exists():
            logger.debug("Merging alias override from %s", candidate)
            datasets.append(_read_override(candidate))
        elif override_path is not None:
            logger.debug("Alias override %s does not exist, skipping", candidate)

        resolver = cls.from_entries(*datasets)
        logger.debug("Loaded %d aliases for %d models", len(resolver), len(resolver.canonicals()))
        return resolver

    def resolve(self, name: str) -> str:
        """Return the canonical name for ``name``, or ``name`` lowercased."""
        query = name.lower()
        canonical = self._map.get(query)
        if canonical is not None:
            return canonical

        for alias in self._prefix_order:
            if len(query) > len(alias) and query.startswith(alias) and query[len(alias)] in PREFIX_SEPARATORS:
                return self._map[alias]

        return query

    def matches(self, source_name: str, canonical: str) -> bool:
        """Return True if ``source_name`` resolves to ``canonical``."""
        return self.resolve(source_name) == canonical.lower()

    def canonicals(self) -> list[str]:
        return sorted(set(self._map.values()))

    def __len__(self) -> int:
        return len(self._map)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._map
