"""
CLI Configuration Constants

Default values, help texts and message templates for the command-line
interface.
"""


class CLIDefaults:
    """CLI default values."""

    VERSION = "0.1.0"
    APP_NAME = "pondus"

    EXIT_SUCCESS = 0
    EXIT_ERROR = 1
    EXIT_USAGE = 2

    DEFAULT_FORMAT = "json"
    DEFAULT_LOG_LEVEL = "WARNING"


class CLIHelp:
    """CLI help texts."""

    APP_DESCRIPTION = "Opinionated AI model benchmark aggregator"
    VERSION_TEXT = "pondus {version}"

    FORMAT_HELP = "Output format: json (default), table, markdown"
    REFRESH_HELP = "Bypass cached data and re-fetch all sources"
    CONFIG_HELP = "Path to config.toml (default: per-user config directory)"

    RANK_HELP = "Rank all models across sources"
    RANK_TOP_HELP = "Show top N models per source"
    CHECK_HELP = "Check a single model across all sources"
    CHECK_MODEL_HELP = "Model name (canonical or alias)"
    COMPARE_HELP = "Compare two models head-to-head"
    COMPARE_MODEL1_HELP = "First model"
    COMPARE_MODEL2_HELP = "Second model"
    SOURCES_HELP = "List all sources and their status"
    REFRESH_COMMAND_HELP = "Force re-fetch all sources (clears cache)"


class CLIMessages:
    """CLI message templates."""

    CACHE_CLEARED = "Cache cleared. Re-fetching all sources..."
    UNKNOWN_FORMAT = "Unknown format: {value}. Expected: json, table, markdown"
    ERROR_PREFIX = "Error: {message}"
