"""
Cache Configuration Constants

Defaults shared by the freshness cache and the configuration models.
"""

# Base time units for TTL calculations
BASE_SECOND = 1
BASE_MINUTE = 60 * BASE_SECOND
BASE_HOUR = 60 * BASE_MINUTE


class Cache:
    """Freshness cache constants."""

    DEFAULT_TTL_HOURS = 24
    SECONDS_PER_HOUR = BASE_HOUR

    APP_DIR_NAME = "pondus"
    FILE_SUFFIX = ".json"
    TEMP_SUFFIX = ".tmp"

    # Keys become file names, so they are restricted to a safe alphabet
    KEY_PATTERN = r"^[A-Za-z0-9_-][A-Za-z0-9_.-]*$"
