"""Pondus Shared Module.

This package contains constants, error handling, logging helpers and
filesystem locations used across pondus.
"""

__all__ = ["constants", "errors", "logging", "paths", "protocols"]
