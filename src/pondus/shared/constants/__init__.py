"""
Pondus Constants Module

Centralized constants for the pondus application. Magic values used by more
than one module live here so the cache, the sources and the CLI agree on them.
"""

from .cache import Cache
from .cli import CLIDefaults, CLIHelp, CLIMessages
from .network import Network
from .sources import AgentBrowser, SourceNames

__all__ = [
    "AgentBrowser",
    "CLIDefaults",
    "CLIHelp",
    "CLIMessages",
    "Cache",
    "Network",
    "SourceNames",
]
