"""
Source Constants

Names and endpoints of the benchmark providers. The names double as cache
keys and as the ``source`` field of every result.
"""


class SourceNames:
    """Registered source names, in registration order."""

    ARTIFICIAL_ANALYSIS = "artificial-analysis"
    ARENA = "arena"
    SWEBENCH = "swebench"
    SWE_REBENCH = "swe-rebench"
    AIDER = "aider"
    LIVEBENCH = "livebench"
    TERMINAL_BENCH = "terminal-bench"
    SEAL = "seal"
    MOCK = "mock"


class AgentBrowser:
    """agent-browser subprocess settings."""

    DEFAULT_EXECUTABLE = "agent-browser"
    PAGE_SETTLE_MS = "2000"
    STEP_OPEN = "open"
    STEP_WAIT = "wait"
    STEP_SNAPSHOT = "snapshot"
