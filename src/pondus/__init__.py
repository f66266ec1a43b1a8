"""pondus: opinionated AI model benchmark aggregator."""

__version__ = "0.1.0"
