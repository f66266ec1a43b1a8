"""Protocol interfaces shared across layers."""

from .services import BenchmarkSourceProtocol

__all__ = ["BenchmarkSourceProtocol"]
