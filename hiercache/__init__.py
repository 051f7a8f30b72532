"""Two-level cache hierarchy simulator."""

__version__ = "0.1.0"
