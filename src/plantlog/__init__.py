"""Plant observation log: record plants and query them by exact-match filters."""

__version__ = "0.1.0"
