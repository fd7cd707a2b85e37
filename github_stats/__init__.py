"""HTTP API returning aggregated GitHub user statistics."""

__version__ = "0.1.0"
