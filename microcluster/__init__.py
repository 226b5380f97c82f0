"""SQL statement registry, cluster member and join token tables, daemon configuration and cluster query helpers."""

__version__ = "0.1.0"