"""Go model generation tools for PostgreSQL schemas."""

__version__ = "0.1.0"
