"""Bulk-load the IMDb TSV datasets into SQLite and run a stored query against them."""

__version__ = "0.1.0"
