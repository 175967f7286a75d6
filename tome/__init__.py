"""Tome: hierarchical wiki pages with revision history and inherited permissions."""

__version__ = "0.1.0"
