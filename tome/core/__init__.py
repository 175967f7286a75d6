"""Core infrastructure shared by the wiki engine."""
