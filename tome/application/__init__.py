"""Application layer of the wiki engine."""
