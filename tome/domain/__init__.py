"""Domain layer of the wiki engine."""
