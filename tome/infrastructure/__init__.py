"""Infrastructure layer of the wiki engine."""
