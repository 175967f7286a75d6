"""Application layer for the wiki feature."""

from .schemas import PageViewSchema, RevisionSchema
from .services import WikiPageService

__all__ = ["PageViewSchema", "RevisionSchema", "WikiPageService"]
