"""SQLAlchemy models for the wiki engine."""

from .base import Base
from .wiki import INHERIT, Page, Revision, current_revision

__all__ = ["Base", "INHERIT", "Page", "Revision", "current_revision"]
