"""Infrastructure layer for the wiki feature."""

from .assembler import PageViewAssembler
from .pages import PageRepository
from .permissions import PermissionResolver
from .revisions import UNSET, RevisionStore

__all__ = [
    "PageRepository",
    "PageViewAssembler",
    "PermissionResolver",
    "RevisionStore",
    "UNSET",
]
