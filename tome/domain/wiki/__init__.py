"""Wiki ドメインモジュール。"""

from .commands import PageDefinition, PageUpdate, WikiPageCommandFactory
from .entities import CurrentRevisionRow, PageActions, PageView, RevisionEntry
from .exceptions import (
    PermissionResolutionError,
    WikiAccessDeniedError,
    WikiError,
    WikiMultipleResultsError,
    WikiOperationError,
    WikiPageExistsError,
    WikiPageNotFoundError,
    WikiRevisionConflictError,
    WikiValidationError,
)
from .paths import ROOT_PATH, PathNormalizer, ancestor_paths, normalize_path
from .permissions import INHERIT, PUBLIC, PageAction, ViewerContext, WikiAccessPolicy

__all__ = [
    "CurrentRevisionRow",
    "INHERIT",
    "PUBLIC",
    "PageAction",
    "PageActions",
    "PageDefinition",
    "PageUpdate",
    "PageView",
    "PathNormalizer",
    "PermissionResolutionError",
    "ROOT_PATH",
    "RevisionEntry",
    "ViewerContext",
    "WikiAccessDeniedError",
    "WikiAccessPolicy",
    "WikiError",
    "WikiMultipleResultsError",
    "WikiOperationError",
    "WikiPageCommandFactory",
    "WikiPageExistsError",
    "WikiPageNotFoundError",
    "WikiRevisionConflictError",
    "WikiValidationError",
    "ancestor_paths",
    "normalize_path",
]
