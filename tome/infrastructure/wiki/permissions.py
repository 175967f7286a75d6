"""
祖先ページを辿って実効権限値を解決するリポジトリ
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from tome.core.db import Database
from tome.core.logging_config import structured_logger
from tome.core.models.wiki import Page
from tome.domain.wiki.entities import PageActions
from tome.domain.wiki.exceptions import PermissionResolutionError
from tome.domain.wiki.paths import PathNormalizer
from tome.domain.wiki.permissions import INHERIT, PageAction, is_concrete
from tome.infrastructure.wiki._session import reading

log = structured_logger(__name__)


class PermissionResolver:
    """パスと操作から、最も近い祖先が持つ具体的な権限値を返す"""

    def __init__(self, database: Database, path_normalizer: Optional[PathNormalizer] = None) -> None:
        self._database = database
        self._paths = path_normalizer or PathNormalizer()

    def resolve(self, path: str, action: PageAction | str, session: Optional[Session] = None) -> str:
        """``path`` 自身を含む祖先のうち、最も長いパスの具体値を返す。

        ``path`` のページが存在しなくても解決できる（新規作成時の判定に使う）。
        ルートにも具体値が無い場合は初期設定の不備なので例外にする。
        """

        action = PageAction.parse(action)
        ancestors = self._paths.ancestors(path)
        column = getattr(Page, action.column_name)

        stmt = (
            select(column)
            .where(Page.path.in_(ancestors), column != INHERIT, column != "")
            .order_by(func.length(Page.path).desc())
            .limit(1)
        )

        with reading(self._database, session) as active:
            token = active.execute(stmt).scalar_one_or_none()

        if not is_concrete(token):
            log.error("wiki.permission.unresolved", path=path, action=action.value, ancestors=ancestors)
            raise PermissionResolutionError(path, action.value)
        return token

    def resolve_actions(
        self,
        path: str,
        action_view: str,
        action_modify: str,
        session: Optional[Session] = None,
    ) -> PageActions:
        """保存値が ``inherit`` のものだけを祖先から解決する"""

        view = action_view if is_concrete(action_view) else self.resolve(path, PageAction.VIEW, session)
        modify = action_modify if is_concrete(action_modify) else self.resolve(path, PageAction.MODIFY, session)
        return PageActions(wiki_view=view, wiki_modify=modify)


__all__ = ["PermissionResolver"]
