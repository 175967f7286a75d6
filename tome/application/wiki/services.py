"""
Wiki機能のアプリケーションサービス - 権限判定を行ってからリポジトリへ委譲する
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from tome.application.wiki.schemas import page_view_schema, revision_list_schema
from tome.domain.wiki.commands import PageDefinition, PageUpdate, WikiPageCommandFactory
from tome.domain.wiki.entities import PageView, RevisionEntry
from tome.domain.wiki.paths import PathNormalizer
from tome.domain.wiki.permissions import PageAction, ViewerContext, WikiAccessPolicy
from tome.infrastructure.wiki.pages import PageRepository


class WikiPageService:
    """Wikiページ関連のビジネスロジック"""

    def __init__(
        self,
        repository: PageRepository,
        policy: Optional[WikiAccessPolicy] = None,
        command_factory: Optional[WikiPageCommandFactory] = None,
        path_normalizer: Optional[PathNormalizer] = None,
    ) -> None:
        self.repository = repository
        self.policy = policy or WikiAccessPolicy()
        self.commands = command_factory or WikiPageCommandFactory()
        self._paths = path_normalizer or PathNormalizer()

    # 権限判定 ---------------------------------------------------------

    def effective_permission(self, path: str, action: PageAction | str) -> str:
        """存在しないパスでも最も近い祖先の値で解決する"""
        return self.repository.resolver.resolve(self._paths.normalize(path), action)

    def can_view(self, path: str, viewer: Optional[ViewerContext]) -> bool:
        return self.policy.is_allowed(self.effective_permission(path, PageAction.VIEW), viewer)

    def can_modify(self, path: str, viewer: Optional[ViewerContext]) -> bool:
        return self.policy.is_allowed(self.effective_permission(path, PageAction.MODIFY), viewer)

    def _require(self, token: str, viewer: Optional[ViewerContext], action: PageAction, path: str) -> None:
        self.policy.ensure_allowed(token, viewer, action, path)

    # 参照 -------------------------------------------------------------

    def get_page(self, path: str, viewer: Optional[ViewerContext] = None, include_deleted: bool = False) -> PageView:
        page = self.repository.get_page(path, include_deleted=include_deleted)
        self._require(page.actions.wiki_view, viewer, PageAction.VIEW, page.path)
        return page

    def page_exists(self, path: str, viewer: Optional[ViewerContext] = None) -> bool:
        """存在確認のみ。存在するが閲覧できない場合は権限エラー"""

        normalized = self._paths.normalize(path)
        if not self.repository.page_exists(normalized):
            return False
        self._require(self.effective_permission(normalized, PageAction.VIEW), viewer, PageAction.VIEW, normalized)
        return True

    def get_history(self, path: str, viewer: Optional[ViewerContext] = None) -> List[RevisionEntry]:
        page = self.repository.get_page(path, include_deleted=True)
        self._require(page.actions.wiki_view, viewer, PageAction.VIEW, page.path)
        return self.repository.get_revisions(page.page_id)

    # 更新 -------------------------------------------------------------

    def create_page(self, definition: PageDefinition, viewer: Optional[ViewerContext] = None) -> PageView:
        """新しいページの作成には、作成先パスの実効 modify 権限が必要"""

        path = self._paths.normalize(definition.path)
        self._require(self.effective_permission(path, PageAction.MODIFY), viewer, PageAction.MODIFY, path)
        return self.repository.create_page(definition)

    def update_page(self, page_update: PageUpdate, viewer: Optional[ViewerContext] = None) -> PageView:
        page = self.repository.get_page_by_id(page_update.page_id, include_deleted=True)
        self._require(page.actions.wiki_modify, viewer, PageAction.MODIFY, page.path)
        return self.repository.update_page(page_update)

    def move_page(self, old_path: str, new_path: str, viewer: Optional[ViewerContext] = None) -> int:
        page = self.repository.get_page(old_path, include_deleted=True)
        self._require(page.actions.wiki_modify, viewer, PageAction.MODIFY, page.path)
        destination = self._paths.normalize(new_path)
        self._require(
            self.effective_permission(destination, PageAction.MODIFY),
            viewer,
            PageAction.MODIFY,
            destination,
        )
        return self.repository.move_page(page.path, destination)

    def delete_page(self, path: str, viewer: Optional[ViewerContext] = None) -> int:
        page = self.repository.get_page(path, include_deleted=True)
        self._require(page.actions.wiki_modify, viewer, PageAction.MODIFY, page.path)
        return self.repository.delete_page(page.path)

    def full_delete_page(self, path: str, viewer: Optional[ViewerContext] = None) -> int:
        page = self.repository.get_page(path, include_deleted=True)
        self._require(page.actions.wiki_modify, viewer, PageAction.MODIFY, page.path)
        return self.repository.full_delete_page(page.path)

    # HTTP層向けの辞書入出力 -------------------------------------------

    def create_page_from_payload(
        self,
        payload: Mapping[str, Any],
        viewer: Optional[ViewerContext] = None,
        path: Optional[str] = None,
    ) -> Dict[str, Any]:
        definition = self.commands.definition_from_payload(payload, path=path)
        return self.serialize_page(self.create_page(definition, viewer))

    def update_page_from_payload(
        self,
        payload: Mapping[str, Any],
        viewer: Optional[ViewerContext] = None,
        page_id: Optional[int] = None,
    ) -> Dict[str, Any]:
        page_update = self.commands.update_from_payload(payload, page_id=page_id)
        return self.serialize_page(self.update_page(page_update, viewer))

    @staticmethod
    def serialize_page(page: PageView) -> Dict[str, Any]:
        return page_view_schema.dump(page)

    @staticmethod
    def serialize_revisions(revisions: List[RevisionEntry]) -> List[Dict[str, Any]]:
        return revision_list_schema.dump(revisions)


__all__ = ["WikiPageService"]
