"""
Wikiページのリポジトリ実装 - メタデータと現在のリビジョンを扱うデータアクセス層
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List, Optional, Sequence

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from tome.core.db import Database
from tome.core.logging_config import structured_logger
from tome.core.models.wiki import Page, current_revision
from tome.domain.wiki.commands import PageDefinition, PageUpdate
from tome.domain.wiki.entities import CurrentRevisionRow, PageView, RevisionEntry
from tome.domain.wiki.exceptions import (
    WikiError,
    WikiMultipleResultsError,
    WikiOperationError,
    WikiPageExistsError,
    WikiPageNotFoundError,
    WikiRevisionConflictError,
    WikiValidationError,
)
from tome.domain.wiki.paths import ROOT_PATH, PathNormalizer
from tome.domain.wiki.permissions import is_concrete, normalize_token
from tome.infrastructure.wiki.assembler import PageViewAssembler
from tome.infrastructure.wiki.permissions import PermissionResolver
from tome.infrastructure.wiki.revisions import RevisionStore

log = structured_logger(__name__)


def _single(rows: Sequence, missing_message: str):
    if len(rows) > 1:
        raise WikiMultipleResultsError("page")
    if not rows:
        raise WikiPageNotFoundError(missing_message)
    return rows[0]


class PageRepository:
    """Wikiページのデータアクセス"""

    def __init__(
        self,
        database: Database,
        resolver: Optional[PermissionResolver] = None,
        revisions: Optional[RevisionStore] = None,
        assembler: Optional[PageViewAssembler] = None,
        path_normalizer: Optional[PathNormalizer] = None,
    ) -> None:
        self._database = database
        self._paths = path_normalizer or PathNormalizer()
        self.resolver = resolver or PermissionResolver(database, self._paths)
        self.revisions = revisions or RevisionStore(database)
        self.assembler = assembler or PageViewAssembler(self.resolver)

    # ------------------------------------------------------------------
    # 内部ヘルパー
    # ------------------------------------------------------------------

    @contextmanager
    def _guarded_transaction(
        self,
        operation: str,
        label: str,
        claimed_path: Optional[str] = None,
    ) -> Iterator[Session]:
        """トランザクションを開き、ストレージ由来の例外を詳細を伏せた例外に置き換える。

        ロールバックは ``Database.transaction`` が例外の伝播前に行う。
        ドメイン例外はそのまま呼び出し側へ渡す。``claimed_path`` を書き込む操作で
        一意制約違反が起き、そのパスが他のトランザクションで使われていれば
        ``WikiPageExistsError`` とする。
        """

        try:
            with self._database.transaction() as session:
                yield session
        except WikiError:
            raise
        except IntegrityError:
            if claimed_path is not None and self._path_claimed_elsewhere(claimed_path):
                log.warning(f"wiki.page.{operation}_conflict", path=claimed_path)
                raise WikiPageExistsError(claimed_path) from None
            log.exception(f"wiki.page.{operation}_failed", path=label)
            raise WikiOperationError(f"Failed to {operation} page '{label}'.") from None
        except SQLAlchemyError:
            log.exception(f"wiki.page.{operation}_failed", path=label)
            raise WikiOperationError(f"Failed to {operation} page '{label}'.") from None

    def _path_claimed_elsewhere(self, path: str) -> bool:
        # 失敗したトランザクションとは別のセッションで確認する
        stmt = select(Page.page_id).where(Page.path == path)
        try:
            with self._database.session() as session:
                return session.execute(stmt).first() is not None
        except SQLAlchemyError:
            return False

    @staticmethod
    def _path_taken(session: Session, path: str) -> bool:
        return session.execute(select(Page.page_id).where(Page.path == path)).first() is not None

    @staticmethod
    def _current_rows(session: Session, *criteria) -> List[CurrentRevisionRow]:
        stmt = select(current_revision).where(*criteria)
        return [CurrentRevisionRow.from_mapping(row) for row in session.execute(stmt).mappings()]

    def _current_by_path(self, session: Session, path: str) -> CurrentRevisionRow:
        rows = self._current_rows(session, current_revision.c.path == path)
        return _single(rows, f"No page found for url '{path}'.")

    def _current_by_id(self, session: Session, page_id: int) -> CurrentRevisionRow:
        rows = self._current_rows(session, current_revision.c.page_id == page_id)
        return _single(rows, f"No page found for id '{page_id}'.")

    @staticmethod
    def _ensure_root_is_concrete(path: str, action_view: Optional[str], action_modify: Optional[str]) -> None:
        # ルートが具体値を持つことで権限解決が必ず終了する
        if path != ROOT_PATH:
            return
        if action_view is not None and not is_concrete(action_view):
            raise WikiValidationError("action_view", "The root page must define a concrete view permission.")
        if action_modify is not None and not is_concrete(action_modify):
            raise WikiValidationError("action_modify", "The root page must define a concrete modify permission.")

    # ------------------------------------------------------------------
    # 公開API
    # ------------------------------------------------------------------

    def create_page(self, definition: PageDefinition) -> PageView:
        """ページと初版リビジョンを1トランザクションで作成する"""

        path = self._paths.normalize(definition.path)
        action_view = normalize_token(definition.action_view, "action_view")
        action_modify = normalize_token(definition.action_modify, "action_modify")
        self._ensure_root_is_concrete(path, action_view, action_modify)

        with self._guarded_transaction("create", path, claimed_path=path) as session:
            if self._path_taken(session, path):
                raise WikiPageExistsError(path)

            page = Page(
                path=path,
                title=definition.title,
                action_view=action_view,
                action_modify=action_modify,
            )
            session.add(page)
            session.flush()
            self.revisions.append(page.page_id, definition.body, session=session)

        log.info("wiki.page.created", path=path)
        return self.get_page(path)

    def get_page(self, path: str, include_deleted: bool = False) -> PageView:
        """パスで現在のページを取得する。削除済みページは既定で NotFound"""

        path = self._paths.normalize(path)
        with self._database.session() as session:
            row = self._current_by_path(session, path)
            if row.is_deleted and not include_deleted:
                raise WikiPageNotFoundError(f"No page found for url '{path}'.")
            return self.assembler.assemble(row, session)

    def get_page_by_id(self, page_id: int, include_deleted: bool = False) -> PageView:
        with self._database.session() as session:
            row = self._current_by_id(session, page_id)
            if row.is_deleted and not include_deleted:
                raise WikiPageNotFoundError(f"No page found for id '{page_id}'.")
            return self.assembler.assemble(row, session)

    def page_exists(self, path: str) -> bool:
        """削除されていないページが存在するか"""

        path = self._paths.normalize(path)
        with self._database.session() as session:
            rows = self._current_rows(session, current_revision.c.path == path)
        if len(rows) > 1:
            raise WikiMultipleResultsError("page")
        return bool(rows) and not rows[0].is_deleted

    def update_page(self, page_update: PageUpdate) -> PageView:
        """メタデータと（本文が変わった場合は）新しいリビジョンを1トランザクションで書き込む"""

        with self._database.session() as session:
            current = self._current_by_id(session, page_update.page_id)

        if page_update.path is not None and self._paths.normalize(page_update.path) != current.path:
            raise WikiValidationError("path", "Updating 'path' must be done as its own operation.")

        changes = page_update.metadata_changes()
        # 空文字などは inherit に揃える
        for key in ("action_view", "action_modify"):
            if key in changes:
                changes[key] = normalize_token(changes[key], key)
        self._ensure_root_is_concrete(current.path, changes.get("action_view"), changes.get("action_modify"))

        with self._guarded_transaction("update", current.path) as session:
            # 競合判定はトランザクション内で読み直した値で行う
            current = self._current_by_id(session, page_update.page_id)

            if changes:
                session.execute(
                    update(Page).where(Page.page_id == current.page_id).values(**changes)
                )

            if page_update.body is not None and page_update.body != current.body:
                if page_update.revision_id is not None and page_update.revision_id != current.revision_id:
                    raise WikiRevisionConflictError(
                        expected=current.revision_id,
                        actual=page_update.revision_id,
                    )
                self.revisions.append(current.page_id, page_update.body, session=session)

        log.info("wiki.page.updated", path=current.path, page_id=current.page_id)
        return self.get_page_by_id(current.page_id, include_deleted=True)

    def move_page(self, old_path: str, new_path: str) -> int:
        """パスのみを書き換える。影響を受けた行数を返す"""

        old_path = self._paths.normalize(old_path)
        new_path = self._paths.normalize(new_path)
        if old_path == ROOT_PATH:
            raise WikiValidationError("path", "The root page cannot be moved.")

        with self._guarded_transaction("move", old_path, claimed_path=new_path) as session:
            if old_path != new_path and self._path_taken(session, new_path):
                raise WikiPageExistsError(new_path)
            result = session.execute(
                update(Page).where(Page.path == old_path).values(path=new_path)
            )
            rows_affected = result.rowcount

        log.info("wiki.page.moved", old_path=old_path, new_path=new_path, rows=rows_affected)
        return rows_affected

    def delete_page(self, path: str) -> int:
        """削除マーカー（本文 None）のリビジョンを追加する。履歴は残る"""

        path = self._paths.normalize(path)
        with self._guarded_transaction("delete", path) as session:
            page_ids = session.execute(select(Page.page_id).where(Page.path == path)).scalars().all()
            page_id = _single(page_ids, f"No page found for url '{path}'.")

            try:
                current = self.revisions.current_for(page_id, session=session)
            except WikiPageNotFoundError:
                current = None

            if current is not None and current.is_tombstone:
                return current.revision_id

            revision_id = self.revisions.append(page_id, None, session=session)

        log.info("wiki.page.deleted", path=path, revision_id=revision_id)
        return revision_id

    def full_delete_page(self, path: str) -> int:
        """ページ行を削除する。リビジョンはDBのカスケードで消える（元に戻せない）"""

        path = self._paths.normalize(path)
        if path == ROOT_PATH:
            raise WikiValidationError("path", "The root page cannot be deleted.")

        with self._guarded_transaction("delete", path) as session:
            result = session.execute(delete(Page).where(Page.path == path))
            rows_affected = result.rowcount

        log.info("wiki.page.purged", path=path, rows=rows_affected)
        return rows_affected

    def get_revisions(self, page_id: int) -> List[RevisionEntry]:
        """ページの全履歴を古い順に返す"""

        return self.revisions.history_for(page_id)


__all__ = ["PageRepository"]
