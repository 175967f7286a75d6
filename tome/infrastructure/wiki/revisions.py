"""
Wiki履歴のデータアクセス - 追記のみのリビジョンログ
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from tome.core.db import Database
from tome.core.models.wiki import Revision
from tome.core.time import as_utc
from tome.domain.wiki.entities import RevisionEntry
from tome.domain.wiki.exceptions import WikiPageNotFoundError
from tome.infrastructure.wiki._session import reading, writing


class _Unset:
    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return "UNSET"


# 本文が渡されなかったことを表す（None は削除マーカーとして区別する）
UNSET = _Unset()


def _to_entry(revision: Revision) -> RevisionEntry:
    return RevisionEntry(
        revision_id=revision.revision_id,
        page_id=revision.page_id,
        body=revision.body,
        created=as_utc(revision.created),
    )


class RevisionStore:
    """ページ本文のリビジョンを追記・参照する"""

    def __init__(self, database: Database) -> None:
        self._database = database

    def append(
        self,
        page_id: int,
        body: "str | None | _Unset" = UNSET,
        session: Optional[Session] = None,
    ) -> int:
        """リビジョンを追加し、その ``revision_id`` を返す。

        ``session`` が渡された場合は呼び出し側のトランザクション内で実行し、
        コミットはしない。ロールバックされればこのリビジョンも残らない。
        """

        if isinstance(body, _Unset):
            body = ""

        with writing(self._database, session) as active:
            revision = Revision(page_id=page_id, body=body)
            active.add(revision)
            active.flush()
            return revision.revision_id

    def current_for(self, page_id: int, session: Optional[Session] = None) -> RevisionEntry:
        """``revision_id`` が最大のリビジョンを返す"""

        stmt = (
            select(Revision)
            .where(Revision.page_id == page_id)
            .order_by(Revision.revision_id.desc())
            .limit(1)
        )
        with reading(self._database, session) as active:
            revision = active.execute(stmt).scalar_one_or_none()
            if revision is None:
                raise WikiPageNotFoundError(f"No revisions found for page id '{page_id}'.")
            return _to_entry(revision)

    def history_for(self, page_id: int, session: Optional[Session] = None) -> List[RevisionEntry]:
        """全リビジョンを古い順に返す（削除マーカーも含む）"""

        stmt = (
            select(Revision)
            .where(Revision.page_id == page_id)
            .order_by(Revision.revision_id.asc())
        )
        with reading(self._database, session) as active:
            return [_to_entry(revision) for revision in active.execute(stmt).scalars()]


__all__ = ["RevisionStore", "UNSET"]
