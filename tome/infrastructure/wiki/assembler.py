"""保存されたページ行を外部公開用の PageView に変換する。"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from sqlalchemy.orm import Session

from tome.core.time import as_utc
from tome.domain.wiki.entities import CurrentRevisionRow, PageView
from tome.infrastructure.wiki.permissions import PermissionResolver


class PageViewAssembler:
    """日時の正規化と ``inherit`` の解決を行い、生の権限列を取り除く"""

    def __init__(self, resolver: PermissionResolver) -> None:
        self._resolver = resolver

    def assemble(
        self,
        raw: CurrentRevisionRow | Mapping[str, Any],
        session: Optional[Session] = None,
    ) -> PageView:
        row = raw if isinstance(raw, CurrentRevisionRow) else CurrentRevisionRow.from_mapping(raw)

        actions = self._resolver.resolve_actions(
            row.path,
            row.action_view,
            row.action_modify,
            session=session,
        )

        return PageView(
            page_id=row.page_id,
            path=row.path,
            title=row.title,
            body=row.body,
            revision_id=row.revision_id,
            created=as_utc(row.created),
            edited=as_utc(row.edited),
            actions=actions,
        )


__all__ = ["PageViewAssembler"]
