"""
Wiki domain entities - 純粋な業務ロジックとドメインモデル
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class CurrentRevisionRow:
    """``current_revision`` ビューの1行（権限値は未解決のまま）"""

    page_id: int
    path: str
    title: str
    action_view: str
    action_modify: str
    revision_id: int
    body: Optional[str]
    created: Optional[datetime]
    edited: Optional[datetime]

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "CurrentRevisionRow":
        return cls(
            page_id=row["page_id"],
            path=row["path"],
            title=row["title"],
            action_view=row["action_view"],
            action_modify=row["action_modify"],
            revision_id=row["revision_id"],
            body=row["body"],
            created=row["created"],
            edited=row["edited"],
        )

    @property
    def is_deleted(self) -> bool:
        return self.body is None


@dataclass(frozen=True)
class PageActions:
    """解決済みの実効権限値"""

    wiki_view: str
    wiki_modify: str

    def to_dict(self) -> dict[str, str]:
        return {"wikiView": self.wiki_view, "wikiModify": self.wiki_modify}


@dataclass(frozen=True)
class PageView:
    """外部に公開するページ表現"""

    page_id: int
    path: str
    title: str
    body: Optional[str]
    revision_id: int
    created: Optional[datetime]
    edited: Optional[datetime]
    actions: PageActions

    @property
    def is_deleted(self) -> bool:
        """現在のリビジョンが削除マーカー（本文が None）かどうか"""
        return self.body is None


@dataclass(frozen=True)
class RevisionEntry:
    """ページ本文の1リビジョン"""

    revision_id: int
    page_id: int
    body: Optional[str]
    created: Optional[datetime]

    @property
    def is_tombstone(self) -> bool:
        return self.body is None


__all__ = ["CurrentRevisionRow", "PageActions", "PageView", "RevisionEntry"]
