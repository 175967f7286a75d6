"""Wiki機能のSQLAlchemyモデル."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, func, select
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tome.core.models.base import Base
from tome.core.time import utc_now
from tome.domain.wiki.commands import TITLE_MAX_LENGTH
from tome.domain.wiki.paths import PATH_MAX_LENGTH
from tome.domain.wiki.permissions import INHERIT


class Page(Base):
    """Wikiページのメタデータ"""

    __tablename__ = "page"

    page_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    path: Mapped[str] = mapped_column(String(PATH_MAX_LENGTH), nullable=False, unique=True, index=True)
    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    action_view: Mapped[str] = mapped_column(String(64), nullable=False, default=INHERIT)
    action_modify: Mapped[str] = mapped_column(String(64), nullable=False, default=INHERIT)

    # 履歴の削除はDB側のON DELETE CASCADEに任せる
    revisions: Mapped[list["Revision"]] = relationship(
        "Revision",
        back_populates="page",
        order_by="Revision.revision_id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Page {self.path}>"


class Revision(Base):
    """Wikiページ本文の履歴（追記のみ）"""

    __tablename__ = "revision"
    # revision_id は削除後も再利用させない
    __table_args__ = {"sqlite_autoincrement": True}

    revision_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    page_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("page.page_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # None はそのリビジョンでページが削除されたことを表す
    body: Mapped[str | None] = mapped_column(Text, nullable=True)
    created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    page: Mapped[Page] = relationship("Page", back_populates="revisions")

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Revision {self.page_id} #{self.revision_id}>"


# ページごとの最新リビジョンIDと作成・更新日時（履歴の最小・最大）
_revision_span = (
    select(
        Revision.page_id.label("page_id"),
        func.max(Revision.revision_id).label("revision_id"),
        func.min(Revision.created).label("created"),
        func.max(Revision.created).label("edited"),
    )
    .group_by(Revision.page_id)
    .subquery("revision_span")
)

# ページと最新リビジョンを結合したビュー
current_revision = (
    select(
        Page.page_id,
        Page.path,
        Page.title,
        Page.action_view,
        Page.action_modify,
        Revision.revision_id,
        Revision.body,
        _revision_span.c.created,
        _revision_span.c.edited,
    )
    .join(_revision_span, _revision_span.c.page_id == Page.page_id)
    .join(Revision, Revision.revision_id == _revision_span.c.revision_id)
    .subquery("current_revision")
)


__all__ = [
    "INHERIT",
    "PATH_MAX_LENGTH",
    "TITLE_MAX_LENGTH",
    "Page",
    "Revision",
    "current_revision",
]
