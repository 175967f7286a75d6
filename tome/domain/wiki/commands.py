"""Wikiページ操作に利用するドメインコマンドとファクトリ。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from tome.domain.wiki.exceptions import WikiValidationError
from tome.domain.wiki.paths import PathNormalizer
from tome.domain.wiki.permissions import INHERIT, normalize_token

TITLE_MAX_LENGTH = 255


@dataclass(frozen=True)
class PageDefinition:
    """ページ作成に必要な値を正規化したコマンド。"""

    path: str
    title: str
    body: str = ""
    action_view: str = INHERIT
    action_modify: str = INHERIT


@dataclass(frozen=True)
class PageUpdate:
    """ページ更新に必要な値を正規化したコマンド。

    ``None`` のフィールドは「変更しない」を意味する。
    """

    page_id: int
    path: Optional[str] = None
    title: Optional[str] = None
    body: Optional[str] = None
    action_view: Optional[str] = None
    action_modify: Optional[str] = None
    revision_id: Optional[int] = None

    def metadata_changes(self) -> dict[str, str]:
        changes: dict[str, str] = {}
        if self.title is not None:
            changes["title"] = self.title
        if self.action_view is not None:
            changes["action_view"] = self.action_view
        if self.action_modify is not None:
            changes["action_modify"] = self.action_modify
        return changes


class WikiPageCommandFactory:
    """入力値を正規化しドメインコマンドへ変換するファクトリ。"""

    def __init__(self, path_normalizer: PathNormalizer | None = None) -> None:
        self._paths = path_normalizer or PathNormalizer()

    def build_definition(
        self,
        *,
        path: str,
        title: str | None,
        body: str | None = None,
        action_view: str | None = None,
        action_modify: str | None = None,
    ) -> PageDefinition:
        return PageDefinition(
            path=self._paths.normalize(path),
            title=self._normalize_title(title),
            # 本文未指定は空文字列。None は削除マーカーなので作成時には使わない
            body=self._normalize_body(body) or "",
            action_view=normalize_token(action_view, "action_view"),
            action_modify=normalize_token(action_modify, "action_modify"),
        )

    def build_update(
        self,
        *,
        page_id: Any,
        path: str | None = None,
        title: str | None = None,
        body: str | None = None,
        action_view: str | None = None,
        action_modify: str | None = None,
        revision_id: Any = None,
    ) -> PageUpdate:
        return PageUpdate(
            page_id=self._parse_required_int(page_id, "page_id"),
            path=self._paths.normalize(path) if path is not None else None,
            title=self._normalize_title(title) if title is not None else None,
            body=self._normalize_body(body),
            action_view=normalize_token(action_view, "action_view") if action_view is not None else None,
            action_modify=normalize_token(action_modify, "action_modify") if action_modify is not None else None,
            revision_id=self._parse_optional_int(revision_id, "revision_id"),
        )

    def definition_from_payload(self, payload: Mapping[str, Any], path: str | None = None) -> PageDefinition:
        """HTTP層から渡された辞書をページ作成コマンドに変換する。"""

        return self.build_definition(
            path=path if path is not None else payload.get("path"),
            title=payload.get("title"),
            body=payload.get("body"),
            action_view=payload.get("action_view"),
            action_modify=payload.get("action_modify"),
        )

    def update_from_payload(self, payload: Mapping[str, Any], page_id: Any = None) -> PageUpdate:
        return self.build_update(
            page_id=page_id if page_id is not None else payload.get("page_id"),
            path=payload.get("path"),
            title=payload.get("title"),
            body=payload.get("body"),
            action_view=payload.get("action_view"),
            action_modify=payload.get("action_modify"),
            revision_id=payload.get("revision_id"),
        )

    @staticmethod
    def _normalize_title(value: str | None) -> str:
        if value is not None and not isinstance(value, str):
            raise WikiValidationError("title", "Title must be a string.")
        normalized = (value or "").strip()
        if not normalized:
            raise WikiValidationError("title", "Title is required.")
        if len(normalized) > TITLE_MAX_LENGTH:
            raise WikiValidationError("title", f"Title must be at most {TITLE_MAX_LENGTH} characters.")
        return normalized

    @staticmethod
    def _normalize_body(value: Any) -> str | None:
        if value is None:
            return None
        if not isinstance(value, str):
            raise WikiValidationError("body", "Body must be a string.")
        return value

    @staticmethod
    def _parse_required_int(value: Any, field_name: str) -> int:
        parsed = WikiPageCommandFactory._parse_optional_int(value, field_name)
        if parsed is None:
            raise WikiValidationError(field_name, f"'{field_name}' is required.")
        return parsed

    @staticmethod
    def _parse_optional_int(value: Any, field_name: str) -> int | None:
        if value in (None, ""):
            return None
        if isinstance(value, bool):
            raise WikiValidationError(field_name, f"'{field_name}' must be an integer.")
        try:
            return int(value)
        except (TypeError, ValueError) as exc:
            raise WikiValidationError(field_name, f"'{field_name}' must be an integer.") from exc


__all__ = [
    "PageDefinition",
    "PageUpdate",
    "WikiPageCommandFactory",
]
