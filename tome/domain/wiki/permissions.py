"""Wikiページに関する権限値と権限判定のドメインサービス。"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable

from tome.domain.wiki.exceptions import WikiAccessDeniedError, WikiValidationError

# 上位ページの値を引き継ぐことを表す権限値
INHERIT = "inherit"
# 全員（匿名利用者を含む）に許可する権限値
PUBLIC = "*"

TOKEN_MAX_LENGTH = 64


class PageAction(str, Enum):
    """ページに対する操作の種類。"""

    VIEW = "view"
    MODIFY = "modify"

    @property
    def column_name(self) -> str:
        return f"action_{self.value}"

    @classmethod
    def parse(cls, value: "PageAction | str") -> "PageAction":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise WikiValidationError("action", f"Unknown page action '{value}'.") from exc


def is_concrete(token: str | None) -> bool:
    """``inherit`` 以外の具体的な権限値かどうか。"""

    return bool(token) and token != INHERIT


def normalize_token(value: str | None, field_name: str) -> str:
    """権限値を正規化する。未指定は ``inherit`` とみなす。"""

    token = (value or "").strip()
    if not token:
        return INHERIT
    if len(token) > TOKEN_MAX_LENGTH:
        raise WikiValidationError(field_name, f"Permission must be at most {TOKEN_MAX_LENGTH} characters.")
    return token


@dataclass(frozen=True)
class ViewerContext:
    """ページを閲覧・編集する利用者が持つ権限値を表す値オブジェクト。"""

    permissions: FrozenSet[str] = field(default_factory=frozenset)
    is_admin: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "permissions", frozenset(self.permissions))
        if INHERIT in self.permissions:
            raise ValueError("'inherit' cannot be granted to a viewer")

    @classmethod
    def anonymous(cls) -> "ViewerContext":
        return cls()

    @classmethod
    def with_permissions(cls, permissions: Iterable[str], is_admin: bool = False) -> "ViewerContext":
        return cls(permissions=frozenset(permissions), is_admin=is_admin)


class WikiAccessPolicy:
    """実効権限値と利用者の権限から操作可否を判定するドメインサービス。"""

    def is_allowed(self, token: str, viewer: ViewerContext | None) -> bool:
        if not is_concrete(token):
            # 未解決の値で許可を出してはいけない
            raise ValueError(f"cannot check access against unresolved permission {token!r}")

        if viewer is not None and viewer.is_admin:
            return True

        if token == PUBLIC:
            return True

        return viewer is not None and token in viewer.permissions

    def ensure_allowed(
        self,
        token: str,
        viewer: ViewerContext | None,
        action: PageAction,
        path: str,
    ) -> None:
        if not self.is_allowed(token, viewer):
            raise WikiAccessDeniedError(f"Not allowed to {action.value} '{path}'.")


__all__ = [
    "INHERIT",
    "PUBLIC",
    "PageAction",
    "ViewerContext",
    "WikiAccessPolicy",
    "is_concrete",
    "normalize_token",
]
