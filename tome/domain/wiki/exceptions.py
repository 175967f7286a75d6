"""Wikiドメインで利用する例外定義"""

from __future__ import annotations

from typing import Any, Dict, Optional


class WikiError(Exception):
    """Wiki機能における基底例外

    ``kind`` は外部に公開する安定した識別子、``message`` は利用者向けの文言。
    """

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        """JSONエラーエンベロープ形式で返す"""

        return {"error": self.kind, "message": self.message}


class WikiPageNotFoundError(WikiError):
    """ページが存在しない場合の例外"""

    kind = "not_found"


class WikiMultipleResultsError(WikiError):
    """一意であるべき検索結果が複数見つかった場合の例外（整合性違反）"""

    kind = "multiple_results"

    def __init__(self, entity: str = "page") -> None:
        super().__init__(f"Multiple results found for a unique {entity}.")
        self.entity = entity


class WikiValidationError(WikiError):
    """入力値の検証エラー"""

    kind = "validation"

    def __init__(self, field: Optional[str], message: str) -> None:
        super().__init__(message)
        self.field = field

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        if self.field:
            payload["field"] = self.field
        return payload


class WikiRevisionConflictError(WikiValidationError):
    """古いリビジョンを元にした編集（楽観的排他制御の失敗）"""

    kind = "conflict"

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(
            "revision_id",
            "this revision is not the current 'revision_id'. "
            "Your changes may be against an outdated version.",
        )
        self.expected = expected
        self.actual = actual


class WikiPageExistsError(WikiValidationError):
    """同じパスのページが既に存在する場合の例外"""

    kind = "conflict"

    def __init__(self, path: str) -> None:
        super().__init__("path", f"A page already exists at '{path}'.")
        self.path = path


class WikiAccessDeniedError(WikiError):
    """権限不足を表す例外"""

    kind = "access_denied"


class WikiOperationError(WikiError):
    """ストレージ障害など、詳細を伏せて通知するその他の操作エラー"""

    kind = "internal"


class PermissionResolutionError(WikiError):
    """祖先ページのどれにも具体的な権限値が無い（ルートの初期設定不備）"""

    kind = "consistency"

    def __init__(self, path: str, action: str) -> None:
        super().__init__(f"No ancestor of '{path}' defines a concrete '{action}' permission.")
        self.path = path
        self.action = action


__all__ = [
    "PermissionResolutionError",
    "WikiAccessDeniedError",
    "WikiError",
    "WikiMultipleResultsError",
    "WikiOperationError",
    "WikiPageExistsError",
    "WikiPageNotFoundError",
    "WikiRevisionConflictError",
    "WikiValidationError",
]
