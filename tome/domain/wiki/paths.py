"""ページパスの正規化と祖先パスの列挙。"""

from __future__ import annotations

import re
from typing import List

from tome.domain.wiki.exceptions import WikiValidationError

ROOT_PATH = "/"
PATH_MAX_LENGTH = 1024

_SEPARATOR_PATTERN = re.compile(r"/+")
_FORBIDDEN_SEGMENTS = {".", ".."}


class PathNormalizer:
    """利用者入力のパスを ``/a/b`` 形式の正規形に揃えるコンポーネント。"""

    def normalize(self, raw: object) -> str:
        if not isinstance(raw, str):
            raise WikiValidationError("path", "Page path must be a string.")

        candidate = raw.strip()
        if not candidate:
            raise WikiValidationError("path", "Page path must not be blank.")

        candidate = _SEPARATOR_PATTERN.sub("/", "/" + candidate)
        if candidate != ROOT_PATH:
            candidate = candidate.rstrip("/")

        segments = [segment for segment in candidate.split("/") if segment]
        if any(segment in _FORBIDDEN_SEGMENTS for segment in segments):
            raise WikiValidationError("path", "Page path must not contain '.' or '..' segments.")
        if len(candidate) > PATH_MAX_LENGTH:
            raise WikiValidationError("path", f"Page path must be at most {PATH_MAX_LENGTH} characters.")

        return candidate or ROOT_PATH

    def ancestors(self, path: str) -> List[str]:
        """パス自身と全ての祖先をルートから順に返す。

        ``/a/b`` なら ``['/', '/a', '/a/b']``。前方一致ではなくセグメント単位で
        判定するため ``/no`` は ``/normal`` の祖先にならない。
        """

        normalized = self.normalize(path)
        result = [ROOT_PATH]
        current = ""
        for segment in normalized.split("/"):
            if not segment:
                continue
            current = f"{current}/{segment}"
            result.append(current)
        return result


_default_normalizer = PathNormalizer()


def normalize_path(raw: object) -> str:
    return _default_normalizer.normalize(raw)


def ancestor_paths(path: str) -> List[str]:
    return _default_normalizer.ancestors(path)


__all__ = ["PathNormalizer", "ROOT_PATH", "ancestor_paths", "normalize_path"]
