"""ページパス正規化のテスト"""

import pytest

from tome.domain.wiki.exceptions import WikiValidationError
from tome.domain.wiki.paths import ancestor_paths, normalize_path


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("/", "/"),
        ("", None),
        ("bar", "/bar"),
        ("/bar/", "/bar"),
        ("//normal///sub", "/normal/sub"),
        ("  /normal/sub  ", "/normal/sub"),
        ("///", "/"),
    ],
)
def test_normalize_path(raw, expected):
    if expected is None:
        with pytest.raises(WikiValidationError) as excinfo:
            normalize_path(raw)
        assert excinfo.value.field == "path"
    else:
        assert normalize_path(raw) == expected


@pytest.mark.parametrize("raw", ["/a/../b", "/./a", None, 42])
def test_normalize_path_rejects_invalid_input(raw):
    with pytest.raises(WikiValidationError) as excinfo:
        normalize_path(raw)
    assert excinfo.value.field == "path"


def test_normalize_path_rejects_overlong_path():
    with pytest.raises(WikiValidationError):
        normalize_path("/" + "a" * 1024)


def test_ancestor_paths_lists_root_first():
    assert ancestor_paths("/normal/sub/perm") == ["/", "/normal", "/normal/sub", "/normal/sub/perm"]
    assert ancestor_paths("/") == ["/"]


def test_ancestor_paths_are_segment_based():
    """/no は /normal の祖先ではない"""
    assert "/no" not in ancestor_paths("/normal")
