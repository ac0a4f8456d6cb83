"""パス展開のテスト。

expand_relative_path: 絶対パス, 相対パス, 冪等性, "~" 展開, 正規化失敗
expand_global_root: "//" 接頭辞あり/なし
expand_path: "//" 接頭辞の保持
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from pyre_client.errors import PathError
from pyre_client.filesystem import (
    expand_global_root,
    expand_path,
    expand_relative_path,
    is_global_root_relative,
)


@pytest.fixture
def root(tmp_path: Path) -> Path:
    return tmp_path.resolve()


class TestExpandRelativePathAbsolute:
    """絶対パスは root に依存せず正規化される。"""

    def test_absolute_path_ignores_root(self, root: Path) -> None:
        target = root / "a" / "b"
        assert expand_relative_path("/somewhere/else", str(target)) == str(target)

    def test_absolute_path_is_canonicalized(self, root: Path) -> None:
        """".." を含む絶対パスは正規化される。"""
        raw = f"{root}/a/../b"
        assert expand_relative_path("/unused", raw) == str(root / "b")

    def test_symlink_is_resolved(self, root: Path) -> None:
        real = root / "real"
        real.mkdir()
        link = root / "link"
        link.symlink_to(real)
        assert expand_relative_path("/unused", str(link)) == str(real)


class TestExpandRelativePathRelative:
    """相対パスは root に連結される。"""

    def test_joined_onto_root(self, root: Path) -> None:
        assert expand_relative_path(str(root), "sub/dir") == str(root / "sub" / "dir")

    def test_result_is_absolute(self, root: Path) -> None:
        assert Path(expand_relative_path(str(root), "x")).is_absolute()

    def test_nonexistent_path_allowed(self, root: Path) -> None:
        """存在しないパスもエラーにならない。"""
        result = expand_relative_path(str(root), "missing/file.py")
        assert result == str(root / "missing" / "file.py")

    def test_idempotent_with_any_root(self, root: Path) -> None:
        """展開済みパスに別の root で再適用しても変わらない。"""
        once = expand_relative_path(str(root), "a/b")
        assert expand_relative_path("/other/root", once) == once
        assert expand_relative_path(str(root), once) == once

    def test_home_directory_expanded(self, root: Path) -> None:
        with patch.dict(os.environ, {"HOME": str(root)}):
            assert expand_relative_path("/unused", "~/stubs") == str(root / "stubs")


class TestExpandRelativePathFailure:
    """正規化できない場合は PathError。"""

    def test_resolve_error_wrapped(self, root: Path) -> None:
        with patch.object(Path, "resolve", side_effect=RuntimeError("loop")):
            with pytest.raises(PathError, match="Cannot resolve path"):
                expand_relative_path(str(root), "a")


class TestExpandGlobalRoot:
    """"//" 接頭辞の展開。"""

    def test_prefixed_path_resolved_against_global_root(self, root: Path) -> None:
        assert expand_global_root("//sub/dir", str(root)) == str(root / "sub" / "dir")

    def test_relative_path_unchanged(self, root: Path) -> None:
        assert expand_global_root("rel/dir", str(root)) == "rel/dir"

    def test_absolute_path_unchanged(self, root: Path) -> None:
        assert expand_global_root("/abs/dir", str(root)) == "/abs/dir"


class TestExpandPath:
    """レイヤー単位の展開は "//" パスを保持する。"""

    def test_global_root_relative_preserved(self, root: Path) -> None:
        assert expand_path("//stubs", str(root)) == "//stubs"

    def test_relative_expanded(self, root: Path) -> None:
        assert expand_path("stubs", str(root)) == str(root / "stubs")

    def test_is_global_root_relative(self) -> None:
        assert is_global_root_relative("//a")
        assert not is_global_root_relative("/a")
        assert not is_global_root_relative("a//b")
