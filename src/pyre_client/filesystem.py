"""パス展開。

設定値として与えられた生のパス文字列を、基準ディレクトリに対する正規化済み絶対パスへ変換する。
"//" で始まるパスはグローバルルート（.pyre_configuration のあるディレクトリ）からの相対パスとして扱う。
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Final

from pyre_client.errors import PathError

GLOBAL_ROOT_MARKER: Final[str] = "//"
"""グローバルルート相対パスを示す接頭辞。"""


def expand_relative_path(root: str | Path, path: str) -> str:
    """path を root 基準で正規化済み絶対パスに展開する。

    "~" はホームディレクトリに展開する。絶対パスはそのまま正規化し、
    相対パスは root に連結してから正規化する。存在しないパスも許容する。

    Args:
        root: 相対パスの基準ディレクトリ。
        path: 展開対象のパス文字列。

    Returns:
        正規化済みの絶対パス文字列。

    Raises:
        PathError: 正規化できない場合（シンボリックリンク循環、権限不足等）。
    """
    expanded = Path(os.path.expanduser(path))
    if not expanded.is_absolute():
        expanded = Path(root) / expanded
    try:
        return str(expanded.resolve())
    except (OSError, RuntimeError) as e:
        raise PathError(f"Cannot resolve path `{expanded}`: {e}") from e


def is_global_root_relative(path: str) -> bool:
    """path がグローバルルート相対（"//" 接頭辞）かどうか判定する。"""
    return path.startswith(GLOBAL_ROOT_MARKER)


def expand_global_root(path: str, global_root: str | Path) -> str:
    """"//" 接頭辞のパスを global_root 基準で展開する。

    接頭辞のないパスは変更せずに返す。

    Raises:
        PathError: 正規化できない場合。
    """
    if is_global_root_relative(path):
        return expand_relative_path(global_root, path[len(GLOBAL_ROOT_MARKER) :])
    return path


def expand_path(path: str, root: str | Path) -> str:
    """設定レイヤーのパス値を root 基準で展開する。

    "//" 接頭辞のパスはどのレイヤーから見てもグローバルルート相対なので、
    ここでは変更せず設定の組み立て時に展開する。

    Raises:
        PathError: 正規化できない場合。
    """
    if is_global_root_relative(path):
        return path
    return expand_relative_path(root, path)
