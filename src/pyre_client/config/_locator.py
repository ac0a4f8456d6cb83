"""設定ファイル探索。

基準ディレクトリから親方向に .pyre_configuration（グローバル設定）と
.pyre_configuration.local（局所設定）を探索する。
"""

from __future__ import annotations

import os
import stat as stat_module
from pathlib import Path
from typing import Final

from pyre_client.models._base import PyreBaseModel

CONFIGURATION_FILE: Final[str] = ".pyre_configuration"
LOCAL_CONFIGURATION_FILE: Final[str] = ".pyre_configuration.local"
LOG_DIRECTORY: Final[str] = ".pyre"


class FoundRoot(PyreBaseModel):
    """探索で見つかったグローバルルートと局所ルート。

    local_root が存在する場合、global_root の真の子孫であることが保証される。
    """

    global_root: Path
    local_root: Path | None = None


def _is_readable_file(candidate: Path) -> bool:
    """candidate が読み取り可能な通常ファイルかどうか判定する。

    アクセス権限の不足で stat できない場合もファイルは存在しないものとして扱う。
    """
    try:
        st = candidate.stat()
    except OSError:
        return False
    return stat_module.S_ISREG(st.st_mode) and os.access(candidate, os.R_OK)


def find_parent_directory_containing_file(
    base: Path,
    target: str,
    stop_search_after: int | None = None,
) -> Path | None:
    """base から親方向に target ファイルを探索し、それを含むディレクトリを返す。

    近いディレクトリから順に、ファイルシステムのルートまで探索する。

    Args:
        base: 探索開始ディレクトリ。
        target: 探索対象のファイル名。
        stop_search_after: 指定した場合、base とその親 stop_search_after 個までで探索を打ち切る。

    Returns:
        target を含む最も近いディレクトリ。見つからなければ None。
    """
    current = base.resolve()
    index = 0
    while True:
        if _is_readable_file(current / target):
            return current
        if stop_search_after is not None and index >= stop_search_after:
            return None
        parent = current.parent
        if parent == current:
            return None
        current = parent
        index += 1


def find_global_and_local_root(base: Path) -> FoundRoot | None:
    """base から親方向にグローバル設定と局所設定の両方を探索する。

    グローバル設定が見つからなければ None を返す。
    局所設定がグローバルルートと同じか、それより浅いディレクトリにある場合は無視する。

    Args:
        base: 探索開始ディレクトリ。

    Returns:
        見つかったルートの組。グローバル設定がなければ None。
    """
    global_root = find_parent_directory_containing_file(base, CONFIGURATION_FILE)
    if global_root is None:
        return None

    local_root = find_parent_directory_containing_file(base, LOCAL_CONFIGURATION_FILE)
    if local_root is None:
        return FoundRoot(global_root=global_root)

    if local_root == global_root or local_root in global_root.parents:
        return FoundRoot(global_root=global_root)
    return FoundRoot(global_root=global_root, local_root=local_root)


def get_relative_local_root(
    global_root: Path, local_root: Path | None
) -> str | None:
    """local_root の global_root からの相対パスを返す。

    local_root が None、または global_root 配下にない場合は None を返す。
    """
    if local_root is None:
        return None
    try:
        return str(local_root.relative_to(global_root))
    except ValueError:
        return None
