"""探索パス要素。

RawElement は設定レイヤーに書かれたままの要素、Element は展開済みの要素を表す。
呼び出し側は RawElement プロトコルの能力（グローバルルート展開・相対展開・glob 展開）にのみ依存する。
"""

from __future__ import annotations

import glob as glob_module
import logging
from typing import Protocol, Self

from pydantic import Field

from pyre_client.filesystem import expand_global_root, expand_path
from pyre_client.models._base import PyreBaseModel

logger = logging.getLogger(__name__)


class Element(Protocol):
    """展開済み探索パス要素の能力。"""

    def path(self) -> str: ...

    def command_line_argument(self) -> str: ...


class RawElement(Protocol):
    """未展開探索パス要素の能力。"""

    def expand_global_root(self, global_root: str) -> Self: ...

    def expand_relative_root(self, relative_root: str) -> Self: ...

    def expand_glob(self) -> tuple[Self, ...]: ...

    def to_element(self) -> Element: ...


class SimpleElement(PyreBaseModel):
    """単一ディレクトリを指す展開済み要素。"""

    root: str = Field(min_length=1)

    def path(self) -> str:
        return self.root

    def command_line_argument(self) -> str:
        return self.root


class SimpleRawElement(PyreBaseModel):
    """単一ディレクトリ（または glob パターン）を指す未展開要素。"""

    root: str = Field(min_length=1)

    def expand_global_root(self, global_root: str) -> SimpleRawElement:
        """"//" 接頭辞を global_root 基準で展開する。"""
        return SimpleRawElement(root=expand_global_root(self.root, global_root))

    def expand_relative_root(self, relative_root: str) -> SimpleRawElement:
        """相対パスを relative_root 基準で展開する。"//" 接頭辞は保持する。"""
        return SimpleRawElement(root=expand_path(self.root, relative_root))

    def expand_glob(self) -> tuple[SimpleRawElement, ...]:
        """root の glob パターンを展開し、辞書順にソートして返す。

        何にもマッチしない場合は警告をログに出し、空タプルを返す。
        """
        matched = sorted(glob_module.glob(self.root))
        if not matched:
            logger.warning("'%s' does not match any paths.", self.root)
            return ()
        return tuple(SimpleRawElement(root=path) for path in matched)

    def to_element(self) -> SimpleElement:
        return SimpleElement(root=self.root)
