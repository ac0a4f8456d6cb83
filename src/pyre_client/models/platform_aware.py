"""プラットフォーム依存の設定値。

"buck_mode": "opt" のような単一値と、
"buck_mode": {"default": "opt", "darwin": "mac-opt"} のようなプラットフォーム別の値の両方を受け付ける。
"""

from __future__ import annotations

import sys
from typing import Final

from pydantic import Field

from pyre_client.models._base import PyreBaseModel

DEFAULT_PLATFORM_KEY: Final[str] = "default"

_PLATFORM_NAMES: Final[dict[str, str]] = {
    "linux": "linux",
    "darwin": "darwin",
    "win32": "windows",
    "cygwin": "windows",
}


def current_platform() -> str:
    """sys.platform を設定ファイルで使うプラットフォーム名に変換する。"""
    for prefix, name in _PLATFORM_NAMES.items():
        if sys.platform.startswith(prefix):
            return name
    return sys.platform


class PlatformAware(PyreBaseModel):
    """既定値とプラットフォーム別の上書き値を持つ文字列設定。"""

    default: str | None = None
    platforms: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_value(cls, value: str | dict[str, str]) -> PlatformAware:
        """単一文字列またはプラットフォーム名→値の辞書から構築する。"""
        if isinstance(value, str):
            return cls(default=value)
        platforms = {k: v for k, v in value.items() if k != DEFAULT_PLATFORM_KEY}
        return cls(default=value.get(DEFAULT_PLATFORM_KEY), platforms=platforms)

    def get(self, platform: str | None = None) -> str | None:
        """platform（省略時は実行中のプラットフォーム）に対応する値を返す。

        プラットフォーム別の値がなければ既定値にフォールバックする。
        """
        key = platform if platform is not None else current_platform()
        return self.platforms.get(key, self.default)
