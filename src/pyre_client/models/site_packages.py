"""サードパーティパッケージの探索戦略。"""

from __future__ import annotations

from enum import StrEnum


class SearchStrategy(StrEnum):
    """site-packages の探索方針。

    NONE はパッケージを探索しない。ALL は全パッケージを探索パスに含める。
    PEP561 は py.typed を持つパッケージ（PEP 561 準拠）のみを含める。
    """

    NONE = "none"
    ALL = "all"
    PEP561 = "pep561"

    @classmethod
    def from_string(cls, value: str) -> SearchStrategy:
        """文字列から探索戦略を構築する（大文字小文字非依存）。

        Raises:
            ValueError: 未知の戦略名の場合。
        """
        for member in cls:
            if value.lower() == member.value:
                return member
        valid = ", ".join(member.value for member in cls)
        raise ValueError(
            f"Unknown site package search strategy `{value}`. Expected one of: {valid}"
        )
