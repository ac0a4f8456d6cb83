"""対象 Python バージョン。"""

from __future__ import annotations

import sys

from pydantic import Field

from pyre_client.models._base import PyreBaseModel


class InvalidPythonVersionError(ValueError):
    """バージョン文字列が "X", "X.Y", "X.Y.Z" のいずれの形式でもない場合。"""


class PythonVersion(PyreBaseModel):
    """major.minor.micro 形式の Python バージョン。"""

    major: int = Field(ge=0)
    minor: int = Field(default=0, ge=0)
    micro: int = Field(default=0, ge=0)

    @classmethod
    def from_string(cls, value: str) -> PythonVersion:
        """"3", "3.10", "3.10.4" 形式の文字列からバージョンを構築する。

        省略された minor / micro は 0 として扱う。

        Raises:
            InvalidPythonVersionError: 形式が不正な場合。
        """
        splits = value.split(".")
        if not 1 <= len(splits) <= 3:
            raise InvalidPythonVersionError(
                "Version string is expected to have the form of 'X.Y.Z' "
                f"but got `{value}`"
            )
        try:
            numbers = [int(split) for split in splits]
        except ValueError:
            raise InvalidPythonVersionError(
                f"Version string `{value}` contains a non-integer component"
            ) from None
        if any(number < 0 for number in numbers):
            raise InvalidPythonVersionError(
                f"Version string `{value}` contains a negative component"
            )
        numbers.extend([0] * (3 - len(numbers)))
        major, minor, micro = numbers
        return cls(major=major, minor=minor, micro=micro)

    @classmethod
    def current(cls) -> PythonVersion:
        """実行中のインタプリタのバージョンを返す。"""
        return cls(
            major=sys.version_info.major,
            minor=sys.version_info.minor,
            micro=sys.version_info.micro,
        )

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.micro}"
