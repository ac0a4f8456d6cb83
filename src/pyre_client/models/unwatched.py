"""ファイル監視対象外の依存ツリー。

監視の代わりにチェックサムファイルで変更を追跡する。
"""

from __future__ import annotations

from pathlib import PurePosixPath

from pydantic import Field, field_validator

from pyre_client.filesystem import expand_path
from pyre_client.models._base import PyreBaseModel


class UnwatchedFiles(PyreBaseModel):
    """監視対象外ファイル群のルートと、その配下のチェックサムファイル。"""

    root: str = Field(min_length=1)
    checksum_path: str = Field(min_length=1)

    @field_validator("checksum_path")
    @classmethod
    def validate_checksum_path(cls, v: str) -> str:
        """checksum_path が root 配下に収まる相対パスであることを検証する。"""
        path = PurePosixPath(v)
        if path.is_absolute():
            msg = f"checksum_path must be relative to root, got `{v}`"
            raise ValueError(msg)
        if ".." in path.parts:
            msg = f"checksum_path must not escape root, got `{v}`"
            raise ValueError(msg)
        return v


class UnwatchedDependency(PyreBaseModel):
    """変更検知用インジケータと監視対象外ファイル群の組。"""

    change_indicator: str = Field(min_length=1)
    files: UnwatchedFiles

    def expand_root(self, root: str) -> UnwatchedDependency:
        """files.root を root 基準で展開した新しいインスタンスを返す。"""
        files = self.files.model_copy(update={"root": expand_path(self.files.root, root)})
        return self.model_copy(update={"files": files})
