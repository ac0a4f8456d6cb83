"""チェッカーが報告する型エラーとチェック結果。"""

from __future__ import annotations

from pydantic import Field

from pyre_client.models._base import PyreBaseModel


class TypeCheckError(PyreBaseModel):
    """チェッカー応答の JSON 配列の 1 要素。"""

    line: int
    column: int
    stop_line: int
    stop_column: int
    path: str
    code: int
    name: str
    description: str
    long_description: str
    concise_description: str


class CheckResult(PyreBaseModel):
    """チェッカーが正常終了した場合の結果。

    errors が空でなければ型エラーが見つかったことを表す（ツールの異常ではない）。
    """

    errors: tuple[TypeCheckError, ...] = Field(default=())

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0
