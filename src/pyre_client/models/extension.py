"""追加のソースファイル拡張子定義。"""

from pydantic import Field, StrictBool

from pyre_client.models._base import PyreBaseModel


class ExtensionElement(PyreBaseModel):
    """.py 以外に Python ソースとして扱う拡張子。

    include_suffix_in_module_qualifier が True の場合、モジュール名に拡張子を含める。
    """

    suffix: str = Field(min_length=1)
    include_suffix_in_module_qualifier: StrictBool = False

    def command_line_argument(self) -> str:
        """チェッカー引数ファイルに書き出す表現を返す。"""
        if self.include_suffix_in_module_qualifier:
            return f"{self.suffix}$include_suffix_in_module_qualifier"
        return self.suffix
