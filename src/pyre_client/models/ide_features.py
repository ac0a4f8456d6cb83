"""IDE 機能の有効/無効フラグ。

値はチェッカーにそのまま渡すだけで、機能自体の意味はここでは扱わない。
"""

from __future__ import annotations

from typing import Final

from pydantic import StrictBool

from pyre_client.models._base import PyreBaseModel

DEFAULT_HOVER_ENABLED: Final[bool] = False
DEFAULT_GO_TO_DEFINITION_ENABLED: Final[bool] = False
DEFAULT_FIND_SYMBOLS_ENABLED: Final[bool] = False
DEFAULT_FIND_ALL_REFERENCES_ENABLED: Final[bool] = False


class IdeFeatures(PyreBaseModel):
    """4 つの独立した IDE 機能トグル。None は未指定を表す。"""

    hover_enabled: StrictBool | None = None
    go_to_definition_enabled: StrictBool | None = None
    find_symbols_enabled: StrictBool | None = None
    find_all_references_enabled: StrictBool | None = None

    def is_hover_enabled(self) -> bool:
        if self.hover_enabled is None:
            return DEFAULT_HOVER_ENABLED
        return self.hover_enabled

    def is_go_to_definition_enabled(self) -> bool:
        if self.go_to_definition_enabled is None:
            return DEFAULT_GO_TO_DEFINITION_ENABLED
        return self.go_to_definition_enabled

    def is_find_symbols_enabled(self) -> bool:
        if self.find_symbols_enabled is None:
            return DEFAULT_FIND_SYMBOLS_ENABLED
        return self.find_symbols_enabled

    def is_find_all_references_enabled(self) -> bool:
        if self.find_all_references_enabled is None:
            return DEFAULT_FIND_ALL_REFERENCES_ENABLED
        return self.find_all_references_enabled
