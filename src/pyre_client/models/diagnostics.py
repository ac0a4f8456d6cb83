"""設定解決中の非致命的な警告。"""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field

from pyre_client.models._base import PyreBaseModel


class WarningKind(StrEnum):
    """警告の種別。"""

    DEPRECATED = "deprecated"
    UNRECOGNIZED = "unrecognized"
    EMPTY_GLOB = "empty_glob"


class ConfigurationWarning(PyreBaseModel):
    """解決を中断しない診断情報。解決済み設定と一緒に呼び出し側へ返される。"""

    kind: WarningKind
    message: str = Field(min_length=1)
