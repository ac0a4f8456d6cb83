"""ExitCode: 終了コードの定義。"""

from enum import IntEnum


class ExitCode(IntEnum):
    """プロセス終了コード。

    FOUND_ERRORS はチェッカーが型エラーを報告した場合で、ツールの異常ではない。
    """

    SUCCESS = 0
    FOUND_ERRORS = 1
    FAILURE = 2
    CONFIGURATION_ERROR = 3
