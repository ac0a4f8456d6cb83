"""外部チェッカーの起動。

`<binary> newcheck <argument_file>` を 1 回だけ起動し、終了を待ってから stdout 全体を解釈する。
"""

from __future__ import annotations

import json
import logging
import subprocess
from typing import Final

from pydantic import TypeAdapter, ValidationError

from pyre_client.models.type_error import CheckResult, TypeCheckError

logger = logging.getLogger(__name__)

CHECK_SUBCOMMAND: Final[str] = "newcheck"

_TYPE_ERRORS_ADAPTER: Final[TypeAdapter[list[TypeCheckError]]] = TypeAdapter(
    list[TypeCheckError]
)


class CheckError(Exception):
    """チェッカー起動の失敗を示す基底例外。型エラーの検出はこれに含まれない。"""


class CommandFailedError(CheckError):
    """チェッカーを起動できない、または非ゼロで終了した場合。"""


class ResponseDecodeError(CheckError):
    """チェッカーの stdout が型エラー配列の JSON として解釈できない場合。"""


def parse_type_error_response(response: str) -> tuple[TypeCheckError, ...]:
    """チェッカーの stdout を型エラーのタプルに変換する。

    Raises:
        ResponseDecodeError: JSON 構文エラー、または型エラー配列の形をしていない場合。
    """
    try:
        loaded = json.loads(response)
    except json.JSONDecodeError as e:
        raise ResponseDecodeError(f"Cannot parse checker response as JSON: {e}") from e
    try:
        return tuple(_TYPE_ERRORS_ADAPTER.validate_python(loaded))
    except ValidationError as e:
        raise ResponseDecodeError(
            f"Checker response is not a list of type errors: {e}"
        ) from e


def run_check(binary: str, argument_file_path: str) -> CheckResult:
    """チェッカーを起動し、終了を待って結果を返す。

    Args:
        binary: チェッカー実行ファイルのパス。
        argument_file_path: 引数ファイルのパス。

    Returns:
        チェック結果。errors が空でなければ型エラーが見つかったことを表す。

    Raises:
        CommandFailedError: 起動に失敗した場合、または非ゼロで終了した場合（stdout の内容は問わない）。
        ResponseDecodeError: 正常終了したが stdout を解釈できない場合。
    """
    command = [binary, CHECK_SUBCOMMAND, argument_file_path]
    logger.debug("Running %s", " ".join(command))
    try:
        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        raise CommandFailedError(f"Cannot start checker `{binary}`: {e}") from e

    if result.returncode != 0:
        stderr = result.stderr.strip()
        detail = f": {stderr}" if stderr else ""
        raise CommandFailedError(
            f"Command `{' '.join(command)}` failed with exit code "
            f"{result.returncode}{detail}"
        )

    return CheckResult(errors=parse_type_error_response(result.stdout))
