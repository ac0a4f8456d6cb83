"""型エラーの表示。

text 形式は rich で stdout に出力し、json 形式はチェッカー応答と同じ形の JSON 配列を出力する。
"""

from __future__ import annotations

import json
import sys
from collections.abc import Sequence
from typing import assert_never

from rich.console import Console
from rich.markup import escape

from pyre_client.models.command_arguments import OutputFormat
from pyre_client.models.type_error import TypeCheckError

NO_ERRORS_MESSAGE = "No type errors found."


def format_json(errors: Sequence[TypeCheckError]) -> str:
    return json.dumps([error.model_dump() for error in errors], indent=2)


def _format_text_line(error: TypeCheckError) -> str:
    return (
        f"[bold]{escape(error.path)}[/bold]:{error.line}:{error.column} "
        f"{escape(error.description)}"
    )


def print_type_errors(
    errors: Sequence[TypeCheckError],
    output_format: OutputFormat,
    console: Console | None = None,
) -> None:
    """型エラーを指定形式で stdout に出力する。

    Args:
        errors: 表示する型エラー。
        output_format: 出力形式。
        console: text 形式で使う rich Console。None の場合は stdout 向けに生成する。
    """
    if output_format == OutputFormat.JSON:
        print(format_json(errors))
        return
    if output_format == OutputFormat.TEXT:
        console = console or Console(file=sys.stdout, soft_wrap=True, highlight=False)
        if not errors:
            console.print(NO_ERRORS_MESSAGE)
            return
        for error in errors:
            console.print(_format_text_line(error))
        return
    assert_never(output_format)
