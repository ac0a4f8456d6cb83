"""コマンドライン引数モデル。

CLI パーサーの出力を不変値として保持する。None・空タプル・False は「未指定」を意味する。
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field

from pyre_client.models._base import PyreBaseModel


class OutputFormat(StrEnum):
    """型エラーの出力形式。"""

    TEXT = "text"
    JSON = "json"


class CommandArguments(PyreBaseModel):
    """全サブコマンド共通のグローバルオプション。"""

    # 探索・プロセス制御
    local_configuration: str | None = None
    debug: bool = False
    sequential: bool = False
    show_error_traces: bool = False
    output: OutputFormat = OutputFormat.TEXT

    # 設定上書き
    strict: bool = False
    logger: str | None = None
    targets: tuple[str, ...] = ()
    source_directories: tuple[str, ...] = ()
    do_not_ignore_errors_in: tuple[str, ...] = ()
    buck_mode: str | None = None
    search_path: tuple[str, ...] = ()
    binary: str | None = None
    exclude: tuple[str, ...] = ()
    typeshed: str | None = None
    dot_pyre_directory: str | None = None
    isolation_prefix: str | None = None
    python_version: str | None = None
    shared_memory_heap_size: int | None = Field(default=None, gt=0)
    shared_memory_dependency_table_power: int | None = Field(default=None, gt=0)
    shared_memory_hash_table_power: int | None = Field(default=None, gt=0)
    number_of_workers: int | None = Field(default=None, gt=0)
    enable_hover: bool | None = None
    enable_go_to_definition: bool | None = None
    enable_find_symbols: bool | None = None
    enable_find_all_references: bool | None = None
    use_buck2: bool | None = None
