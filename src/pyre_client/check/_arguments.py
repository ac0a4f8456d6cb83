"""チェッカー引数ファイルの構築。

解決済み設定を、外部チェッカーが読み込む JSON 引数ファイルの形に変換する。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Final, Literal

from pydantic import Field

from pyre_client.errors import ConfigurationError
from pyre_client.models._base import PyreBaseModel
from pyre_client.models.configuration import Configuration
from pyre_client.models.ide_features import IdeFeatures
from pyre_client.models.python_version import PythonVersion
from pyre_client.models.shared_memory import SharedMemory
from pyre_client.models.site_packages import SearchStrategy

logger = logging.getLogger(__name__)

ARGUMENT_FILE_NAME: Final[str] = "check_arguments.json"
"""ログディレクトリ内に書き出す引数ファイル名。"""


class SimpleSourcePaths(PyreBaseModel):
    """ディレクトリ列挙によるソース指定。"""

    kind: Literal["simple"] = "simple"
    paths: tuple[str, ...]


class BuckSourcePaths(PyreBaseModel):
    """buck ターゲットによるソース指定。ビルドはチェッカー側が行う。"""

    kind: Literal["buck"] = "buck"
    targets: tuple[str, ...]
    mode: str | None = None
    isolation_prefix: str | None = None
    use_buck2: bool = False


SourcePaths = Annotated[
    SimpleSourcePaths | BuckSourcePaths, Field(discriminator="kind")
]


class CheckArguments(PyreBaseModel):
    """newcheck サブコマンドの引数ファイルの内容。"""

    global_root: str
    relative_local_root: str | None = None
    log_path: str
    source_paths: SourcePaths
    search_paths: tuple[str, ...] = ()
    typeshed: str | None = None
    site_package_search_strategy: SearchStrategy = SearchStrategy.NONE
    site_roots: tuple[str, ...] = ()
    excludes: tuple[str, ...] = ()
    extensions: tuple[str, ...] = ()
    checked_directory_allowlist: tuple[str, ...] = ()
    checked_directory_blocklist: tuple[str, ...] = ()
    critical_files: tuple[str, ...] = ()
    strict: bool = False
    debug: bool = False
    show_error_traces: bool = False
    parallel: bool = True
    number_of_workers: int = Field(gt=0)
    python_version: PythonVersion
    shared_memory: SharedMemory = Field(default_factory=SharedMemory)
    ide_features: IdeFeatures | None = None


def get_source_paths(configuration: Configuration) -> SimpleSourcePaths | BuckSourcePaths:
    """ソースディレクトリ、なければ buck ターゲットからソース指定を構築する。

    Raises:
        ConfigurationError: どちらも指定されていない場合。
    """
    if configuration.source_directories is not None:
        return SimpleSourcePaths(
            paths=tuple(element.path() for element in configuration.source_directories)
        )
    if configuration.targets is not None:
        return BuckSourcePaths(
            targets=configuration.targets,
            mode=configuration.get_buck_mode(),
            isolation_prefix=configuration.isolation_prefix,
            use_buck2=configuration.use_buck2,
        )
    raise ConfigurationError(
        "No source directories or targets specified. Add `source_directories` or "
        "`targets` to the configuration, or pass --source-directory / --target."
    )


def create_check_arguments(
    configuration: Configuration,
    *,
    debug: bool = False,
    sequential: bool = False,
    show_error_traces: bool = False,
) -> CheckArguments:
    """解決済み設定とプロセス制御フラグから引数を構築する。

    Raises:
        ConfigurationError: ソースが指定されていない場合。
    """
    return CheckArguments(
        global_root=configuration.project_root,
        relative_local_root=configuration.relative_local_root,
        log_path=configuration.log_directory,
        source_paths=get_source_paths(configuration),
        search_paths=tuple(
            element.command_line_argument() for element in configuration.search_path
        ),
        typeshed=configuration.typeshed,
        site_package_search_strategy=configuration.site_package_search_strategy,
        site_roots=configuration.site_roots or (),
        excludes=configuration.excludes,
        extensions=tuple(
            extension.command_line_argument() for extension in configuration.extensions
        ),
        checked_directory_allowlist=configuration.do_not_ignore_errors_in,
        checked_directory_blocklist=configuration.ignore_all_errors,
        critical_files=configuration.other_critical_files,
        strict=configuration.strict,
        debug=debug,
        show_error_traces=show_error_traces,
        parallel=not sequential,
        number_of_workers=configuration.get_number_of_workers(),
        python_version=configuration.get_python_version(),
        shared_memory=configuration.shared_memory,
        ide_features=configuration.ide_features,
    )


def write_argument_file(arguments: CheckArguments, log_directory: Path) -> Path:
    """引数を log_directory 配下の JSON ファイルに書き出し、そのパスを返す。

    Raises:
        OSError: ディレクトリ作成または書き込みに失敗した場合。
    """
    log_directory.mkdir(parents=True, exist_ok=True)
    path = log_directory / ARGUMENT_FILE_NAME
    path.write_text(arguments.model_dump_json(indent=2), encoding="utf-8")
    logger.debug("Wrote checker arguments to %s", path)
    return path
