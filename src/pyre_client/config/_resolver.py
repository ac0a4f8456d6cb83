"""設定リゾルバー。

CLI 引数 → 設定ファイル探索 → グローバル設定 → 局所設定 → CLI 上書き の順に
部分設定を構築・展開・マージし、最終設定を組み立てる。
いずれかの段階で致命的エラーが起きた場合は解決全体が失敗し、部分的な結果は返さない。
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from pyre_client.config._locator import (
    CONFIGURATION_FILE,
    LOCAL_CONFIGURATION_FILE,
    LOG_DIRECTORY,
    FoundRoot,
    find_global_and_local_root,
    get_relative_local_root,
)
from pyre_client.config._partial import (
    expand_relative_paths,
    merge_config_layers,
    partial_configuration_from_command_arguments,
    partial_configuration_from_file,
)
from pyre_client.errors import MissingLocalConfigurationError
from pyre_client.filesystem import expand_global_root
from pyre_client.models.command_arguments import CommandArguments
from pyre_client.models.configuration import (
    Configuration,
    PartialConfiguration,
    ResolvedConfiguration,
)
from pyre_client.models.diagnostics import ConfigurationWarning, WarningKind
from pyre_client.models.search_path import Element, RawElement
from pyre_client.models.shared_memory import SharedMemory
from pyre_client.models.site_packages import SearchStrategy

logger = logging.getLogger(__name__)


def _expand_search_path(
    elements: Iterable[RawElement], project_root: str
) -> tuple[list[Element], list[ConfigurationWarning]]:
    """探索パスのグローバルルート展開と glob 展開を行う。

    Returns:
        (展開済み要素リスト, 何にもマッチしなかったパターンの警告リスト)
    """
    expanded: list[Element] = []
    warnings: list[ConfigurationWarning] = []
    for element in elements:
        rooted = element.expand_global_root(project_root)
        matched = rooted.expand_glob()
        if not matched:
            warnings.append(
                ConfigurationWarning(
                    kind=WarningKind.EMPTY_GLOB,
                    message=(
                        f"'{rooted.to_element().path()}' does not match any paths."
                    ),
                )
            )
        expanded.extend(match.to_element() for match in matched)
    return expanded, warnings


def configuration_from_partial_configuration(
    project_root: str,
    relative_local_root: str | None,
    partial_configuration: PartialConfiguration,
) -> tuple[Configuration, list[ConfigurationWarning]]:
    """マージ済みの部分設定から最終設定を組み立てる。

    全パスフィールドの "//" 接頭辞を project_root 基準で展開し、
    探索パスを glob 展開し、未指定フィールドに既定値を適用する。

    Args:
        project_root: グローバルルート（見つからなければ基準ディレクトリ）。
        relative_local_root: 局所ルートのグローバルルートからの相対パス。
        partial_configuration: 全レイヤーをマージした部分設定。

    Returns:
        (最終設定, glob 展開で発生した警告リスト)

    Raises:
        PathError: "//" パスを正規化できない場合。
    """
    partial = partial_configuration

    def rooted(path: str | None) -> str | None:
        return expand_global_root(path, project_root) if path is not None else None

    def rooted_all(paths: tuple[str, ...] | None) -> tuple[str, ...]:
        return tuple(expand_global_root(p, project_root) for p in paths or ())

    search_path, warnings = _expand_search_path(partial.search_path or (), project_root)

    source_directories = (
        tuple(
            element.expand_global_root(project_root).to_element()
            for element in partial.source_directories
        )
        if partial.source_directories is not None
        else None
    )

    unwatched_dependency = partial.unwatched_dependency
    if unwatched_dependency is not None:
        files = unwatched_dependency.files
        unwatched_dependency = unwatched_dependency.model_copy(
            update={
                "files": files.model_copy(
                    update={"root": expand_global_root(files.root, project_root)}
                )
            }
        )

    dot_pyre_directory = rooted(partial.dot_pyre_directory) or str(
        Path(project_root) / LOG_DIRECTORY
    )

    configuration = Configuration(
        project_root=project_root,
        relative_local_root=relative_local_root,
        dot_pyre_directory=dot_pyre_directory,
        binary=rooted(partial.binary),
        buck_mode=partial.buck_mode,
        do_not_ignore_errors_in=rooted_all(partial.do_not_ignore_errors_in),
        excludes=partial.excludes or (),
        extensions=partial.extensions or (),
        ide_features=partial.ide_features,
        ignore_all_errors=rooted_all(partial.ignore_all_errors),
        isolation_prefix=partial.isolation_prefix,
        logger=rooted(partial.logger),
        number_of_workers=partial.number_of_workers,
        oncall=partial.oncall,
        other_critical_files=rooted_all(partial.other_critical_files),
        pysa_version_hash=partial.pysa_version_hash,
        python_version=partial.python_version,
        search_path=tuple(search_path),
        shared_memory=partial.shared_memory or SharedMemory(),
        site_package_search_strategy=(
            partial.site_package_search_strategy or SearchStrategy.NONE
        ),
        site_roots=partial.site_roots,
        source_directories=source_directories,
        strict=partial.strict if partial.strict is not None else False,
        taint_models_path=rooted_all(partial.taint_models_path),
        targets=partial.targets,
        typeshed=rooted(partial.typeshed),
        unwatched_dependency=unwatched_dependency,
        use_buck2=partial.use_buck2 if partial.use_buck2 is not None else False,
        version_hash=partial.version_hash,
    )
    return configuration, warnings


def _check_explicit_local_configuration(
    found_root: FoundRoot | None, search_base: Path
) -> None:
    """明示された局所設定が実際に見つかったことを検証する。

    Raises:
        MissingLocalConfigurationError: グローバル設定または局所設定が見つからない場合。
    """
    if found_root is None:
        missing = CONFIGURATION_FILE
    elif found_root.local_root is None:
        missing = LOCAL_CONFIGURATION_FILE
    else:
        return
    raise MissingLocalConfigurationError(
        "A local configuration path was explicitly specified, but no "
        f"{missing} file was found in {search_base} or its parents."
    )


def create_configuration(
    arguments: CommandArguments, base_directory: Path
) -> ResolvedConfiguration:
    """設定ファイルを探索し、全レイヤーをマージして最終設定を構築する。

    優先順位: CLI > 局所設定 (.pyre_configuration.local) > グローバル設定 (.pyre_configuration)
    > 既定値。

    --local-configuration が指定された場合は base_directory / local_configuration から探索し、
    局所設定が見つからなければ祖先のプロジェクトに切り替えずエラーとする。
    グローバル設定が見つからない場合は base_directory をプロジェクトルートとし、CLI 設定のみを適用する。

    Args:
        arguments: CLI 引数。
        base_directory: 探索の基準ディレクトリ。CLI 指定の相対パスもここを基準に展開する。

    Returns:
        最終設定と解決中の警告。

    Raises:
        MissingLocalConfigurationError: 明示された局所設定が見つからない場合。
        ConfigurationReadError: 設定ファイルを読み込めない場合。
        ConfigurationDecodeError: 設定ファイルまたは CLI 値のデコードに失敗した場合。
        PathError: パスを正規化できない場合。
    """
    base_directory = base_directory.resolve()
    search_base = (
        base_directory / arguments.local_configuration
        if arguments.local_configuration is not None
        else base_directory
    )
    found_root = find_global_and_local_root(search_base)
    if arguments.local_configuration is not None:
        _check_explicit_local_configuration(found_root, search_base)

    command_argument_configuration = expand_relative_paths(
        partial_configuration_from_command_arguments(arguments), str(base_directory)
    )

    warnings: list[ConfigurationWarning] = []

    if found_root is None:
        logger.debug(
            "No %s found above %s; using it as the project root",
            CONFIGURATION_FILE,
            search_base,
        )
        project_root = str(base_directory)
        relative_local_root = None
        partial_configuration = command_argument_configuration
    else:
        global_root = found_root.global_root
        project_root = str(global_root)
        logger.debug("Found global configuration root at %s", global_root)

        global_decoded = partial_configuration_from_file(global_root / CONFIGURATION_FILE)
        warnings.extend(global_decoded.warnings)
        global_layer = expand_relative_paths(
            global_decoded.partial_configuration, project_root
        )

        local_layer: PartialConfiguration | None = None
        local_root = found_root.local_root
        relative_local_root = get_relative_local_root(global_root, local_root)
        if local_root is not None:
            logger.debug("Found local configuration root at %s", local_root)
            local_decoded = partial_configuration_from_file(
                local_root / LOCAL_CONFIGURATION_FILE
            )
            warnings.extend(local_decoded.warnings)
            local_layer = expand_relative_paths(
                local_decoded.partial_configuration, str(local_root)
            )

        partial_configuration = merge_config_layers(
            global_layer, local_layer, command_argument_configuration
        )

    configuration, assembly_warnings = configuration_from_partial_configuration(
        project_root, relative_local_root, partial_configuration
    )
    warnings.extend(assembly_warnings)
    return ResolvedConfiguration(configuration=configuration, warnings=tuple(warnings))
