"""部分設定の構築・展開・マージ。

部分設定は CLI 引数または設定ファイル（JSON）から構築される。
いずれのレイヤーも生成後に変更されることはなく、展開とマージは常に新しい値を返す。
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Final, TypeVar

from pydantic import ValidationError

from pyre_client.config._fields import (
    ensure_list,
    ensure_option_type,
    ensure_optional_object,
    ensure_optional_string_or_string_dict,
    ensure_string_list,
)
from pyre_client.errors import ConfigurationDecodeError, ConfigurationReadError
from pyre_client.filesystem import expand_path
from pyre_client.models._base import PyreBaseModel
from pyre_client.models.command_arguments import CommandArguments
from pyre_client.models.configuration import PartialConfiguration
from pyre_client.models.diagnostics import ConfigurationWarning, WarningKind
from pyre_client.models.extension import ExtensionElement
from pyre_client.models.ide_features import IdeFeatures
from pyre_client.models.platform_aware import PlatformAware
from pyre_client.models.python_version import InvalidPythonVersionError, PythonVersion
from pyre_client.models.search_path import SimpleRawElement
from pyre_client.models.shared_memory import SharedMemory
from pyre_client.models.site_packages import SearchStrategy
from pyre_client.models.unwatched import UnwatchedDependency

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=PyreBaseModel)

DEPRECATED_KEYS: Final[dict[str, str]] = {"do_not_check": "ignore_all_errors"}
"""廃止キー → 移行先キー。値は自動移行しない。"""

EXTRA_KEYS: Final[frozenset[str]] = frozenset(
    {
        "create_open_source_configuration",
        "saved_state",
        "stable_client",
        "taint_models_path",
        "unstable_client",
    }
)
"""検証しないが警告も出さない既知のキー。"""

APPEND_FIELDS: Final[frozenset[str]] = frozenset(
    {"do_not_ignore_errors_in", "other_critical_files"}
)
"""マージ時に上書きではなく下位レイヤーの後ろに連結するフィールド。"""

RECORD_FIELDS: Final[frozenset[str]] = frozenset({"ide_features", "shared_memory"})
"""マージ時にレコード全体ではなく、内部の項目ごとに上書きするフィールド。"""


class DecodedPartialConfiguration(PyreBaseModel):
    """設定ドキュメントのデコード結果。部分設定と非致命的な警告の組。"""

    partial_configuration: PartialConfiguration
    warnings: tuple[ConfigurationWarning, ...] = ()


# =============================================================================
# 共通ヘルパー
# =============================================================================


def _validate_nested(
    model_type: type[M], name: str, value: object
) -> M:
    try:
        return model_type.model_validate(value)
    except ValidationError as e:
        raise ConfigurationDecodeError(
            f"Configuration field `{name}` is invalid: {e}"
        ) from e


def _as_elements(
    name: str, values: Iterable[str] | None
) -> tuple[SimpleRawElement, ...] | None:
    if values is None:
        return None
    return tuple(
        _validate_nested(SimpleRawElement, name, {"root": value}) for value in values
    )


# =============================================================================
# CLI 引数から
# =============================================================================


def _parse_python_version(value: str) -> PythonVersion:
    try:
        return PythonVersion.from_string(value)
    except InvalidPythonVersionError as e:
        raise ConfigurationDecodeError(
            f"Configuration field `python_version` is invalid: {e}"
        ) from e


def _non_empty(values: tuple[str, ...]) -> tuple[str, ...] | None:
    # 空のリストで下位レイヤーのリストを空に上書きしないよう、未指定として扱う
    return values if values else None


def partial_configuration_from_command_arguments(
    arguments: CommandArguments,
) -> PartialConfiguration:
    """CLI 引数を部分設定に射影する。

    strict は指定時のみ True になり、明示的な False は生成しない。
    IDE 機能と共有メモリは、構成要素のいずれかが指定された場合のみ設定する。

    Raises:
        ConfigurationDecodeError: --python-version の形式が不正な場合、
            または空のパスが指定された場合。
    """
    ide_toggles = (
        arguments.enable_hover,
        arguments.enable_go_to_definition,
        arguments.enable_find_symbols,
        arguments.enable_find_all_references,
    )
    ide_features = (
        IdeFeatures(
            hover_enabled=arguments.enable_hover,
            go_to_definition_enabled=arguments.enable_go_to_definition,
            find_symbols_enabled=arguments.enable_find_symbols,
            find_all_references_enabled=arguments.enable_find_all_references,
        )
        if any(toggle is not None for toggle in ide_toggles)
        else None
    )

    shared_memory_knobs = (
        arguments.shared_memory_heap_size,
        arguments.shared_memory_dependency_table_power,
        arguments.shared_memory_hash_table_power,
    )
    shared_memory = (
        SharedMemory(
            heap_size=arguments.shared_memory_heap_size,
            dependency_table_power=arguments.shared_memory_dependency_table_power,
            hash_table_power=arguments.shared_memory_hash_table_power,
        )
        if any(knob is not None for knob in shared_memory_knobs)
        else None
    )

    return PartialConfiguration(
        binary=arguments.binary,
        buck_mode=(
            PlatformAware.from_value(arguments.buck_mode)
            if arguments.buck_mode is not None
            else None
        ),
        do_not_ignore_errors_in=_non_empty(arguments.do_not_ignore_errors_in),
        dot_pyre_directory=arguments.dot_pyre_directory,
        excludes=_non_empty(arguments.exclude),
        ide_features=ide_features,
        isolation_prefix=arguments.isolation_prefix,
        logger=arguments.logger,
        number_of_workers=arguments.number_of_workers,
        python_version=(
            _parse_python_version(arguments.python_version)
            if arguments.python_version is not None
            else None
        ),
        search_path=_as_elements("search_path", _non_empty(arguments.search_path)),
        shared_memory=shared_memory,
        source_directories=_as_elements(
            "source_directories", _non_empty(arguments.source_directories)
        ),
        strict=True if arguments.strict else None,
        targets=_non_empty(arguments.targets),
        typeshed=arguments.typeshed,
        use_buck2=arguments.use_buck2,
    )


# =============================================================================
# 設定ドキュメントから
# =============================================================================


def _decode_extensions(values: list[object] | None) -> tuple[ExtensionElement, ...] | None:
    if values is None:
        return None
    extensions: list[ExtensionElement] = []
    for value in values:
        if isinstance(value, str):
            extensions.append(
                _validate_nested(ExtensionElement, "extensions", {"suffix": value})
            )
        elif isinstance(value, dict):
            extensions.append(_validate_nested(ExtensionElement, "extensions", value))
        else:
            raise ConfigurationDecodeError(
                "Configuration field `extensions` is expected to contain strings "
                f"or objects but got `{value}`."
            )
    return tuple(extensions)


def _decode_search_strategy(value: str | None) -> SearchStrategy | None:
    if value is None:
        return None
    try:
        return SearchStrategy.from_string(value)
    except ValueError as e:
        raise ConfigurationDecodeError(
            f"Configuration field `site_package_search_strategy` is invalid: {e}"
        ) from e


def _as_tuple(values: list[str] | None) -> tuple[str, ...] | None:
    return tuple(values) if values is not None else None


def _pop_deprecated_keys(document: dict[str, object]) -> list[ConfigurationWarning]:
    warnings: list[ConfigurationWarning] = []
    for deprecated_key, replacement_key in DEPRECATED_KEYS.items():
        if deprecated_key in document:
            document.pop(deprecated_key)
            message = (
                f"Configuration file uses deprecated item `{deprecated_key}`. "
                f"Please migrate to its replacement `{replacement_key}`."
            )
            logger.warning(message)
            warnings.append(
                ConfigurationWarning(kind=WarningKind.DEPRECATED, message=message)
            )
    return warnings


def _collect_unrecognized_keys(
    document: dict[str, object],
) -> list[ConfigurationWarning]:
    warnings: list[ConfigurationWarning] = []
    for key in document:
        if key in EXTRA_KEYS:
            continue
        message = f"Unrecognized configuration item: {key}"
        logger.warning(message)
        warnings.append(
            ConfigurationWarning(kind=WarningKind.UNRECOGNIZED, message=message)
        )
    return warnings


def partial_configuration_from_string(contents: str) -> DecodedPartialConfiguration:
    """JSON 設定ドキュメントを部分設定にデコードする。

    廃止キーは値を移行せずに取り除いて警告を記録する。
    認識したキーを順に取り出して型検証し、残ったキーのうち既知の追加キー以外を
    未認識として警告する。

    Args:
        contents: 設定ファイルの内容。

    Returns:
        部分設定と警告。

    Raises:
        ConfigurationDecodeError: JSON 構文エラー、トップレベルがオブジェクトでない場合、
            またはいずれかのフィールドの型が一致しない場合。
    """
    try:
        loaded = json.loads(contents)
    except json.JSONDecodeError as e:
        raise ConfigurationDecodeError(f"Configuration is not valid JSON: {e}") from e
    if not isinstance(loaded, dict):
        raise ConfigurationDecodeError(
            f"Configuration is expected to be a JSON object but got `{loaded}`."
        )
    document: dict[str, object] = dict(loaded)

    warnings = _pop_deprecated_keys(document)

    buck_mode = ensure_optional_string_or_string_dict(document, "buck_mode")
    ide_features = ensure_optional_object(document, "ide_features")
    python_version = ensure_option_type(document, "python_version", str)
    shared_memory = ensure_optional_object(document, "shared_memory")
    unwatched_dependency = ensure_optional_object(document, "unwatched_dependency")

    partial_configuration = PartialConfiguration(
        binary=ensure_option_type(document, "binary", str),
        buck_mode=PlatformAware.from_value(buck_mode) if buck_mode is not None else None,
        do_not_ignore_errors_in=_as_tuple(
            ensure_string_list(document, "do_not_ignore_errors_in")
        ),
        dot_pyre_directory=ensure_option_type(document, "dot_pyre_directory", str),
        excludes=_as_tuple(
            ensure_string_list(document, "exclude", allow_single_string=True)
        ),
        extensions=_decode_extensions(ensure_list(document, "extensions")),
        ide_features=(
            _validate_nested(IdeFeatures, "ide_features", ide_features)
            if ide_features is not None
            else None
        ),
        ignore_all_errors=_as_tuple(ensure_string_list(document, "ignore_all_errors")),
        isolation_prefix=ensure_option_type(document, "isolation_prefix", str),
        logger=ensure_option_type(document, "logger", str),
        number_of_workers=ensure_option_type(document, "workers", int),
        oncall=ensure_option_type(document, "oncall", str),
        other_critical_files=_as_tuple(ensure_string_list(document, "critical_files")),
        pysa_version_hash=ensure_option_type(document, "pysa_version", str),
        python_version=(
            _parse_python_version(python_version) if python_version is not None else None
        ),
        search_path=_as_elements(
            "search_path",
            ensure_string_list(document, "search_path", allow_single_string=True),
        ),
        shared_memory=(
            _validate_nested(SharedMemory, "shared_memory", shared_memory)
            if shared_memory is not None
            else None
        ),
        site_package_search_strategy=_decode_search_strategy(
            ensure_option_type(document, "site_package_search_strategy", str)
        ),
        site_roots=_as_tuple(ensure_string_list(document, "site_roots")),
        source_directories=_as_elements(
            "source_directories", ensure_string_list(document, "source_directories")
        ),
        strict=ensure_option_type(document, "strict", bool),
        taint_models_path=_as_tuple(
            ensure_string_list(document, "taint_models_path", allow_single_string=True)
        ),
        targets=_as_tuple(ensure_string_list(document, "targets")),
        typeshed=ensure_option_type(document, "typeshed", str),
        unwatched_dependency=(
            _validate_nested(
                UnwatchedDependency, "unwatched_dependency", unwatched_dependency
            )
            if unwatched_dependency is not None
            else None
        ),
        use_buck2=ensure_option_type(document, "use_buck2", bool),
        version_hash=ensure_option_type(document, "version", str),
    )

    warnings.extend(_collect_unrecognized_keys(document))
    return DecodedPartialConfiguration(
        partial_configuration=partial_configuration, warnings=tuple(warnings)
    )


def partial_configuration_from_file(path: Path) -> DecodedPartialConfiguration:
    """設定ファイルを読み込み部分設定にデコードする。

    Raises:
        ConfigurationReadError: ファイルを読み込めない場合。
        ConfigurationDecodeError: デコードに失敗した場合（メッセージにファイルパスを含む）。
    """
    try:
        contents = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationReadError(
            f"Cannot read configuration file `{path}`: {e}"
        ) from e
    logger.debug("Reading configuration file %s", path)
    try:
        return partial_configuration_from_string(contents)
    except ConfigurationDecodeError as e:
        raise ConfigurationDecodeError(f"{path}: {e}") from e


# =============================================================================
# 展開・マージ
# =============================================================================


def _expand_optional(value: str | None, root: str) -> str | None:
    return expand_path(value, root) if value is not None else None


def _expand_all(values: Iterable[str] | None, root: str) -> tuple[str, ...] | None:
    if values is None:
        return None
    return tuple(expand_path(value, root) for value in values)


def _expand_elements(
    elements: tuple[SimpleRawElement, ...] | None, root: str
) -> tuple[SimpleRawElement, ...] | None:
    if elements is None:
        return None
    return tuple(element.expand_relative_root(root) for element in elements)


def expand_relative_paths(
    partial_configuration: PartialConfiguration, root: str
) -> PartialConfiguration:
    """部分設定の全パスフィールドを root 基準で展開した新しい部分設定を返す。

    "//" 接頭辞のパスは保持される。展開済みの絶対パスに再適用しても値は変わらない。

    Raises:
        PathError: いずれかのパスを正規化できない場合。
    """
    unwatched_dependency = partial_configuration.unwatched_dependency
    return partial_configuration.model_copy(
        update={
            "binary": _expand_optional(partial_configuration.binary, root),
            "do_not_ignore_errors_in": _expand_all(
                partial_configuration.do_not_ignore_errors_in, root
            ),
            "dot_pyre_directory": _expand_optional(
                partial_configuration.dot_pyre_directory, root
            ),
            "ignore_all_errors": _expand_all(
                partial_configuration.ignore_all_errors, root
            ),
            "logger": _expand_optional(partial_configuration.logger, root),
            "other_critical_files": _expand_all(
                partial_configuration.other_critical_files, root
            ),
            "search_path": _expand_elements(partial_configuration.search_path, root),
            "source_directories": _expand_elements(
                partial_configuration.source_directories, root
            ),
            "taint_models_path": _expand_all(
                partial_configuration.taint_models_path, root
            ),
            "typeshed": _expand_optional(partial_configuration.typeshed, root),
            "unwatched_dependency": (
                unwatched_dependency.expand_root(root)
                if unwatched_dependency is not None
                else None
            ),
        }
    )


def _merge_field(name: str, base: object, overwrite: object) -> object:
    if overwrite is None:
        return base
    if base is None:
        return overwrite
    if name in APPEND_FIELDS:
        return (*base, *overwrite)  # type: ignore[misc]
    if name in RECORD_FIELDS:
        knobs = overwrite.model_dump(exclude_none=True)  # type: ignore[attr-defined]
        return base.model_copy(update=knobs)  # type: ignore[attr-defined]
    return overwrite


def merge_partial_configurations(
    base: PartialConfiguration, overwrite: PartialConfiguration
) -> PartialConfiguration:
    """2 つの部分設定をフィールド単位でマージする。

    overwrite が指定したフィールドは overwrite の値を採用し、未指定なら base の値を保持する。
    リストも上書き（連結しない）。ただし APPEND_FIELDS は base の後ろに overwrite を連結し、
    RECORD_FIELDS は内部の項目ごとに同じ規則でマージする。

    Args:
        base: 低優先度のレイヤー。
        overwrite: 高優先度のレイヤー。

    Returns:
        マージ済みの新しい部分設定。
    """
    merged: dict[str, object] = {
        name: _merge_field(name, getattr(base, name), getattr(overwrite, name))
        for name in PartialConfiguration.model_fields
    }
    return PartialConfiguration(**merged)  # type: ignore[arg-type]


def merge_config_layers(
    *layers: PartialConfiguration | None,
) -> PartialConfiguration:
    """複数のレイヤーを低優先度から高優先度の順にマージする。

    None のレイヤーはスキップされる。
    """
    result = PartialConfiguration()
    for layer in layers:
        if layer is None:
            continue
        result = merge_partial_configurations(result, layer)
    return result
