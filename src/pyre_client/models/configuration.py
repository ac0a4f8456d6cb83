"""設定モデル。

PartialConfiguration は 1 レイヤー（グローバル設定・局所設定・CLI）が明示的に指定した値だけを持つ。
全フィールドが省略可能で、None は「このレイヤーでは未指定（下位レイヤーから継承）」を意味する。
Configuration はマージと展開を終えた不変の最終設定。
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Final

from pydantic import Field

from pyre_client.models._base import PyreBaseModel
from pyre_client.models.diagnostics import ConfigurationWarning
from pyre_client.models.extension import ExtensionElement
from pyre_client.models.ide_features import IdeFeatures
from pyre_client.models.platform_aware import PlatformAware
from pyre_client.models.python_version import PythonVersion
from pyre_client.models.search_path import SimpleElement, SimpleRawElement
from pyre_client.models.shared_memory import SharedMemory
from pyre_client.models.site_packages import SearchStrategy
from pyre_client.models.unwatched import UnwatchedDependency

BINARY_ENVIRONMENT_VARIABLE: Final[str] = "PYRE_BINARY"
"""binary 未指定時に参照する環境変数。"""

BINARY_NAME: Final[str] = "pyre.bin"
"""binary 未指定時に PATH 上で探すチェッカー実行ファイル名。"""


class PartialConfiguration(PyreBaseModel):
    """1 レイヤー分の部分設定。"""

    binary: str | None = None
    buck_mode: PlatformAware | None = None
    do_not_ignore_errors_in: tuple[str, ...] | None = None
    dot_pyre_directory: str | None = None
    excludes: tuple[str, ...] | None = None
    extensions: tuple[ExtensionElement, ...] | None = None
    ide_features: IdeFeatures | None = None
    ignore_all_errors: tuple[str, ...] | None = None
    isolation_prefix: str | None = None
    logger: str | None = None
    number_of_workers: int | None = None
    oncall: str | None = None
    other_critical_files: tuple[str, ...] | None = None
    pysa_version_hash: str | None = None
    python_version: PythonVersion | None = None
    search_path: tuple[SimpleRawElement, ...] | None = None
    shared_memory: SharedMemory | None = None
    site_package_search_strategy: SearchStrategy | None = None
    site_roots: tuple[str, ...] | None = None
    source_directories: tuple[SimpleRawElement, ...] | None = None
    strict: bool | None = None
    taint_models_path: tuple[str, ...] | None = None
    targets: tuple[str, ...] | None = None
    typeshed: str | None = None
    unwatched_dependency: UnwatchedDependency | None = None
    use_buck2: bool | None = None
    version_hash: str | None = None


class Configuration(PyreBaseModel):
    """全レイヤーを統合し、パスを正規化した最終設定。"""

    project_root: str = Field(min_length=1)
    relative_local_root: str | None = None
    dot_pyre_directory: str = Field(min_length=1)

    binary: str | None = None
    buck_mode: PlatformAware | None = None
    do_not_ignore_errors_in: tuple[str, ...] = ()
    excludes: tuple[str, ...] = ()
    extensions: tuple[ExtensionElement, ...] = ()
    ide_features: IdeFeatures | None = None
    ignore_all_errors: tuple[str, ...] = ()
    isolation_prefix: str | None = None
    logger: str | None = None
    number_of_workers: int | None = None
    oncall: str | None = None
    other_critical_files: tuple[str, ...] = ()
    pysa_version_hash: str | None = None
    python_version: PythonVersion | None = None
    search_path: tuple[SimpleElement, ...] = ()
    shared_memory: SharedMemory = Field(default_factory=SharedMemory)
    site_package_search_strategy: SearchStrategy = SearchStrategy.NONE
    site_roots: tuple[str, ...] | None = None
    source_directories: tuple[SimpleElement, ...] | None = None
    strict: bool = False
    taint_models_path: tuple[str, ...] = ()
    targets: tuple[str, ...] | None = None
    typeshed: str | None = None
    unwatched_dependency: UnwatchedDependency | None = None
    use_buck2: bool = False
    version_hash: str | None = None

    @property
    def local_root(self) -> str | None:
        """局所設定のあるディレクトリの絶対パス。局所設定がなければ None。"""
        if self.relative_local_root is None:
            return None
        return str(Path(self.project_root) / self.relative_local_root)

    @property
    def log_directory(self) -> str:
        """このプロジェクト（局所設定単位）の作業ディレクトリ。"""
        if self.relative_local_root is None:
            return self.dot_pyre_directory
        return str(Path(self.dot_pyre_directory) / self.relative_local_root)

    def get_python_version(self) -> PythonVersion:
        """未指定なら実行中のインタプリタのバージョンを返す。"""
        if self.python_version is not None:
            return self.python_version
        return PythonVersion.current()

    def get_number_of_workers(self) -> int:
        """未指定なら CPU 数を返す。"""
        if self.number_of_workers is not None and self.number_of_workers > 0:
            return self.number_of_workers
        return os.cpu_count() or 1

    def get_binary(self) -> str | None:
        """チェッカー実行ファイルのパスを返す。

        設定値、環境変数 PYRE_BINARY、PATH 上の pyre.bin の順に探す。見つからなければ None。
        """
        if self.binary is not None:
            return self.binary
        from_environment = os.environ.get(BINARY_ENVIRONMENT_VARIABLE)
        if from_environment:
            return from_environment
        return shutil.which(BINARY_NAME)

    def get_buck_mode(self) -> str | None:
        """実行中のプラットフォームに対応する buck モードを返す。"""
        if self.buck_mode is None:
            return None
        return self.buck_mode.get()

    def get_ide_features(self) -> IdeFeatures:
        return self.ide_features if self.ide_features is not None else IdeFeatures()


class ResolvedConfiguration(PyreBaseModel):
    """create_configuration の結果。最終設定と解決中に集めた警告の組。"""

    configuration: Configuration
    warnings: tuple[ConfigurationWarning, ...] = ()
