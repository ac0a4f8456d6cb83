"""Configuration のアクセサのテスト。"""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from pyre_client.models.configuration import (
    BINARY_ENVIRONMENT_VARIABLE,
    Configuration,
    PartialConfiguration,
)
from pyre_client.models.ide_features import IdeFeatures
from pyre_client.models.platform_aware import PlatformAware
from pyre_client.models.python_version import PythonVersion
from pyre_client.models.site_packages import SearchStrategy


def _configuration(**kwargs: object) -> Configuration:
    return Configuration(
        project_root="/project",
        dot_pyre_directory="/project/.pyre",
        **kwargs,  # type: ignore[arg-type]
    )


class TestConfigurationDefaults:
    """未指定フィールドの既定値。"""

    def test_defaults(self) -> None:
        configuration = _configuration()
        assert configuration.strict is False
        assert configuration.use_buck2 is False
        assert configuration.site_package_search_strategy is SearchStrategy.NONE
        assert configuration.search_path == ()
        assert configuration.source_directories is None

    def test_frozen(self) -> None:
        configuration = _configuration()
        with pytest.raises(ValidationError):
            configuration.strict = True  # type: ignore[misc]


class TestConfigurationLocalRoot:
    """local_root と log_directory。"""

    def test_without_local_root(self) -> None:
        configuration = _configuration()
        assert configuration.local_root is None
        assert configuration.log_directory == "/project/.pyre"

    def test_with_local_root(self) -> None:
        configuration = _configuration(relative_local_root="sub/dir")
        assert configuration.local_root == "/project/sub/dir"
        assert configuration.log_directory == "/project/.pyre/sub/dir"


class TestConfigurationAccessors:
    """get_* アクセサ。"""

    def test_python_version_explicit(self) -> None:
        version = PythonVersion(major=3, minor=8)
        assert _configuration(python_version=version).get_python_version() == version

    def test_python_version_fallback(self) -> None:
        assert _configuration().get_python_version() == PythonVersion.current()

    def test_number_of_workers_explicit(self) -> None:
        assert _configuration(number_of_workers=3).get_number_of_workers() == 3

    def test_number_of_workers_fallback(self) -> None:
        with patch("pyre_client.models.configuration.os.cpu_count", return_value=None):
            assert _configuration().get_number_of_workers() == 1

    def test_binary_explicit(self) -> None:
        assert _configuration(binary="/bin/checker").get_binary() == "/bin/checker"

    def test_binary_from_environment(self) -> None:
        with patch.dict(os.environ, {BINARY_ENVIRONMENT_VARIABLE: "/env/checker"}):
            assert _configuration().get_binary() == "/env/checker"

    def test_binary_from_path(self) -> None:
        with (
            patch.dict(os.environ, {BINARY_ENVIRONMENT_VARIABLE: ""}),
            patch(
                "pyre_client.models.configuration.shutil.which",
                return_value="/usr/bin/pyre.bin",
            ),
        ):
            assert _configuration().get_binary() == "/usr/bin/pyre.bin"

    def test_buck_mode(self) -> None:
        configuration = _configuration(buck_mode=PlatformAware.from_value("opt"))
        assert configuration.get_buck_mode() == "opt"
        assert _configuration().get_buck_mode() is None

    def test_ide_features_default(self) -> None:
        assert _configuration().get_ide_features() == IdeFeatures()


class TestPartialConfiguration:
    """部分設定は全フィールド未指定で構築できる。"""

    def test_all_fields_optional(self) -> None:
        partial = PartialConfiguration()
        assert all(
            getattr(partial, name) is None for name in PartialConfiguration.model_fields
        )
