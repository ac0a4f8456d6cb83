"""Typer app のテスト。

check: 終了コード, text / json 出力, 設定エラー, チェッカー失敗
info: 解決済み設定の出力, CLI 上書き, 警告
グローバルオプション: --help, --version, 不正な値

NOTE: Typer の CliRunner は stderr 分離パラメータを公開しないため、
stderr 出力は result.output（stdout + stderr 混合出力）で検証する。
"""

from __future__ import annotations

import json
import stat
import sys
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from pyre_client.check import CommandFailedError
from pyre_client.cli._app import app
from pyre_client.errors import ConfigurationDecodeError
from pyre_client.models.exit_code import ExitCode
from pyre_client.models.type_error import CheckResult

from tests.unit.cli.conftest import (
    PATCH_CREATE_CONFIGURATION,
    PATCH_RUN_CHECK,
    make_type_error,
    write_configuration,
)

runner = CliRunner()


class TestAppHelp:
    """--help / --version の動作。"""

    def test_help_shows_subcommands(self) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "check" in result.output
        assert "info" in result.output

    def test_no_arguments_shows_help(self) -> None:
        result = runner.invoke(app, [])
        assert "Usage" in result.output

    def test_version(self) -> None:
        with patch("pyre_client.cli._app.importlib.metadata.version", return_value="9.9.9"):
            result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "9.9.9" in result.output


# =============================================================================
# check
# =============================================================================


class TestCheckExitCodes:
    """check の終了コード。"""

    def test_no_errors(self, project: Path) -> None:
        with patch(PATCH_RUN_CHECK, return_value=CheckResult()) as mock_run:
            result = runner.invoke(app, ["check"])
        assert result.exit_code == ExitCode.SUCCESS
        assert "No type errors found." in result.output
        binary, argument_file = mock_run.call_args.args
        assert binary == "/opt/pyre/pyre.bin"
        assert Path(argument_file) == project / ".pyre" / "check_arguments.json"

    def test_found_errors(self, project: Path) -> None:
        errors = (make_type_error(path="src/app.py", line=3, column=4),)
        with patch(PATCH_RUN_CHECK, return_value=CheckResult(errors=errors)):
            result = runner.invoke(app, ["check"])
        assert result.exit_code == ExitCode.FOUND_ERRORS
        assert "src/app.py:3:4 Incompatible return type [7]" in result.output

    def test_checker_failure(self, project: Path) -> None:
        with patch(
            PATCH_RUN_CHECK,
            side_effect=CommandFailedError("Command `x` failed with exit code 3"),
        ):
            result = runner.invoke(app, ["check"])
        assert result.exit_code == ExitCode.FAILURE
        assert "Error: Command `x` failed with exit code 3" in result.output

    def test_configuration_error(self, project: Path) -> None:
        write_configuration(project, {"workers": "four"})
        with patch(PATCH_RUN_CHECK) as mock_run:
            result = runner.invoke(app, ["check"])
        assert result.exit_code == ExitCode.CONFIGURATION_ERROR
        assert "Error:" in result.output
        assert "workers" in result.output
        mock_run.assert_not_called()

    def test_missing_binary(
        self, project: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        write_configuration(project, {"source_directories": ["."]})
        monkeypatch.setenv("PATH", str(project))
        with patch(PATCH_RUN_CHECK) as mock_run:
            result = runner.invoke(app, ["check"])
        assert result.exit_code == ExitCode.CONFIGURATION_ERROR
        assert "Cannot locate the checker binary" in result.output
        mock_run.assert_not_called()

    def test_binary_from_environment(
        self, project: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        write_configuration(project, {"source_directories": ["."]})
        monkeypatch.setenv("PYRE_BINARY", "/env/pyre.bin")
        with patch(PATCH_RUN_CHECK, return_value=CheckResult()) as mock_run:
            result = runner.invoke(app, ["check"])
        assert result.exit_code == ExitCode.SUCCESS
        assert mock_run.call_args.args[0] == "/env/pyre.bin"

    def test_no_sources(self, project: Path) -> None:
        write_configuration(project, {"binary": "/opt/pyre/pyre.bin"})
        with patch(PATCH_RUN_CHECK) as mock_run:
            result = runner.invoke(app, ["check"])
        assert result.exit_code == ExitCode.CONFIGURATION_ERROR
        assert "No source directories or targets" in result.output
        mock_run.assert_not_called()


class TestCheckOutput:
    """check の出力形式と引数ファイル。"""

    def test_json_output(self, project: Path) -> None:
        errors = (make_type_error(line=1), make_type_error(line=2))
        with patch(PATCH_RUN_CHECK, return_value=CheckResult(errors=errors)):
            result = runner.invoke(app, ["--output", "json", "check"])
        assert result.exit_code == ExitCode.FOUND_ERRORS
        document = json.loads(result.output)
        assert [entry["line"] for entry in document] == [1, 2]

    def test_argument_file_reflects_options(self, project: Path) -> None:
        with patch(PATCH_RUN_CHECK, return_value=CheckResult()) as mock_run:
            runner.invoke(
                app, ["--strict", "--sequential", "--number-of-workers", "2", "check"]
            )
        argument_file = Path(mock_run.call_args.args[1])
        document = json.loads(argument_file.read_text(encoding="utf-8"))
        assert document["strict"] is True
        assert document["parallel"] is False
        assert document["number_of_workers"] == 2
        assert document["global_root"] == str(project)

    def test_warnings_printed(self, project: Path) -> None:
        write_configuration(
            project,
            {"binary": "/opt/pyre/pyre.bin", "source_directories": ["."], "mystery": 1},
        )
        with patch(PATCH_RUN_CHECK, return_value=CheckResult()):
            result = runner.invoke(app, ["check"])
        assert result.exit_code == ExitCode.SUCCESS
        assert "Warning: Unrecognized configuration item: mystery" in result.output


@pytest.mark.skipif(sys.platform == "win32", reason="requires a POSIX shell")
class TestCheckWithCheckerProcess:
    """実際にチェッカープロセスを起動する。"""

    def _install_checker(self, directory: Path, stdout: str, status: int) -> Path:
        script = directory / "fake-checker"
        script.write_text(
            f"#!/bin/sh\ncat <<'JSON'\n{stdout}\nJSON\nexit {status}\n",
            encoding="utf-8",
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR)
        return script

    def test_diagnostics_from_process(self, project: Path) -> None:
        diagnostic = make_type_error(path="a.py", line=5, column=2).model_dump()
        checker = self._install_checker(project, json.dumps([diagnostic]), 0)
        result = runner.invoke(app, ["--binary", str(checker), "check"])
        assert result.exit_code == ExitCode.FOUND_ERRORS
        assert "a.py:5:2" in result.output

    def test_nonzero_exit_from_process(self, project: Path) -> None:
        checker = self._install_checker(project, "[]", 4)
        result = runner.invoke(app, ["--binary", str(checker), "check"])
        assert result.exit_code == ExitCode.FAILURE
        assert "exit code 4" in result.output


# =============================================================================
# info
# =============================================================================


class TestInfo:
    """info サブコマンド。"""

    def test_prints_resolved_configuration(self, project: Path) -> None:
        result = runner.invoke(app, ["info"])
        assert result.exit_code == ExitCode.SUCCESS
        document = json.loads(result.output)
        assert document["project_root"] == str(project)
        assert document["binary"] == "/opt/pyre/pyre.bin"
        assert document["source_directories"] == [{"root": str(project)}]

    def test_cli_overrides(self, project: Path) -> None:
        result = runner.invoke(app, ["--strict", "--number-of-workers", "3", "info"])
        assert result.exit_code == ExitCode.SUCCESS
        document = json.loads(result.output)
        assert document["strict"] is True
        assert document["number_of_workers"] == 3

    def test_local_configuration_option(self, project: Path) -> None:
        write_configuration(
            project / "sub", {"strict": True}, name=".pyre_configuration.local"
        )
        result = runner.invoke(app, ["--local-configuration", "sub", "info"])
        assert result.exit_code == ExitCode.SUCCESS
        document = json.loads(result.output)
        assert document["relative_local_root"] == "sub"
        assert document["strict"] is True

    def test_missing_local_configuration(self, project: Path) -> None:
        (project / "sub").mkdir()
        result = runner.invoke(app, ["-l", "sub", "info"])
        assert result.exit_code == ExitCode.CONFIGURATION_ERROR
        assert ".pyre_configuration.local" in result.output

    def test_resolution_error(self, project: Path) -> None:
        with patch(
            PATCH_CREATE_CONFIGURATION,
            side_effect=ConfigurationDecodeError("bad value"),
        ):
            result = runner.invoke(app, ["info"])
        assert result.exit_code == ExitCode.CONFIGURATION_ERROR
        assert "Error: bad value" in result.output

    def test_invalid_element_is_configuration_error(self, project: Path) -> None:
        write_configuration(project, {"source_directories": [""]})
        result = runner.invoke(app, ["info"])
        assert result.exit_code == ExitCode.CONFIGURATION_ERROR
        assert "Error:" in result.output
        assert "source_directories" in result.output

    def test_shared_memory_knobs_merged_with_file(self, project: Path) -> None:
        write_configuration(
            project,
            {
                "source_directories": ["."],
                "shared_memory": {"heap_size": 1, "hash_table_power": 5},
                "ide_features": {"go_to_definition_enabled": True},
            },
        )
        result = runner.invoke(
            app, ["--shared-memory-heap-size", "2", "--enable-hover", "info"]
        )
        assert result.exit_code == ExitCode.SUCCESS
        document = json.loads(result.output)
        assert document["shared_memory"]["heap_size"] == 2
        assert document["shared_memory"]["hash_table_power"] == 5
        assert document["ide_features"]["hover_enabled"] is True
        assert document["ide_features"]["go_to_definition_enabled"] is True


class TestGlobalOptions:
    """グローバルオプションの検証。"""

    def test_invalid_output_format(self, project: Path) -> None:
        result = runner.invoke(app, ["--output", "xml", "info"])
        assert result.exit_code != ExitCode.SUCCESS

    def test_non_positive_workers_rejected(self, project: Path) -> None:
        result = runner.invoke(app, ["--number-of-workers", "0", "info"])
        assert result.exit_code != ExitCode.SUCCESS

    def test_invalid_python_version(self, project: Path) -> None:
        result = runner.invoke(app, ["--python-version", "three", "info"])
        assert result.exit_code == ExitCode.CONFIGURATION_ERROR
        assert "python_version" in result.output
