"""CLI テスト共通フィクスチャ・ヘルパー。"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from pyre_client.models.type_error import TypeCheckError

PATCH_RUN_CHECK = "pyre_client.cli._app.run_check"
PATCH_CREATE_CONFIGURATION = "pyre_client.cli._app.create_configuration"


def write_configuration(
    directory: Path, document: dict[str, object], name: str = ".pyre_configuration"
) -> None:
    """directory に設定ファイルを書き出す。"""
    directory.mkdir(parents=True, exist_ok=True)
    (directory / name).write_text(json.dumps(document), encoding="utf-8")


def make_type_error(
    path: str = "src/app.py",
    line: int = 1,
    column: int = 0,
    description: str = "Incompatible return type [7]",
) -> TypeCheckError:
    """テスト用の最小 TypeCheckError を生成する。"""
    return TypeCheckError(
        line=line,
        column=column,
        stop_line=line,
        stop_column=column + 1,
        path=path,
        code=7,
        name="Incompatible return type",
        description=description,
        long_description=description,
        concise_description=description,
    )


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """グローバル設定を持つプロジェクトを作成し、カレントディレクトリにする。"""
    root = tmp_path.resolve() / "project"
    write_configuration(
        root, {"binary": "/opt/pyre/pyre.bin", "source_directories": ["."]}
    )
    monkeypatch.chdir(root)
    monkeypatch.delenv("PYRE_BINARY", raising=False)
    return root
