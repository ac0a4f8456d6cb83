"""設定解決の致命的エラー。

いずれも ConfigurationError を基底とし、CLI のトップレベルで一括して捕捉される。
エラーメッセージは単体で原因が分かるよう、対象のフィールド名やパスを含める。
"""

from __future__ import annotations


class ConfigurationError(Exception):
    """設定解決に失敗したことを示す基底例外。"""


class PathError(ConfigurationError):
    """パスの正規化に失敗した場合（シンボリックリンク循環、権限不足等）。"""


class ConfigurationReadError(ConfigurationError):
    """設定ファイルを読み込めなかった場合。"""


class ConfigurationDecodeError(ConfigurationError):
    """設定ドキュメントのデコード・型検証に失敗した場合。"""


class MissingLocalConfigurationError(ConfigurationError):
    """--local-configuration で明示された局所設定が見つからない場合。"""
