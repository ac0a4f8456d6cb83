"""設定ドキュメントの値デコードヘルパー。

各ヘルパーは辞書から指定キーを取り出し（pop）、実行時型を検証する。
キーが存在しなければ None を返し、型が合わなければ ConfigurationDecodeError を送出する。
"""

from __future__ import annotations

from typing import TypeVar

from pyre_client.errors import ConfigurationDecodeError

T = TypeVar("T")

_TYPE_NAMES: dict[type, str] = {str: "str", int: "int", bool: "bool"}


def _matches_type(value: object, expected_type: type) -> bool:
    # bool は int のサブクラスだが、int フィールドには受け付けない
    if expected_type is int and isinstance(value, bool):
        return False
    return isinstance(value, expected_type)


def is_list_of_strings(value: object) -> bool:
    return isinstance(value, list) and all(isinstance(e, str) for e in value)


def ensure_option_type(
    document: dict[str, object], name: str, expected_type: type[T]
) -> T | None:
    """name の値が expected_type であることを検証して返す。

    Raises:
        ConfigurationDecodeError: 型が一致しない場合。
    """
    result = document.pop(name, None)
    if result is None:
        return None
    if _matches_type(result, expected_type):
        return result  # type: ignore[return-value]
    type_name = _TYPE_NAMES.get(expected_type, expected_type.__name__)
    raise ConfigurationDecodeError(
        f"Configuration field `{name}` is expected to have type "
        f"{type_name} but got: `{result}`."
    )


def ensure_optional_string_or_string_dict(
    document: dict[str, object], name: str
) -> str | dict[str, str] | None:
    """name の値が文字列または文字列値の辞書であることを検証して返す。

    Raises:
        ConfigurationDecodeError: 型が一致しない場合。
    """
    result = document.pop(name, None)
    if result is None:
        return None
    if isinstance(result, str):
        return result
    if isinstance(result, dict):
        if not all(isinstance(value, str) for value in result.values()):
            raise ConfigurationDecodeError(
                f"Configuration field `{name}` is expected to be a dict of "
                f"strings but got `{result}`."
            )
        return result
    raise ConfigurationDecodeError(
        f"Configuration field `{name}` is expected to be a string or a dict "
        f"of strings but got `{result}`."
    )


def ensure_string_list(
    document: dict[str, object], name: str, allow_single_string: bool = False
) -> list[str] | None:
    """name の値が文字列リストであることを検証して返す。

    allow_single_string が True の場合、単一の文字列は 1 要素のリストとして受け付ける。

    Raises:
        ConfigurationDecodeError: 型が一致しない場合。
    """
    result = document.pop(name, None)
    if result is None:
        return None
    if allow_single_string and isinstance(result, str):
        return [result]
    if is_list_of_strings(result):
        return result  # type: ignore[return-value]
    raise ConfigurationDecodeError(
        f"Configuration field `{name}` is expected to be a list of strings "
        f"but got `{result}`."
    )


def ensure_list(document: dict[str, object], name: str) -> list[object] | None:
    """name の値がリストであることを検証して返す。要素の型は呼び出し側が検証する。

    Raises:
        ConfigurationDecodeError: 型が一致しない場合。
    """
    result = document.pop(name, None)
    if result is None:
        return None
    if isinstance(result, list):
        return result
    raise ConfigurationDecodeError(
        f"Configuration field `{name}` is expected to be a list but got `{result}`."
    )


def ensure_optional_object(
    document: dict[str, object], name: str
) -> dict[str, object] | None:
    """name の値が JSON オブジェクトであることを検証して返す。

    Raises:
        ConfigurationDecodeError: 型が一致しない場合。
    """
    result = document.pop(name, None)
    if result is None:
        return None
    if isinstance(result, dict):
        return result
    raise ConfigurationDecodeError(
        f"Configuration field `{name}` is expected to be an object but got `{result}`."
    )
