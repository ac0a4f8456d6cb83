"""全値モデルの基底クラス。

設定レイヤー・解決済み設定・チェッカー応答はすべて不変値として扱う。
"""

from pydantic import BaseModel, ConfigDict


class PyreBaseModel(BaseModel):
    """全値モデルの基底クラス。

    extra="forbid" で未知フィールドを拒否し、frozen=True で生成後の変更を禁止する。
    値の「変更」は常に model_copy(update=...) による新しいインスタンスの生成で表現する。
    """

    model_config = ConfigDict(extra="forbid", frozen=True)
