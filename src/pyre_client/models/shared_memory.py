"""共有メモリのサイズ設定。"""

from pydantic import Field, StrictInt

from pyre_client.models._base import PyreBaseModel


class SharedMemory(PyreBaseModel):
    """チェッカーの共有メモリ設定。各値は独立に省略可能。"""

    heap_size: StrictInt | None = Field(default=None, gt=0)
    dependency_table_power: StrictInt | None = Field(default=None, gt=0)
    hash_table_power: StrictInt | None = Field(default=None, gt=0)
