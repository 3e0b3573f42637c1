"""オブジェクトストレージのプロトコル定義"""

from typing import Protocol


class ObjectStore(Protocol):
    """
    オブジェクトストレージのインターフェース

    パスはバケット直下の相対パス（例: "backup-2025-06-15.json"）。
    """

    async def write(self, path: str, data: bytes) -> None:
        """オブジェクトを書き込む（既存オブジェクトは上書き）"""
        ...

    async def read(self, path: str) -> bytes:
        """
        オブジェクトを読み込む

        Raises:
            FileNotFoundError: オブジェクトが存在しない場合
        """
        ...

    async def delete_many(self, paths: list[str]) -> None:
        """パスのリストで一括削除する（存在しないパスは無視）"""
        ...
