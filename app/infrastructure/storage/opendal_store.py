"""OpenDALによるオブジェクトストレージ実装"""

import asyncio
from typing import Any

import opendal
from opendal.exceptions import NotFound

from app.core.config import Settings
from app.core.logging import get_logger

logger = get_logger(__name__)


class OpendalObjectStore:
    """
    opendal.AsyncOperatorをラップしたObjectStore

    SupabaseのストレージはS3互換エンドポイントを提供しているため、
    本番ではスキーム"s3"で接続する。

    Args:
        scheme: OpenDALのサービス名（"s3", "fs", "memory"等）
        **options: サービス固有のオプション
    """

    def __init__(self, scheme: str, **options: Any) -> None:
        self.scheme = scheme
        self.operator = opendal.AsyncOperator(scheme, **options)

    @classmethod
    def from_settings(cls, settings: Settings) -> "OpendalObjectStore":
        """
        設定からストレージを初期化する

        Args:
            settings: アプリケーション設定

        Returns:
            OpendalObjectStore: 初期化済みのストレージ
        """
        store = cls(settings.STORAGE_SCHEME, **settings.storage_options)
        logger.info(
            f"Object storage initialized ({settings.STORAGE_SCHEME}: {settings.BACKUP_BUCKET})"
        )
        return store

    async def write(self, path: str, data: bytes) -> None:
        await self.operator.write(path, data)

    async def read(self, path: str) -> bytes:
        try:
            return bytes(await self.operator.read(path))
        except NotFound as e:
            raise FileNotFoundError(path) from e

    async def delete_many(self, paths: list[str]) -> None:
        """
        パスのリストをまとめて削除する

        OpenDALのPython APIは1パスずつの削除のみのため、並行して実行する。
        存在しないパスの削除も成功として扱われる。
        """
        await asyncio.gather(*(self.operator.delete(path) for path in paths))
        logger.info(f"Deleted {len(paths)} object(s) from storage")
