"""
Supabaseデータストアアダプター

supabase-pyの非同期クライアントでDataStoreプロトコルを実装する。
クライアントは初回利用時にasyncio.Lockで保護して遅延生成する。
"""

import asyncio
from typing import Any, Optional

from supabase import AsyncClient, acreate_client

from app.core.logging import get_logger

from .client import NIL_UUID

logger = get_logger(__name__)


class SupabaseDataStore:
    """
    Supabase版DataStore

    Args:
        url: SupabaseプロジェクトURL
        key: サービスロールキー（RLSをバイパスする特権キー）

    Example:
        >>> store = SupabaseDataStore(url="https://xyz.supabase.co", key="eyJ...")
        >>> rows = await store.select("staff")
        >>> await store.close()
    """

    def __init__(self, url: str, key: str) -> None:
        self._url = url
        self._key = key
        self._client: Optional[AsyncClient] = None
        self._lock = asyncio.Lock()

    async def _get_client(self) -> AsyncClient:
        """
        非同期クライアントを取得（未生成なら生成）する

        Returns:
            初期化済みのAsyncClient
        """
        if self._client is None:
            async with self._lock:
                if self._client is None:
                    self._client = await acreate_client(self._url, self._key)
                    logger.info("Supabase client initialized")
        return self._client

    async def select(
        self,
        table: str,
        columns: str = "*",
        *,
        filters: Optional[dict[str, Any]] = None,
        in_filters: Optional[dict[str, list[Any]]] = None,
        gte: Optional[dict[str, Any]] = None,
        lte: Optional[dict[str, Any]] = None,
        lt: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        """Supabaseクエリビルダーで行を取得する"""
        client = await self._get_client()
        query = client.table(table).select(columns)

        for key, value in (filters or {}).items():
            query = query.eq(key, value)
        for key, values in (in_filters or {}).items():
            query = query.in_(key, values)
        for key, value in (gte or {}).items():
            query = query.gte(key, value)
        for key, value in (lte or {}).items():
            query = query.lte(key, value)
        for key, value in (lt or {}).items():
            query = query.lt(key, value)

        if order_by:
            query = query.order(order_by, desc=descending)
        if limit is not None:
            query = query.limit(limit)

        result = await query.execute()
        return result.data or []

    async def insert(
        self, table: str, data: dict[str, Any] | list[dict[str, Any]]
    ) -> list[dict[str, Any]]:
        """行を挿入する"""
        client = await self._get_client()
        result = await client.table(table).insert(data).execute()
        return result.data or []

    async def update(
        self, table: str, data: dict[str, Any], filters: dict[str, Any]
    ) -> list[dict[str, Any]]:
        """行を更新する"""
        client = await self._get_client()
        query = client.table(table).update(data)
        for key, value in filters.items():
            query = query.eq(key, value)
        result = await query.execute()
        return result.data or []

    async def upsert(
        self,
        table: str,
        data: dict[str, Any] | list[dict[str, Any]],
        on_conflict: str,
    ) -> list[dict[str, Any]]:
        """行を挿入または更新する"""
        client = await self._get_client()
        result = (
            await client.table(table).upsert(data, on_conflict=on_conflict).execute()
        )
        return result.data or []

    async def delete(
        self,
        table: str,
        *,
        filters: Optional[dict[str, Any]] = None,
        in_filters: Optional[dict[str, list[Any]]] = None,
    ) -> None:
        """条件に一致する行を削除する"""
        if not filters and not in_filters:
            raise ValueError("delete() requires at least one filter; use delete_all()")

        client = await self._get_client()
        query = client.table(table).delete()
        for key, value in (filters or {}).items():
            query = query.eq(key, value)
        for key, values in (in_filters or {}).items():
            query = query.in_(key, values)
        await query.execute()

    async def delete_all(self, table: str) -> None:
        """テーブルの全行を削除する"""
        client = await self._get_client()
        await client.table(table).delete().neq("id", NIL_UUID).execute()

    async def close(self) -> None:
        """
        クライアントを閉じる

        一度もクエリしていない場合は何もしない
        """
        if self._client is not None:
            await self._client.postgrest.aclose()
            self._client = None
