"""
データストアクライアントのプロトコル定義

ホスト型データストア（Supabase）への汎用クエリインターフェース。
行はカラム名→値のdictとしてそのまま扱い、スキーマ検証は行わない。
全メソッドはasync。
"""

from typing import Any, Optional, Protocol

# 全行削除時に使う「存在しないID」。PostgRESTはフィルタなしのDELETEを拒否するため
NIL_UUID = "00000000-0000-0000-0000-000000000000"


class DataStore(Protocol):
    """
    データストアクライアントのインターフェース

    フィルタ引数の意味:
        filters: カラム = 値（AND）
        in_filters: カラム IN (値リスト)
        gte / lte / lt: カラム >= / <= / < 値
    """

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
        """
        行を取得する

        Args:
            table: テーブル名
            columns: カンマ区切りのカラム名（例: "id, file_path"）

        Returns:
            行のリスト（該当なしの場合は空リスト）
        """
        ...

    async def insert(
        self, table: str, data: dict[str, Any] | list[dict[str, Any]]
    ) -> list[dict[str, Any]]:
        """行を挿入し、作成された行を返す"""
        ...

    async def update(
        self, table: str, data: dict[str, Any], filters: dict[str, Any]
    ) -> list[dict[str, Any]]:
        """条件に一致する行を更新し、更新後の行を返す"""
        ...

    async def upsert(
        self,
        table: str,
        data: dict[str, Any] | list[dict[str, Any]],
        on_conflict: str,
    ) -> list[dict[str, Any]]:
        """
        行を挿入または更新する

        Args:
            on_conflict: 一意制約のカラム（カンマ区切り）
        """
        ...

    async def delete(
        self,
        table: str,
        *,
        filters: Optional[dict[str, Any]] = None,
        in_filters: Optional[dict[str, list[Any]]] = None,
    ) -> None:
        """条件に一致する行を削除する（条件なしの呼び出しは不可）"""
        ...

    async def delete_all(self, table: str) -> None:
        """テーブルの全行を削除する"""
        ...

    async def close(self) -> None:
        """接続を閉じる"""
        ...
