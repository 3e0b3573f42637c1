"""
テスト用のインメモリ実装

- FakeDataStore: DataStoreプロトコルのインメモリ版（フィルタ・並び替え・件数制限に対応）
- FakeObjectStore: ObjectStoreプロトコルのインメモリ版
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Optional

Row = dict[str, Any]


def _comparable(value: Any) -> Any:
    """ISO形式の日時文字列は日時として比較する"""
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            return value
    return value


class FakeDataStore:
    """
    インメモリのDataStore

    Args:
        tables: 初期データ（テーブル名→行リスト）
        journal: 操作の記録先（ストレージと共有して呼び出し順を検証する）
    """

    def __init__(
        self,
        tables: Optional[dict[str, list[Row]]] = None,
        journal: Optional[list[tuple[str, Any]]] = None,
    ) -> None:
        self.tables: dict[str, list[Row]] = {
            name: [dict(row) for row in rows] for name, rows in (tables or {}).items()
        }
        self.journal = journal if journal is not None else []
        self.failures: dict[tuple[str, str], list[Any]] = {}
        self.closed = False

    def fail(
        self, operation: str, table: str, error: Optional[Exception] = None, times: int = -1
    ) -> None:
        """
        指定した操作を失敗させる

        Args:
            operation: select / insert / update / upsert / delete / delete_all
            table: テーブル名
            error: 送出する例外
            times: 失敗させる回数（-1は無制限）
        """
        self.failures[(operation, table)] = [
            error or RuntimeError(f"{operation} {table} failed"),
            times,
        ]

    def _maybe_fail(self, operation: str, table: str) -> None:
        failure = self.failures.get((operation, table))
        if failure is None:
            return
        error, remaining = failure
        if remaining == 0:
            return
        if remaining > 0:
            failure[1] = remaining - 1
        raise error

    def rows(self, table: str) -> list[Row]:
        return self.tables.setdefault(table, [])

    @staticmethod
    def _project(row: Row, columns: str) -> Row:
        if columns.strip() == "*":
            return dict(row)
        return {name.strip(): row.get(name.strip()) for name in columns.split(",")}

    @staticmethod
    def _matches(
        row: Row,
        filters: Optional[dict[str, Any]] = None,
        in_filters: Optional[dict[str, list[Any]]] = None,
        gte: Optional[dict[str, Any]] = None,
        lte: Optional[dict[str, Any]] = None,
        lt: Optional[dict[str, Any]] = None,
    ) -> bool:
        for key, value in (filters or {}).items():
            if row.get(key) != value:
                return False
        for key, values in (in_filters or {}).items():
            if row.get(key) not in values:
                return False
        for bounds, check in (
            (gte, lambda a, b: a >= b),
            (lte, lambda a, b: a <= b),
            (lt, lambda a, b: a < b),
        ):
            for key, value in (bounds or {}).items():
                current = row.get(key)
                if current is None or not check(_comparable(current), _comparable(value)):
                    return False
        return True

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
    ) -> list[Row]:
        self.journal.append(("select", table))
        self._maybe_fail("select", table)

        rows = [
            row
            for row in self.rows(table)
            if self._matches(row, filters, in_filters, gte, lte, lt)
        ]
        if order_by:
            rows.sort(key=lambda r: _comparable(r.get(order_by)), reverse=descending)
        if limit is not None:
            rows = rows[:limit]
        return [self._project(row, columns) for row in rows]

    async def insert(self, table: str, data: Row | list[Row]) -> list[Row]:
        self.journal.append(("insert", table))
        self._maybe_fail("insert", table)

        inserted = []
        for item in data if isinstance(data, list) else [data]:
            row = dict(item)
            row.setdefault("id", str(uuid.uuid4()))
            row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
            self.rows(table).append(row)
            inserted.append(dict(row))
        return inserted

    async def update(self, table: str, data: Row, filters: dict[str, Any]) -> list[Row]:
        self.journal.append(("update", table))
        self._maybe_fail("update", table)

        updated = []
        for row in self.rows(table):
            if self._matches(row, filters):
                row.update(data)
                updated.append(dict(row))
        return updated

    async def upsert(self, table: str, data: Row | list[Row], on_conflict: str) -> list[Row]:
        self.journal.append(("upsert", table))
        self._maybe_fail("upsert", table)

        keys = [key.strip() for key in on_conflict.split(",")]
        result = []
        for item in data if isinstance(data, list) else [data]:
            match = {key: item.get(key) for key in keys}
            existing = [row for row in self.rows(table) if self._matches(row, match)]
            if existing:
                existing[0].update(item)
                result.append(dict(existing[0]))
            else:
                result.extend(await self.insert(table, item))
        return result

    async def delete(
        self,
        table: str,
        *,
        filters: Optional[dict[str, Any]] = None,
        in_filters: Optional[dict[str, list[Any]]] = None,
    ) -> None:
        if not filters and not in_filters:
            raise ValueError("delete requires at least one filter")
        self.journal.append(("delete", table))
        self._maybe_fail("delete", table)

        self.tables[table] = [
            row for row in self.rows(table) if not self._matches(row, filters, in_filters)
        ]

    async def delete_all(self, table: str) -> None:
        self.journal.append(("delete_all", table))
        self._maybe_fail("delete_all", table)
        self.tables[table] = []

    async def close(self) -> None:
        self.closed = True


class FakeObjectStore:
    """
    インメモリのObjectStore

    Args:
        journal: 操作の記録先
        fail_writes: Trueの場合writeが失敗する
    """

    def __init__(
        self,
        journal: Optional[list[tuple[str, Any]]] = None,
        fail_writes: bool = False,
    ) -> None:
        self.objects: dict[str, bytes] = {}
        self.journal = journal if journal is not None else []
        self.fail_writes = fail_writes
        self.write_count = 0

    async def write(self, path: str, data: bytes) -> None:
        self.journal.append(("write", path))
        if self.fail_writes:
            raise OSError("storage unavailable")
        self.objects[path] = bytes(data)
        self.write_count += 1

    async def read(self, path: str) -> bytes:
        if path not in self.objects:
            raise FileNotFoundError(path)
        return self.objects[path]

    async def delete_many(self, paths: list[str]) -> None:
        self.journal.append(("delete_many", tuple(paths)))
        for path in paths:
            self.objects.pop(path, None)
