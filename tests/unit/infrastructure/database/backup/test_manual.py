"""
手動バックアップ/リストア（manual.py）の単体テスト
"""

import asyncio
import json
from datetime import datetime, timezone
from typing import Any

import pytest

from app.domain.exceptions.base import RestoreError, ValidationError
from app.infrastructure.database.backup.manual import (
    CORE_TABLES,
    dump_manual_backup,
    export_core_tables,
    manual_backup_file_name,
    parse_manual_backup,
    restore_core_tables,
)
from app.infrastructure.database.backup.models import ManualBackup
from tests.helpers import FakeDataStore

NOW = datetime(2025, 6, 15, 9, 5, tzinfo=timezone.utc)


def current_tables() -> dict[str, list[dict[str, Any]]]:
    return {
        "staff": [{"id": "s-old", "name": "Old"}],
        "attendance": [{"id": "a-old", "staff_id": "s-old"}],
        "advances": [{"id": "v-old", "staff_id": "s-old", "amount": 100}],
        "payroll": [{"id": "p-old", "staff_id": "s-old"}],
        "mlt_staff": [{"id": "m1"}],
    }


def backup_data() -> dict[str, list[dict[str, Any]]]:
    return {
        "staff": [{"id": "s1", "name": "Ravi"}, {"id": "s2", "name": "Anil"}],
        "attendance": [{"id": "a1", "staff_id": "s1"}],
        "advances": [],
        "payroll": [{"id": "p1", "staff_id": "s1"}],
    }


class TestExport:
    """export_core_tables()のテスト"""

    def test_exports_four_tables(self) -> None:
        """主要4テーブルのみを書き出すこと"""
        store = FakeDataStore(current_tables())

        backup = asyncio.run(export_core_tables(store, NOW))

        assert backup.version == "2.0"
        assert backup.created_at == NOW
        assert list(backup.data) == list(CORE_TABLES)
        assert backup.data["staff"] == [{"id": "s-old", "name": "Old"}]

    def test_file_name(self) -> None:
        assert manual_backup_file_name(NOW) == "tnt-backup-2025-06-15-0905.json"

    def test_dump_is_parseable(self) -> None:
        """書き出したファイルをそのまま読み込めること"""
        backup = ManualBackup(created_at=NOW, data=backup_data())

        parsed = parse_manual_backup(dump_manual_backup(backup))

        assert parsed.version == "2.0"
        assert parsed.data == backup_data()


class TestParse:
    """parse_manual_backup()のテスト"""

    @pytest.mark.parametrize(
        "raw",
        [
            b"not json",
            b"[]",
            json.dumps({"data": {}}).encode(),
            json.dumps({"version": "2.0"}).encode(),
            json.dumps({"version": "2.0", "data": []}).encode(),
            json.dumps({"version": "", "data": {}}).encode(),
        ],
    )
    def test_invalid_file(self, raw: bytes) -> None:
        """versionまたはdataがないファイルは拒否すること"""
        with pytest.raises(ValidationError) as exc_info:
            parse_manual_backup(raw)

        assert exc_info.value.message == "Invalid backup file"

    def test_ignores_non_list_tables(self) -> None:
        """行リストでない値は無視すること"""
        raw = json.dumps(
            {"version": "2.0", "data": {"staff": [{"id": "s1"}], "note": "x"}}
        )

        backup = parse_manual_backup(raw)

        assert backup.data == {"staff": [{"id": "s1"}]}


class TestRestore:
    """restore_core_tables()のテスト"""

    def test_replaces_core_tables(self) -> None:
        """4テーブルを置き換え、他のテーブルには触れないこと"""
        store = FakeDataStore(current_tables())

        result = asyncio.run(
            restore_core_tables(store, ManualBackup(version="2.0", data=backup_data()))
        )

        assert result.success is True
        assert result.restored_rows == {
            "staff": 2,
            "attendance": 1,
            "advances": 0,
            "payroll": 1,
        }
        assert [r["id"] for r in store.rows("staff")] == ["s1", "s2"]
        assert store.rows("advances") == []
        assert store.rows("mlt_staff") == [{"id": "m1"}]

    def test_delete_and_insert_order(self) -> None:
        """削除は子テーブルから、挿入は親テーブルから行うこと"""
        store = FakeDataStore(current_tables())

        asyncio.run(
            restore_core_tables(store, ManualBackup(version="2.0", data=backup_data()))
        )

        writes = [entry for entry in store.journal if entry[0] in ("delete_all", "insert")]
        assert writes == [
            ("delete_all", "payroll"),
            ("delete_all", "advances"),
            ("delete_all", "attendance"),
            ("delete_all", "staff"),
            ("insert", "staff"),
            ("insert", "attendance"),
            ("insert", "payroll"),
        ]

    def test_failure_rolls_back(self) -> None:
        """挿入に失敗した場合は元の行に書き戻してRestoreErrorを送出すること"""
        store = FakeDataStore(current_tables())
        store.fail("insert", "attendance", RuntimeError("fk violation"), times=1)

        with pytest.raises(RestoreError) as exc_info:
            asyncio.run(
                restore_core_tables(
                    store, ManualBackup(version="2.0", data=backup_data())
                )
            )

        assert exc_info.value.message == "Failed to restore data"
        for table in CORE_TABLES:
            restored_ids = [r["id"] for r in store.rows(table)]
            assert restored_ids == [r["id"] for r in current_tables()[table]]

    def test_aborts_when_snapshot_fails(self) -> None:
        """現在の行を退避できない場合は何も削除しないこと"""
        store = FakeDataStore(current_tables())
        store.fail("select", "payroll")

        with pytest.raises(RestoreError):
            asyncio.run(
                restore_core_tables(
                    store, ManualBackup(version="2.0", data=backup_data())
                )
            )

        assert not any(op == "delete_all" for op, _ in store.journal)
        assert store.rows("staff") == current_tables()["staff"]
