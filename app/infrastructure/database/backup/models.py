"""バックアップデータのモデル定義"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

Row = dict[str, Any]


class TableSnapshot(BaseModel):
    """
    1テーブル分のスナップショット

    Attributes:
        name: テーブル名
        rows: 行データ（カラム名→値）。取得したまま無加工で保持する
    """

    name: str = Field(description="テーブル名")
    rows: list[Row] = Field(default_factory=list, description="行データ")


@dataclass(frozen=True)
class TableFetchResult:
    """
    1テーブルの取得結果（ok(rows) | failed(error)）

    failedの場合、ペイロードには空リストとして格納される。
    """

    table: str
    rows: list[Row] = field(default_factory=list)
    error: Optional[str] = None

    @classmethod
    def ok(cls, table: str, rows: list[Row]) -> "TableFetchResult":
        return cls(table=table, rows=rows)

    @classmethod
    def failed(cls, table: str, error: str) -> "TableFetchResult":
        return cls(table=table, error=error)

    @property
    def is_ok(self) -> bool:
        return self.error is None

    def to_snapshot(self) -> TableSnapshot:
        return TableSnapshot(name=self.table, rows=self.rows if self.is_ok else [])


class BackupPayload(BaseModel):
    """
    自動バックアップのアーカイブ本体

    Attributes:
        version: フォーマットのバージョンタグ
        created_at: 作成日時（ISO8601）
        data: テーブル名→行リスト。対象テーブルは取得失敗時も必ずキーとして存在する
    """

    version: str = Field(default="4.0-auto", description="フォーマットバージョン")
    created_at: datetime = Field(description="作成日時")
    data: dict[str, list[Row]] = Field(description="テーブルデータ")

    @classmethod
    def from_snapshots(
        cls, snapshots: list[TableSnapshot], created_at: datetime, version: str
    ) -> "BackupPayload":
        return cls(
            version=version,
            created_at=created_at,
            data={snapshot.name: snapshot.rows for snapshot in snapshots},
        )

    def to_json_bytes(self) -> bytes:
        """コンパクトなJSON（UTF-8）にシリアライズする"""
        return self.model_dump_json().encode("utf-8")


class BackupLogEntry(BaseModel):
    """
    バックアップログ（backup_logsテーブルの1行）

    Attributes:
        id: ログID
        file_path: アーカイブのパス
        file_size: アーカイブのバイト数（失敗時は0）
        status: success | failed
        error_message: 失敗時のエラーメッセージ
        created_at: 作成日時
    """

    id: Optional[str] = None
    file_path: str
    file_size: int = 0
    status: Literal["success", "failed"]
    error_message: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_insert_row(self) -> Row:
        """INSERT用の行（id/created_atはデータストア側で採番）"""
        return self.model_dump(
            include={"file_path", "file_size", "status", "error_message"},
            exclude_none=True,
        )


class BackupResult(BaseModel):
    """
    バックアップ実行結果

    Attributes:
        success: 成功フラグ
        file: アーカイブのファイル名
        size: アーカイブのバイト数
    """

    success: bool = Field(default=True, description="成功フラグ")
    file: str = Field(description="アーカイブのファイル名")
    size: int = Field(description="アーカイブのバイト数")


class ManualBackup(BaseModel):
    """
    手動バックアップファイル（主要4テーブル）

    リストア時はversionとdataの存在のみを検証する。
    """

    version: str = Field(default="2.0", description="フォーマットバージョン")
    created_at: Optional[datetime] = Field(default=None, description="作成日時")
    data: dict[str, list[Row]] = Field(description="テーブルデータ")


class RestoreResult(BaseModel):
    """
    リストア結果

    Attributes:
        success: 成功フラグ
        message: メッセージ
        restored_rows: テーブル名→挿入行数
    """

    success: bool = Field(description="成功フラグ")
    message: str = Field(description="メッセージ")
    restored_rows: dict[str, int] = Field(
        default_factory=dict, description="テーブルごとの挿入行数"
    )
