"""バックアップ管理CLI"""

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, TypeVar

import click

from app.core.config import get_settings
from app.core.logging import configure_cli_logging
from app.domain.exceptions.base import DomainError
from app.infrastructure.context import build_backup_context
from app.infrastructure.database.backup.core import BackupContext
from app.infrastructure.database.backup.manual import (
    dump_manual_backup,
    export_core_tables,
    manual_backup_file_name,
    parse_manual_backup,
    restore_core_tables,
)
from app.infrastructure.repositories.backup_log_repository import BackupLogRepository

T = TypeVar("T")


def run_with_context(func: Callable[[BackupContext], Awaitable[T]]) -> T:
    """
    バックアップコンテキストを構築してfuncを実行し、終了後にクライアントを閉じる。

    Args:
        func: コンテキストを受け取るコルーチン関数

    Returns:
        funcの戻り値
    """

    async def _run() -> T:
        context = build_backup_context(get_settings())
        try:
            return await func(context)
        finally:
            await context.store.close()

    return asyncio.run(_run())


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="デバッグログを出力")
def cli(verbose: bool) -> None:
    """バックアップ管理CLI"""
    configure_cli_logging(verbose)


@cli.command("oneshot")
def backup_oneshot() -> None:
    """バックアップを即座に実行する（auto_backup_enabled設定は無視する）"""
    from app.infrastructure.batch.tasks.backup import DailyBackupTask

    click.echo("Starting manual backup...")
    task = DailyBackupTask(respect_toggle=False)
    try:
        task.run()
    except Exception as e:
        click.echo(f"✗ Backup failed: {e}", err=True)
        raise click.Abort()

    if task.result is not None:
        click.echo(f"✓ Backup saved: {task.result.file} ({task.result.size} bytes)")


@cli.command("logs")
@click.option("--limit", "-n", default=10, show_default=True, help="表示件数")
def backup_logs(limit: int) -> None:
    """最近のバックアップログを新しい順に表示する"""
    entries = run_with_context(lambda ctx: BackupLogRepository(ctx.store).latest(limit))

    if not entries:
        click.echo("No backup logs found")
        return

    for entry in entries:
        created = entry.created_at.isoformat() if entry.created_at else "-"
        line = f"  {created}  {entry.status:<7}  {entry.file_path} ({entry.file_size / 1024:.2f} KB)"
        if entry.error_message:
            line += f"  error: {entry.error_message}"
        click.echo(line)


@cli.command("download")
@click.argument("file_path")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="保存先（省略時はカレントディレクトリに同名で保存）",
)
def backup_download(file_path: str, output: Optional[Path]) -> None:
    """
    ストレージからアーカイブをダウンロードする。

    FILE_PATH: アーカイブのパス（例: backup-2025-06-15.json）
    """
    try:
        data = run_with_context(lambda ctx: ctx.storage.read(file_path))
    except FileNotFoundError:
        click.echo(f"✗ Backup file not found: {file_path}", err=True)
        raise click.Abort()

    destination = output or Path(Path(file_path).name)
    destination.write_bytes(data)
    click.echo(f"✓ Downloaded to: {destination} ({len(data)} bytes)")


@cli.command("export")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="保存先（省略時は tnt-backup-YYYY-MM-DD-HHMM.json）",
)
def backup_export(output: Optional[Path]) -> None:
    """主要4テーブル（staff, attendance, advances, payroll）をファイルに書き出す"""
    now = datetime.now(timezone.utc)
    backup = run_with_context(lambda ctx: export_core_tables(ctx.store, now))

    destination = output or Path(manual_backup_file_name(now))
    destination.write_bytes(dump_manual_backup(backup))
    counts = ", ".join(f"{table}: {len(rows)}" for table, rows in backup.data.items())
    click.echo(f"✓ Exported to: {destination} ({counts})")


@cli.command("restore")
@click.argument(
    "backup_file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option("--yes", "-y", is_flag=True, help="確認をスキップ")
def backup_restore(backup_file: Path, yes: bool) -> None:
    """
    手動バックアップファイルから主要4テーブルを復元する。

    BACKUP_FILE: export で書き出したファイル
    """
    try:
        backup = parse_manual_backup(backup_file.read_bytes())
    except DomainError as e:
        click.echo(f"✗ {e.message}", err=True)
        raise click.Abort()

    if not yes:
        click.confirm(
            f"⚠️  staff, attendance, advances and payroll will be replaced with "
            f"'{backup_file.name}'. All current rows will be lost. Continue?",
            abort=True,
        )

    try:
        result = run_with_context(lambda ctx: restore_core_tables(ctx.store, backup))
    except DomainError as e:
        click.echo(f"✗ Restore failed: {e.message}", err=True)
        raise click.Abort()

    for table, count in result.restored_rows.items():
        click.echo(f"  - {table}: {count} rows")
    click.echo(f"✓ {result.message}")


if __name__ == "__main__":
    cli()
