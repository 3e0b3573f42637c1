"""
給与リポジトリ

スタッフ・出勤・前払い・支払記録を取得し、月次の給与一覧を組み立てる
- 通常スタッフ（staff / attendance / advances）
- MLTスタッフ（mlt_staff / mlt_attendance / mlt_advances）
- 支払済み記録（payroll / salary_records）
"""

import asyncio
import calendar
from datetime import date, datetime, timezone
from typing import Any, Optional

from app.core.logging import get_logger
from app.domain.exceptions.base import NotFoundError, ValidationError
from app.domain.payroll.salary import (
    SHIFT_STATUSES,
    SalaryLine,
    SalarySheet,
    StaffMember,
    StaffType,
    calculate_salary,
    previous_month,
)

from ..database.client import DataStore

logger = get_logger(__name__)

SALARY_RECORDS_TABLE = "salary_records"
SALARY_RECORD_CONFLICT = "staff_id,staff_type,month,year"

# スタッフ種別ごとのテーブル
STAFF_TABLES: dict[str, dict[str, str]] = {
    "staff": {
        "staff": "staff",
        "attendance": "attendance",
        "advances": "advances",
    },
    "mlt": {
        "staff": "mlt_staff",
        "attendance": "mlt_attendance",
        "advances": "mlt_advances",
    },
}


def month_range(year: int, month: int) -> tuple[str, str]:
    """月初日と月末日（ISO形式）"""
    if not 1 <= month <= 12:
        raise ValidationError("month must be between 1 and 12", details={"month": month})
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1).isoformat(), date(year, month, last_day).isoformat()


def _group_by_staff(rows: list[dict[str, Any]]) -> dict[str, list[dict[str, Any]]]:
    grouped: dict[str, list[dict[str, Any]]] = {}
    for row in rows:
        grouped.setdefault(str(row.get("staff_id")), []).append(row)
    return grouped


class PayrollRepository:
    """
    給与リポジトリ
    """

    def __init__(self, store: DataStore) -> None:
        """
        Args:
            store: データストアクライアント
        """
        self.store = store

    async def active_staff(self, category: Optional[str] = None) -> list[StaffMember]:
        """
        在籍中のスタッフを取得する

        カテゴリ指定がない場合のみMLTスタッフも含める。

        Args:
            category: スタッフ区分

        Returns:
            スタッフのリスト（通常スタッフ、MLTスタッフの順）
        """
        filters: dict[str, Any] = {"is_active": True}
        if category:
            filters["category"] = category

        rows = await self.store.select(
            "staff", "id, name, category, shift_rate", filters=filters
        )
        members = [StaffMember.from_row(row, "staff") for row in rows]

        if not category:
            mlt_rows = await self.store.select(
                "mlt_staff", "id, name, category, shift_rate", filters={"is_active": True}
            )
            members.extend(StaffMember.from_row(row, "mlt") for row in mlt_rows)

        return members

    async def _month_rows(
        self, staff_type: StaffType, year: int, month: int
    ) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
        tables = STAFF_TABLES[staff_type]
        start, end = month_range(year, month)
        attendance, advances = await asyncio.gather(
            self.store.select(
                tables["attendance"],
                "staff_id, shift_count, status",
                in_filters={"status": list(SHIFT_STATUSES)},
                gte={"date": start},
                lte={"date": end},
            ),
            self.store.select(
                tables["advances"],
                "staff_id, amount",
                gte={"date": start},
                lte={"date": end},
            ),
        )
        return attendance, advances

    async def _salary_records(self, year: int, month: int) -> dict[tuple[str, str], dict[str, Any]]:
        rows = await self.store.select(
            SALARY_RECORDS_TABLE,
            "staff_id, staff_type, is_paid, pending_amount",
            filters={"month": month, "year": year},
        )
        return {(str(r["staff_id"]), r.get("staff_type") or "staff"): r for r in rows}

    async def _paid_staff_ids(self, year: int, month: int) -> set[str]:
        rows = await self.store.select(
            "payroll", "staff_id, is_paid", filters={"month": month, "year": year}
        )
        return {str(r["staff_id"]) for r in rows if r.get("is_paid")}

    async def salary_sheet(
        self, year: int, month: int, category: Optional[str] = None
    ) -> SalarySheet:
        """
        月次の給与一覧を作成する

        Args:
            year: 年
            month: 月（1-12）
            category: スタッフ区分（指定時は通常スタッフのみ）

        Returns:
            SalarySheet: 給与一覧
        """
        month_range(year, month)
        prev_year, prev_month = previous_month(year, month)

        staff = await self.active_staff(category)
        (
            (attendance, advances),
            (mlt_attendance, mlt_advances),
            current_records,
            previous_records,
            paid_ids,
        ) = await asyncio.gather(
            self._month_rows("staff", year, month),
            self._month_rows("mlt", year, month),
            self._salary_records(year, month),
            self._salary_records(prev_year, prev_month),
            self._paid_staff_ids(year, month),
        )

        by_type = {
            "staff": (_group_by_staff(attendance), _group_by_staff(advances)),
            "mlt": (_group_by_staff(mlt_attendance), _group_by_staff(mlt_advances)),
        }

        lines: list[SalaryLine] = []
        for member in staff:
            attendance_by_staff, advances_by_staff = by_type[member.type]
            key = (member.id, member.type)
            current = current_records.get(key) or {}
            is_paid = (member.type == "staff" and member.id in paid_ids) or bool(
                current.get("is_paid")
            )
            lines.append(
                calculate_salary(
                    member,
                    attendance_by_staff.get(member.id, []),
                    advances_by_staff.get(member.id, []),
                    previous_record=previous_records.get(key),
                    is_paid=is_paid,
                )
            )

        logger.info(f"Calculated salary for {len(lines)} staff ({year}-{month:02d})")
        return SalarySheet(year=year, month=month, lines=lines)

    async def mark_as_paid(
        self,
        staff_id: str,
        staff_type: StaffType,
        year: int,
        month: int,
        paid_on: Optional[date] = None,
    ) -> SalaryLine:
        """
        スタッフの当月給与を支払済みにする

        計算結果をsalary_recordsへupsertする（staff_id, staff_type, month, yearで一意）。

        Raises:
            NotFoundError: 在籍中のスタッフに該当しない場合
        """
        sheet = await self.salary_sheet(year, month)
        line = next(
            (
                item
                for item in sheet.lines
                if item.staff.id == staff_id and item.staff.type == staff_type
            ),
            None,
        )
        if line is None:
            raise NotFoundError(
                "Staff not found", details={"staff_id": staff_id, "staff_type": staff_type}
            )

        paid_on = paid_on or datetime.now(timezone.utc).date()
        await self.store.upsert(
            SALARY_RECORDS_TABLE,
            {
                "staff_id": staff_id,
                "staff_type": staff_type,
                "month": month,
                "year": year,
                "total_shifts": float(line.total_shifts),
                "shift_rate": float(line.staff.shift_rate),
                "gross_salary": float(line.gross_salary),
                "total_advances": float(line.total_advances),
                "pending_amount": float(line.pending_amount),
                "total_paid": float(line.pending_amount),
                "is_paid": True,
                "paid_date": paid_on.isoformat(),
            },
            on_conflict=SALARY_RECORD_CONFLICT,
        )
        logger.info(f"Marked salary as paid: {staff_type}/{staff_id} {year}-{month:02d}")

        return SalaryLine(
            staff=line.staff,
            total_shifts=line.total_shifts,
            gross_salary=line.gross_salary,
            total_advances=line.total_advances,
            carry_forward=line.carry_forward,
            pending_amount=line.pending_amount,
            is_paid=True,
        )
