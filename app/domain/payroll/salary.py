"""
給与計算

シフト数 × シフト単価 − 前払い + 前月繰越 を計算する純粋なロジック。
データ取得はインフラ層（PayrollRepository）が行う。
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable, Literal, Optional
from urllib.parse import quote

StaffType = Literal["staff", "mlt"]

# シフトとして数える出勤ステータス
SHIFT_STATUSES: tuple[str, ...] = ("present", "half_day")

MONTH_NAMES: tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def to_decimal(value: Any) -> Decimal:
    """数値カラム（None/文字列/float）をDecimalに変換する"""
    if value is None or value == "":
        return Decimal(0)
    return Decimal(str(value))


@dataclass(frozen=True)
class StaffMember:
    """
    給与計算対象のスタッフ

    Attributes:
        id: スタッフID
        name: 氏名
        category: 区分（petroleum / crusher / office 等）
        shift_rate: 1シフトあたりの単価
        type: staff（通常）または mlt
    """

    id: str
    name: str
    category: str
    shift_rate: Decimal
    type: StaffType = "staff"

    @classmethod
    def from_row(cls, row: dict[str, Any], staff_type: StaffType) -> "StaffMember":
        return cls(
            id=str(row["id"]),
            name=row.get("name") or "",
            category=row.get("category") or "",
            shift_rate=to_decimal(row.get("shift_rate")),
            type=staff_type,
        )


@dataclass(frozen=True)
class SalaryLine:
    """1スタッフ・1か月分の給与"""

    staff: StaffMember
    total_shifts: Decimal
    gross_salary: Decimal
    total_advances: Decimal
    carry_forward: Decimal
    pending_amount: Decimal
    is_paid: bool = False


@dataclass(frozen=True)
class SalaryTotals:
    shifts: Decimal = Decimal(0)
    gross: Decimal = Decimal(0)
    advances: Decimal = Decimal(0)
    pending: Decimal = Decimal(0)


@dataclass
class SalarySheet:
    """
    月次の給与一覧

    Attributes:
        year: 年
        month: 月（1-12）
        lines: スタッフごとの給与
    """

    year: int
    month: int
    lines: list[SalaryLine] = field(default_factory=list)

    @property
    def month_name(self) -> str:
        return MONTH_NAMES[self.month - 1]

    @property
    def totals(self) -> SalaryTotals:
        return SalaryTotals(
            shifts=sum((line.total_shifts for line in self.lines), Decimal(0)),
            gross=sum((line.gross_salary for line in self.lines), Decimal(0)),
            advances=sum((line.total_advances for line in self.lines), Decimal(0)),
            pending=sum((line.pending_amount for line in self.lines), Decimal(0)),
        )

    def search(self, query: str) -> "SalarySheet":
        """氏名の部分一致（大文字小文字を区別しない）で絞り込む"""
        needle = query.strip().lower()
        if not needle:
            return self
        return SalarySheet(
            year=self.year,
            month=self.month,
            lines=[line for line in self.lines if needle in line.staff.name.lower()],
        )


def count_shifts(attendance_rows: Iterable[dict[str, Any]]) -> Decimal:
    """
    出勤記録からシフト数を合計する

    present / half_day の記録のみを数え、shift_countが未設定（None/0）の記録は1シフトとする。
    """
    total = Decimal(0)
    for row in attendance_rows:
        if row.get("status", "present") not in SHIFT_STATUSES:
            continue
        total += to_decimal(row.get("shift_count")) or Decimal(1)
    return total


def sum_amounts(rows: Iterable[dict[str, Any]], column: str = "amount") -> Decimal:
    return sum((to_decimal(row.get(column)) for row in rows), Decimal(0))


def calculate_salary(
    staff: StaffMember,
    attendance_rows: Iterable[dict[str, Any]],
    advance_rows: Iterable[dict[str, Any]],
    previous_record: Optional[dict[str, Any]] = None,
    is_paid: bool = False,
) -> SalaryLine:
    """
    1スタッフの月次給与を計算する

    Args:
        staff: スタッフ
        attendance_rows: 当月の出勤記録
        advance_rows: 当月の前払い記録
        previous_record: 前月のsalary_records行（未払いの場合のみ繰越に使う）
        is_paid: 当月が支払済みか

    Returns:
        SalaryLine: 計算結果
    """
    total_shifts = count_shifts(attendance_rows)
    gross = total_shifts * staff.shift_rate
    advances = sum_amounts(advance_rows)

    carry_forward = Decimal(0)
    if previous_record and not previous_record.get("is_paid"):
        carry_forward = to_decimal(previous_record.get("pending_amount"))

    return SalaryLine(
        staff=staff,
        total_shifts=total_shifts,
        gross_salary=gross,
        total_advances=advances,
        carry_forward=carry_forward,
        pending_amount=gross - advances + carry_forward,
        is_paid=is_paid,
    )


def previous_month(year: int, month: int) -> tuple[int, int]:
    if month == 1:
        return year - 1, 12
    return year, month - 1


def format_inr(amount: Decimal) -> str:
    """インド式の桁区切り（例: 1234567 -> 12,34,567）"""
    quantized = amount.quantize(Decimal("0.01"))
    sign = "-" if quantized < 0 else ""
    whole, _, fraction = f"{abs(quantized):.2f}".partition(".")

    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ",".join(groups + [tail])

    if fraction == "00":
        return f"{sign}{whole}"
    return f"{sign}{whole}.{fraction}"


def whatsapp_message(sheet: SalarySheet) -> str:
    """給与一覧の共有用メッセージを作成する"""
    lines = [f"📊 *Salary Report - {sheet.month_name} {sheet.year}*", ""]
    for line in sheet.lines:
        lines.append(f"👤 {line.staff.name} ({line.staff.category})")
        lines.append(
            f"   Shifts: {line.total_shifts.normalize():f} | "
            f"Gross: ₹{format_inr(line.gross_salary)}"
        )
        lines.append(
            f"   Advances: ₹{format_inr(line.total_advances)} | "
            f"Pending: ₹{format_inr(line.pending_amount)}"
        )
        lines.append("")

    totals = sheet.totals
    lines.append("")
    lines.append("💰 *Summary*")
    lines.append(f"Total Gross: ₹{format_inr(totals.gross)}")
    lines.append(f"Total Advances: ₹{format_inr(totals.advances)}")
    lines.append(f"Total Pending: ₹{format_inr(totals.pending)}")
    return "\n".join(lines)


def whatsapp_share_url(message: str) -> str:
    return f"https://wa.me/?text={quote(message, safe='')}"
