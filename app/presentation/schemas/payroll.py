"""給与関連のスキーマ定義"""

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, Field

from app.domain.payroll.salary import SalaryLine, SalarySheet


class StaffSchema(BaseModel):
    id: str
    name: str
    category: str
    shift_rate: float
    type: Literal["staff", "mlt"]


class SalaryLineSchema(BaseModel):
    """
    1スタッフ分の給与

    Attributes:
        staff: スタッフ
        total_shifts: シフト数
        gross_salary: 総支給額（シフト数 × 単価）
        total_advances: 前払い合計
        carry_forward: 前月からの繰越
        pending_amount: 未払い額
        is_paid: 支払済みか
    """

    staff: StaffSchema
    total_shifts: float
    gross_salary: float
    total_advances: float
    carry_forward: float
    pending_amount: float
    is_paid: bool

    @classmethod
    def from_line(cls, line: SalaryLine) -> "SalaryLineSchema":
        return cls(
            staff=StaffSchema(
                id=line.staff.id,
                name=line.staff.name,
                category=line.staff.category,
                shift_rate=float(line.staff.shift_rate),
                type=line.staff.type,
            ),
            total_shifts=float(line.total_shifts),
            gross_salary=float(line.gross_salary),
            total_advances=float(line.total_advances),
            carry_forward=float(line.carry_forward),
            pending_amount=float(line.pending_amount),
            is_paid=line.is_paid,
        )


class SalaryTotalsSchema(BaseModel):
    shifts: float
    gross: float
    advances: float
    pending: float


class SalarySheetResponse(BaseModel):
    """月次の給与一覧"""

    year: int
    month: int
    month_name: str
    lines: list[SalaryLineSchema]
    totals: SalaryTotalsSchema

    @classmethod
    def from_sheet(cls, sheet: SalarySheet) -> "SalarySheetResponse":
        totals = sheet.totals
        return cls(
            year=sheet.year,
            month=sheet.month,
            month_name=sheet.month_name,
            lines=[SalaryLineSchema.from_line(line) for line in sheet.lines],
            totals=SalaryTotalsSchema(
                shifts=float(totals.shifts),
                gross=float(totals.gross),
                advances=float(totals.advances),
                pending=float(totals.pending),
            ),
        )


class SalaryShareResponse(BaseModel):
    """WhatsApp共有用のメッセージとリンク"""

    message: str
    url: str


class MarkPaidRequest(BaseModel):
    """支払済み登録リクエスト"""

    staff_id: str
    staff_type: Literal["staff", "mlt"] = "staff"
    year: int = Field(ge=2000, le=2100)
    month: int = Field(ge=1, le=12)
    paid_date: Optional[date] = None
