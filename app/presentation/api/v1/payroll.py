"""給与API"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.domain.payroll.salary import whatsapp_message, whatsapp_share_url
from app.infrastructure.database.client import DataStore
from app.infrastructure.repositories.payroll_repository import PayrollRepository
from app.presentation.api.deps import get_datastore
from app.presentation.schemas.payroll import (
    MarkPaidRequest,
    SalaryLineSchema,
    SalarySheetResponse,
    SalaryShareResponse,
)

router = APIRouter()


@router.get("/salary", response_model=SalarySheetResponse)
async def get_salary_sheet(
    year: int = Query(..., ge=2000, le=2100),
    month: int = Query(..., ge=1, le=12),
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    store: DataStore = Depends(get_datastore),
) -> SalarySheetResponse:
    """
    月次の給与一覧

    - category指定時は通常スタッフのみ（MLTスタッフは含まない）
    - searchは氏名の部分一致
    """
    sheet = await PayrollRepository(store).salary_sheet(year, month, category)
    if search:
        sheet = sheet.search(search)
    return SalarySheetResponse.from_sheet(sheet)


@router.get("/salary/share", response_model=SalaryShareResponse)
async def share_salary_sheet(
    year: int = Query(..., ge=2000, le=2100),
    month: int = Query(..., ge=1, le=12),
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    store: DataStore = Depends(get_datastore),
) -> SalaryShareResponse:
    """給与一覧のWhatsApp共有メッセージとリンク"""
    sheet = await PayrollRepository(store).salary_sheet(year, month, category)
    if search:
        sheet = sheet.search(search)
    message = whatsapp_message(sheet)
    return SalaryShareResponse(message=message, url=whatsapp_share_url(message))


@router.post("/salary/paid", response_model=SalaryLineSchema)
async def mark_salary_paid(
    body: MarkPaidRequest,
    store: DataStore = Depends(get_datastore),
) -> SalaryLineSchema:
    """スタッフの当月給与を支払済みとして記録する"""
    line = await PayrollRepository(store).mark_as_paid(
        body.staff_id, body.staff_type, body.year, body.month, body.paid_date
    )
    return SalaryLineSchema.from_line(line)
