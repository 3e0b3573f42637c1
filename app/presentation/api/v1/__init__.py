from fastapi import APIRouter, Depends

from app.presentation.api.deps import get_api_key
from app.presentation.api.v1 import backups, payroll

router = APIRouter(dependencies=[Depends(get_api_key)])
router.include_router(backups.router, prefix="/backups", tags=["backups"])
router.include_router(payroll.router, prefix="/payroll", tags=["payroll"])
