from fastapi import APIRouter

from . import daily_backup

router = APIRouter()
router.include_router(daily_backup.router, prefix="/daily-backup", tags=["functions"])
