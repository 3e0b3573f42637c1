from fastapi import APIRouter

from app.presentation.api import functions, system, v1

# 外部スケジューラーから呼ばれるトリガー（/api配下ではなく/functions/v1に置く）
FUNCTIONS_PREFIX = "/functions/v1"

api_router = APIRouter()
api_router.include_router(v1.router, prefix="/v1")
api_router.include_router(system.router, prefix="/system")

functions_router = APIRouter()
functions_router.include_router(functions.router, prefix=FUNCTIONS_PREFIX)
