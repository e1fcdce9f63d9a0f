from fastapi import APIRouter
from ledger_staging.api.rest import staging, sync

api_router = APIRouter()
api_router.include_router(staging.router)
api_router.include_router(sync.router)
