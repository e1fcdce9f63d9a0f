from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ledger_staging.api.rest.errors import http_error
from ledger_staging.core.database import get_db
from ledger_staging.core.exceptions import StagingError
from ledger_staging.schemas.export import SyncRequest, SyncResponse, SentCountResponse
from ledger_staging.services.connector import AccountingConnector, get_connector
from ledger_staging.services.sync_service import SyncService

router = APIRouter(prefix="/staging/batches/{batch_id}", tags=["sync"])


@router.post("/sync", response_model=SyncResponse)
def sync_batch(
    batch_id: str,
    sync_data: SyncRequest,
    db: Session = Depends(get_db),
    connector: AccountingConnector = Depends(get_connector),
):
    """Export rows with assigned ledgers to the accounting system"""
    try:
        return SyncService.sync_batch(
            db,
            sync_data.user_email,
            sync_data.company,
            batch_id,
            connector,
            selection=sync_data.selected_transactions,
        )
    except StagingError as e:
        raise http_error(e)


@router.get("/sent-count", response_model=SentCountResponse)
def count_sent_rows(
    batch_id: str,
    user_email: str = Query(..., min_length=1),
    company: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
):
    """Number of rows already sent to the accounting system"""
    try:
        count = SyncService.count_sent(db, user_email, company, batch_id)
    except StagingError as e:
        raise http_error(e)
    return SentCountResponse(batch_id=batch_id, count=count)
