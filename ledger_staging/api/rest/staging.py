from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List

from ledger_staging.api.rest.errors import http_error
from ledger_staging.core.database import get_db
from ledger_staging.core.exceptions import StagingError
from ledger_staging.schemas.staged_transaction import StagedTransactionResponse
from ledger_staging.schemas.staging import (
    StagingIngest,
    StagingReplace,
    IngestResponse,
    ReplaceResponse,
    StagingBatchResponse,
)
from ledger_staging.services.staging_service import StagingService

router = APIRouter(prefix="/staging/batches", tags=["staging"])


@router.post("", response_model=IngestResponse, status_code=201)
def ingest_batch(ingest_data: StagingIngest, db: Session = Depends(get_db)):
    """Stage uploaded statement rows for a tenant"""
    try:
        return StagingService.ingest(
            db,
            ingest_data.user_email,
            ingest_data.company,
            ingest_data.bank_account,
            ingest_data.file_name,
            ingest_data.rows,
        )
    except StagingError as e:
        raise http_error(e)


@router.get("", response_model=List[StagingBatchResponse])
def list_tenant_batches(
    user_email: str = Query(..., min_length=1),
    company: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
):
    """List every batch the tenant has uploaded, newest first"""
    try:
        return StagingService.list_batch_history(db, user_email, company)
    except StagingError as e:
        raise http_error(e)


@router.get("/current")
def resolve_current_batch(
    user_email: str = Query(..., min_length=1),
    company: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
):
    """Current batch for the tenant; empty object when it has none"""
    try:
        current = StagingService.resolve_current_batch(db, user_email, company)
    except StagingError as e:
        raise http_error(e)
    return current.model_dump() if current else {}


@router.get("/{batch_id}/transactions", response_model=List[StagedTransactionResponse])
def list_staged_rows(
    batch_id: str,
    user_email: str = Query(..., min_length=1),
    company: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
):
    """List staged rows of a batch in upload order"""
    try:
        return StagingService.list_by_batch(db, user_email, company, batch_id)
    except StagingError as e:
        raise http_error(e)


@router.put("/{batch_id}/transactions", response_model=ReplaceResponse)
def replace_batch(
    batch_id: str,
    replace_data: StagingReplace,
    db: Session = Depends(get_db),
):
    """Replace all rows of a batch with the edited set"""
    try:
        return StagingService.replace_all(
            db, replace_data.user_email, replace_data.company, batch_id, replace_data.rows
        )
    except StagingError as e:
        raise http_error(e)


@router.delete("/{batch_id}/transactions/{transaction_id}", status_code=204)
def delete_staged_row(
    batch_id: str,
    transaction_id: int,
    user_email: str = Query(..., min_length=1),
    company: str = Query(..., min_length=1),
    db: Session = Depends(get_db),
):
    """Delete a staged row; deleting a missing row is not an error"""
    try:
        StagingService.delete_one(db, user_email, company, batch_id, transaction_id)
    except StagingError as e:
        raise http_error(e)
    return None
