from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List

from ledger_staging.schemas.staged_transaction import StagedTransactionCreate


class StagingIngest(BaseModel):
    # Presence is checked by StagingService so missing fields come back as domain validation errors
    user_email: Optional[str] = Field(None, max_length=255)
    company: Optional[str] = Field(None, max_length=255)
    bank_account: Optional[str] = Field(None, max_length=255)
    file_name: Optional[str] = Field(None, max_length=255, description="Name of the uploaded statement file")
    rows: Optional[List[StagedTransactionCreate]] = None


class StagingReplace(BaseModel):
    user_email: str = Field(..., min_length=1, max_length=255)
    company: str = Field(..., min_length=1, max_length=255)
    rows: List[StagedTransactionCreate]


class IngestResponse(BaseModel):
    message: str
    batch_id: str
    rows_inserted: int
    reused_batch: bool = False


class ReplaceResponse(BaseModel):
    message: str
    batch_id: str
    rows_deleted: int
    rows_inserted: int


class StagingBatchResponse(BaseModel):
    id: str
    user_email: str
    company: str
    bank_account: str
    source_file: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True


class CurrentBatchResponse(BaseModel):
    batch_id: str
    uploaded_file: Optional[str] = None
