from ledger_staging.schemas.staged_transaction import StagedTransactionCreate, StagedTransactionResponse
from ledger_staging.schemas.staging import (
    StagingIngest,
    StagingReplace,
    IngestResponse,
    ReplaceResponse,
    StagingBatchResponse,
    CurrentBatchResponse,
)
from ledger_staging.schemas.export import (
    ExportRow,
    IneligibleExportRow,
    SyncRequest,
    SyncResponse,
    SentCountResponse,
)

__all__ = [
    "StagedTransactionCreate",
    "StagedTransactionResponse",
    "StagingIngest",
    "StagingReplace",
    "IngestResponse",
    "ReplaceResponse",
    "StagingBatchResponse",
    "CurrentBatchResponse",
    "ExportRow",
    "IneligibleExportRow",
    "SyncRequest",
    "SyncResponse",
    "SentCountResponse",
]
