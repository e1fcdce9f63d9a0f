from ledger_staging.services.batch_index_service import BatchIndexService
from ledger_staging.services.staging_service import StagingService
from ledger_staging.services.export_service import ExportService
from ledger_staging.services.sync_service import SyncService
from ledger_staging.services.connector import AccountingConnector, HttpAccountingConnector, get_connector

__all__ = [
    "BatchIndexService",
    "StagingService",
    "ExportService",
    "SyncService",
    "AccountingConnector",
    "HttpAccountingConnector",
    "get_connector",
]
