from ledger_staging.models.staging_batch import StagingBatch
from ledger_staging.models.staged_transaction import StagedTransaction, TransactionType, TransactionStatus
from ledger_staging.models.tenant_batch_pointer import TenantBatchPointer

__all__ = ["StagingBatch", "StagedTransaction", "TransactionType", "TransactionStatus", "TenantBatchPointer"]
