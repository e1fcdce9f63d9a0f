import strawberry
from typing import List, Optional
from decimal import Decimal
from datetime import datetime

from ledger_staging.core.database import get_db
from ledger_staging.services.connector import get_connector
from ledger_staging.services.staging_service import StagingService
from ledger_staging.services.sync_service import SyncService


# GraphQL Types
@strawberry.type
class StagedTransaction:
    id: int
    batch_id: str
    transaction_date: Optional[str]
    transaction_type: Optional[str]
    description: str
    amount: Decimal
    bank_account: str
    assigned_ledger: str
    status: str
    created_at: datetime

    @classmethod
    def from_model(cls, row):
        return cls(
            id=row.id,
            batch_id=row.batch_id,
            transaction_date=row.transaction_date,
            transaction_type=row.transaction_type.value if row.transaction_type else None,
            description=row.description,
            amount=row.amount,
            bank_account=row.bank_account,
            assigned_ledger=row.assigned_ledger,
            status=row.status.value,
            created_at=row.created_at,
        )


@strawberry.type
class StagingBatch:
    id: str
    bank_account: str
    source_file: Optional[str]
    created_at: datetime

    @classmethod
    def from_model(cls, batch):
        return cls(
            id=batch.id,
            bank_account=batch.bank_account,
            source_file=batch.source_file,
            created_at=batch.created_at,
        )


@strawberry.type
class CurrentBatch:
    batch_id: str
    uploaded_file: Optional[str]


@strawberry.type
class SyncResult:
    batch_id: str
    transactions_sent: int
    status_committed: bool
    message: str


# Queries
@strawberry.type
class Query:
    @strawberry.field
    def staged_transactions(self, user_email: str, company: str, batch_id: str) -> List[StagedTransaction]:
        db = next(get_db())
        try:
            rows = StagingService.list_by_batch(db, user_email, company, batch_id)
            return [StagedTransaction.from_model(r) for r in rows]
        finally:
            db.close()

    @strawberry.field
    def tenant_batches(self, user_email: str, company: str) -> List[StagingBatch]:
        db = next(get_db())
        try:
            batches = StagingService.list_batch_history(db, user_email, company)
            return [StagingBatch.from_model(b) for b in batches]
        finally:
            db.close()

    @strawberry.field
    def current_batch(self, user_email: str, company: str) -> Optional[CurrentBatch]:
        db = next(get_db())
        try:
            current = StagingService.resolve_current_batch(db, user_email, company)
            if current is None:
                return None
            return CurrentBatch(batch_id=current.batch_id, uploaded_file=current.uploaded_file)
        finally:
            db.close()

    @strawberry.field
    def sent_count(self, user_email: str, company: str, batch_id: str) -> int:
        db = next(get_db())
        try:
            return SyncService.count_sent(db, user_email, company, batch_id)
        finally:
            db.close()


# Mutations
@strawberry.type
class Mutation:
    @strawberry.mutation
    def delete_staged_row(self, user_email: str, company: str, batch_id: str, transaction_id: int) -> bool:
        db = next(get_db())
        try:
            return StagingService.delete_one(db, user_email, company, batch_id, transaction_id)
        finally:
            db.close()

    @strawberry.mutation
    def sync_batch(
        self,
        user_email: str,
        company: str,
        batch_id: str,
        selected_transactions: Optional[List[int]] = None,
    ) -> SyncResult:
        db = next(get_db())
        try:
            result = SyncService.sync_batch(
                db,
                user_email,
                company,
                batch_id,
                get_connector(),
                selection=selected_transactions,
            )
            return SyncResult(
                batch_id=result.batch_id,
                transactions_sent=result.transactions_sent,
                status_committed=result.status_committed,
                message=result.message,
            )
        finally:
            db.close()


schema = strawberry.Schema(query=Query, mutation=Mutation)
