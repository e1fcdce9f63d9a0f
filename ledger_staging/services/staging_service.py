from contextlib import ExitStack
from sqlalchemy.orm import Session
from sqlalchemy import and_
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from typing import List, Optional

from ledger_staging.core.config import settings
from ledger_staging.core.exceptions import ValidationError, StorageError
from ledger_staging.core.locks import batch_locks, tenant_lock_key
from ledger_staging.core.logging import get_logger
from ledger_staging.models.staged_transaction import StagedTransaction, TransactionStatus
from ledger_staging.models.staging_batch import StagingBatch
from ledger_staging.schemas.staged_transaction import StagedTransactionCreate
from ledger_staging.schemas.staging import IngestResponse, ReplaceResponse, CurrentBatchResponse
from ledger_staging.services.batch_index_service import BatchIndexService

logger = get_logger(__name__)


def convert_date(value: Optional[str]) -> Optional[str]:
    """Normalize 'dd/mm/yyyy' to ISO 'yyyy-mm-dd'.

    Anything that is not three numeric '/'-separated parts is returned
    unchanged, so callers must tolerate non-ISO dates in storage.
    """
    if not value:
        return None
    parts = value.split("/")
    if len(parts) != 3:
        return value
    day, month, year = (p.strip() for p in parts)
    if not (day.isdigit() and month.isdigit() and year.isdigit()):
        return value
    return f"{year}-{month.zfill(2)}-{day.zfill(2)}"


def _require(**fields) -> None:
    missing = [name for name, value in fields.items() if value is None or (isinstance(value, str) and not value.strip())]
    if missing:
        raise ValidationError(f"Missing {', '.join(missing)}", detail={"missing": missing})


class StagingService:
    @staticmethod
    def _build_row(batch_id: str, row: StagedTransactionCreate, bank_account: str) -> StagedTransaction:
        return StagedTransaction(
            batch_id=batch_id,
            transaction_date=convert_date(row.transaction_date),
            transaction_type=row.transaction_type,
            description=row.description,
            amount=row.amount,
            bank_account=(row.bank_account or bank_account or "").strip(),
            assigned_ledger=row.assigned_ledger,
            status=TransactionStatus.PENDING,
        )

    @staticmethod
    def ingest(
        db: Session,
        user_email: Optional[str],
        company: Optional[str],
        bank_account: Optional[str],
        file_name: Optional[str],
        rows: Optional[List[StagedTransactionCreate]],
        mode: Optional[str] = None,
    ) -> IngestResponse:
        """Stage uploaded rows as pending and point the tenant at their batch.

        Rows, batch and pointer are written in one transaction. A pointer
        insert that loses a race with a concurrent upload is retried once.
        """
        _require(user_email=user_email, company=company, bank_account=bank_account)
        if not rows:
            raise ValidationError("Missing rows", detail={"missing": ["rows"]})

        user_email = user_email.strip()
        company = company.strip()
        bank_account = bank_account.strip()
        mode = mode or settings.ingestion_mode

        # Only ingest moves the tenant pointer, and always under the tenant lock,
        # so the current batch resolved here stays current until we commit.
        with batch_locks.hold(tenant_lock_key(user_email, company)), ExitStack() as held:
            if mode == "append":
                current = BatchIndexService.resolve_current(db, user_email, company)
                if current:
                    held.enter_context(batch_locks.hold(current.batch_id))
            for attempt in (1, 2):
                try:
                    batch, reused = BatchIndexService.open_batch_for_upload(
                        db, user_email, company, bank_account, file_name, mode
                    )
                    db.flush()
                    for row in rows:
                        db.add(StagingService._build_row(batch.id, row, bank_account))
                    db.commit()
                    break
                except IntegrityError as e:
                    db.rollback()
                    if attempt == 2:
                        raise StorageError("Failed to store staged transactions", detail=str(e.orig)) from e
                    logger.info("Tenant pointer upsert raced, retrying", extra={"user_email": user_email})
                except SQLAlchemyError as e:
                    db.rollback()
                    raise StorageError("Failed to store staged transactions", detail=str(e)) from e

        logger.info(
            "Staged uploaded transactions",
            extra={"batch_id": batch.id, "rows_inserted": len(rows), "reused_batch": reused, "ingestion_mode": mode},
        )
        return IngestResponse(
            message="Uploaded data staged under batch",
            batch_id=batch.id,
            rows_inserted=len(rows),
            reused_batch=reused,
        )

    @staticmethod
    def replace_all(
        db: Session,
        user_email: str,
        company: str,
        batch_id: str,
        rows: List[StagedTransactionCreate],
    ) -> ReplaceResponse:
        """Delete every row of the batch and insert ``rows`` as pending.

        Destructive: rows left out of ``rows`` are gone, including sent ones.
        An empty list clears the batch.
        """
        with batch_locks.hold(batch_id):
            batch = BatchIndexService.get_owned_batch(db, user_email, company, batch_id, lock=True)
            try:
                deleted = db.query(StagedTransaction).filter(
                    StagedTransaction.batch_id == batch.id
                ).delete(synchronize_session=False)
                for row in rows:
                    db.add(StagingService._build_row(batch.id, row, batch.bank_account))
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                raise StorageError("Failed to replace staged transactions", detail=str(e)) from e

        logger.info(
            "Replaced staged transactions",
            extra={"batch_id": batch_id, "rows_deleted": deleted, "rows_inserted": len(rows)},
        )
        return ReplaceResponse(
            message="Updated rows for the batch",
            batch_id=batch_id,
            rows_deleted=deleted,
            rows_inserted=len(rows),
        )

    @staticmethod
    def delete_one(db: Session, user_email: str, company: str, batch_id: str, transaction_id: int) -> bool:
        """Delete one staged row. Returns False (not an error) if it was already gone."""
        with batch_locks.hold(batch_id):
            BatchIndexService.get_owned_batch(db, user_email, company, batch_id, lock=True)
            try:
                deleted = db.query(StagedTransaction).filter(
                    and_(
                        StagedTransaction.batch_id == batch_id,
                        StagedTransaction.id == transaction_id,
                    )
                ).delete(synchronize_session=False)
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                raise StorageError("Failed to delete staged transaction", detail=str(e)) from e

        logger.info("Deleted staged transaction", extra={"batch_id": batch_id, "transaction_id": transaction_id, "deleted": bool(deleted)})
        return bool(deleted)

    @staticmethod
    def list_by_batch(db: Session, user_email: str, company: str, batch_id: str) -> List[StagedTransaction]:
        """Rows of a batch in insertion order"""
        BatchIndexService.get_owned_batch(db, user_email, company, batch_id)
        return db.query(StagedTransaction).filter(
            StagedTransaction.batch_id == batch_id
        ).order_by(StagedTransaction.id.asc()).all()

    @staticmethod
    def resolve_current_batch(db: Session, user_email: str, company: str) -> Optional[CurrentBatchResponse]:
        _require(user_email=user_email, company=company)
        pointer = BatchIndexService.resolve_current(db, user_email, company)
        if pointer is None:
            return None
        return CurrentBatchResponse(batch_id=pointer.batch_id, uploaded_file=pointer.uploaded_file)

    @staticmethod
    def list_batch_history(db: Session, user_email: str, company: str) -> List[StagingBatch]:
        _require(user_email=user_email, company=company)
        return BatchIndexService.list_history(db, user_email, company)
