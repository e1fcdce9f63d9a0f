from sqlalchemy.orm import Session
from sqlalchemy import and_
from typing import List, Optional, Tuple
import uuid

from ledger_staging.core.exceptions import NotFoundError
from ledger_staging.core.logging import get_logger
from ledger_staging.models.staging_batch import StagingBatch
from ledger_staging.models.tenant_batch_pointer import TenantBatchPointer

logger = get_logger(__name__)

INGESTION_MODES = ("new_batch", "append")


class BatchIndexService:
    """Maps a (user, company) tenant to the batch it is currently working on."""

    @staticmethod
    def new_batch_id() -> str:
        return uuid.uuid4().hex

    @staticmethod
    def resolve_current(db: Session, user_email: str, company: str) -> Optional[TenantBatchPointer]:
        """Current batch pointer for a tenant, or None if it never uploaded"""
        return db.query(TenantBatchPointer).filter(
            and_(
                TenantBatchPointer.user_email == user_email,
                TenantBatchPointer.company == company,
            )
        ).first()

    @staticmethod
    def list_history(db: Session, user_email: str, company: str) -> List[StagingBatch]:
        """All batches a tenant has owned, newest first"""
        return db.query(StagingBatch).filter(
            and_(
                StagingBatch.user_email == user_email,
                StagingBatch.company == company,
            )
        ).order_by(StagingBatch.created_at.desc(), StagingBatch.id.desc()).all()

    @staticmethod
    def get_owned_batch(
        db: Session,
        user_email: str,
        company: str,
        batch_id: str,
        lock: bool = False,
    ) -> StagingBatch:
        """Get a batch, ensuring it belongs to the tenant.

        With ``lock=True`` the batch row is locked (SELECT ... FOR UPDATE) until
        the surrounding transaction ends.
        """
        query = db.query(StagingBatch).filter(
            and_(
                StagingBatch.id == batch_id,
                StagingBatch.user_email == user_email,
                StagingBatch.company == company,
            )
        )
        if lock:
            query = query.with_for_update()
        batch = query.first()
        if not batch:
            raise NotFoundError(f"Batch '{batch_id}' not found for this tenant")
        return batch

    @staticmethod
    def open_batch_for_upload(
        db: Session,
        user_email: str,
        company: str,
        bank_account: str,
        file_name: Optional[str],
        mode: str,
    ) -> Tuple[StagingBatch, bool]:
        """Pick the batch an upload writes into and move the tenant pointer to it.

        Returns (batch, reused). Nothing is committed; the caller owns the
        transaction so rows and pointer land together.

        new_batch: always a fresh batch.
        append: reuse the current batch when it is for the same bank account.
        """
        if mode not in INGESTION_MODES:
            raise ValueError(f"Unknown ingestion mode '{mode}'")

        pointer = db.query(TenantBatchPointer).filter(
            and_(
                TenantBatchPointer.user_email == user_email,
                TenantBatchPointer.company == company,
            )
        ).with_for_update().first()

        batch = None
        reused = False
        if mode == "append" and pointer is not None:
            current = db.query(StagingBatch).filter(StagingBatch.id == pointer.batch_id).first()
            if current is not None and current.bank_account == bank_account:
                batch = current
                reused = True
                if file_name:
                    batch.source_file = file_name

        if batch is None:
            batch = StagingBatch(
                id=BatchIndexService.new_batch_id(),
                user_email=user_email,
                company=company,
                bank_account=bank_account,
                source_file=file_name,
            )
            db.add(batch)

        if pointer is None:
            pointer = TenantBatchPointer(user_email=user_email, company=company)
            db.add(pointer)
        pointer.batch_id = batch.id
        pointer.uploaded_file = file_name

        logger.debug(
            "Tenant pointer moved",
            extra={"batch_id": batch.id, "reused_batch": reused, "ingestion_mode": mode},
        )
        return batch, reused
