from sqlalchemy.orm import Session
from sqlalchemy import and_
from sqlalchemy.exc import SQLAlchemyError
from typing import Iterable, List, Optional

from ledger_staging.core.exceptions import ValidationError, NotFoundError, UpstreamError
from ledger_staging.core.locks import batch_locks
from ledger_staging.core.logging import get_logger
from ledger_staging.models.staged_transaction import StagedTransaction, TransactionStatus
from ledger_staging.schemas.export import SyncResponse
from ledger_staging.services.batch_index_service import BatchIndexService
from ledger_staging.services.connector import AccountingConnector
from ledger_staging.services.export_service import ExportService

logger = get_logger(__name__)


class SyncService:
    @staticmethod
    def select_candidates(
        db: Session,
        batch_id: str,
        selection: Optional[Iterable[int]] = None,
    ) -> List[StagedTransaction]:
        """Rows with an assigned ledger, optionally narrowed to ``selection``.

        Unknown ids in ``selection`` simply match nothing. Ordered by date
        with unset dates first, then insertion order.
        """
        query = db.query(StagedTransaction).filter(
            and_(
                StagedTransaction.batch_id == batch_id,
                StagedTransaction.assigned_ledger.isnot(None),
                StagedTransaction.assigned_ledger != "",
            )
        )
        selected_ids = list(selection or [])
        if selected_ids:
            query = query.filter(StagedTransaction.id.in_(selected_ids))
        return query.order_by(
            StagedTransaction.transaction_date.asc().nulls_first(),
            StagedTransaction.id.asc(),
        ).all()

    @staticmethod
    def sync_batch(
        db: Session,
        user_email: str,
        company: str,
        batch_id: str,
        connector: AccountingConnector,
        selection: Optional[List[int]] = None,
    ) -> SyncResponse:
        """Export eligible rows of a batch and mark them sent on acknowledgement.

        Either every candidate passes validation and is exported, or nothing
        is sent. Marking rows sent after a successful export is best effort:
        if that commit fails the call still succeeds with
        ``status_committed=False`` and the rows are exported again next time.
        """
        if not company or not batch_id:
            raise ValidationError("Missing company or batch id")

        with batch_locks.hold(batch_id):
            BatchIndexService.get_owned_batch(db, user_email, company, batch_id, lock=True)

            candidates = SyncService.select_candidates(db, batch_id, selection)
            if not candidates:
                db.rollback()
                raise NotFoundError("No transactions found with assigned ledgers")

            export_rows, ineligible = ExportService.prepare(candidates)
            if ineligible:
                db.rollback()
                raise ValidationError(
                    "Some transactions have invalid data",
                    invalid_transactions=[row.model_dump(mode="json") for row in ineligible],
                )

            display_name = ExportService.format_company_name(company)
            logger.info(
                "Sending to accounting connector",
                extra={
                    "company": display_name,
                    "transaction_count": len(export_rows),
                    "sample_transaction": export_rows[0].model_dump(mode="json"),
                },
            )

            try:
                ack = connector.export(display_name, export_rows)
            except UpstreamError:
                db.rollback()
                raise
            except Exception as e:
                db.rollback()
                logger.error("Accounting connector error", extra={"batch_id": batch_id, "error": str(e)})
                raise UpstreamError("Failed to send data to accounting connector", detail=str(e) or None) from e

            status_committed = SyncService._mark_sent(db, batch_id, [row.id for row in export_rows])

        return SyncResponse(
            message="Data sent to accounting system successfully",
            batch_id=batch_id,
            transactions_sent=len(export_rows),
            status_committed=status_committed,
            connector_response=ack,
        )

    @staticmethod
    def _mark_sent(db: Session, batch_id: str, transaction_ids: List[int]) -> bool:
        try:
            db.query(StagedTransaction).filter(
                and_(
                    StagedTransaction.batch_id == batch_id,
                    StagedTransaction.id.in_(transaction_ids),
                )
            ).update({StagedTransaction.status: TransactionStatus.SENT}, synchronize_session=False)
            db.commit()
            return True
        except SQLAlchemyError as e:
            db.rollback()
            logger.warning(
                "Export acknowledged but marking rows sent failed; rows stay pending and will be re-exported",
                extra={"batch_id": batch_id, "transaction_ids": transaction_ids, "error": str(e)},
            )
            return False

    @staticmethod
    def count_sent(db: Session, user_email: str, company: str, batch_id: str) -> int:
        """Number of rows in the batch already accepted by the accounting system"""
        BatchIndexService.get_owned_batch(db, user_email, company, batch_id)
        return db.query(StagedTransaction).filter(
            and_(
                StagedTransaction.batch_id == batch_id,
                StagedTransaction.status == TransactionStatus.SENT,
            )
        ).count()
