from typing import List, Optional, Tuple
from datetime import datetime
from decimal import Decimal

from ledger_staging.models.staged_transaction import StagedTransaction
from ledger_staging.schemas.export import ExportRow, IneligibleExportRow


class ExportService:
    @staticmethod
    def format_company_name(company: str) -> str:
        """'acme_trading_co' -> 'Acme Trading Co'"""
        return " ".join(word[:1].upper() + word[1:].lower() for word in company.split("_"))

    @staticmethod
    def _iso_date(value: Optional[str]) -> Optional[str]:
        """ISO calendar date, or None when unset or not a real date"""
        if not value:
            return None
        try:
            return datetime.strptime(value.strip(), "%Y-%m-%d").date().isoformat()
        except ValueError:
            return None

    @staticmethod
    def transform(row: StagedTransaction) -> ExportRow:
        """Normalize a staged row into the connector shape"""
        return ExportRow(
            id=row.id,
            transaction_date=ExportService._iso_date(row.transaction_date),
            transaction_type=row.transaction_type.value.lower() if row.transaction_type else "",
            description=row.description.strip() if row.description else "",
            amount=abs(Decimal(row.amount or 0)),
            bank_account=row.bank_account.strip() if row.bank_account else "",
            assigned_ledger=row.assigned_ledger.strip() if row.assigned_ledger else "",
        )

    @staticmethod
    def missing_fields(export_row: ExportRow) -> List[str]:
        """Fields that keep a transformed row from being exported"""
        missing = []
        if not export_row.transaction_date:
            missing.append("transaction_date")
        if not export_row.bank_account:
            missing.append("bank_account")
        if not export_row.assigned_ledger:
            missing.append("assigned_ledger")
        if not export_row.amount:
            missing.append("amount")
        return missing

    @staticmethod
    def is_eligible(export_row: ExportRow) -> bool:
        return not ExportService.missing_fields(export_row)

    @staticmethod
    def prepare(rows: List[StagedTransaction]) -> Tuple[List[ExportRow], List[IneligibleExportRow]]:
        """Transform every row and split off the ones that cannot be exported.

        Returns (export_rows, ineligible). Callers must not export anything
        while ``ineligible`` is non-empty.
        """
        export_rows = []
        ineligible = []
        for row in rows:
            export_row = ExportService.transform(row)
            missing = ExportService.missing_fields(export_row)
            if missing:
                ineligible.append(IneligibleExportRow(**export_row.model_dump(), missing_fields=missing))
            export_rows.append(export_row)
        return export_rows, ineligible
