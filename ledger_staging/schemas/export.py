from pydantic import BaseModel, field_serializer
from typing import Optional, List, Any
from decimal import Decimal


class ExportRow(BaseModel):
    """Row in the shape the accounting connector expects.

    ``amount`` is always the magnitude. Payment vs receipt direction is
    carried only by ``transaction_type``, never by the sign.
    """

    id: int
    transaction_date: Optional[str]
    transaction_type: str
    description: str
    amount: Decimal
    bank_account: str
    assigned_ledger: str

    @field_serializer('amount', when_used='json')
    def serialize_amount(self, value: Decimal) -> float:
        """Connector takes amounts as JSON numbers"""
        return float(value)


class IneligibleExportRow(ExportRow):
    missing_fields: List[str]


class SyncRequest(BaseModel):
    user_email: str
    company: str
    selected_transactions: Optional[List[int]] = None


class SyncResponse(BaseModel):
    message: str
    batch_id: str
    transactions_sent: int
    # False when the connector acknowledged but marking rows as sent failed
    status_committed: bool
    connector_response: Optional[Any] = None


class SentCountResponse(BaseModel):
    batch_id: str
    count: int
