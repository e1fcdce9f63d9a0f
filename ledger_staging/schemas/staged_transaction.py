from pydantic import BaseModel, Field, AliasChoices, field_validator
from datetime import datetime
from typing import Optional
from decimal import Decimal

from ledger_staging.models.staged_transaction import TransactionType, TransactionStatus


class StagedTransactionCreate(BaseModel):
    transaction_date: Optional[str] = Field(None, max_length=64, description="Date as uploaded, usually dd/mm/yyyy")
    transaction_type: Optional[TransactionType] = Field(None, description="payment, receipt, contra-withdraw or contra-deposit")
    description: str = Field(..., max_length=1000, description="Transaction narration (required, non-empty)")
    amount: Decimal = Field(
        default=Decimal("0"),
        max_digits=14,
        decimal_places=2,
        description="Signed amount; only the magnitude is exported",
    )
    bank_account: Optional[str] = Field(None, max_length=255, description="Defaults to the batch bank account")
    assigned_ledger: str = Field(
        default="",
        max_length=255,
        validation_alias=AliasChoices("assigned_ledger", "assignedLedger"),
        description="Ledger name; empty string means unassigned",
    )

    @field_validator('transaction_date', mode='before')
    @classmethod
    def validate_transaction_date(cls, v):
        """Blank dates are treated as unset"""
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @field_validator('transaction_type', mode='before')
    @classmethod
    def validate_transaction_type(cls, v):
        """Accept any casing and space/underscore separators, e.g. 'Contra Withdraw'"""
        if v is None or isinstance(v, TransactionType):
            return v
        normalized = str(v).strip().lower().replace("_", "-").replace(" ", "-")
        if not normalized:
            return None
        allowed = [t.value for t in TransactionType]
        if normalized not in allowed:
            raise ValueError(f"Transaction type must be one of: {', '.join(allowed)}")
        return TransactionType(normalized)

    @field_validator('description')
    @classmethod
    def validate_description(cls, v: str) -> str:
        """Validate description is not empty or just whitespace"""
        if not v or not v.strip():
            raise ValueError("Description cannot be empty")
        return v.strip()

    @field_validator('bank_account')
    @classmethod
    def validate_bank_account(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v and v.strip() else None

    @field_validator('assigned_ledger', mode='before')
    @classmethod
    def validate_assigned_ledger(cls, v) -> str:
        return str(v).strip() if v is not None else ""


class StagedTransactionResponse(BaseModel):
    id: int
    batch_id: str
    transaction_date: Optional[str]
    transaction_type: Optional[TransactionType]
    description: str
    amount: Decimal
    bank_account: str
    assigned_ledger: str
    status: TransactionStatus
    created_at: datetime

    class Config:
        from_attributes = True
