from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, DateTime, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum

from ledger_staging.core.database import Base


class TransactionType(str, enum.Enum):
    PAYMENT = "payment"
    RECEIPT = "receipt"
    CONTRA_WITHDRAW = "contra-withdraw"
    CONTRA_DEPOSIT = "contra-deposit"


class TransactionStatus(str, enum.Enum):
    PENDING = "pending"
    SENT = "sent"


class StagedTransaction(Base):
    __tablename__ = "staged_transactions"

    id = Column(Integer, primary_key=True, index=True)
    batch_id = Column(String(32), ForeignKey("staging_batches.id", ondelete="CASCADE"), nullable=False, index=True)
    # ISO date after normalization; unparseable uploads are kept verbatim
    transaction_date = Column(String(64), nullable=True)
    transaction_type = Column(Enum(TransactionType), nullable=True)
    description = Column(String, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False, default=0)
    bank_account = Column(String, nullable=False, default="")
    assigned_ledger = Column(String, nullable=False, default="")
    status = Column(Enum(TransactionStatus), default=TransactionStatus.PENDING, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    batch = relationship("StagingBatch", back_populates="transactions")
