from sqlalchemy import Column, String, DateTime, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from datetime import datetime, timezone

from ledger_staging.core.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StagingBatch(Base):
    __tablename__ = "staging_batches"

    # Opaque uuid token, never derived from tenant input
    id = Column(String(32), primary_key=True)
    user_email = Column(String, nullable=False)
    company = Column(String, nullable=False)
    bank_account = Column(String, nullable=False)
    source_file = Column(String, nullable=True)
    # Python-side timestamp keeps microseconds so history ordering is stable on SQLite
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    transactions = relationship(
        "StagedTransaction",
        back_populates="batch",
        cascade="all, delete-orphan",
        order_by="StagedTransaction.id",
    )

    __table_args__ = (
        Index("ix_staging_batch_tenant", "user_email", "company", "created_at"),
    )
