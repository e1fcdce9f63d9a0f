from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ledger_staging.core.database import Base


class TenantBatchPointer(Base):
    """Current batch for a (user, company) tenant"""

    __tablename__ = "tenant_batch_pointers"

    id = Column(Integer, primary_key=True, index=True)
    user_email = Column(String, nullable=False, index=True)
    company = Column(String, nullable=False)
    batch_id = Column(String(32), ForeignKey("staging_batches.id", ondelete="CASCADE"), nullable=False)
    uploaded_file = Column(String, nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    # Relationships
    batch = relationship("StagingBatch")

    __table_args__ = (
        UniqueConstraint("user_email", "company", name="uq_tenant_batch_pointer"),
    )
