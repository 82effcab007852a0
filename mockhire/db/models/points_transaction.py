import enum
import uuid

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum, Index, CheckConstraint
from sqlalchemy.sql import func
from mockhire.core.timeutils import utcnow
from mockhire.db.base import Base


class TransactionType(str, enum.Enum):
    EARNED = "EARNED"
    SPENT = "SPENT"
    REFUNDED = "REFUNDED"


class PointsTransaction(Base):
    """
    Immutable ledger entry. Rows are only ever inserted; a user's balance is
    the fold of all their entries.
    """
    __tablename__ = "points_transactions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    amount = Column(Integer, nullable=False)
    type = Column(Enum(TransactionType, name="transaction_type"), nullable=False)
    description = Column(String, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("amount > 0", name="check_points_amount_positive"),
        Index("idx_points_user_created", "user_id", "created_at"),
    )

    def __repr__(self):
        return f"<PointsTransaction(id={self.id}, user_id={self.user_id}, type={self.type}, amount={self.amount})>"
