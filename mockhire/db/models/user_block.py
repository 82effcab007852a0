"""
UserBlock model: an admin moderation record restricting a user's access.
"""
import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, Boolean, Index, CheckConstraint, text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from mockhire.core.timeutils import as_utc, utcnow
from mockhire.db.base import Base


class UserBlock(Base):
    """
    Permanent blocks have no end date; temporary blocks lapse at ``end_date``.
    Unblocking only flips ``is_active``, history is kept.
    """
    __tablename__ = "user_blocks"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    reason = Column(String(500), nullable=False)
    is_permanent = Column(Boolean, nullable=False, default=False)
    start_date = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", backref="blocks")

    __table_args__ = (
        CheckConstraint(
            "(is_permanent AND end_date IS NULL) OR (NOT is_permanent AND end_date IS NOT NULL)",
            name="check_block_end_date",
        ),
        # One active block per user
        Index(
            "uq_user_blocks_active_user",
            "user_id",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active"),
        ),
    )

    def is_in_effect(self, now) -> bool:
        """Active and, for temporary blocks, not yet past its end date."""
        if not self.is_active:
            return False
        return self.is_permanent or as_utc(self.end_date) > as_utc(now)

    def __repr__(self):
        return f"<UserBlock(id={self.id}, user_id={self.user_id}, is_active={self.is_active})>"
