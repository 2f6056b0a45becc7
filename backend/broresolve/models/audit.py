from __future__ import annotations
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Index, Integer, String, JSON, DateTime, func

from .authz import Base


class AuditLog(Base):
    """Append-only record of ticket and account mutations.

    `entity_id` is a string so ticket UUIDs and integer user ids share a column.
    `actor_user_id` is 0 when the actor is unknown, hence no foreign key.
    """
    __tablename__ = 'audit_logs'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    actor_user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    action: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    entity: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    entity_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)
    meta: Mapped[dict] = mapped_column(JSON, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index('ix_audit_logs_entity_ref', 'entity', 'entity_id'),
    )

    @property
    def changes(self) -> dict:
        """Field diffs recorded by the audit decorator, empty when none were captured."""
        return (self.meta or {}).get('changes', {})
