from __future__ import annotations
import uuid
from datetime import datetime, timezone
from typing import Optional
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Integer, String, Text, DateTime, ForeignKey, CheckConstraint, func

from broresolve.constants.tickets import Stage, INITIAL_STAGE, values, Category, Priority
from .authz import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


def _in(column: str, enum_cls) -> str:
    return f"{column} IN ({', '.join(repr(v) for v in values(enum_cls))})"


class Ticket(Base):
    __tablename__ = 'tickets'
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    display_id: Mapped[str] = mapped_column(String(32), unique=True, nullable=False, index=True)
    display_seq: Mapped[int] = mapped_column(Integer, unique=True, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    priority: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    stage: Mapped[str] = mapped_column(String(16), nullable=False, default=INITIAL_STAGE.value, index=True)
    upvote_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    mood: Mapped[Optional[str]] = mapped_column(String(16), nullable=True)
    creator_id: Mapped[int] = mapped_column(ForeignKey('users.id'), nullable=False, index=True)
    attachment_ref: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, server_default=func.now(), onupdate=_utcnow)
    # Loaded with one IN query per batch of tickets
    creator = relationship('User', lazy='selectin')

    __table_args__ = (
        CheckConstraint(_in('stage', Stage), name='ck_tickets_stage'),
        CheckConstraint(_in('category', Category), name='ck_tickets_category'),
        CheckConstraint(_in('priority', Priority), name='ck_tickets_priority'),
        CheckConstraint('upvote_count >= 1', name='ck_tickets_upvotes'),
    )

# Stage flow: committed -> reviewing -> patching -> resolved (display order).
# Admins may set any stage from any stage; see services.lifecycle.STAGE_FSM.


class TicketUpvote(Base):
    """One row per upvote action; only consulted when single-upvote mode is on."""
    __tablename__ = 'ticket_upvotes'
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    ticket_id: Mapped[str] = mapped_column(ForeignKey('tickets.id', ondelete='CASCADE'), nullable=False, index=True)
    actor_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


class Counter(Base):
    """Named monotonic sequences owned by the database."""
    __tablename__ = 'counters'
    name: Mapped[str] = mapped_column(String(32), primary_key=True)
    value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
