from __future__ import annotations
from typing import Any, Dict, Optional
from sqlalchemy import select
from sqlalchemy.orm import Session
from broresolve.models.audit import AuditLog


def add_audit(session: Session, actor_id: Optional[int], action: str, entity: Optional[str] = None,
              entity_id: Optional[Any] = None, meta: Optional[Dict[str, Any]] = None):
    """Stage an audit log entry within the given DB session.

    Parameters:
      actor_id: id of the acting user (0 when unknown)
      action: short action code e.g. TICKET.CREATE, TICKET.STAGE, USER.PROMOTE
      entity: optional entity name (Ticket, User)
      entity_id: optional primary key, stored as string
      meta: additional JSON-safe dictionary (shallow copied)
    """
    log = AuditLog(
        actor_user_id=actor_id or 0,
        action=action,
        entity=entity,
        entity_id=str(entity_id) if entity_id is not None else None,
        meta=dict(meta or {}),
    )
    session.add(log)
    # No commit here; caller's transaction boundary controls durability.
    return log


def entity_history(session: Session, entity: str, entity_id: Any):
    """Audit rows for one entity, oldest first."""
    return session.execute(
        select(AuditLog).where(AuditLog.entity == entity, AuditLog.entity_id == str(entity_id)).order_by(AuditLog.id)
    ).scalars().all()
