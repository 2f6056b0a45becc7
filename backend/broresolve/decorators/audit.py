from __future__ import annotations
"""Audit logging decorator to reduce repetitive add_audit() calls in route handlers.

Usage examples:

@audit_log('USER.PROFILE.UPDATE', entity='User', entity_id_key='id', diff_keys=['full_name', 'bio'],
           pre_fetch=lambda a, kw: _profile_snapshot(kw['actor'].id))
def update_me(actor): ...

Parameters:
  action: required audit action code (e.g. USER.AVATAR.REPLACE)
  entity: optional entity label (Ticket, User)
  entity_id_key: key in the returned JSON object whose value becomes entity_id.
  entity_id_arg: name of the view argument / path parameter to use for entity_id (fallback if entity_id_key absent).
  meta_keys: list of keys to project from returned JSON into meta dict (shallow copy).
  diff_keys + pre_fetch: snapshot selected fields before the view runs and record before/after changes.

The acting user comes from the `actor` keyword injected by `require_actor`,
so this decorator must sit below it.

Return handling:
  Flask view functions commonly return one of:
    dict
    (dict, status)
  The decorator extracts the first element as the JSON payload for key/meta extraction while preserving the original return value.
"""

from functools import wraps
from typing import Any, Callable, Iterable, Optional, Dict

from flask import current_app
from broresolve.services.audit import add_audit
from broresolve import get_db


def _extract_payload(rv: Any):
    if isinstance(rv, tuple) and rv:
        return rv[0]
    return rv


def audit_log(
    action: str,
    *,
    entity: Optional[str] = None,
    entity_id_key: Optional[str] = None,
    entity_id_arg: Optional[str] = None,
    meta_keys: Optional[Iterable[str]] = None,
    diff_keys: Optional[Iterable[str]] = None,
    pre_fetch: Optional[Callable[[tuple, dict], Dict[str, Any]]] = None,
):
    def outer(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            before_snapshot = pre_fetch(args, kwargs) if diff_keys and pre_fetch else None
            rv = fn(*args, **kwargs)
            actor = kwargs.get('actor')
            try:
                data = _extract_payload(rv)
                if not isinstance(data, dict):
                    data = {}
                entity_id = None
                if entity_id_key and entity_id_key in data:
                    entity_id = data.get(entity_id_key)
                elif entity_id_arg and entity_id_arg in kwargs:
                    entity_id = kwargs.get(entity_id_arg)
                meta = {k: data.get(k) for k in (meta_keys or ()) if k in data}
                if diff_keys and isinstance(before_snapshot, dict):
                    changes = {
                        k: {'before': before_snapshot.get(k), 'after': data.get(k)}
                        for k in diff_keys
                        if k in before_snapshot and k in data and before_snapshot.get(k) != data.get(k)
                    }
                    if changes:
                        meta['changes'] = changes
                session = get_db()
                add_audit(session, actor.id if actor else None, action, entity, entity_id, meta)
                session.commit()
            except Exception:
                # The primary action already committed; an audit failure must not turn it into an error
                current_app.logger.exception('Audit write failed for %s', action)
                get_db().rollback()
            return rv
        return wrapper
    return outer
