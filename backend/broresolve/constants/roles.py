"""Role and capability definitions.

Two roles only. Capabilities are derived from the role; account status
(suspension) is enforced at the session boundary, not here.
"""
from __future__ import annotations
import enum
from typing import Dict, FrozenSet


class Role(str, enum.Enum):
    STUDENT = 'student'
    ADMIN = 'admin'


CAP_TICKET_CREATE = 'TICKET.CREATE'
CAP_TICKET_UPVOTE = 'TICKET.UPVOTE'
CAP_TICKET_VIEW_ALL = 'TICKET.VIEW_ALL'
CAP_TICKET_STAGE = 'TICKET.STAGE'
CAP_USER_MANAGE = 'USER.MANAGE'

ROLE_CAPABILITIES: Dict[Role, FrozenSet[str]] = {
    Role.STUDENT: frozenset({CAP_TICKET_CREATE, CAP_TICKET_UPVOTE}),
    Role.ADMIN: frozenset({
        CAP_TICKET_CREATE, CAP_TICKET_UPVOTE, CAP_TICKET_VIEW_ALL, CAP_TICKET_STAGE, CAP_USER_MANAGE,
    }),
}

DEFAULT_ROLE = Role.STUDENT
