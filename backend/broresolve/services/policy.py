from __future__ import annotations
"""Role- and ownership-gated access rules.

Predicates here are pure functions of an explicit `Actor`; they never look at
request state. Suspension is deliberately not checked here: the session
boundary (`load_actor`) rejects suspended accounts before any predicate runs.
"""
from dataclasses import dataclass
from typing import Optional
import logging
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from broresolve.constants.roles import (
    Role, ROLE_CAPABILITIES, CAP_TICKET_CREATE, CAP_TICKET_UPVOTE, CAP_TICKET_VIEW_ALL,
    CAP_TICKET_STAGE, CAP_USER_MANAGE,
)
from broresolve.errors import PermissionDenied, SuspendedAccountError, NotFoundError
from broresolve.models.authz import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Actor:
    id: int
    role: Role
    is_active: bool = True

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    def has(self, capability: str) -> bool:
        return capability in ROLE_CAPABILITIES[self.role]

    @classmethod
    def from_user(cls, user: User) -> 'Actor':
        return cls(id=user.id, role=user.role, is_active=bool(user.is_active))


def _authenticated(actor: Optional[Actor]) -> bool:
    return actor is not None and actor.id is not None


def can_create(actor: Optional[Actor]) -> bool:
    return _authenticated(actor) and actor.has(CAP_TICKET_CREATE)


def can_upvote(actor: Optional[Actor]) -> bool:
    return _authenticated(actor) and actor.has(CAP_TICKET_UPVOTE)


def can_mutate_stage(actor: Optional[Actor]) -> bool:
    return _authenticated(actor) and actor.has(CAP_TICKET_STAGE)


def can_manage_users(actor: Optional[Actor]) -> bool:
    return _authenticated(actor) and actor.has(CAP_USER_MANAGE)


def can_view(actor: Optional[Actor], ticket) -> bool:
    if not _authenticated(actor):
        return False
    return actor.has(CAP_TICKET_VIEW_ALL) or actor.id == ticket.creator_id


def assert_can_create(actor: Optional[Actor]):
    if not can_create(actor):
        raise PermissionDenied('Ticket creation requires an authenticated account')


def assert_can_upvote(actor: Optional[Actor]):
    if not can_upvote(actor):
        raise PermissionDenied('Upvoting requires an authenticated account')


def assert_can_mutate_stage(actor: Optional[Actor]):
    if not can_mutate_stage(actor):
        raise PermissionDenied('Admin access required to change stage')


def assert_can_manage_users(actor: Optional[Actor]):
    if not can_manage_users(actor):
        raise PermissionDenied('Admin access required')


def assert_can_view(actor: Optional[Actor], ticket):
    if not can_view(actor, ticket):
        raise PermissionDenied('Ticket ownership required')


def load_actor(session: Session, user_id: int) -> Actor:
    """Session boundary: resolve a user id into an Actor, rejecting suspended accounts.

    Queried once per request so a suspension takes effect on the next call,
    even for tokens issued before it.
    """
    user = session.execute(
        select(User).options(selectinload(User.user_roles)).where(User.id == user_id)
    ).scalar_one_or_none()
    if user is None:
        raise NotFoundError('Account not found')
    if not user.is_active:
        logger.warning('Rejected suspended account user_id=%s', user_id)
        raise SuspendedAccountError('Your account has been suspended')
    return Actor.from_user(user)


__all__ = [
    'Actor', 'can_create', 'can_upvote', 'can_mutate_stage', 'can_manage_users', 'can_view',
    'assert_can_create', 'assert_can_upvote', 'assert_can_mutate_stage', 'assert_can_manage_users',
    'assert_can_view', 'load_actor',
]
