"""Test seeding utilities to reduce duplication.

These helpers centralize creation of accounts and tickets while going through
the same model/service code the API uses, so role and counter invariants hold.
"""
from typing import Optional
from broresolve import get_db
from broresolve.constants.roles import Role
from broresolve.models.authz import User, UserRole
from broresolve.services import lifecycle
from broresolve.services.policy import Actor

DEFAULT_PASSWORD = 'secret1'


def ensure_user(email: str, full_name: Optional[str] = None, password: str = DEFAULT_PASSWORD,
                admin: bool = False, active: bool = True) -> User:
    """Idempotently ensure an account exists (by email) with the given role and status."""
    session = get_db()
    u = session.query(User).filter_by(email=email).one_or_none()
    if not u:
        u = User(email=email, full_name=full_name or email.split('@')[0], password_hash='')
        u.set_password(password)
        u.user_roles.append(UserRole(role=Role.STUDENT.value))
        session.add(u)
    if admin and u.role is not Role.ADMIN:
        u.user_roles.append(UserRole(role=Role.ADMIN.value))
    u.is_active = active
    session.commit()
    return u


def ensure_admin(email: str, password: str = DEFAULT_PASSWORD) -> User:
    return ensure_user(email, password=password, admin=True)


def actor_for(user: User) -> Actor:
    return Actor(id=user.id, role=user.role, is_active=user.is_active)


def make_ticket(user: User, text: str = 'wifi keeps dropping in block C', mood=None, attachment_ref=None):
    """Create a ticket through the lifecycle service (non-idempotent)."""
    return lifecycle.create_ticket(get_db(), text, mood, actor_for(user), attachment_ref=attachment_ref)


__all__ = ['DEFAULT_PASSWORD', 'ensure_user', 'ensure_admin', 'actor_for', 'make_ticket']
