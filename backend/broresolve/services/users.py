from __future__ import annotations
"""Account operations: sign-up, sign-in, admin promotion and suspension."""
import logging
from typing import Optional
from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from broresolve.constants.roles import Role
from broresolve.errors import ValidationError, NotFoundError, ConflictError, SuspendedAccountError, UpstreamError
from broresolve.models.authz import User, UserRole
from broresolve.services import policy
from broresolve.services.audit import add_audit
from broresolve.utils.validation import validate_text, is_valid_email

logger = logging.getLogger(__name__)

MIN_PASSWORD = 6


def find_by_email(session: Session, email: str) -> Optional[User]:
    return session.execute(
        select(User).options(selectinload(User.user_roles)).where(func.lower(User.email) == email.strip().lower())
    ).scalar_one_or_none()


def get_user(session: Session, user_id: int) -> User:
    user = session.execute(
        select(User).options(selectinload(User.user_roles)).where(User.id == user_id)
    ).scalar_one_or_none()
    if user is None:
        raise NotFoundError('User not found')
    return user


def register_user(session: Session, email, password, full_name) -> User:
    email = validate_text(email, 'email', max_len=255).lower()
    if not is_valid_email(email):
        raise ValidationError('Invalid email address')
    if not isinstance(password, str) or len(password) < MIN_PASSWORD:
        raise ValidationError(f'Password must be at least {MIN_PASSWORD} characters')
    full_name = validate_text(full_name, 'full_name', min_len=2, max_len=100)
    if find_by_email(session, email):
        raise ConflictError('An account with this email already exists')
    user = User(email=email, full_name=full_name, password_hash='')
    user.set_password(password)
    user.user_roles.append(UserRole(role=Role.STUDENT.value))
    session.add(user)
    session.commit()
    logger.info('Registered user id=%s', user.id)
    return user


def authenticate(session: Session, email, password) -> Optional[User]:
    """Return the user for valid credentials, None otherwise. Suspended accounts raise."""
    if not email or not password:
        raise ValidationError('email & password required')
    user = find_by_email(session, email)
    if user is None or not user.verify_password(password):
        return None
    if not user.is_active:
        logger.warning('Sign-in refused for suspended user id=%s', user.id)
        raise SuspendedAccountError('Your account has been suspended')
    return user


def promote_to_admin(session: Session, email: str, actor: policy.Actor) -> User:
    """Grant the admin role to the account registered under `email`."""
    policy.assert_can_manage_users(actor)
    target = find_by_email(session, email)
    if target is None:
        logger.warning('Admin promotion: no user for email=%s', email)
        raise NotFoundError('User with this email not found')
    if target.role is Role.ADMIN:
        raise ConflictError('User is already an admin')
    try:
        target.user_roles.append(UserRole(role=Role.ADMIN.value))
        add_audit(session, actor.id, 'USER.PROMOTE', 'User', target.id, {'email': target.email})
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error('Error inserting admin role for user=%s: %s', target.id, e)
        raise UpstreamError('Failed to add admin role') from e
    logger.info('Promoted user=%s to admin (by admin=%s)', target.id, actor.id)
    return target


def set_active(session: Session, user_id: int, active: bool, actor: policy.Actor) -> User:
    policy.assert_can_manage_users(actor)
    if not active and user_id == actor.id:
        raise ValidationError('You cannot suspend your own account')
    user = get_user(session, user_id)
    before = user.is_active
    user.is_active = active
    if before != active:
        add_audit(session, actor.id, 'USER.ACTIVATE' if active else 'USER.SUSPEND', 'User', user.id,
                  {'changes': {'is_active': {'before': before, 'after': active}}})
    session.commit()
    logger.info('User %s %s by admin=%s', user.id, 'activated' if active else 'suspended', actor.id)
    return user


def list_users(session: Session, actor: policy.Actor):
    policy.assert_can_manage_users(actor)
    return session.query(User).options(selectinload(User.user_roles)).order_by(User.created_at.desc(), User.id.desc())


__all__ = ['find_by_email', 'get_user', 'register_user', 'authenticate', 'promote_to_admin', 'set_active', 'list_users']
