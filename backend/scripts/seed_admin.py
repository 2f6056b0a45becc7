#!/usr/bin/env python
"""Idempotent seed script for the initial admin account.

Usage:
    python backend/scripts/seed_admin.py               # seed normally
    python backend/scripts/seed_admin.py --dry-run     # run logic then rollback (no DB changes)
    python backend/scripts/seed_admin.py --show-admins # list admin accounts after seeding

Credentials come from SEED_ADMIN_EMAIL / SEED_ADMIN_PASSWORD.
"""
from __future__ import annotations
import os, sys, argparse, textwrap
from sqlalchemy import select, text
from sqlalchemy.exc import OperationalError

# Allow running from repo root
sys.path.append(os.path.abspath('backend'))

from broresolve import create_app, get_db  # type: ignore
from broresolve.constants.roles import Role
from broresolve.models.authz import Base, User, UserRole
from broresolve.models.ticket import Counter
from broresolve.services.lifecycle import TICKET_COUNTER


def ensure_schema(session):
    try:
        session.execute(text('SELECT 1 FROM users LIMIT 1'))
    except OperationalError:
        session.rollback()
        # Auto-create schema for bootstrap; in real env prefer alembic upgrade
        import broresolve.models.ticket  # noqa: F401
        import broresolve.models.audit  # noqa: F401
        Base.metadata.create_all(session.get_bind())


def ensure_counter(session):
    if session.get(Counter, TICKET_COUNTER) is None:
        session.add(Counter(name=TICKET_COUNTER, value=0))
        return True
    return False


def ensure_initial_admin(session, email: str, password: str, full_name: str = 'Administrator'):
    """Create the account if missing and make sure it holds the admin role.

    Returns a short status string: 'created', 'promoted' or 'unchanged'.
    """
    email = email.strip().lower()
    user = session.execute(select(User).where(User.email == email)).scalar_one_or_none()
    if user is None:
        user = User(email=email, full_name=full_name, password_hash='')
        user.set_password(password)
        user.user_roles.append(UserRole(role=Role.STUDENT.value))
        user.user_roles.append(UserRole(role=Role.ADMIN.value))
        session.add(user)
        session.flush()
        return 'created'
    if user.role is not Role.ADMIN:
        user.user_roles.append(UserRole(role=Role.ADMIN.value))
        return 'promoted'
    return 'unchanged'


def print_admins(session):
    rows = session.execute(
        select(User.id, User.email, User.is_active).join(UserRole).where(UserRole.role == Role.ADMIN.value).order_by(User.id)
    ).all()
    if not rows:
        print('[INFO] No admin accounts present.')
        return
    for uid, email, active in rows:
        print(f"{str(uid).rjust(5)} | {email} | {'active' if active else 'suspended'}")


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        description="Seed the initial BroResolve admin account",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""Examples:\n  seed normally: seed_admin.py\n  dry run: seed_admin.py --dry-run\n  list admins: seed_admin.py --show-admins\n""")
    )
    p.add_argument('--dry-run', action='store_true', help='Rollback after operations (no commit)')
    p.add_argument('--show-admins', action='store_true', help='Print admin accounts after seeding')
    p.add_argument('--full-name', default='Administrator', help='Display name for a newly created admin')
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    email = os.getenv('SEED_ADMIN_EMAIL', 'admin@example.com')
    password = os.getenv('SEED_ADMIN_PASSWORD', 'ChangeMe123!')
    app = create_app()
    with app.app_context():
        session = get_db()
        try:
            ensure_schema(session)
            counter_created = ensure_counter(session)
            status = ensure_initial_admin(session, email, password, args.full_name)
            if args.dry_run:
                session.rollback()
                print(f"[DRY-RUN] (rolled back) admin {email}: {status}, counter created: {counter_created}")
            else:
                session.commit()
                print(f"[DONE] admin {email}: {status}, counter created: {counter_created}")
            if args.show_admins:
                print_admins(session)
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
    return 0


if __name__ == '__main__':
    sys.exit(main())
