"""Callable functions used by the admin console.

These keep the flat `{"error": "<message>"}` contract the console already
parses instead of the structured error envelope used elsewhere in the API.
CORS for this prefix is configured in the app factory.
"""
from __future__ import annotations
import logging
from flask import Blueprint, request
from flask_jwt_extended import verify_jwt_in_request, get_jwt_identity
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError
from broresolve import get_db
from broresolve.errors import NotFoundError, ConflictError, UpstreamError, SuspendedAccountError
from broresolve.services import users
from broresolve.services.policy import load_actor
from broresolve.utils.validation import is_valid_email

logger = logging.getLogger(__name__)

functions_bp = Blueprint('functions', __name__)


def _error(message: str, status: int):
    return {'error': message}, status


@functions_bp.post('/add-admin')
def add_admin():
    session = get_db()
    try:
        try:
            verify_jwt_in_request()
            actor = load_actor(session, int(get_jwt_identity()))
        except (JWTExtendedException, PyJWTError, NotFoundError, SuspendedAccountError, ValueError) as e:
            logger.warning('add-admin authentication error: %s', e)
            return _error('Unauthorized', 401)
        if not actor.is_admin:
            logger.warning('add-admin refused for non-admin user=%s', actor.id)
            return _error('Unauthorized: Admin access required', 403)

        data = request.get_json(silent=True)
        email = data.get('email') if isinstance(data, dict) else None
        if not email or not isinstance(email, str):
            return _error('Email is required', 400)
        if not is_valid_email(email):
            return _error('Invalid email format', 400)

        logger.info('Adding admin role for email=%s', email)
        target = users.promote_to_admin(session, email, actor)
        return {
            'success': True,
            'message': f'Successfully added admin role to {email}',
            'user_id': target.id,
        }
    except NotFoundError as e:
        return _error(e.description, 404)
    except ConflictError as e:
        return _error(e.description, 400)
    except UpstreamError as e:
        return _error(e.description, 500)
    except Exception:
        logger.exception('add-admin unexpected error')
        session.rollback()
        return _error('Internal server error', 500)
