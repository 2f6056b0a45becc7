from __future__ import annotations
from flask import Blueprint, request, abort
from flask_jwt_extended import create_access_token, jwt_required, get_jwt
from broresolve import get_db
from broresolve.decorators.auth import require_actor
from broresolve.models.authz import RevokedToken
from broresolve.services import users
from broresolve.routes.profiles import profile_json

auth_bp = Blueprint('auth', __name__)


@auth_bp.post('/signup')
def signup():
    data = request.get_json(silent=True) or {}
    user = users.register_user(get_db(), data.get('email'), data.get('password'), data.get('full_name'))
    return profile_json(user), 201


@auth_bp.post('/login')
def login():
    data = request.get_json(silent=True) or {}
    session = get_db()
    user = users.authenticate(session, data.get('email'), data.get('password'))
    if user is None:
        abort(401, description='invalid credentials')
    # identity must be a string (JWT 'sub' claim); role travels as a hint for clients only
    token = create_access_token(identity=str(user.id), additional_claims={'role': user.role.value})
    return {'access_token': token, 'role': user.role.value}


@auth_bp.get('/me')
@require_actor()
def me(actor):
    return profile_json(users.get_user(get_db(), actor.id))


@auth_bp.post('/logout')
@jwt_required()
def logout():
    claims = get_jwt()
    session = get_db()
    session.add(RevokedToken(jti=claims['jti'], user_id=int(claims['sub'])))
    session.commit()
    return {'revoked': True}
