from __future__ import annotations
from flask import Blueprint, request, current_app
from broresolve import get_db
from broresolve.decorators.auth import require_actor
from broresolve.decorators.audit import audit_log
from broresolve.errors import ValidationError
from broresolve.services import profiles
from broresolve.services.storage import get_storage
from broresolve.services.users import get_user
from broresolve.utils.listing import iso_z

profiles_bp = Blueprint('profiles', __name__)


def profile_json(u):
    return {
        'id': u.id,
        'email': u.email,
        'full_name': u.full_name,
        'role': u.role.value,
        'is_active': u.is_active,
        'bio': u.bio,
        'avatar_url': u.avatar_url,
        'contact_number': u.contact_number,
        'created_at': iso_z(u.created_at),
    }


def _snapshot(args, kwargs):
    return profile_json(get_user(get_db(), kwargs['actor'].id))


@profiles_bp.get('/me')
@require_actor()
def get_me(actor):
    return profile_json(get_user(get_db(), actor.id))


@profiles_bp.put('/me')
@require_actor()
@audit_log('USER.PROFILE.UPDATE', entity='User', entity_id_key='id',
           diff_keys=['full_name', 'bio', 'contact_number', 'avatar_url'], pre_fetch=_snapshot)
def update_me(actor):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('JSON object body required')
    user = profiles.update_profile(get_db(), actor, data)
    return profile_json(user)


@profiles_bp.post('/me/avatar')
@require_actor()
@audit_log('USER.AVATAR.REPLACE', entity='User', entity_id_key='id', meta_keys=['avatar_url'])
def upload_avatar(actor):
    user = profiles.replace_avatar(
        get_db(), actor, request.files.get('file'), get_storage(), current_app.config['MAX_AVATAR_BYTES']
    )
    return profile_json(user)
