from __future__ import annotations
from flask import Blueprint
from broresolve import get_db
from broresolve.constants.roles import Role
from broresolve.decorators.auth import require_actor
from broresolve.services import users
from broresolve.routes.profiles import profile_json
from broresolve.utils.listing import apply_pagination, build_list_payload

admin_bp = Blueprint('admin', __name__)


@admin_bp.get('/users')
@require_actor(Role.ADMIN)
def list_users(actor):
    paged_q, total, limit, offset = apply_pagination(users.list_users(get_db(), actor))
    return build_list_payload([profile_json(u) for u in paged_q.all()], total, limit, offset)


@admin_bp.post('/users/<int:user_id>/suspend')
@require_actor(Role.ADMIN)
def suspend_user(user_id: int, actor):
    return profile_json(users.set_active(get_db(), user_id, False, actor))


@admin_bp.post('/users/<int:user_id>/activate')
@require_actor(Role.ADMIN)
def activate_user(user_id: int, actor):
    return profile_json(users.set_active(get_db(), user_id, True, actor))
