from __future__ import annotations
"""Profile editing and avatar replacement."""
import logging
from typing import Any, Dict
from sqlalchemy.orm import Session
from werkzeug.datastructures import FileStorage

from broresolve.errors import ValidationError
from broresolve.models.authz import User
from broresolve.services import policy
from broresolve.services.storage import LocalObjectStorage, read_image_upload, avatar_key
from broresolve.services.users import get_user
from broresolve.utils.validation import validate_text

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('full_name', 'bio', 'contact_number', 'avatar_url')
MAX_BIO = 500
MAX_CONTACT = 32


def update_profile(session: Session, actor: policy.Actor, data: Dict[str, Any]) -> User:
    user = get_user(session, actor.id)
    unknown = set(data) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(f'Unknown profile fields: {sorted(unknown)}')
    if 'full_name' in data:
        user.full_name = validate_text(data['full_name'], 'full_name', min_len=2, max_len=100)
    for field, limit in (('bio', MAX_BIO), ('contact_number', MAX_CONTACT), ('avatar_url', 512)):
        if field not in data:
            continue
        value = data[field]
        if value is not None and not isinstance(value, str):
            raise ValidationError(f'{field} must be a string')
        if field == 'avatar_url' and value and '..' in value.split('/'):
            raise ValidationError('avatar_url must not contain relative path segments')
        if value is not None and len(value) > limit:
            raise ValidationError(f'{field} must be at most {limit} characters')
        setattr(user, field, value or None)
    session.commit()
    return user


def replace_avatar(session: Session, actor: policy.Actor, file: FileStorage, storage: LocalObjectStorage, max_bytes: int) -> User:
    """Upload a new avatar, drop the previous object, point the profile at the new URL."""
    data, ext, content_type = read_image_upload(file, max_bytes)
    user = get_user(session, actor.id)
    old_key = storage.key_from_url(user.avatar_url) if user.avatar_url else None
    key = storage.upload(avatar_key(user.id, ext), data, content_type)
    user.avatar_url = storage.public_url(key)
    session.commit()
    # Only objects that resolve inside the caller's own avatar folder
    if old_key and old_key != key and storage.is_under(old_key, f"avatars/{user.id}"):
        storage.delete(old_key)
    logger.info('Avatar replaced for user=%s', user.id)
    return user


__all__ = ['update_profile', 'replace_avatar', 'EDITABLE_FIELDS']
