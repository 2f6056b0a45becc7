"""Object storage for ticket attachments and profile avatars.

The rest of the app only ever holds the opaque key returned by `upload`;
public URLs are derived from it on the way out.
"""
from __future__ import annotations
import logging
import os
import time
import uuid
from typing import Optional, Protocol

from flask import current_app
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from broresolve.errors import ValidationError, UpstreamError

logger = logging.getLogger(__name__)


class ObjectStorage(Protocol):
    def upload(self, key: str, data: bytes, content_type: Optional[str] = None) -> str: ...

    def delete(self, key: str) -> None: ...

    def public_url(self, key: str) -> str: ...

    def path_for(self, key: str) -> str: ...

    def is_under(self, key: str, prefix: str) -> bool: ...


class LocalObjectStorage:
    """Filesystem-backed storage rooted at a single directory."""

    def __init__(self, root: str, url_prefix: str = '/media'):
        self.root = os.path.abspath(root)
        self.url_prefix = url_prefix.rstrip('/')

    def path_for(self, key: str) -> str:
        path = os.path.abspath(os.path.join(self.root, key))
        if os.path.commonpath([self.root, path]) != self.root or path == self.root:
            raise ValidationError('Invalid storage key')
        return path

    def is_under(self, key: str, prefix: str) -> bool:
        """True when `key` resolves to an object inside the `prefix` folder."""
        try:
            path = self.path_for(key)
        except ValidationError:
            return False
        base = os.path.abspath(os.path.join(self.root, prefix))
        return path != base and os.path.commonpath([base, path]) == base

    def upload(self, key: str, data: bytes, content_type: Optional[str] = None) -> str:
        path = self.path_for(key)
        tmp_path = f"{path}.{uuid.uuid4().hex}.tmp"
        try:
            os.makedirs(os.path.dirname(path), exist_ok=True)
            with open(tmp_path, 'wb') as fh:
                fh.write(data)
            os.replace(tmp_path, path)
        except OSError as e:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            logger.error('Storage upload failed key=%s: %s', key, e)
            raise UpstreamError('Failed to store file') from e
        logger.info('Stored object key=%s bytes=%s type=%s', key, len(data), content_type)
        return key

    def delete(self, key: str) -> None:
        path = self.path_for(key)
        try:
            os.remove(path)
        except FileNotFoundError:
            return
        except OSError as e:
            logger.error('Storage delete failed key=%s: %s', key, e)
            raise UpstreamError('Failed to delete file') from e
        logger.info('Deleted object key=%s', key)

    def public_url(self, key: str) -> str:
        return f"{self.url_prefix}/{key}"

    def key_from_url(self, url: str) -> Optional[str]:
        prefix = f"{self.url_prefix}/"
        if url and url.startswith(prefix):
            return url[len(prefix):]
        return None


def get_storage() -> LocalObjectStorage:
    return current_app.extensions['object_storage']


def read_image_upload(file: Optional[FileStorage], max_bytes: int, field_name: str = 'file') -> tuple[bytes, str, str]:
    """Validate an uploaded image; return (data, extension, content_type)."""
    if file is None or not file.filename:
        raise ValidationError(f'{field_name} required')
    content_type = file.mimetype or ''
    if not content_type.startswith('image/'):
        raise ValidationError('Please upload an image file')
    data = file.read()
    if len(data) > max_bytes:
        raise ValidationError(f'Image must be less than {max_bytes // (1024 * 1024)}MB')
    name = secure_filename(file.filename)
    ext = name.rsplit('.', 1)[-1].lower() if '.' in name else content_type.split('/', 1)[-1]
    return data, ext, content_type


def attachment_key(ext: str) -> str:
    return f"tickets/{uuid.uuid4().hex}.{ext}"


def avatar_key(user_id: int, ext: str) -> str:
    return f"avatars/{user_id}/{int(time.time() * 1000)}.{ext}"


__all__ = ['ObjectStorage', 'LocalObjectStorage', 'get_storage', 'read_image_upload', 'attachment_key', 'avatar_key']
