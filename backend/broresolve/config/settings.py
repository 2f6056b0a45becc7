"""Environment-backed application settings.

`create_app` starts from `default_settings()` and lets callers (tests, scripts)
override individual keys.
"""
from __future__ import annotations
import os
from datetime import timedelta
from typing import Any, Dict

DEFAULT_LIMIT = 50
MAX_LIMIT = 200

MAX_AVATAR_BYTES = 2 * 1024 * 1024
MAX_ATTACHMENT_BYTES = 5 * 1024 * 1024


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == '':
        return default
    return int(raw)


def default_settings() -> Dict[str, Any]:
    return {
        'JWT_SECRET_KEY': os.getenv('JWT_SECRET_KEY', 'dev-secret'),
        'JWT_ACCESS_TOKEN_EXPIRES': timedelta(minutes=_env_int('JWT_ACCESS_TOKEN_EXPIRES_MINUTES', 60)),
        'DATABASE_URL': os.getenv('DATABASE_URL', 'sqlite:///dev.db'),
        'UPLOAD_DIR': os.getenv('UPLOAD_DIR', os.path.abspath('uploads')),
        'MEDIA_URL_PREFIX': os.getenv('MEDIA_URL_PREFIX', '/media'),
        'MAX_AVATAR_BYTES': _env_int('MAX_AVATAR_BYTES', MAX_AVATAR_BYTES),
        'MAX_ATTACHMENT_BYTES': _env_int('MAX_ATTACHMENT_BYTES', MAX_ATTACHMENT_BYTES),
        'DISPLAY_ID_PREFIX': os.getenv('DISPLAY_ID_PREFIX', 'BUG'),
        'ENFORCE_SINGLE_UPVOTE': _env_bool('ENFORCE_SINGLE_UPVOTE', False),
        'LOG_LEVEL': os.getenv('LOG_LEVEL', 'INFO'),
    }


def normalize_pagination(limit_raw, offset_raw):
    try:
        limit = int(limit_raw) if limit_raw is not None else DEFAULT_LIMIT
        offset = int(offset_raw) if offset_raw is not None else 0
    except ValueError:
        raise ValueError('limit/offset must be int')
    limit = max(1, min(limit, MAX_LIMIT))
    offset = max(0, offset)
    return limit, offset
