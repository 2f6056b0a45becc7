"""List endpoint plumbing: pagination, list payloads and conditional GET.

Validators are derived from the page contents. The ETag hashes the returned
ids, paging window and newest `updated_at` on the page. Last-Modified carries
that same timestamp at one-second resolution, since HTTP dates have no
sub-second part.
"""
from __future__ import annotations
import hashlib
from datetime import datetime, timezone, timedelta
from email.utils import parsedate_to_datetime, format_datetime
from typing import Iterable, Optional, Tuple
from flask import request, make_response
from sqlalchemy.orm import Query

from broresolve.config.settings import normalize_pagination
from broresolve.errors import ValidationError

# If-Modified-Since round-trips through HTTP-date, allow for that truncation
IMS_SLACK = timedelta(seconds=1)


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        # SQLite hands back naive values for timezone-aware columns
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def canonicalize_timestamp(dt: datetime) -> datetime:
    """UTC, tz-aware, whole seconds."""
    return _as_utc(dt).replace(microsecond=0)


def iso_z(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    return _as_utc(dt).isoformat().replace('+00:00', 'Z')


def latest_timestamp(rows: Iterable, attr: str = 'updated_at') -> Optional[datetime]:
    stamps = [canonicalize_timestamp(v) for v in (getattr(r, attr, None) for r in rows) if v is not None]
    return max(stamps, default=None)


def apply_pagination(q: Query) -> Tuple[Query, int, int, int]:
    """Apply ?limit/?offset; returns (paged query, total, limit, offset)."""
    try:
        limit, offset = normalize_pagination(request.args.get('limit'), request.args.get('offset'))
    except ValueError as e:
        raise ValidationError(str(e))
    total = q.order_by(None).count()
    return q.offset(offset).limit(limit), total, limit, offset


def compute_etag(ids: Iterable, total: int, limit: int, offset: int, latest_iso: Optional[str] = None) -> str:
    seed = '|'.join([','.join(str(i) for i in ids), str(total), str(limit), str(offset), latest_iso or ''])
    return hashlib.sha256(seed.encode()).hexdigest()[:32]


def build_list_payload(rows: list, total: int, limit: int, offset: int, **extra):
    payload = {
        'data': rows,
        'pagination': {'total': total, 'limit': limit, 'offset': offset, 'returned': len(rows)},
    }
    payload.update(extra)
    return payload


def _stamp(resp, etag: str, latest: Optional[datetime]):
    resp.headers['ETag'] = etag
    if latest is not None:
        resp.headers['Last-Modified'] = format_datetime(latest, usegmt=True)
        resp.headers['X-Last-Modified-ISO'] = iso_z(latest)
    return resp


def make_cached_list_response(rows: list, total: int, limit: int, offset: int,
                              latest_ts: Optional[datetime] = None, **extra):
    """JSON list response with ETag / Last-Modified set. Returns (response, etag)."""
    latest = canonicalize_timestamp(latest_ts) if latest_ts is not None else None
    etag = compute_etag((r.get('id') for r in rows), total, limit, offset, iso_z(latest))
    resp = make_response(build_list_payload(rows, total, limit, offset, **extra))
    return _stamp(resp, etag, latest), etag


def parse_http_timestamp(raw: Optional[str]) -> Optional[datetime]:
    """Accept ISO 8601 (what X-Last-Modified-ISO hands out) or an RFC 1123 HTTP-date."""
    if not raw:
        return None
    try:
        return _as_utc(datetime.fromisoformat(raw.replace('Z', '+00:00')))
    except ValueError:
        pass
    try:
        return _as_utc(parsedate_to_datetime(raw))
    except (TypeError, ValueError):
        return None


def handle_conditional(etag_value: str, latest_ts: Optional[datetime]):
    """Return a 304 response when the client's copy is current, else None.

    If-None-Match wins; If-Modified-Since is only consulted without it.
    """
    latest = canonicalize_timestamp(latest_ts) if latest_ts is not None else None
    inm = request.headers.get('If-None-Match')
    if inm:
        if inm.strip('"') == etag_value:
            return _stamp(make_response('', 304), etag_value, latest)
        return None
    since = parse_http_timestamp(request.headers.get('If-Modified-Since'))
    if since is not None and latest is not None and latest <= canonicalize_timestamp(since) + IMS_SLACK:
        return _stamp(make_response('', 304), etag_value, latest)
    return None
