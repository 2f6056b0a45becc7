from __future__ import annotations
import logging
from flask import Blueprint, request, current_app
from broresolve import get_db
from broresolve.constants.tickets import (
    Stage, Category, Priority, Mood, CATEGORY_ICONS, CATEGORY_COLORS, PRIORITY_STYLES, MOOD_EMOJIS, STAGE_LABELS,
    UNKNOWN_REPORTER,
)
from broresolve.decorators.auth import require_actor
from broresolve.errors import ValidationError
from broresolve.models.ticket import Ticket
from broresolve.services import lifecycle
from broresolve.services.storage import get_storage, read_image_upload, attachment_key
from broresolve.utils.listing import (
    apply_pagination, handle_conditional, make_cached_list_response, iso_z, latest_timestamp,
)
from broresolve.utils.sorting import apply_multi_sort

logger = logging.getLogger(__name__)

tickets_bp = Blueprint('tickets', __name__)


def ticket_json(t):
    stage = Stage(t.stage)
    category = Category(t.category)
    mood = Mood(t.mood) if t.mood else None
    return {
        'id': t.id,
        'display_id': t.display_id,
        'title': t.title,
        'category': category.value,
        'category_icon': CATEGORY_ICONS[category],
        'category_color': CATEGORY_COLORS[category],
        'priority': t.priority,
        'priority_style': PRIORITY_STYLES[Priority(t.priority)],
        'stage': stage.value,
        'stage_label': STAGE_LABELS[stage],
        'stage_index': lifecycle.stage_index(stage),
        'progress': lifecycle.progress_fraction(stage),
        'upvote_count': t.upvote_count,
        'mood': mood.value if mood else None,
        'mood_emoji': MOOD_EMOJIS[mood] if mood else None,
        'creator_id': t.creator_id,
        'creator_name': (t.creator.full_name if t.creator is not None else None) or UNKNOWN_REPORTER,
        'attachment_ref': t.attachment_ref,
        'attachment_url': get_storage().public_url(t.attachment_ref) if t.attachment_ref else None,
        'created_at': iso_z(t.created_at),
        'updated_at': iso_z(t.updated_at),
    }


@tickets_bp.get('')
@require_actor()
def list_tickets(actor):
    q = lifecycle.visible_tickets(get_db(), actor, request.args)
    q = apply_multi_sort(q, request.args.get('sort'), lifecycle.TICKET_SORT_FIELDS,
                         Ticket.display_seq.desc(), default_expr='-created_at')
    paged_q, total, limit, offset = apply_pagination(q)
    rows = paged_q.all()
    rows_json = [ticket_json(t) for t in rows]
    latest_ts = latest_timestamp(rows)
    resp, etag = make_cached_list_response(rows_json, total, limit, offset, latest_ts)
    cond = handle_conditional(etag, latest_ts)
    if cond:
        return cond
    return resp


@tickets_bp.get('/stats')
@require_actor()
def ticket_stats(actor):
    return lifecycle.ticket_stats(lifecycle.visible_tickets(get_db(), actor).all())


@tickets_bp.post('')
@require_actor()
def create_ticket(actor):
    if request.mimetype == 'multipart/form-data':
        title = request.form.get('title')
        mood = request.form.get('mood')
        upload = request.files.get('attachment')
    else:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError('JSON object body required')
        title = data.get('title')
        mood = data.get('mood')
        upload = None

    storage = get_storage()
    attachment_ref = None
    if upload is not None and upload.filename:
        blob, ext, content_type = read_image_upload(upload, current_app.config['MAX_ATTACHMENT_BYTES'], 'attachment')
        attachment_ref = storage.upload(attachment_key(ext), blob, content_type)
    try:
        ticket = lifecycle.create_ticket(get_db(), title, mood, actor, attachment_ref=attachment_ref,
                                         display_prefix=current_app.config['DISPLAY_ID_PREFIX'])
    except Exception:
        get_db().rollback()
        if attachment_ref:
            logger.warning('Ticket creation failed; removing orphaned attachment %s', attachment_ref)
            storage.delete(attachment_ref)
        raise
    return ticket_json(ticket), 201


@tickets_bp.get('/<ticket_id>')
@require_actor()
def get_ticket(ticket_id: str, actor):
    return ticket_json(lifecycle.get_ticket(get_db(), ticket_id, actor))


@tickets_bp.put('/<ticket_id>/stage')
@require_actor()
def change_stage(ticket_id: str, actor):
    data = request.get_json(silent=True) or {}
    ticket = lifecycle.change_stage(get_db(), ticket_id, data.get('stage'), actor)
    return ticket_json(ticket)


@tickets_bp.post('/<ticket_id>/upvote')
@require_actor()
def upvote(ticket_id: str, actor):
    ticket = lifecycle.upvote(get_db(), ticket_id, actor,
                              once_per_actor=current_app.config['ENFORCE_SINGLE_UPVOTE'])
    return ticket_json(ticket)
