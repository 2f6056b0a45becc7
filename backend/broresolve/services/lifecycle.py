from __future__ import annotations
"""Ticket lifecycle: creation, stage changes, upvotes, listing and stats.

Every operation takes an explicit session and actor. Nothing here reads
request or JWT state; the HTTP layer resolves the actor and passes it in.
Operations commit their own unit of work and either fully apply or raise.
"""
import logging
from typing import Any, Dict, Iterable, Optional
from sqlalchemy import select, update, insert, or_, func, case
from sqlalchemy.orm import Session

from broresolve.constants.tickets import Stage, Mood, Priority, PIPELINE, INITIAL_STAGE, TERMINAL_STAGE, Category
from broresolve.errors import ValidationError, NotFoundError, ConflictError
from broresolve.models.ticket import Ticket, TicketUpvote, Counter
from broresolve.services import policy
from broresolve.services.audit import add_audit
from broresolve.services.classifier import classify
from broresolve.utils.fsm import TransitionValidator
from broresolve.utils.filters import apply_filters, contains_pattern, LIKE_ESCAPE
from broresolve.utils.validation import validate_choice, validate_optional_choice, validate_text

logger = logging.getLogger(__name__)

TICKET_COUNTER = 'ticket'
DEFAULT_DISPLAY_PREFIX = 'BUG'

# Admin override: any stage may move to any stage, including backwards and
# onto itself. Tightening the pipeline means swapping this graph.
STAGE_FSM = TransitionValidator.complete([s.value for s in PIPELINE], field_name='stage')


def stage_index(stage) -> int:
    return PIPELINE.index(validate_choice(stage, Stage, 'stage'))


def progress_fraction(stage) -> float:
    """Share of the pipeline completed, 0.0 at committed and 1.0 at resolved."""
    return stage_index(stage) / (len(PIPELINE) - 1)


def format_display_id(seq: int, prefix: str = DEFAULT_DISPLAY_PREFIX) -> str:
    return f"{prefix}-{seq:03d}"


def next_sequence(session: Session, name: str) -> int:
    """Increment and return a named counter inside the caller's transaction.

    The UPDATE takes the row lock (or the SQLite write lock) so concurrent
    creators are serialized by the database rather than racing on count+1.
    """
    result = session.execute(update(Counter).where(Counter.name == name).values(value=Counter.value + 1))
    if result.rowcount == 0:
        session.execute(insert(Counter).values(name=name, value=1))
        return 1
    return session.execute(select(Counter.value).where(Counter.name == name)).scalar_one()


def create_ticket(session: Session, text, mood, actor: policy.Actor, attachment_ref: Optional[str] = None,
                  display_prefix: str = DEFAULT_DISPLAY_PREFIX) -> Ticket:
    policy.assert_can_create(actor)
    title = validate_text(text, 'title')
    mood = validate_optional_choice(mood, Mood, Mood.NEUTRAL, 'mood')
    category, priority = classify(title, mood)
    seq = next_sequence(session, TICKET_COUNTER)
    ticket = Ticket(
        display_id=format_display_id(seq, display_prefix),
        display_seq=seq,
        title=title,
        category=category.value,
        priority=priority.value,
        stage=INITIAL_STAGE.value,
        upvote_count=1,
        mood=mood.value,
        creator_id=actor.id,
        attachment_ref=attachment_ref,
    )
    session.add(ticket)
    session.flush()
    add_audit(session, actor.id, 'TICKET.CREATE', 'Ticket', ticket.id,
              {'display_id': ticket.display_id, 'category': ticket.category, 'priority': ticket.priority})
    session.commit()
    logger.info('Ticket %s created by user=%s category=%s priority=%s',
                ticket.display_id, actor.id, ticket.category, ticket.priority)
    return ticket


def _load(session: Session, ticket_id: str) -> Ticket:
    ticket = session.execute(select(Ticket).where(Ticket.id == ticket_id)).scalar_one_or_none()
    if ticket is None:
        raise NotFoundError('Ticket not found')
    return ticket


def get_ticket(session: Session, ticket_id: str, actor: policy.Actor) -> Ticket:
    ticket = _load(session, ticket_id)
    policy.assert_can_view(actor, ticket)
    return ticket


def change_stage(session: Session, ticket_id: str, new_stage, actor: policy.Actor) -> Ticket:
    """Set a ticket's stage. Admin only; last write wins, no version check."""
    policy.assert_can_mutate_stage(actor)
    target = validate_choice(new_stage, Stage, 'stage')
    ticket = _load(session, ticket_id)
    before = ticket.stage
    STAGE_FSM.assert_can_transition(before, target.value)
    ticket.stage = target.value
    if before != target.value:
        add_audit(session, actor.id, 'TICKET.STAGE', 'Ticket', ticket.id,
                  {'changes': {'stage': {'before': before, 'after': target.value}}})
    session.commit()
    logger.info('Ticket %s stage %s -> %s by admin=%s', ticket.display_id, before, target.value, actor.id)
    return ticket


def upvote(session: Session, ticket_id: str, actor: policy.Actor, once_per_actor: bool = False) -> Ticket:
    """Add one upvote.

    Plain read-modify-write: the count is read, then count+1 is written back.
    Concurrent upvotes on the same ticket can therefore lose updates.
    """
    policy.assert_can_upvote(actor)
    ticket = _load(session, ticket_id)
    if once_per_actor:
        already = session.execute(
            select(func.count(TicketUpvote.id)).where(TicketUpvote.ticket_id == ticket.id, TicketUpvote.actor_id == actor.id)
        ).scalar_one()
        if already:
            raise ConflictError('You have already upvoted this ticket')
    current = ticket.upvote_count
    ticket.upvote_count = current + 1
    session.add(TicketUpvote(ticket_id=ticket.id, actor_id=actor.id))
    session.commit()
    logger.debug('Ticket %s upvoted by user=%s (%s -> %s)', ticket.display_id, actor.id, current, current + 1)
    return ticket


TICKET_FILTERS: Dict[str, Dict[str, Any]] = {
    'stage': {'coerce': lambda v: validate_choice(v, Stage, 'stage').value, 'op': lambda q, v: q.filter(Ticket.stage == v)},
    'category': {'coerce': lambda v: validate_choice(v, Category, 'category').value, 'op': lambda q, v: q.filter(Ticket.category == v)},
    'priority': {'coerce': lambda v: validate_choice(v, Priority, 'priority').value, 'op': lambda q, v: q.filter(Ticket.priority == v)},
    'q': {
        'coerce': lambda v: str(v).strip(),
        'op': lambda q, v: q.filter(or_(Ticket.title.ilike(contains_pattern(v), escape=LIKE_ESCAPE),
                                        Ticket.display_id.ilike(contains_pattern(v), escape=LIKE_ESCAPE))),
    },
}

# Enum declaration order is severity order for Priority and pipeline order for Stage
PRIORITY_RANK = case({p.value: i for i, p in enumerate(Priority)}, value=Ticket.priority)
STAGE_RANK = case({s.value: i for i, s in enumerate(PIPELINE)}, value=Ticket.stage)

TICKET_SORT_FIELDS = {
    'created_at': Ticket.created_at,
    'upvote_count': Ticket.upvote_count,
    'priority': PRIORITY_RANK,
    'stage': STAGE_RANK,
    'display_id': Ticket.display_seq,
}


def visible_tickets(session: Session, actor: policy.Actor, filters: Optional[Dict[str, Any]] = None):
    """Query of tickets the actor may see: all for admins, own for students."""
    q = session.query(Ticket)
    if not actor.is_admin:
        q = q.filter(Ticket.creator_id == actor.id)
    return apply_filters(q, TICKET_FILTERS, filters or {})


def list_tickets(session: Session, actor: policy.Actor, filters: Optional[Dict[str, Any]] = None):
    """Visible tickets, newest first."""
    return visible_tickets(session, actor, filters).order_by(Ticket.created_at.desc(), Ticket.display_seq.desc())


def ticket_stats(tickets: Iterable[Ticket]) -> Dict[str, int]:
    stats = {'critical': 0, 'in_progress': 0, 'resolved': 0, 'total': 0}
    for t in tickets:
        stats['total'] += 1
        if t.priority == Priority.CRITICAL.value:
            stats['critical'] += 1
        if t.stage == TERMINAL_STAGE.value:
            stats['resolved'] += 1
        else:
            stats['in_progress'] += 1
    return stats


__all__ = [
    'STAGE_FSM', 'stage_index', 'progress_fraction', 'format_display_id', 'next_sequence',
    'create_ticket', 'get_ticket', 'change_stage', 'upvote', 'visible_tickets', 'list_tickets',
    'ticket_stats', 'TICKET_FILTERS', 'TICKET_SORT_FIELDS',
]
