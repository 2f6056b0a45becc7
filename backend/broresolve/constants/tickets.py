"""Central enum definitions for ticket classification and presentation.

Every presentation table below is keyed by enum member and checked for
exhaustiveness at import time, so adding a variant without a matching row
fails on load instead of surfacing as a KeyError in a handler.
Never rename values silently; they are persisted and part of the API.
"""
from __future__ import annotations
import enum
from typing import Dict, Mapping, Type, TypeVar


class Category(str, enum.Enum):
    INFRASTRUCTURE = 'infrastructure'
    ACADEMIC = 'academic'
    MENTAL_HEALTH = 'mental-health'
    HOSTEL = 'hostel'
    FOOD = 'food'
    OTHER = 'other'


class Priority(str, enum.Enum):
    LOW = 'low'
    MEDIUM = 'medium'
    HIGH = 'high'
    CRITICAL = 'critical'


class Stage(str, enum.Enum):
    # Declaration order is pipeline order
    COMMITTED = 'committed'
    REVIEWING = 'reviewing'
    PATCHING = 'patching'
    RESOLVED = 'resolved'


class Mood(str, enum.Enum):
    FRUSTRATED = 'frustrated'
    PANICKING = 'panicking'
    NEUTRAL = 'neutral'
    SICK = 'sick'


PIPELINE = tuple(Stage)
INITIAL_STAGE = Stage.COMMITTED
TERMINAL_STAGE = Stage.RESOLVED
DEFAULT_MOOD = Mood.NEUTRAL

# Shown when the reporter's profile has no name or no longer exists
UNKNOWN_REPORTER = 'Unknown Student'

CATEGORY_ICONS: Dict[Category, str] = {
    Category.INFRASTRUCTURE: '🔧',
    Category.ACADEMIC: '📚',
    Category.MENTAL_HEALTH: '💙',
    Category.HOSTEL: '🏠',
    Category.FOOD: '🍽️',
    Category.OTHER: '📌',
}

CATEGORY_COLORS: Dict[Category, str] = {
    Category.INFRASTRUCTURE: 'red',
    Category.ACADEMIC: 'blue',
    Category.MENTAL_HEALTH: 'purple',
    Category.HOSTEL: 'yellow',
    Category.FOOD: 'orange',
    Category.OTHER: 'gray',
}

PRIORITY_STYLES: Dict[Priority, str] = {
    Priority.CRITICAL: 'urgent',
    Priority.HIGH: 'destructive',
    Priority.MEDIUM: 'warning',
    Priority.LOW: 'muted',
}

MOOD_EMOJIS: Dict[Mood, str] = {
    Mood.FRUSTRATED: '😤',
    Mood.PANICKING: '😰',
    Mood.NEUTRAL: '😐',
    Mood.SICK: '🤒',
}

STAGE_LABELS: Dict[Stage, str] = {
    Stage.COMMITTED: 'Committed',
    Stage.REVIEWING: 'Reviewing',
    Stage.PATCHING: 'Patching',
    Stage.RESOLVED: 'Resolved',
}

E = TypeVar('E', bound=enum.Enum)


def assert_exhaustive(table: Mapping[E, object], enum_cls: Type[E], name: str) -> None:
    missing = [m.value for m in enum_cls if m not in table]
    extra = [k for k in table if not isinstance(k, enum_cls)]
    if missing or extra:
        raise RuntimeError(f"{name} not exhaustive over {enum_cls.__name__}: missing={missing} extra={extra}")


PRESENTATION_TABLES = (
    (CATEGORY_ICONS, Category, 'CATEGORY_ICONS'),
    (CATEGORY_COLORS, Category, 'CATEGORY_COLORS'),
    (PRIORITY_STYLES, Priority, 'PRIORITY_STYLES'),
    (MOOD_EMOJIS, Mood, 'MOOD_EMOJIS'),
    (STAGE_LABELS, Stage, 'STAGE_LABELS'),
)

for _table, _enum_cls, _name in PRESENTATION_TABLES:
    assert_exhaustive(_table, _enum_cls, _name)


def values(enum_cls) -> list[str]:
    return [m.value for m in enum_cls]


__all__ = [
    'Category', 'Priority', 'Stage', 'Mood', 'PIPELINE', 'INITIAL_STAGE', 'TERMINAL_STAGE', 'DEFAULT_MOOD', 'UNKNOWN_REPORTER',
    'CATEGORY_ICONS', 'CATEGORY_COLORS', 'PRIORITY_STYLES', 'MOOD_EMOJIS', 'STAGE_LABELS',
    'PRESENTATION_TABLES', 'assert_exhaustive', 'values',
]
