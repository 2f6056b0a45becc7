"""Keyword triage for new tickets.

A crude, deterministic heuristic: case-insensitive substring matching against
an ordered rule table, first match wins for category. Priority comes from the
matching rule and is then overridden by mood. Substring means substring:
"teacher" contains "ac" and lands in infrastructure.
"""
from __future__ import annotations
from typing import NamedTuple, Optional, Tuple, Union

from broresolve.constants.tickets import Category, Priority, Mood, DEFAULT_MOOD


class Rule(NamedTuple):
    keywords: Tuple[str, ...]
    category: Category
    priority: Priority


RULES: Tuple[Rule, ...] = (
    Rule(('wifi', 'ac', 'lab'), Category.INFRASTRUCTURE, Priority.HIGH),
    Rule(('notes', 'lecture'), Category.ACADEMIC, Priority.MEDIUM),
    Rule(('counseling', 'mental'), Category.MENTAL_HEALTH, Priority.HIGH),
)

FALLBACK = (Category.OTHER, Priority.MEDIUM)

MOOD_PRIORITY_OVERRIDES = {
    Mood.PANICKING: Priority.CRITICAL,
}


def classify(text: str, mood: Optional[Union[Mood, str]] = None) -> Tuple[Category, Priority]:
    """Return (category, priority) for a free-text description.

    `mood` defaults to neutral. Never raises for a string input.
    """
    haystack = text.lower()
    category, priority = FALLBACK
    for rule in RULES:
        if any(k in haystack for k in rule.keywords):
            category, priority = rule.category, rule.priority
            break
    mood = Mood(mood) if mood is not None else DEFAULT_MOOD
    priority = MOOD_PRIORITY_OVERRIDES.get(mood, priority)
    return category, priority


__all__ = ['classify', 'RULES', 'FALLBACK', 'MOOD_PRIORITY_OVERRIDES']
