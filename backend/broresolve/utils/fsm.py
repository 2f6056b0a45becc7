from __future__ import annotations
"""Simple finite state machine utility for checking allowed stage transitions.

Usage:
    from broresolve.utils.fsm import TransitionValidator
    STRICT = TransitionValidator({
        'committed': {'reviewing'},
        'reviewing': {'patching'},
        'patching': {'resolved'},
        'resolved': set(),
    }, field_name='stage')
    STRICT.assert_can_transition(current, target)

    OVERRIDE = TransitionValidator.complete(['committed', 'reviewing', ...], field_name='stage')

Raises ValidationError (400) if invalid.
"""
from typing import Dict, Iterable, Set
from broresolve.errors import ValidationError


class TransitionValidator:
    def __init__(self, graph: Dict[str, Set[str]], field_name: str = 'status'):
        self.graph = graph
        self.field_name = field_name

    @classmethod
    def complete(cls, states: Iterable[str], field_name: str = 'status') -> 'TransitionValidator':
        """Every state may move to every state, itself included."""
        states = list(states)
        return cls({s: set(states) for s in states}, field_name=field_name)

    @property
    def states(self) -> Set[str]:
        return set(self.graph)

    def can_transition(self, current: str, target: str) -> bool:
        return target in self.graph.get(current, set())

    def assert_can_transition(self, current: str, target: str):
        if not self.can_transition(current, target):
            raise ValidationError(f"Invalid {self.field_name} transition {current} -> {target}")
        return True

__all__ = ['TransitionValidator']
