"""Centralized constants for the OpenAPI spec builder.

Splitting these out keeps `openapi_builder.py` concise. Tests depend on
deterministic ordering and content.
"""
from typing import Dict, List, Tuple

from broresolve.constants.roles import Role

# Collection registry: (SchemaName, path prefix, id param, id type)
ENTITIES: List[Tuple[str, str, str, str]] = [
    ("Ticket", "/tickets", "ticket_id", "string"),
    ("UserProfile", "/admin/users", "user_id", "integer"),
]

# Declarative registry for action (state-changing) endpoints.
ACTION_REGISTRY: Dict[str, List[Dict[str, object]]] = {
    "Ticket": [
        {"action": "stage", "method": "put", "summary": "Change ticket stage", "roles": [Role.ADMIN.value],
         "body": "StageChange"},
        {"action": "upvote", "method": "post", "summary": "Upvote ticket",
         "roles": [Role.STUDENT.value, Role.ADMIN.value]},
    ],
    "UserProfile": [
        {"action": "suspend", "method": "post", "summary": "Suspend account", "roles": [Role.ADMIN.value]},
        {"action": "activate", "method": "post", "summary": "Re-activate account", "roles": [Role.ADMIN.value]},
    ],
}

# Roles allowed to read each collection; students only see their own tickets.
READ_ROLES: Dict[str, List[str]] = {
    "Ticket": [Role.STUDENT.value, Role.ADMIN.value],
    "UserProfile": [Role.ADMIN.value],
}

SORT_PARAM_MAP = {
    "Ticket": "SortTicketsParam",
}

SORT_DETAILS = {
    "SortTicketsParam": "Multi-field sort (created_at,upvote_count,priority,stage,display_id). Prefix - for desc. Default -created_at",
}

__all__ = [
    "ENTITIES",
    "ACTION_REGISTRY",
    "READ_ROLES",
    "SORT_PARAM_MAP",
    "SORT_DETAILS",
]
