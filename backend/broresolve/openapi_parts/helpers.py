"""Helper functions for the OpenAPI builder.

Schemas are derived from the enums and presentation tables so the document
cannot drift from what the API accepts.
"""
from typing import Any, Dict

from broresolve.constants.tickets import Category, Priority, Stage, Mood, values
from broresolve.constants.roles import Role


def enum_schema(enum_cls) -> Dict[str, Any]:
    return {"type": "string", "enum": values(enum_cls)}


def caching_headers() -> Dict[str, Any]:
    return {
        "ETag": {"schema": {"type": "string"}},
        "Last-Modified": {"schema": {"type": "string"}},
        "X-Last-Modified-ISO": {"schema": {"type": "string"}},
    }


def ticket_schema() -> Dict[str, Any]:
    nullable_str = {"type": "string", "nullable": True}
    return {
        "type": "object",
        "properties": {
            "id": {"type": "string", "format": "uuid"},
            "display_id": {"type": "string", "example": "BUG-001"},
            "title": {"type": "string"},
            "category": enum_schema(Category),
            "category_icon": {"type": "string"},
            "category_color": {"type": "string"},
            "priority": enum_schema(Priority),
            "priority_style": {"type": "string"},
            "stage": enum_schema(Stage),
            "stage_label": {"type": "string"},
            "stage_index": {"type": "integer", "minimum": 0, "maximum": len(Stage) - 1},
            "progress": {"type": "number", "minimum": 0, "maximum": 1},
            "upvote_count": {"type": "integer", "minimum": 1},
            "mood": {**enum_schema(Mood), "nullable": True},
            "mood_emoji": nullable_str,
            "creator_id": {"type": "integer"},
            "creator_name": {"type": "string", "description": "Reporter full name, or \"Unknown Student\""},
            "attachment_ref": nullable_str,
            "attachment_url": nullable_str,
            "created_at": {"type": "string", "format": "date-time"},
            "updated_at": {"type": "string", "format": "date-time"},
        },
        "required": ["id", "display_id", "title", "category", "priority", "stage", "upvote_count", "creator_id"],
    }


def profile_schema() -> Dict[str, Any]:
    nullable_str = {"type": "string", "nullable": True}
    return {
        "type": "object",
        "properties": {
            "id": {"type": "integer"},
            "email": {"type": "string", "format": "email"},
            "full_name": {"type": "string"},
            "role": enum_schema(Role),
            "is_active": {"type": "boolean"},
            "bio": nullable_str,
            "avatar_url": nullable_str,
            "contact_number": nullable_str,
            "created_at": {"type": "string", "format": "date-time"},
        },
        "required": ["id", "email", "full_name", "role", "is_active"],
    }


__all__ = ["enum_schema", "caching_headers", "ticket_schema", "profile_schema"]
