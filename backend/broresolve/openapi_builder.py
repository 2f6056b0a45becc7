"""Minimal deterministic OpenAPI spec builder.

Scope (purposefully narrow):
- Auth endpoints: signup, login, me, logout
- Ticket collection: list (cached), single GET, stage/upvote actions, stats
- Profile and admin user-management endpoints
- The add-admin function with its flat error contract
- Reusable params: limit, offset, ticket sort

This is the canonical builder module; `broresolve/openapi.py` re-exports from here.
"""
from typing import Any, Dict
from .constants.roles import Role
from .constants.tickets import Stage, Mood, Category, Priority, values
from .openapi_parts.constants import ENTITIES, SORT_DETAILS
from .openapi_parts.helpers import ticket_schema, profile_schema, enum_schema
from .openapi_parts.paths import build_collection_paths

__all__ = ["build_openapi_spec"]

ANY_ROLE = [Role.STUDENT.value, Role.ADMIN.value]


def _json_body(schema_ref: str) -> Dict[str, Any]:
    return {"required": True, "content": {"application/json": {"schema": {"$ref": f"#/components/schemas/{schema_ref}"}}}}


def _ok(schema_ref: str, code: str = "200") -> Dict[str, Any]:
    return {code: {"description": "OK", "content": {"application/json": {"schema": {"$ref": f"#/components/schemas/{schema_ref}"}}}}}


def build_openapi_spec() -> Dict[str, Any]:
    ticket = ticket_schema()
    # Display order of the pipeline; any stage may be set from any stage by an admin
    ticket["x-transitions"] = values(Stage)
    ticket["x-transition-graph"] = "complete"

    components: Dict[str, Any] = {
        "schemas": {
            "Ticket": ticket,
            "UserProfile": profile_schema(),
            "TicketCreate": {
                "type": "object",
                "properties": {"title": {"type": "string", "minLength": 1}, "mood": enum_schema(Mood)},
                "required": ["title"],
            },
            "StageChange": {"type": "object", "properties": {"stage": enum_schema(Stage)}, "required": ["stage"]},
            "TicketStats": {
                "type": "object",
                "properties": {k: {"type": "integer"} for k in ("critical", "in_progress", "resolved", "total")},
                "required": ["critical", "in_progress", "resolved", "total"],
            },
            "Signup": {
                "type": "object",
                "properties": {
                    "email": {"type": "string", "format": "email", "maxLength": 255},
                    "password": {"type": "string", "minLength": 6},
                    "full_name": {"type": "string", "minLength": 2, "maxLength": 100},
                },
                "required": ["email", "password", "full_name"],
            },
            "Login": {
                "type": "object",
                "properties": {"email": {"type": "string"}, "password": {"type": "string"}},
                "required": ["email", "password"],
            },
            "Token": {
                "type": "object",
                "properties": {"access_token": {"type": "string"}, "role": enum_schema(Role)},
                "required": ["access_token", "role"],
            },
            "ProfileUpdate": {
                "type": "object",
                "properties": {
                    "full_name": {"type": "string", "minLength": 2, "maxLength": 100},
                    "bio": {"type": "string", "nullable": True, "maxLength": 500},
                    "contact_number": {"type": "string", "nullable": True, "maxLength": 32},
                    "avatar_url": {"type": "string", "nullable": True},
                },
                "additionalProperties": False,
            },
            "AddAdmin": {"type": "object", "properties": {"email": {"type": "string"}}, "required": ["email"]},
            "AddAdminResult": {
                "type": "object",
                "properties": {"success": {"type": "boolean"}, "message": {"type": "string"}, "user_id": {"type": "integer"}},
                "required": ["success", "message", "user_id"],
            },
            "FunctionError": {"type": "object", "properties": {"error": {"type": "string"}}, "required": ["error"]},
            "Pagination": {
                "type": "object",
                "properties": {
                    "total": {"type": "integer"},
                    "limit": {"type": "integer"},
                    "offset": {"type": "integer"},
                    "returned": {"type": "integer"},
                },
                "required": ["total", "limit", "offset", "returned"],
            },
            "Error": {
                "type": "object",
                "properties": {
                    "error": {
                        "type": "object",
                        "properties": {"status": {"type": "integer"}, "title": {"type": "string"}, "detail": {"type": "string"}},
                        "required": ["status", "title", "detail"],
                    }
                },
                "required": ["error"],
            },
        },
        "responses": {
            "NotFound": {"description": "Not Found"},
            "BadRequest": {"description": "Bad Request"},
            "Forbidden": {"description": "Forbidden (missing role, not owner, or suspended)"},
            "Conflict": {"description": "Conflict"},
        },
        "securitySchemes": {"BearerAuth": {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"}},
        "parameters": {
            "LimitParam": {"name": "limit", "in": "query", "schema": {"type": "integer", "default": 50, "maximum": 200}},
            "OffsetParam": {"name": "offset", "in": "query", "schema": {"type": "integer", "default": 0}},
        },
    }
    for pname, desc in SORT_DETAILS.items():
        components["parameters"][pname] = {"name": "sort", "in": "query", "schema": {"type": "string"}, "description": desc}

    public: list = []
    paths: Dict[str, Any] = {
        "/auth/signup": {"post": {"summary": "Create a student account", "security": public,
                                  "requestBody": _json_body("Signup"),
                                  "responses": {**_ok("UserProfile", "201"), "409": {"$ref": "#/components/responses/Conflict"}}}},
        "/auth/login": {"post": {"summary": "Login", "security": public, "requestBody": _json_body("Login"),
                                 "responses": {**_ok("Token"), "401": {"description": "Invalid credentials"},
                                               "403": {"$ref": "#/components/responses/Forbidden"}}}},
        "/auth/me": {"get": {"summary": "Current user", "responses": _ok("UserProfile"), "x-required-roles": ANY_ROLE}},
        "/auth/logout": {"post": {"summary": "Revoke current token", "responses": {"200": {"description": "Revoked"}}}},
    }

    for schema_name, prefix, id_param, id_type in ENTITIES:
        # deterministic merge: keys are unique per entity, order preserved by insertion
        for k, v in build_collection_paths(schema_name, prefix, id_param, id_type).items():
            paths[k] = v

    paths["/tickets"]["get"]["parameters"] += [
        {"name": "stage", "in": "query", "schema": enum_schema(Stage)},
        {"name": "category", "in": "query", "schema": enum_schema(Category)},
        {"name": "priority", "in": "query", "schema": enum_schema(Priority)},
        {"name": "q", "in": "query", "schema": {"type": "string"}, "description": "Substring of title or display id"},
    ]
    paths["/tickets"]["post"] = {
        "summary": "Create ticket (category and priority are assigned by the classifier)",
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {"schema": {"$ref": "#/components/schemas/TicketCreate"}},
                "multipart/form-data": {
                    "schema": {
                        "type": "object",
                        "properties": {
                            "title": {"type": "string"},
                            "mood": enum_schema(Mood),
                            "attachment": {"type": "string", "format": "binary", "description": "image/*, at most 5MB"},
                        },
                        "required": ["title"],
                    }
                },
            },
        },
        "responses": {**_ok("Ticket", "201"), "400": {"$ref": "#/components/responses/BadRequest"}},
        "x-required-roles": ANY_ROLE,
    }
    paths["/tickets/stats"] = {"get": {"summary": "Counts over visible tickets", "responses": _ok("TicketStats"),
                                       "x-required-roles": ANY_ROLE}}
    paths["/profiles/me"] = {
        "get": {"summary": "Own profile", "responses": _ok("UserProfile"), "x-required-roles": ANY_ROLE},
        "put": {"summary": "Update own profile", "requestBody": _json_body("ProfileUpdate"),
                "responses": {**_ok("UserProfile"), "400": {"$ref": "#/components/responses/BadRequest"}},
                "x-required-roles": ANY_ROLE},
    }
    paths["/profiles/me/avatar"] = {
        "post": {
            "summary": "Replace avatar",
            "requestBody": {"required": True, "content": {"multipart/form-data": {"schema": {
                "type": "object",
                "properties": {"file": {"type": "string", "format": "binary", "description": "image/*, at most 2MB"}},
                "required": ["file"],
            }}}},
            "responses": {**_ok("UserProfile"), "400": {"$ref": "#/components/responses/BadRequest"}},
            "x-required-roles": ANY_ROLE,
        }
    }
    fn_err = {"content": {"application/json": {"schema": {"$ref": "#/components/schemas/FunctionError"}}}}
    paths["/functions/add-admin"] = {
        "post": {
            "summary": "Grant the admin role by email",
            "requestBody": _json_body("AddAdmin"),
            "responses": {
                **_ok("AddAdminResult"),
                "400": {"description": "Email is required | Invalid email format | User is already an admin", **fn_err},
                "401": {"description": "Unauthorized", **fn_err},
                "403": {"description": "Unauthorized: Admin access required", **fn_err},
                "404": {"description": "User with this email not found", **fn_err},
                "500": {"description": "Failed to add admin role | Internal server error", **fn_err},
            },
            "x-required-roles": [Role.ADMIN.value],
        },
        "options": {"summary": "CORS preflight", "security": public, "responses": {"200": {"description": "Empty"}}},
    }

    # Add operationIds & tags
    tag_desc: Dict[str, str] = {}
    for path, ops in paths.items():
        tag = path.split("/")[1].capitalize()
        for method, od in ops.items():
            rid = path.strip("/").replace("/", "_").replace("-", "_").replace("{", "").replace("}", "")
            od["operationId"] = f"auto_{method}_{rid}"
            od["tags"] = [tag]
        tag_desc[tag] = f"{tag} endpoints"

    return {
        "openapi": "3.0.3",
        "info": {"title": "BroResolve API", "version": "0.1.0"},
        "paths": paths,
        "components": components,
        "security": [{"BearerAuth": []}],
        "tags": [{"name": n, "description": d} for n, d in sorted(tag_desc.items())],
    }
