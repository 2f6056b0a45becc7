"""Collection path builder with deterministic structure.

Order per entity: list path, single-resource path, then action endpoints
in registry order.
"""
from typing import Any, Dict, List
from .constants import ACTION_REGISTRY, READ_ROLES, SORT_PARAM_MAP
from .helpers import caching_headers


def _id_param(id_param: str, id_type: str) -> Dict[str, Any]:
    return {"name": id_param, "in": "path", "required": True, "schema": {"type": id_type}}


def build_collection_paths(schema_name: str, prefix: str, id_param: str, id_type: str) -> Dict[str, Any]:
    paths: Dict[str, Any] = {}
    single_path = f"{prefix}/{{{id_param}}}"
    list_params: List[Dict[str, Any]] = [
        {"$ref": "#/components/parameters/LimitParam"},
        {"$ref": "#/components/parameters/OffsetParam"},
    ]
    if schema_name in SORT_PARAM_MAP:
        list_params.append({"$ref": f"#/components/parameters/{SORT_PARAM_MAP[schema_name]}"})

    paths[prefix] = {
        "get": {
            "summary": f"List {schema_name}s",
            "parameters": list_params,
            "responses": {
                "200": {
                    "description": "OK",
                    "headers": caching_headers(),
                    "content": {
                        "application/json": {
                            "schema": {
                                "type": "object",
                                "properties": {
                                    "data": {"type": "array", "items": {"$ref": f"#/components/schemas/{schema_name}"}},
                                    "pagination": {"$ref": "#/components/schemas/Pagination"},
                                },
                            }
                        }
                    },
                },
                "304": {"description": "Not Modified"},
                "400": {"$ref": "#/components/responses/BadRequest"},
            },
            "x-required-roles": READ_ROLES[schema_name],
        },
    }

    # Users are only addressed through their actions
    if schema_name == "Ticket":
        paths[single_path] = {
            "get": {
                "summary": "Get ticket",
                "parameters": [_id_param(id_param, id_type)],
                "responses": {
                    "200": {
                        "description": "OK",
                        "content": {"application/json": {"schema": {"$ref": f"#/components/schemas/{schema_name}"}}},
                    },
                    "403": {"$ref": "#/components/responses/Forbidden"},
                    "404": {"$ref": "#/components/responses/NotFound"},
                },
                "x-required-roles": READ_ROLES[schema_name],
            },
        }

    for spec in ACTION_REGISTRY.get(schema_name, []):
        op: Dict[str, Any] = {
            "summary": spec["summary"],
            "parameters": [_id_param(id_param, id_type)],
            "responses": {
                "200": {
                    "description": "OK",
                    "content": {"application/json": {"schema": {"$ref": f"#/components/schemas/{schema_name}"}}},
                },
                "400": {"$ref": "#/components/responses/BadRequest"},
                "403": {"$ref": "#/components/responses/Forbidden"},
                "404": {"$ref": "#/components/responses/NotFound"},
            },
            "x-required-roles": spec["roles"],
        }
        if spec.get("body"):
            op["requestBody"] = {
                "required": True,
                "content": {"application/json": {"schema": {"$ref": f"#/components/schemas/{spec['body']}"}}},
            }
        paths[f"{single_path}/{spec['action']}"] = {spec["method"]: op}

    return paths


__all__ = ["build_collection_paths"]
