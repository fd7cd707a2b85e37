"""OpenAPI customization utilities.

Adds tag descriptions and documents the error envelope shared by every
endpoint, keeping documentation concerns out of the app factory.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

TAGS_METADATA = [
    {
        "name": "Stats",
        "description": "Aggregated GitHub user statistics.",
    },
    {
        "name": "Health",
        "description": "Liveness checks.",
    },
]

ERROR_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "error": {
            "type": "object",
            "properties": {
                "code": {"type": "string"},
                "message": {"type": "string"},
                "request_id": {"type": "string", "nullable": True},
                "details": {"type": "object"},
            },
            "required": ["code", "message"],
        }
    },
}

# Status codes the stats endpoint can answer with besides 200
STATS_ERROR_RESPONSES = {
    "400": "Missing username",
    "429": "Request limit exceeded",
    "500": "GitHub request failed",
}


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation with tags and error responses.

    - Adds tags metadata if not present
    - Registers an ``ErrorResponse`` component and references it from the
      error status codes of every Stats operation
    """

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        schema = original_openapi()

        components = schema.setdefault("components", {})
        components.setdefault("schemas", {}).setdefault("ErrorResponse", ERROR_RESPONSE_SCHEMA)

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        for tag in TAGS_METADATA:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        for methods in schema.get("paths", {}).values():
            for method_obj in methods.values():
                if not isinstance(method_obj, dict) or "Stats" not in method_obj.get("tags", []):
                    continue
                responses = method_obj.setdefault("responses", {})
                for status_code, description in STATS_ERROR_RESPONSES.items():
                    responses.setdefault(
                        status_code,
                        {
                            "description": description,
                            "content": {
                                "application/json": {
                                    "schema": {"$ref": "#/components/schemas/ErrorResponse"}
                                }
                            },
                        },
                    )

        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
