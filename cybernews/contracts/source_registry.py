"""Source registry contract.

The registry is a JSON array of source objects. This module defines:
- A JSON Schema (for validation)
- Conversion into SourceConfig records
"""

from __future__ import annotations

from typing import Any, Dict, List

from jsonschema import Draft202012Validator

from cybernews.ingestion.article_types import STRATEGIES, SourceConfig


SOURCE_REGISTRY_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "array",
    "items": {
        "type": "object",
        "required": ["name", "location", "strategy"],
        "properties": {
            "name": {"type": "string", "minLength": 1},
            "location": {"type": "string", "pattern": "^https?://"},
            "strategy": {"type": "string", "enum": list(STRATEGIES)},
            "category": {"type": "string", "minLength": 1},
            "weight": {"type": "number", "minimum": 0},
        },
        "additionalProperties": True,
    },
}


_VALIDATOR = Draft202012Validator(SOURCE_REGISTRY_SCHEMA)


def validate_source_registry(payload: Any) -> List[str]:
    """Return a list of human-readable validation errors (empty means valid)."""
    errors = []
    for e in sorted(_VALIDATOR.iter_errors(payload), key=lambda x: [str(p) for p in x.path]):
        path = ".".join(str(p) for p in e.path) if e.path else "<root>"
        errors.append(f"{path}: {e.message}")
    return errors


def sources_from_payload(payload: Any) -> List[SourceConfig]:
    """Validate and convert a registry payload; raises ValueError when invalid."""
    errors = validate_source_registry(payload)
    if errors:
        raise ValueError("Invalid source registry:\n" + "\n".join(errors))
    return [
        SourceConfig(
            name=str(item["name"]).strip(),
            location=str(item["location"]).strip(),
            strategy=item["strategy"],
            category=str(item.get("category") or "general").strip(),
            weight=float(item.get("weight", 1.0)),
        )
        for item in payload
    ]
