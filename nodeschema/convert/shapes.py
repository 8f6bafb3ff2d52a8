# nodeschema/convert/shapes.py
# Fixed JSON Schema shapes for composite widgets whose runtime value has a
# known structure independent of the property definition.
# Always hand out copies via fixed_shape(); these templates are never mutated.
import copy
from typing import Any, Dict

JSON_SCHEMA_DRAFT = "http://json-schema.org/draft-07/schema#"

COLOR_PATTERN = "^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$"

DEFAULT_LOCATOR_MODES = ["id", "url", "list"]

ASSIGNMENT_VALUE_TYPES = ["string", "number", "boolean", "object", "array"]

JSON_VALUE_ONE_OF = [
    {"type": "string", "description": "JSON string"},
    {"type": "object"},
    {"type": "array"},
]

FILTER_PROPERTIES = {
    "conditions": {
        "type": "array",
        "items": {
            "type": "object",
            "properties": {
                "leftValue": {"type": "string"},
                # right side is compared as whatever type the operator expects
                "rightValue": {},
                "operator": {"type": "object"},
            },
        },
    },
    "combinator": {"type": "string", "enum": ["and", "or"], "default": "and"},
    "options": {
        "type": "object",
        "properties": {
            "caseSensitive": {"type": "boolean"},
            "leftValue": {"type": "string"},
            "typeValidation": {"type": "string"},
        },
    },
}

CREDENTIALS_SELECT_PROPERTIES = {
    "credsType": {"type": "string"},
    "nodeCredentialType": {"type": "string"},
}

ASSIGNMENT_COLLECTION_PROPERTIES = {
    "assignments": {
        "type": "array",
        "items": {
            "type": "object",
            "properties": {
                "id": {"type": "string"},
                "name": {"type": "string"},
                "value": {},
                "type": {"type": "string", "enum": ASSIGNMENT_VALUE_TYPES},
            },
            "required": ["name"],
        },
    },
}


def fixed_shape(template: Any) -> Any:
    """Return an independent deep copy of a shape template."""
    return copy.deepcopy(template)


def locator_properties(mode_names) -> Dict[str, Any]:
    return {
        "__rl": {"type": "boolean", "const": True},
        "mode": {"type": "string", "enum": list(mode_names)},
        "value": {"type": "string"},
    }
