# nodeschema/convert/document.py
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from nodeschema.convert.properties import present, prop_to_schema
from nodeschema.convert.shapes import JSON_SCHEMA_DRAFT

DEFAULT_VERSION = 1

# source key -> vendor key, copied only when set on the description
PASSTHROUGH_METADATA = (
    ("subtitle", "x-subtitle"),
    ("icon", "x-icon"),
    ("inputs", "x-inputs"),
    ("outputs", "x-outputs"),
    ("credentials", "x-credentials"),
)


def normalize_group(group: Any) -> List[Any]:
    """Node group may be a single value or a list; always return a list."""
    if isinstance(group, (list, tuple)):
        return list(group)
    return [group] if group else []


def desc_to_schema(desc: Mapping, version: Optional[Any] = None) -> Dict[str, Any]:
    """
    Build the top-level JSON Schema document for one node description.

    ``version`` overrides the description's own version label (default 1).
    Properties are converted in order; unnamed ones and those with no
    contribution are skipped, and a repeated name keeps the last definition.
    """
    schema: Dict[str, Any] = {
        "$schema": JSON_SCHEMA_DRAFT,
        "title": desc.get("displayName") or desc.get("name"),
        "description": desc.get("description") or "",
        "x-n8n-node-type": desc.get("name"),
        "x-n8n-version": version if version is not None else (desc.get("version") or DEFAULT_VERSION),
        "x-n8n-group": normalize_group(desc.get("group")),
        "type": "object",
        "properties": {},
    }

    for src_key, vendor_key in PASSTHROUGH_METADATA:
        if present(desc.get(src_key)):
            schema[vendor_key] = desc[src_key]
    if present(desc.get("webhooks")):
        schema["x-webhooks"] = "true"

    for prop in desc.get("properties") or []:
        if not isinstance(prop, Mapping) or not prop.get("name"):
            continue
        prop_schema = prop_to_schema(prop)
        if prop_schema is not None:
            schema["properties"][prop["name"]] = prop_schema

    return schema
