# nodeschema/convert/properties.py
"""
Property definition -> JSON Schema fragment.

A property definition is the declarative descriptor of one configurable
field of a node (``name``, ``type``, ``typeOptions``, ``options`` ...).
Conversion dispatches on the ``type`` tag through ``_HANDLERS``; tags not in
the table fall back to a plain string fragment that keeps the original tag
under ``x-n8n-type``.

Nested definitions (``collection`` / ``fixedCollection``) are not converted
by recursion: handlers enqueue ``(sub_definition, target_properties)`` work
items and ``prop_to_schema`` drains the queue, so nesting depth is bounded
only by memory.
"""

import json
from collections import deque
from collections.abc import Mapping
from typing import Any, Callable, Deque, Dict, List, Optional, Tuple

from nodeschema.convert.shapes import (
    ASSIGNMENT_COLLECTION_PROPERTIES,
    COLOR_PATTERN,
    CREDENTIALS_SELECT_PROPERTIES,
    DEFAULT_LOCATOR_MODES,
    FILTER_PROPERTIES,
    JSON_VALUE_ONE_OF,
    fixed_shape,
    locator_properties,
)

Schema = Dict[str, Any]
WorkQueue = Deque[Tuple[Any, Schema]]
Handler = Callable[[Mapping, Schema, WorkQueue], None]

NOTICE_TYPE = "notice"
LOCATOR_MODE_KEYS = ("name", "displayName", "type")


# ---------- Public API ----------

def prop_to_schema(prop: Any) -> Optional[Schema]:
    """
    Convert one property definition into a JSON Schema fragment.

    Returns None ("no contribution") for anything that is not a mapping,
    lacks a name, or is a ``notice``. Never raises for such input.
    """
    pending: WorkQueue = deque()
    schema = _fragment(prop, pending)

    while pending:
        sub, target = pending.popleft()
        sub_schema = _fragment(sub, pending)
        if sub_schema is not None:
            # duplicate names: later definition replaces the earlier one
            target[sub["name"]] = sub_schema

    return schema


def present(value: Any) -> bool:
    """Set on the source: empty lists and dicts count, None/False/"" do not."""
    return value is not None and value is not False and value != ""


def contributes(prop: Any) -> bool:
    """True if the definition can produce a fragment at all."""
    return isinstance(prop, Mapping) and bool(prop.get("name")) and prop.get("type") != NOTICE_TYPE


# ---------- Fragment construction ----------

def _fragment(prop: Any, pending: WorkQueue) -> Optional[Schema]:
    if not contributes(prop):
        return None

    s = _common_fields(prop)
    tag = prop.get("type")
    handler = _HANDLERS.get(tag, _unknown) if isinstance(tag, str) else _unknown
    handler(prop, s, pending)
    return s


def _common_fields(prop: Mapping) -> Schema:
    """Fields shared by every tag: title, description, default, visibility, required."""
    s: Schema = {}
    if prop.get("displayName"):
        s["x-title"] = prop["displayName"]
    if prop.get("description"):
        s["description"] = prop["description"]
    if "default" in prop:
        s["default"] = prop["default"]
    if present(prop.get("displayOptions")):
        s["x-displayOptions"] = prop["displayOptions"]
    if prop.get("required"):
        s["x-required"] = True
    return s


def _type_options(prop: Mapping) -> Mapping:
    opts = prop.get("typeOptions")
    return opts if isinstance(opts, Mapping) else {}


def _value_label(value: Any) -> str:
    """Fallback display name for an option without one."""
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value)
    except (TypeError, ValueError):
        return str(value)


def _valued_options(prop: Mapping) -> List[Mapping]:
    """Choice entries that declare a value; the rest are ignored."""
    return [o for o in prop["options"] if isinstance(o, Mapping) and "value" in o]


def _enqueue(items: Any, target: Schema, pending: WorkQueue) -> None:
    for sub in items:
        if not isinstance(sub, Mapping) or not sub.get("name"):
            continue
        pending.append((sub, target))


# ---------- Handlers (one per type tag) ----------

def _string(prop: Mapping, s: Schema, pending: WorkQueue) -> None:
    s["type"] = "string"
    opts = _type_options(prop)
    if opts.get("password"):
        s["format"] = "password"
    if opts.get("rows"):
        s["x-rows"] = opts["rows"]
    if opts.get("editor"):
        s["x-editor"] = opts["editor"]


def _number(prop: Mapping, s: Schema, pending: WorkQueue) -> None:
    s["type"] = "number"
    opts = _type_options(prop)
    if "minValue" in opts:
        s["minimum"] = opts["minValue"]
    if "maxValue" in opts:
        s["maximum"] = opts["maxValue"]
    if "numberPrecision" in opts:
        s["x-precision"] = opts["numberPrecision"]
    if "numberStepSize" in opts:
        s["x-stepSize"] = opts["numberStepSize"]


def _boolean(prop: Mapping, s: Schema, pending: WorkQueue) -> None:
    s["type"] = "boolean"


def _options(prop: Mapping, s: Schema, pending: WorkQueue) -> None:
    s["type"] = "string"
    if not isinstance(prop.get("options"), list):
        return
    valid = _valued_options(prop)
    s["enum"] = [o["value"] for o in valid]
    s["x-enumNames"] = [o.get("name") or _value_label(o["value"]) for o in valid]
    descriptions = [o.get("description") or "" for o in valid]
    if any(descriptions):
        s["x-enumDescriptions"] = descriptions


def _multi_options(prop: Mapping, s: Schema, pending: WorkQueue) -> None:
    s["type"] = "array"
    if not isinstance(prop.get("options"), list):
        s["items"] = {"type": "string"}
        return
    valid = _valued_options(prop)
    s["items"] = {"type": "string", "enum": [o["value"] for o in valid]}
    s["x-enumNames"] = [o.get("name") or _value_label(o["value"]) for o in valid]


def _collection(prop: Mapping, s: Schema, pending: WorkQueue) -> None:
    s["type"] = "object"
    if isinstance(prop.get("options"), list):
        s["properties"] = {}
        _enqueue(prop["options"], s["properties"], pending)


def _fixed_collection(prop: Mapping, s: Schema, pending: WorkQueue) -> None:
    s["type"] = "object"
    s["properties"] = {}
    if not isinstance(prop.get("options"), list):
        return

    multiple = bool(_type_options(prop).get("multipleValues"))
    for group in prop["options"]:
        if not isinstance(group, Mapping) or not group.get("name"):
            continue

        group_schema: Schema = {}
        if group.get("displayName"):
            group_schema["x-title"] = group["displayName"]
        if group.get("description"):
            group_schema["description"] = group["description"]

        item_props: Schema = {}
        if isinstance(group.get("values"), list):
            _enqueue(group["values"], item_props, pending)

        if multiple:
            group_schema["type"] = "array"
            group_schema["items"] = {"type": "object", "properties": item_props}
        else:
            group_schema["type"] = "object"
            group_schema["properties"] = item_props

        s["properties"][group["name"]] = group_schema


def _json(prop: Mapping, s: Schema, pending: WorkQueue) -> None:
    # value may arrive as serialized text or already parsed
    s["oneOf"] = fixed_shape(JSON_VALUE_ONE_OF)


def _date_time(prop: Mapping, s: Schema, pending: WorkQueue) -> None:
    s["type"] = "string"
    s["format"] = "date-time"


def _color(prop: Mapping, s: Schema, pending: WorkQueue) -> None:
    s["type"] = "string"
    s["pattern"] = COLOR_PATTERN
    s["x-format"] = "color"


def _resource_locator(prop: Mapping, s: Schema, pending: WorkQueue) -> None:
    s["type"] = "object"
    modes = prop.get("modes")
    if isinstance(modes, list):
        declared = [m for m in modes if isinstance(m, Mapping)]
        mode_names = [m["name"] for m in declared if m.get("name")]
    else:
        declared = None
        mode_names = DEFAULT_LOCATOR_MODES

    s["properties"] = locator_properties(mode_names)
    s["required"] = ["mode", "value"]
    if declared is not None:
        s["x-modes"] = [
            {k: m[k] for k in LOCATOR_MODE_KEYS if k in m}
            for m in declared
        ]


def _filter(prop: Mapping, s: Schema, pending: WorkQueue) -> None:
    s["type"] = "object"
    s["properties"] = fixed_shape(FILTER_PROPERTIES)


def _credentials_select(prop: Mapping, s: Schema, pending: WorkQueue) -> None:
    s["type"] = "object"
    s["properties"] = fixed_shape(CREDENTIALS_SELECT_PROPERTIES)


def _assignment_collection(prop: Mapping, s: Schema, pending: WorkQueue) -> None:
    s["type"] = "object"
    s["properties"] = fixed_shape(ASSIGNMENT_COLLECTION_PROPERTIES)


def _unknown(prop: Mapping, s: Schema, pending: WorkQueue) -> None:
    s["type"] = "string"
    if prop.get("type") is not None:
        s["x-n8n-type"] = prop["type"]


_HANDLERS: Dict[str, Handler] = {
    "string": _string,
    "hidden": _string,
    "number": _number,
    "boolean": _boolean,
    "options": _options,
    "multiOptions": _multi_options,
    "collection": _collection,
    "fixedCollection": _fixed_collection,
    "json": _json,
    "dateTime": _date_time,
    "color": _color,
    "resourceLocator": _resource_locator,
    "filter": _filter,
    "credentialsSelect": _credentials_select,
    "assignmentCollection": _assignment_collection,
}

SUPPORTED_TYPES = tuple(_HANDLERS)
