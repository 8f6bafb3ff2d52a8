# nodeschema/plugins/resolve.py
"""
Resolve exported plugin candidates into flat node descriptions.

An export is either a single-version node (exposes ``description``) or a
version container (exposes ``node_versions`` / ``nodeVersions`` plus a shared
``base_description`` / ``baseDescription``). Both Python attribute naming and
the camelCase keys used by JSON/YAML descriptor files are accepted.
"""

from __future__ import annotations

import inspect
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass(frozen=True)
class Single:
    description: Dict[str, Any]


@dataclass(frozen=True)
class Versioned:
    base: Dict[str, Any]
    versions: Dict[Any, Dict[str, Any]] = field(default_factory=dict)


ResolvedNode = Union[Single, Versioned]


@dataclass(frozen=True)
class NodeVersion:
    """One (description, version) pair ready for desc_to_schema."""

    description: Dict[str, Any]
    version: Optional[Any] = None
    file_suffix: str = ""


def _lookup(obj: Any, *names: str) -> Any:
    for name in names:
        value = obj.get(name) if isinstance(obj, Mapping) else getattr(obj, name, None)
        if value is not None:
            return value
    return None


def _description_of(obj: Any) -> Optional[Dict[str, Any]]:
    """A usable description: a mapping with a ``properties`` list."""
    if isinstance(obj, Mapping) and "properties" in obj:
        desc = obj
    else:
        desc = _lookup(obj, "description")
    if isinstance(desc, Mapping) and isinstance(desc.get("properties"), (list, tuple)):
        return dict(desc)
    return None


def _instantiate_version(entry: Any) -> Any:
    if not inspect.isclass(entry):
        return entry
    try:
        return entry()
    except Exception:
        # constructor needs arguments: read the description off the class
        return entry


def resolve_node(candidate: Any) -> Optional[ResolvedNode]:
    """
    Classify one export. Classes are instantiated without arguments and any
    exception propagates to the caller. Returns None for exports that are not
    nodes at all.
    """
    instance = candidate() if inspect.isclass(candidate) else candidate

    versions = _lookup(instance, "node_versions", "nodeVersions")
    if versions is not None:
        base = _lookup(instance, "base_description", "baseDescription") or {}
        resolved: Dict[Any, Dict[str, Any]] = {}
        for label, entry in dict(versions).items():
            desc = _description_of(_instantiate_version(entry))
            if desc is not None:
                resolved[label] = desc
        return Versioned(base=dict(base), versions=resolved)

    desc = _description_of(instance)
    if desc is not None:
        return Single(description=desc)
    return None


def version_number(label: Any) -> Any:
    """'2' -> 2, '1.1' -> 1.1; anything unparsable or non-finite is returned unchanged."""
    if isinstance(label, (int, float)) and not isinstance(label, bool):
        return label
    text = str(label).strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        value = float(text)
    except ValueError:
        return label
    return value if math.isfinite(value) else label


def merge_descriptions(base: Mapping, version_desc: Mapping) -> Dict[str, Any]:
    """Version fields override base fields; properties always come from the version."""
    return {**base, **version_desc, "properties": version_desc.get("properties")}


def expand_node(resolved: Optional[ResolvedNode]) -> List[NodeVersion]:
    """Flatten a resolved node into named (description, version) pairs."""
    if resolved is None:
        return []

    if isinstance(resolved, Single):
        if not resolved.description.get("name"):
            return []
        return [NodeVersion(description=resolved.description)]

    multiple = len(resolved.versions) > 1
    out: List[NodeVersion] = []
    for label, desc in resolved.versions.items():
        merged = merge_descriptions(resolved.base, desc)
        if not merged.get("name"):
            continue
        out.append(NodeVersion(
            description=merged,
            version=version_number(label),
            file_suffix=f"_v{label}" if multiple else "",
        ))
    return out
