# nodeschema/plugins/manifest.py
from pathlib import Path
from typing import Any, Dict, List

from jsonschema import validate, ValidationError

from nodeschema.errors import ManifestError
from nodeschema.utils.io import read_json

MANIFEST_FILE = "package.json"

PACKAGE_MANIFEST_SCHEMA = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "version": {"type": "string"},
        # plugin section: node module paths relative to the package dir
        "n8n": {
            "type": "object",
            "properties": {
                "nodes": {
                    "type": "array",
                    "items": {"type": "string", "minLength": 1},
                },
                "credentials": {
                    "type": "array",
                    "items": {"type": "string"},
                },
            },
            "additionalProperties": True,
        },
    },
    "additionalProperties": True,
}


def read_manifest(pkg_dir: Path) -> Dict[str, Any]:
    """
    Load and shape-check ``<pkg_dir>/package.json``.
    Raises ManifestError when it is missing, not JSON, or malformed.
    """
    path = Path(pkg_dir) / MANIFEST_FILE
    try:
        manifest = read_json(path)
    except (OSError, ValueError) as e:
        raise ManifestError(path, str(e)) from e

    try:
        validate(instance=manifest, schema=PACKAGE_MANIFEST_SCHEMA)
    except ValidationError as e:
        raise ManifestError(path, e.message) from e

    return manifest


def node_module_paths(manifest: Dict[str, Any]) -> List[str]:
    """Relative node module paths declared by the manifest (may be empty)."""
    return list((manifest.get("n8n") or {}).get("nodes") or [])
