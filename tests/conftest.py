# tests/conftest.py
"""Shared fixtures: a small plugin repository laid out like an n8n checkout."""

import json
import textwrap
from pathlib import Path

import pytest

from nodeschema.utils.logger import init_logger


HTTP_NODE = '''
from demo_helpers import URL_PROPERTY, BaseNode


class HttpRequest(BaseNode):
    def __init__(self):
        self.description = {
            "name": "httpRequest",
            "displayName": "HTTP Request",
            "group": "output",
            "version": 1,
            "properties": [
                URL_PROPERTY,
                {"name": "timeout", "type": "number", "typeOptions": {"minValue": 0, "maxValue": 300}},
            ],
        }
'''

HELPERS = '''
URL_PROPERTY = {"displayName": "URL", "name": "url", "type": "string", "default": ""}


class BaseNode:
    """Imported by node modules; not a node itself."""
'''

SWITCH_NODE = '''
BASE = {"name": "switch", "displayName": "Switch", "group": ["transform"], "defaultVersion": 2}


class SwitchV1:
    def __init__(self, base=None):
        self.description = {
            **(base or {}),
            "version": 1,
            "properties": [{"name": "mode", "type": "options", "options": [{"name": "Rules", "value": "rules"}]}],
        }


class SwitchV2:
    def __init__(self, base=None):
        self.description = {
            **(base or {}),
            "version": 2,
            "properties": [{"name": "rules", "type": "filter"}],
        }


class Switch:
    def __init__(self):
        self.base_description = BASE
        self.node_versions = {1: SwitchV1(BASE), 2: SwitchV2(BASE)}


__all__ = ["Switch"]
'''

BROKEN_IMPORT = '''
import module_that_does_not_exist_anywhere  # noqa: F401
'''

BROKEN_CONSTRUCTOR = '''
class Good:
    description = {"name": "good", "properties": []}


class Exploding:
    def __init__(self):
        raise RuntimeError("credentials not configured")
'''

SET_NODE = {
    "name": "set",
    "displayName": "Edit Fields (Set)",
    "version": 3,
    "properties": [
        {"name": "assignments", "type": "assignmentCollection", "default": {}},
        {"name": "options", "type": "collection", "options": [{"name": "dotNotation", "type": "boolean"}]},
    ],
}


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(text), encoding="utf-8")
    return path


@pytest.fixture
def plugin_repo(tmp_path: Path) -> Path:
    """
    <root>/packages/nodes-demo/
        package.json            -> 5 node entries
        demo_helpers.py         -> sibling import target
        dist/nodes/Http/HttpRequest.node.js  (resolved to .py next to it)
        nodes/Switch.py         -> version container, two versions
        nodes/Broken.py         -> import error
        nodes/Exploding.py      -> constructor error
        nodes/Set.node.json     -> static descriptor
    """
    pkg = tmp_path / "packages" / "nodes-demo"
    _write(pkg / "demo_helpers.py", HELPERS)
    _write(pkg / "dist" / "nodes" / "Http" / "HttpRequest.node.py", HTTP_NODE)
    _write(pkg / "nodes" / "Switch.py", SWITCH_NODE)
    _write(pkg / "nodes" / "Broken.py", BROKEN_IMPORT)
    _write(pkg / "nodes" / "Exploding.py", BROKEN_CONSTRUCTOR)
    _write(pkg / "nodes" / "Set.node.json", json.dumps(SET_NODE))

    manifest = {
        "name": "n8n-nodes-demo",
        "version": "0.1.0",
        "n8n": {
            "nodes": [
                "dist/nodes/Http/HttpRequest.node.js",
                "nodes/Broken.py",
                "nodes/Switch.py",
                "nodes/Exploding.py",
                "nodes/Set.node.json",
            ],
        },
    }
    _write(pkg / "package.json", json.dumps(manifest))
    return tmp_path


@pytest.fixture
def set_node_description() -> dict:
    return json.loads(json.dumps(SET_NODE))


@pytest.fixture(autouse=True)
def _rebind_logger():
    # CLI tests bind the log handler to the runner's stream; rebind afterwards
    yield
    init_logger()
