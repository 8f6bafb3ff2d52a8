# nodeschema/errors.py
"""Exceptions raised by the plugin traversal side of nodeschema.

The conversion engine never raises for well-formed input; these cover the
I/O boundary only (manifests, plugin modules, the output directory).
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class NodeSchemaError(Exception):
    """Base class for all nodeschema errors."""


class ManifestError(NodeSchemaError):
    """A package manifest could not be read or has the wrong shape."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read package manifest {path}: {reason}")


class ModuleLoadError(NodeSchemaError):
    """A plugin module could not be located, loaded or resolved."""

    def __init__(self, module: str, reason: str, cause: Optional[BaseException] = None):
        self.module = module
        self.reason = reason
        self.cause = cause
        super().__init__(f"{module}: {reason}")


class OutputDirectoryError(NodeSchemaError):
    """The output directory cannot be created; nothing can be written."""

    def __init__(self, path: Path, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"Cannot create output directory {path}: {cause}")
