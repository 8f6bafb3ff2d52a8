# nodeschema/plugins/loader.py
"""
Plugin module loading.

A manifest entry names a module relative to its package directory. The
loader turns that entry into an ordered ``{export_name: candidate}`` mapping;
what a candidate *means* (node class, versioned container, plain description)
is decided later in ``resolve.py``.

Supported module kinds:
  - Python source (``.py``): executed with importlib, exports are ``__all__``
    or the public classes defined in the module itself.
  - Static descriptors (``.json`` / ``.yaml`` / ``.yml``): one export per file
    (or one per item when the file holds a list).

Entries pointing at compiled JavaScript (``dist/.../Foo.node.js``) are
resolved to a sibling file with the same stem and one of the suffixes above.
"""

from __future__ import annotations

import hashlib
import importlib.util
import inspect
import sys
from contextlib import contextmanager
from pathlib import Path
from types import ModuleType
from typing import Any, Dict, Iterator

from nodeschema.errors import ModuleLoadError
from nodeschema.utils.io import load_any

PYTHON_SUFFIXES = (".py",)
DATA_SUFFIXES = (".json", ".yaml", ".yml")
LOADABLE_SUFFIXES = PYTHON_SUFFIXES + DATA_SUFFIXES


def locate_module(pkg_dir: Path, rel_path: str) -> Path:
    """Find the file backing a manifest entry, trying sibling suffixes."""
    path = Path(pkg_dir) / rel_path
    if path.suffix.lower() in LOADABLE_SUFFIXES and path.is_file():
        return path
    for suffix in LOADABLE_SUFFIXES:
        candidate = path.with_suffix(suffix)
        if candidate.is_file():
            return candidate
    raise ModuleLoadError(rel_path, f"no loadable module found at {path}")


def load_module_exports(pkg_dir: Path, rel_path: str) -> Dict[str, Any]:
    """
    Load one manifest entry and return its exports in definition order.
    Raises ModuleLoadError on any failure.
    """
    path = locate_module(pkg_dir, rel_path)
    if path.suffix.lower() in PYTHON_SUFFIXES:
        module = _exec_python_module(Path(pkg_dir), path, rel_path)
        return python_exports(module)

    try:
        data = load_any(path)
    except Exception as e:
        raise ModuleLoadError(rel_path, f"{type(e).__name__}: {e}", e) from e
    return data_exports(path.stem, data)


def python_exports(module: ModuleType) -> Dict[str, Any]:
    names = getattr(module, "__all__", None)
    if names is not None:
        return {name: getattr(module, name) for name in names}
    return {
        name: obj
        for name, obj in vars(module).items()
        if not name.startswith("_")
        and inspect.isclass(obj)
        and obj.__module__ == module.__name__
    }


def data_exports(stem: str, data: Any) -> Dict[str, Any]:
    if isinstance(data, list):
        return {f"{stem}[{i}]": item for i, item in enumerate(data)}
    return {stem: data}


# ---------- internals ----------

def _module_name(path: Path) -> str:
    digest = hashlib.md5(str(path.resolve()).encode("utf-8")).hexdigest()[:12]
    return f"nodeschema_plugin_{digest}"


@contextmanager
def _on_sys_path(directory: Path) -> Iterator[None]:
    """Temporarily make a package directory importable for sibling imports."""
    entry = str(directory.resolve())
    added = entry not in sys.path
    if added:
        sys.path.insert(0, entry)
    try:
        yield
    finally:
        if added and entry in sys.path:
            sys.path.remove(entry)


def _exec_python_module(pkg_dir: Path, path: Path, rel_path: str) -> ModuleType:
    name = _module_name(path)
    spec = importlib.util.spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise ModuleLoadError(rel_path, f"cannot create import spec for {path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[name] = module
    try:
        with _on_sys_path(pkg_dir):
            spec.loader.exec_module(module)
    except Exception as e:
        sys.modules.pop(name, None)
        raise ModuleLoadError(rel_path, f"{type(e).__name__}: {e}", e) from e
    return module
