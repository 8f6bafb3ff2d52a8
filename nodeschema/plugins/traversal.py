# nodeschema/plugins/traversal.py

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from nodeschema.convert.document import desc_to_schema
from nodeschema.convert.sanitize import safe_name
from nodeschema.errors import ManifestError, ModuleLoadError, OutputDirectoryError
from nodeschema.plugins.loader import load_module_exports
from nodeschema.plugins.manifest import node_module_paths, read_manifest
from nodeschema.plugins.resolve import NodeVersion, expand_node, resolve_node
from nodeschema.utils.io import ensure_dir, write_json
from nodeschema.utils.logger import get_logger

log = get_logger("traversal")

DEFAULT_PACKAGES = ("packages/nodes-base", "packages/@n8n/nodes-langchain")
DEFAULT_OUTPUT_DIR = "json-schemas"


# ---------- Result records ----------

@dataclass
class ItemRecord:
    package: str
    module: str
    node: Optional[str] = None
    version: Optional[Any] = None
    file: Optional[str] = None
    status: str = "ok"
    error: Optional[str] = None


@dataclass
class PackageResult:
    name: str
    success: int = 0
    failed: int = 0
    records: List[ItemRecord] = field(default_factory=list)


@dataclass
class RunSummary:
    output_dir: Path
    packages: List[PackageResult] = field(default_factory=list)

    @property
    def generated(self) -> int:
        return sum(p.success for p in self.packages)

    @property
    def failed(self) -> int:
        return sum(p.failed for p in self.packages)

    def rows(self) -> List[Dict[str, Any]]:
        """Flat per-item rows (for CSV reports)."""
        return [asdict(r) for p in self.packages for r in p.records]


# ---------- Steps ----------

def prepare_output_dir(path: Path) -> Path:
    """Create the output directory; failure here is fatal for the whole run."""
    try:
        return ensure_dir(path)
    except OSError as e:
        raise OutputDirectoryError(Path(path), e) from e


def output_file_name(node: NodeVersion) -> str:
    desc = node.description
    return safe_name(desc.get("displayName") or desc.get("name")) + node.file_suffix + ".json"


def convert_module(pkg_dir: Path, rel_path: str) -> List[Tuple[NodeVersion, Dict[str, Any]]]:
    """
    Load one node module and convert every node version it exports.
    Everything is resolved before anything is returned, so a failing export
    leaves the whole module without documents.
    """
    exports = load_module_exports(pkg_dir, rel_path)
    versions: List[NodeVersion] = []
    for _export_name, candidate in exports.items():
        versions.extend(expand_node(resolve_node(candidate)))
    return [(nv, desc_to_schema(nv.description, nv.version)) for nv in versions]


def process_package(pkg_dir: Path, pkg_name: str, output_dir: Path) -> PackageResult:
    """Convert all node modules declared by one package manifest."""
    result = PackageResult(name=pkg_name)

    try:
        manifest = read_manifest(pkg_dir)
    except ManifestError as e:
        log.error(f"Cannot read package.json in {pkg_dir}")
        log.debug(f"  {e.reason}")
        return result

    node_files = node_module_paths(manifest)
    if not node_files:
        log.info(f"No nodes found in {pkg_name}")
        return result

    log.info(f"Processing {len(node_files)} node files from {pkg_name}...")

    for rel_path in node_files:
        try:
            documents = convert_module(pkg_dir, rel_path)
            for nv, schema in documents:
                fname = output_file_name(nv)
                write_json(Path(output_dir) / fname, schema)
                label = nv.description.get("displayName") or nv.description.get("name")
                log.info(f"  ✓ {label}{nv.file_suffix}")
                result.success += 1
                result.records.append(ItemRecord(
                    package=pkg_name,
                    module=rel_path,
                    node=nv.description.get("name"),
                    version=schema["x-n8n-version"],
                    file=fname,
                ))
        except Exception as e:
            reason = e.reason if isinstance(e, ModuleLoadError) else f"{type(e).__name__}: {e}"
            result.failed += 1
            result.records.append(ItemRecord(
                package=pkg_name, module=rel_path, status="failed", error=reason,
            ))
            log.debug(f"  ✗ {rel_path}: {reason}")

    log.info(f"{pkg_name}: {result.success} generated, {result.failed} failed")
    return result


def package_label(pkg: str) -> str:
    """'packages/@n8n/nodes-langchain' -> '@n8n/nodes-langchain'."""
    parts = Path(pkg).parts
    if len(parts) > 1 and parts[0] == "packages":
        parts = parts[1:]
    return "/".join(parts)


def generate(
    root: Path,
    packages: Iterable[str] = DEFAULT_PACKAGES,
    output_dir: Optional[Path] = None,
) -> RunSummary:
    """
    Run the full traversal: every package under ``root``, every node module,
    every version. Raises OutputDirectoryError if nothing can be written.
    """
    root = Path(root)
    out = prepare_output_dir(output_dir if output_dir is not None else root / DEFAULT_OUTPUT_DIR)
    summary = RunSummary(output_dir=out)

    for pkg in packages:
        summary.packages.append(process_package(root / pkg, package_label(pkg), out))

    return summary
