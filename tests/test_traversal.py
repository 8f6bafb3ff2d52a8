# tests/test_traversal.py

import json
from pathlib import Path

import pytest

from nodeschema.convert.document import desc_to_schema
from nodeschema.errors import ManifestError, ModuleLoadError, OutputDirectoryError
from nodeschema.plugins.loader import load_module_exports, locate_module
from nodeschema.plugins.manifest import node_module_paths, read_manifest
from nodeschema.plugins.resolve import NodeVersion
from nodeschema.plugins.traversal import (
    generate,
    output_file_name,
    package_label,
    prepare_output_dir,
    process_package,
)

PKG = "packages/nodes-demo"
EXPECTED_FILES = {"HTTP_Request.json", "Switch_v1.json", "Switch_v2.json", "Edit_Fields_(Set).json"}


# ---------- manifest ----------

def test_read_manifest_lists_node_modules(plugin_repo: Path):
    manifest = read_manifest(plugin_repo / PKG)
    assert node_module_paths(manifest)[0] == "dist/nodes/Http/HttpRequest.node.js"


def test_missing_manifest_raises(tmp_path: Path):
    with pytest.raises(ManifestError):
        read_manifest(tmp_path)


def test_malformed_manifest_raises(tmp_path: Path):
    (tmp_path / "package.json").write_text('{"n8n": {"nodes": "nodes/A.py"}}', encoding="utf-8")
    with pytest.raises(ManifestError, match="is not of type 'array'"):
        read_manifest(tmp_path)


def test_manifest_without_plugin_section_has_no_nodes():
    assert node_module_paths({"name": "lib"}) == []


# ---------- loader ----------

def test_js_entry_resolves_to_python_sibling(plugin_repo: Path):
    path = locate_module(plugin_repo / PKG, "dist/nodes/Http/HttpRequest.node.js")
    assert path.name == "HttpRequest.node.py"


def test_python_exports_are_local_classes_only(plugin_repo: Path):
    exports = load_module_exports(plugin_repo / PKG, "dist/nodes/Http/HttpRequest.node.js")
    assert list(exports) == ["HttpRequest"]


def test_python_exports_follow_dunder_all(plugin_repo: Path):
    exports = load_module_exports(plugin_repo / PKG, "nodes/Switch.py")
    assert list(exports) == ["Switch"]


def test_loader_wraps_import_errors(plugin_repo: Path):
    with pytest.raises(ModuleLoadError, match="ModuleNotFoundError"):
        load_module_exports(plugin_repo / PKG, "nodes/Broken.py")


def test_loader_reports_missing_module(plugin_repo: Path):
    with pytest.raises(ModuleLoadError, match="no loadable module"):
        load_module_exports(plugin_repo / PKG, "dist/nodes/Nope/Nope.node.js")


def test_yaml_descriptor_list(tmp_path: Path):
    (tmp_path / "nodes.yaml").write_text(
        "- name: a\n  properties: []\n- name: b\n  properties: []\n",
        encoding="utf-8",
    )
    exports = load_module_exports(tmp_path, "nodes.yaml")
    assert list(exports) == ["nodes[0]", "nodes[1]"]


# ---------- file naming ----------

@pytest.mark.parametrize(
    "desc, suffix, expected",
    [
        ({"name": "slack", "displayName": "Slack"}, "", "Slack.json"),
        ({"name": "slack"}, "_v2", "slack_v2.json"),
        ({"name": "x", "displayName": "A/B Test: Split"}, "", "AB_Test_Split.json"),
        ({"name": "", "displayName": ""}, "_v1", "unknown_v1.json"),
    ],
)
def test_output_file_name(desc, suffix, expected):
    assert output_file_name(NodeVersion(description=desc, file_suffix=suffix)) == expected


def test_package_label():
    assert package_label("packages/nodes-base") == "nodes-base"
    assert package_label("packages/@n8n/nodes-langchain") == "@n8n/nodes-langchain"
    assert package_label("vendor/custom") == "vendor/custom"


# ---------- process_package ----------

def test_process_package_counts_and_isolates_failures(plugin_repo: Path, tmp_path: Path):
    out = prepare_output_dir(tmp_path / "out")
    result = process_package(plugin_repo / PKG, "nodes-demo", out)

    assert result.success == 4
    assert result.failed == 2
    assert {p.name for p in out.iterdir()} == EXPECTED_FILES

    failed = [r.module for r in result.records if r.status == "failed"]
    assert failed == ["nodes/Broken.py", "nodes/Exploding.py"]


def test_module_with_failing_export_writes_nothing(plugin_repo: Path, tmp_path: Path):
    out = prepare_output_dir(tmp_path / "out")
    process_package(plugin_repo / PKG, "nodes-demo", out)
    # Exploding.py also defines a valid node; it must not leak out
    assert not (out / "good.json").exists()


def test_version_container_writes_one_file_per_version(plugin_repo: Path, tmp_path: Path):
    out = prepare_output_dir(tmp_path / "out")
    process_package(plugin_repo / PKG, "nodes-demo", out)

    v1 = json.loads((out / "Switch_v1.json").read_text(encoding="utf-8"))
    v2 = json.loads((out / "Switch_v2.json").read_text(encoding="utf-8"))
    assert v1["x-n8n-version"] == 1
    assert v2["x-n8n-version"] == 2
    assert v1["x-n8n-group"] == ["transform"]
    assert list(v1["properties"]) == ["mode"]
    assert list(v2["properties"]) == ["rules"]


def test_written_files_are_pretty_and_newline_terminated(plugin_repo: Path, tmp_path: Path, set_node_description):
    out = prepare_output_dir(tmp_path / "out")
    process_package(plugin_repo / PKG, "nodes-demo", out)

    text = (out / "Edit_Fields_(Set).json").read_text(encoding="utf-8")
    assert text.endswith("}\n")
    assert text.startswith('{\n  "$schema"')
    assert json.loads(text) == desc_to_schema(set_node_description)


def test_sibling_import_and_number_bounds(plugin_repo: Path, tmp_path: Path):
    out = prepare_output_dir(tmp_path / "out")
    process_package(plugin_repo / PKG, "nodes-demo", out)

    doc = json.loads((out / "HTTP_Request.json").read_text(encoding="utf-8"))
    assert doc["properties"]["url"] == {"x-title": "URL", "default": "", "type": "string"}
    assert doc["properties"]["timeout"] == {"type": "number", "minimum": 0, "maximum": 300}


def test_unreadable_manifest_contributes_nothing(tmp_path: Path):
    result = process_package(tmp_path / "missing", "missing", tmp_path)
    assert (result.success, result.failed, result.records) == (0, 0, [])


def test_empty_node_list(tmp_path: Path):
    (tmp_path / "package.json").write_text('{"name": "lib", "n8n": {"nodes": []}}', encoding="utf-8")
    result = process_package(tmp_path, "lib", tmp_path / "out")
    assert (result.success, result.failed) == (0, 0)


# ---------- generate ----------

def test_generate_continues_past_broken_packages(plugin_repo: Path, tmp_path: Path):
    summary = generate(plugin_repo, ["packages/does-not-exist", PKG], tmp_path / "schemas")

    assert [p.name for p in summary.packages] == ["does-not-exist", "nodes-demo"]
    assert summary.generated == 4
    assert summary.failed == 2
    assert len(summary.rows()) == 6
    assert {p.name for p in summary.output_dir.iterdir()} == EXPECTED_FILES


def test_generate_defaults_output_under_root(plugin_repo: Path):
    summary = generate(plugin_repo, [PKG])
    assert summary.output_dir == plugin_repo / "json-schemas"
    assert summary.generated == 4


def test_uncreatable_output_dir_is_fatal(plugin_repo: Path, tmp_path: Path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    with pytest.raises(OutputDirectoryError):
        generate(plugin_repo, [PKG], blocker)
