#!/usr/bin/env python3
# nodeschema/cli.py

import logging
from pathlib import Path
from typing import List, Optional

import pandas as pd
import typer
import yaml

from nodeschema.convert.document import desc_to_schema
from nodeschema.errors import OutputDirectoryError
from nodeschema.plugins.loader import data_exports
from nodeschema.plugins.resolve import expand_node, resolve_node
from nodeschema.plugins.traversal import (
    DEFAULT_OUTPUT_DIR,
    DEFAULT_PACKAGES,
    generate as run_generate,
    output_file_name,
    prepare_output_dir,
)
from nodeschema.utils.io import dump_json, load_any, write_json
from nodeschema.utils.logger import init_logger

app = typer.Typer(help="nodeschema CLI - Generate JSON Schemas from n8n node descriptions")


def _setup_logging(verbose: bool, log_dir: Optional[Path]) -> logging.Logger:
    return init_logger(level=logging.DEBUG if verbose else None, log_dir=log_dir)


@app.command()
def generate(
    root: Path = typer.Option(Path("."), "--root", "-r", envvar="NODESCHEMA_ROOT", help="Repository root containing the plugin packages"),
    package: Optional[List[str]] = typer.Option(None, "--package", "-p", help="Package directory relative to root (repeatable)"),
    out: Optional[Path] = typer.Option(None, "--out", "-o", envvar="NODESCHEMA_OUTPUT_DIR", help=f"Output directory (default: <root>/{DEFAULT_OUTPUT_DIR})"),
    report: Optional[Path] = typer.Option(None, "--report", help="Write a CSV report (one row per generated or failed item)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show the error behind each failed module"),
    log_dir: Optional[Path] = typer.Option(None, "--log-dir", help="Also write a rotating log file here"),
):
    """
    Generate one JSON Schema per node (and per version) for every package.
    """
    log = _setup_logging(verbose, log_dir)
    packages = package or list(DEFAULT_PACKAGES)

    try:
        summary = run_generate(root, packages, out)
    except OutputDirectoryError as e:
        log.error(str(e))
        raise typer.Exit(code=1)

    log.info("")
    log.info("===== DONE =====")
    log.info(f"Generated: {summary.generated} schemas")
    log.info(f"Failed:    {summary.failed} nodes")
    log.info(f"Output:    {summary.output_dir}")

    if report is not None:
        report.parent.mkdir(parents=True, exist_ok=True)
        columns = ["package", "module", "node", "version", "file", "status", "error"]
        pd.DataFrame(summary.rows(), columns=columns).to_csv(report, index=False)
        log.info(f"[ok] wrote report to {report}")


@app.command()
def convert(
    input: Path = typer.Option(..., "--input", "-i", exists=True, readable=True, help="Node description file (.json/.yaml)"),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Write schema files into this directory instead of stdout (stdout gets one object, or a list for several nodes)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug info"),
):
    """
    Convert a standalone node description file without a package manifest.
    """
    log = _setup_logging(verbose, None)
    try:
        data = load_any(input)
    except (ValueError, yaml.YAMLError) as e:
        raise typer.BadParameter(str(e), param_hint="--input")

    nodes = []
    for _name, candidate in data_exports(input.stem, data).items():
        nodes.extend(expand_node(resolve_node(candidate)))
    if not nodes:
        log.error(f"No node description found in {input}")
        raise typer.Exit(code=1)

    if out is None:
        # one JSON value on stdout: a list only when there is more than one document
        documents = [desc_to_schema(nv.description, nv.version) for nv in nodes]
        typer.echo(dump_json(documents[0] if len(documents) == 1 else documents), nl=False)
        return

    try:
        out_dir = prepare_output_dir(out)
    except OutputDirectoryError as e:
        log.error(str(e))
        raise typer.Exit(code=1)
    for nv in nodes:
        path = write_json(out_dir / output_file_name(nv), desc_to_schema(nv.description, nv.version))
        log.info(f"[ok] wrote {path}")


if __name__ == "__main__":
    app()
