from __future__ import annotations

import re
from pathlib import Path
from typing import NoReturn, Optional

import typer

from jdh2trans.assembler import assemble_model
from jdh2trans.config import (
    enum_rule_defaults,
    enum_rules_from_entries,
    inference_config_from_section,
    inference_defaults,
    merge_payload,
)
from jdh2trans.exceptions import (
    ConfigError,
    MissingDocumentationError,
    SnapshotError,
    UnknownMethodError,
)
from jdh2trans.ingest import resolve_adapter
from jdh2trans.ingest.registry import registered_formats
from jdh2trans.model import ApiModel
from jdh2trans.overrides import apply_enum_rules
from jdh2trans.report import PackageSelector, build_report, render_report
from jdh2trans.snapshot import read_snapshot, write_snapshot

app = typer.Typer(add_completion=False)

_EXIT_FATAL = 2


def _fail(message: str, code: int = _EXIT_FATAL) -> NoReturn:
    typer.echo(message, err=True)
    raise typer.Exit(code=code)


def _emit_diagnostics(model: ApiModel) -> None:
    for item in model.diagnostics:
        typer.echo(f"{item.kind}: {item.site}: {item.message}", err=True)


def _selector(package: Optional[str], package_pattern: Optional[str]) -> PackageSelector:
    if package is not None and package_pattern is not None:
        _fail("--package and --package-pattern are mutually exclusive")
    if package_pattern is None:
        return package
    try:
        return re.compile(package_pattern)
    except re.error as exc:
        _fail(f"--package-pattern: invalid regular expression: {exc}")


def _build_model(
    docdir: Path,
    *,
    config: Optional[Path],
    doc_format: Optional[str],
    search_subpackages: Optional[bool],
) -> ApiModel:
    if doc_format is not None and doc_format.lower() not in registered_formats():
        _fail(f"unknown documentation format: {doc_format}")
    try:
        section = merge_payload(
            {"search_subpackages": search_subpackages},
            inference_defaults(config_path=config),
        )
        inference = inference_config_from_section(section)
        rules = enum_rules_from_entries(enum_rule_defaults(config_path=config))
        docs = resolve_adapter(doc_format).load(docdir)
        model = assemble_model(docs, inference)
        apply_enum_rules(model, rules)
    except MissingDocumentationError as exc:
        _fail(f"error: {exc}")
    except (ConfigError, UnknownMethodError) as exc:
        _fail(f"error: {exc}", code=1)
    return model


@app.command("parse")
def parse(
    docdir: Path = typer.Argument(..., file_okay=False),
    snapshot: Path = typer.Option(..., "--snapshot"),
    config: Optional[Path] = typer.Option(None, "--config"),
    doc_format: Optional[str] = typer.Option(None, "--format"),
    search_subpackages: Optional[bool] = typer.Option(
        None, "--search-subpackages/--no-search-subpackages"
    ),
    quiet: bool = typer.Option(False, "--quiet"),
) -> None:
    """Parse a documentation directory and save the model snapshot."""
    model = _build_model(
        docdir,
        config=config,
        doc_format=doc_format,
        search_subpackages=search_subpackages,
    )
    if not quiet:
        _emit_diagnostics(model)
    write_snapshot(model, snapshot)
    typer.echo(
        f"{len(model.enums)} enums, {len(model.methods)} methods, "
        f"{len(model.diagnostics)} diagnostics -> {snapshot}"
    )


@app.command("report")
def report(
    snapshot: Path = typer.Argument(..., dir_okay=False),
    package: Optional[str] = typer.Option(None, "--package"),
    package_pattern: Optional[str] = typer.Option(None, "--package-pattern"),
    out: Optional[Path] = typer.Option(None, "--out"),
    with_diagnostics: bool = typer.Option(False, "--with-diagnostics"),
) -> None:
    """Render the enum report for a saved snapshot."""
    selector = _selector(package, package_pattern)
    try:
        model = read_snapshot(snapshot)
    except SnapshotError as exc:
        _fail(f"error: {exc}")
    text = render_report(build_report(model, selector, include_diagnostics=with_diagnostics))
    if out is None:
        typer.echo(text, nl=False)
        return
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text, encoding="utf-8")


@app.command("enums")
def enums(
    docdir: Path = typer.Argument(..., file_okay=False),
    package: Optional[str] = typer.Option(None, "--package"),
    package_pattern: Optional[str] = typer.Option(None, "--package-pattern"),
    config: Optional[Path] = typer.Option(None, "--config"),
    doc_format: Optional[str] = typer.Option(None, "--format"),
    search_subpackages: Optional[bool] = typer.Option(
        None, "--search-subpackages/--no-search-subpackages"
    ),
    out: Optional[Path] = typer.Option(None, "--out"),
    with_diagnostics: bool = typer.Option(False, "--with-diagnostics"),
) -> None:
    """Parse a documentation directory and print the enum report."""
    selector = _selector(package, package_pattern)
    model = _build_model(
        docdir,
        config=config,
        doc_format=doc_format,
        search_subpackages=search_subpackages,
    )
    _emit_diagnostics(model)
    text = render_report(build_report(model, selector, include_diagnostics=with_diagnostics))
    if out is None:
        typer.echo(text, nl=False)
        return
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text, encoding="utf-8")
