"""CLI entry point for oasgen."""

import importlib
import json
import logging
from pathlib import Path
from typing import Any

import click
import structlog
import yaml

from oasgen.api.base import Api
from oasgen.config import get_settings
from oasgen.errors import OasError, TargetLoadError
from oasgen.exporter.encode import dump, format_for_path
from oasgen.logging import configure_logging
from oasgen.schema.synth import synthesize

logger = structlog.wrap_logger(logging.getLogger(__name__))


def _load_target(target: str) -> Any:
    """Resolve ``package.module:attr`` to the object it names."""
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise TargetLoadError(f"target must look like 'package.module:attr', got {target!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise TargetLoadError(f"cannot import {module_name!r}: {e}") from e

    obj = module
    for part in attr.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise TargetLoadError(f"{module_name!r} has no attribute {attr!r}") from e
    return obj


def _load_api(target: str) -> Api:
    obj = _load_target(target)
    if not isinstance(obj, Api) and callable(obj):
        obj = obj()
    if not isinstance(obj, Api):
        raise TargetLoadError(f"{target!r} is not an Api registry")
    return obj


@click.group()
@click.option("--log-level", default=None, help="Log level (defaults to OASGEN_LOG_LEVEL).")
def main(log_level: str | None):
    """oasgen: build OpenAPI documents from model types."""
    configure_logging(log_level or get_settings().log_level)


@main.command()
@click.argument("target")
@click.option("-o", "--output", required=True, type=click.Path(path_type=Path), help="Output file for the document.")
@click.option("--format", "fmt", default="auto", type=click.Choice(["auto", "yaml", "json"]), help="Output format.")
def export(target: str, output: Path, fmt: str):
    """Write the OpenAPI document for the Api registry at TARGET (module:attr)."""
    if fmt == "auto":
        fmt = format_for_path(output)

    try:
        api = _load_api(target)
        click.echo(f"Found {len(api.paths)} endpoints in {target}.")
        text = dump(api.to_document(), fmt)
    except OasError as e:
        raise click.ClickException(str(e)) from e

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    logger.info("document_written", output=str(output), format=fmt)
    click.echo(f"Document saved to {output}")


@main.command()
@click.argument("target")
@click.option("--format", "fmt", default="yaml", type=click.Choice(["yaml", "json"]), help="Output format.")
def schema(target: str, fmt: str):
    """Print the schema synthesized for the model at TARGET (module:Model)."""
    try:
        syn = synthesize(_load_target(target))
    except OasError as e:
        raise click.ClickException(str(e)) from e

    if not syn.present:
        raise click.ClickException(f"{target} carries no type information")

    data = syn.schema.to_dict()
    if fmt == "json":
        click.echo(json.dumps(data, indent=2))
    else:
        click.echo(yaml.safe_dump(data, sort_keys=False, allow_unicode=True), nl=False)
