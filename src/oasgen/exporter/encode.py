"""Text encoders for assembled documents."""

import json
from pathlib import Path

import yaml

from oasgen.exporter.document import Document

FORMATS = ("yaml", "json")


def to_yaml(document: Document) -> str:
    return yaml.safe_dump(document.to_dict(), sort_keys=False, allow_unicode=True)


def to_json(document: Document, indent: int = 2) -> str:
    return json.dumps(document.to_dict(), indent=indent, ensure_ascii=False) + "\n"


def format_for_path(file_path: Path) -> str:
    """Pick the output format from a file suffix (``.json`` or YAML)."""
    return "json" if file_path.suffix.lower() == ".json" else "yaml"


def dump(document: Document, fmt: str = "yaml") -> str:
    if fmt == "yaml":
        return to_yaml(document)
    if fmt == "json":
        return to_json(document)
    raise ValueError(f"unknown format {fmt!r}, expected one of {FORMATS}")
