"""CLI argument parsers and validators."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import typer
import yaml

from ..core.models import Header


def parse_header(value: str) -> Header:
    """Parse a header argument in format NAME=VALUE."""
    if "=" not in value:
        raise typer.BadParameter(f"Must be NAME=VALUE, got: {value!r}")
    name, header_value = value.split("=", 1)
    if not name.strip():
        raise typer.BadParameter(f"Header name is empty in {value!r}")
    return Header(name=name.strip(), value=header_value)


def load_step_config(path: Path) -> dict[str, Any]:
    """Load a YAML or JSON step configuration file."""
    if not path.exists():
        raise typer.BadParameter(f"Config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise typer.BadParameter(f"Invalid YAML/JSON in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise typer.BadParameter(f"Config file must contain a mapping: {path}")
    return data
