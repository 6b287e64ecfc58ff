"""Main CLI application."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from typing_extensions import Annotated

from ..core.errors import ConfigurationError
from ..step.runner import ManifestRenderStep
from .parsers import load_step_config, parse_header

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="render-commit",
    help="Render Kubernetes manifests through a remote service and commit them to disk.",
)

ConfigOption = Annotated[
    Path,
    typer.Option(
        "--config",
        "-c",
        help="Step configuration file (YAML or JSON).",
        metavar="FILE",
    ),
]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )


@app.command()
def render(
    config_file: ConfigOption,
    work_dir: Annotated[
        str,
        typer.Option(
            "--work-dir",
            help="Working directory receiving the manifests (default: cwd).",
            metavar="DIR",
        ),
    ] = "",
    headers: Annotated[
        list[str],
        typer.Option(
            "--header",
            help="Extra request header (format: NAME=VALUE). Repeatable.",
            metavar="NAME=VALUE",
        ),
    ] = [],
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose logging.",
        ),
    ] = False,
) -> None:
    """Render manifests for every configured deployment and write them out."""
    _configure_logging(verbose)

    config = load_step_config(config_file)
    if headers:
        extra = [parse_header(value).model_dump() for value in headers]
        config["headers"] = [*(config.get("headers") or []), *extra]

    work_path = Path(work_dir) if work_dir else Path.cwd()
    logger.debug(f"Work dir: {work_path}")

    step = ManifestRenderStep()
    result = step.run(config, work_path)

    if not result.succeeded:
        typer.echo(f"{step.name}: {result.message}", err=True)
        raise typer.Exit(code=1)

    for name in result.files:
        typer.echo((Path(result.output_dir or ".") / name).as_posix())


@app.command()
def validate(config_file: ConfigOption) -> None:
    """Validate a step configuration without contacting the render service."""
    config = load_step_config(config_file)
    try:
        ManifestRenderStep().validate(config)
    except ConfigurationError as exc:
        for problem in exc.problems:
            typer.echo(problem, err=True)
        raise typer.Exit(code=1)
    typer.echo("configuration is valid")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
