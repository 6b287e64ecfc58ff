"""Tests for the render-commit command-line interface."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
import typer
import yaml
from typer.testing import CliRunner

from render_commit.cli import app as cli_app
from render_commit.cli.parsers import load_step_config, parse_header
from render_commit.step.runner import ManifestRenderStep
from render_test_helpers import FakeRenderService, deployment_resource, target

runner = CliRunner()


@pytest.fixture
def config_file(tmp_path: Path, step_config: dict[str, Any]) -> Path:
    path = tmp_path / "step.yaml"
    path.write_text(yaml.safe_dump(step_config), encoding="utf-8")
    return path


@pytest.fixture
def patched_step(monkeypatch: pytest.MonkeyPatch, render_service: FakeRenderService) -> FakeRenderService:
    """Route the CLI's step through the fake render service."""

    monkeypatch.setattr(
        cli_app, "ManifestRenderStep", lambda: ManifestRenderStep(transport=render_service.transport)
    )
    return render_service


def test_render_command_writes_files(
    patched_step: FakeRenderService, config_file: Path, work_dir: Path
) -> None:
    patched_step.items = [target("prod-east", "frontend", [deployment_resource()])]

    result = runner.invoke(
        cli_app.app,
        ["render", "--config", str(config_file), "--work-dir", str(work_dir), "--header", "X-Token=abc"],
    )

    assert result.exit_code == 0, result.output
    assert "prod-east/frontend/apps.deployment-frontend-default.yaml" in result.output
    assert (work_dir / "prod-east" / "frontend" / "apps.deployment-frontend-default.yaml").is_file()
    assert patched_step.requests[0].headers["X-Token"] == "abc"


def test_render_command_exits_non_zero_on_error(
    patched_step: FakeRenderService, config_file: Path, work_dir: Path
) -> None:
    patched_step.status_code = 500

    result = runner.invoke(
        cli_app.app, ["render", "--config", str(config_file), "--work-dir", str(work_dir)]
    )

    assert result.exit_code == 1
    assert "500" in result.output


def test_validate_command(config_file: Path, tmp_path: Path) -> None:
    ok = runner.invoke(cli_app.app, ["validate", "--config", str(config_file)])
    assert ok.exit_code == 0
    assert "configuration is valid" in ok.output

    bad_file = tmp_path / "bad.json"
    bad_file.write_text(json.dumps({"url": "http://render.test"}), encoding="utf-8")
    bad = runner.invoke(cli_app.app, ["validate", "--config", str(bad_file)])
    assert bad.exit_code == 1
    assert "repoURL: Field required" in bad.output


def test_parse_header() -> None:
    header = parse_header("Authorization=Bearer a=b")

    assert (header.name, header.value) == ("Authorization", "Bearer a=b")


@pytest.mark.parametrize("value", ["no-separator", "=value"])
def test_parse_header_rejects(value: str) -> None:
    with pytest.raises(typer.BadParameter):
        parse_header(value)


def test_load_step_config_errors(tmp_path: Path) -> None:
    with pytest.raises(typer.BadParameter, match="not found"):
        load_step_config(tmp_path / "missing.yaml")

    listing = tmp_path / "list.yaml"
    listing.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(typer.BadParameter, match="mapping"):
        load_step_config(listing)
