"""Shared fixtures for the render-commit test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from render_test_helpers import RENDER_URL, FakeRenderService


@pytest.fixture
def render_service() -> FakeRenderService:
    """Provide a fake render service answering with an empty result."""

    return FakeRenderService()


@pytest.fixture
def work_dir(tmp_path: Path) -> Path:
    """Create an isolated working directory for a step invocation."""

    root = tmp_path / "work"
    root.mkdir()
    return root


@pytest.fixture
def step_config() -> dict[str, Any]:
    """Return a minimal valid step configuration."""

    return {
        "url": RENDER_URL,
        "repoURL": "https://github.com/example/repo",
        "commit": "abc123",
        "deployments": [{"clusterId": "prod-east", "appName": "frontend"}],
    }
