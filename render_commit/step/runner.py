"""Promotion step that renders manifests remotely and commits them to disk."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

import httpx
from pydantic import ValidationError

from ..core.errors import ConfigurationError, PathEscapeError, RenderCommitError
from ..core.models import (
    RenderRequest,
    RenderResult,
    RendererConfig,
    StepResult,
    StepStatus,
)
from ..core.settings import Settings
from ..fs.paths import relative_display, secure_join
from ..fs.staging import StagedWriter
from ..remote.client import RenderClient

logger = logging.getLogger(__name__)


class StepRunner(Protocol):
    """Capability the pipeline engine dispatches steps through."""

    @property
    def name(self) -> str: ...

    def validate(self, config: Mapping[str, Any]) -> Any: ...

    def run(self, config: Mapping[str, Any], work_dir: Path) -> StepResult: ...


def _problems(exc: ValidationError) -> list[str]:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "(root)"
        problems.append(f"{location}: {error['msg']}")
    return problems


def _errored(message: str) -> StepResult:
    logger.error(message)
    return StepResult(status=StepStatus.ERRORED, message=message)


class ManifestRenderStep:
    """Calls the render service and writes its manifests under the work dir."""

    name = "manifest-render"

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.transport = transport

    def validate(self, config: Mapping[str, Any]) -> RendererConfig:
        """Parse ``config``, raising :class:`ConfigurationError` with every problem."""
        try:
            return RendererConfig.model_validate(config)
        except ValidationError as exc:
            raise ConfigurationError(_problems(exc)) from exc

    def run(self, config: Mapping[str, Any], work_dir: Path) -> StepResult:
        try:
            parsed = self.validate(config)
        except ConfigurationError as exc:
            return _errored(f"invalid configuration: {exc}")
        return self.execute(parsed, work_dir)

    def execute(self, config: RendererConfig, work_dir: Path) -> StepResult:
        work_dir = Path(work_dir).absolute()
        try:
            output_root = secure_join(work_dir, config.out_path or "")
        except PathEscapeError as exc:
            return _errored(f"invalid configuration: outPath: {exc}")

        request = RenderRequest.from_config(config)
        try:
            with RenderClient.from_config(config, self.settings, self.transport) as client:
                result = client.send(config.url, request)
        except RenderCommitError as exc:
            return _errored(f"render request failed: {exc}")

        self._warn_unrequested(request, result)

        try:
            published = StagedWriter(self.settings).commit(output_root, result)
        except RenderCommitError as exc:
            return _errored(f"error writing manifests: {exc}")

        files = [
            f"{target.cluster_id}/{target.app_name}/{name}"
            for target in published
            for name in target.files
        ]
        output_dir = relative_display(output_root, work_dir)
        logger.info(f"Wrote {len(files)} manifest(s) for {len(published)} target(s) to {output_dir}")
        return StepResult(status=StepStatus.SUCCEEDED, output_dir=output_dir, files=files)

    @staticmethod
    def _warn_unrequested(request: RenderRequest, result: RenderResult) -> None:
        requested = {(d.cluster_id, d.app_name) for d in request.deployments}
        for item in result:
            if (item.cluster_id, item.app_name) not in requested:
                logger.warning(
                    "Render service returned unrequested target %s/%s",
                    item.cluster_id,
                    item.app_name,
                )
