"""Two-phase persistence of rendered manifests.

Every resource of every deployment target is first written into a private
staging tree created under the output root. Only once the whole result has
been staged is each target directory moved into its final location
(``<output_root>/<clusterId>/<appName>``), replacing the previous version.
The staging tree is removed on every exit path.
"""

from __future__ import annotations

import dataclasses
import logging
import tempfile
from pathlib import Path

import yaml

from ..core.errors import PathEscapeError, PublishError, StagingError
from ..core.models import RenderResult, TargetResources
from ..core.settings import Settings
from .io import move_dir, remove_tree, write_manifest
from .naming import filename_for
from .paths import clean_parts, secure_join

logger = logging.getLogger(__name__)


@dataclasses.dataclass(slots=True)
class StagedTarget:
    cluster_id: str
    app_name: str
    directory: Path
    files: list[str] = dataclasses.field(default_factory=list)


@dataclasses.dataclass(slots=True, frozen=True)
class PublishedTarget:
    """A target directory that now holds the rendered manifests."""

    cluster_id: str
    app_name: str
    directory: Path
    files: tuple[str, ...]


def _describe(exc: BaseException) -> str:
    if isinstance(exc, OSError) and exc.strerror:
        return exc.strerror
    return str(exc) or type(exc).__name__


def _target_parts(cluster_id: str, app_name: str) -> list[str]:
    parts = [cluster_id, app_name]
    if clean_parts(f"{cluster_id}/{app_name}") != parts:
        raise StagingError(
            "deployment target identifiers must be single path segments",
            cluster_id=cluster_id,
            app_name=app_name,
        )
    return parts


def _missing_dirs(path: Path) -> list[Path]:
    """Return the directories ``mkdir(parents=True)`` would create, deepest first."""
    missing = []
    while not path.exists() and path != path.parent:
        missing.append(path)
        path = path.parent
    return missing


def _remove_empty_dirs(paths: list[Path]) -> None:
    for path in paths:
        try:
            path.rmdir()
        except OSError:
            return


class StagedWriter:
    """Writes a :class:`RenderResult` to disk with all-or-nothing staging."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()

    def commit(self, output_root: Path, result: RenderResult) -> list[PublishedTarget]:
        """Stage every target of ``result`` and publish it under ``output_root``.

        Args:
            output_root: Directory receiving ``<clusterId>/<appName>`` trees
            result: Render service response to persist

        Returns:
            Published targets in response order

        Raises:
            StagingError: If any resource cannot be written; nothing is published
            PublishError: If a staged target cannot be moved into place
        """
        output_root = Path(output_root).absolute()
        created = _missing_dirs(output_root)
        try:
            return self._commit(output_root, result)
        except BaseException:
            _remove_empty_dirs(created)
            raise

    def _commit(self, output_root: Path, result: RenderResult) -> list[PublishedTarget]:
        try:
            output_root.mkdir(parents=True, exist_ok=True)
            staging_dir = tempfile.TemporaryDirectory(
                prefix=self.settings.staging_prefix, dir=output_root
            )
        except OSError as exc:
            raise StagingError(_describe(exc)) from exc

        with staging_dir as tmp:
            staging_root = Path(tmp)
            logger.debug(f"Staging {len(result)} target(s) in {staging_root.name}")
            staged = self.stage(staging_root, result)
            published = self.publish(output_root, staged)
        logger.debug(f"Removed staging directory {staging_root.name}")
        return published

    def stage(self, staging_root: Path, result: RenderResult) -> list[StagedTarget]:
        staged: dict[tuple[str, str], StagedTarget] = {}
        for item in result:
            key = (item.cluster_id, item.app_name)
            target = staged.get(key)
            if target is None:
                parts = _target_parts(*key)
                target = StagedTarget(
                    item.cluster_id, item.app_name, staging_root.joinpath(*parts)
                )
                staged[key] = target
            self._stage_target(target, item)
        return list(staged.values())

    def _stage_target(self, target: StagedTarget, item: TargetResources) -> None:
        try:
            target.directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StagingError(
                _describe(exc), cluster_id=target.cluster_id, app_name=target.app_name
            ) from exc

        for index, resource in enumerate(item.resources):
            filename = filename_for(resource, index)
            try:
                path = secure_join(target.directory, filename)
                write_manifest(path, resource.manifest, mode=self.settings.file_mode)
            except (OSError, yaml.YAMLError, PathEscapeError) as exc:
                raise StagingError(
                    f"{filename}: {_describe(exc)}",
                    cluster_id=target.cluster_id,
                    app_name=target.app_name,
                    index=index,
                ) from exc

            relative = path.relative_to(target.directory).as_posix()
            if relative in target.files:
                logger.warning(
                    "Resource %d overwrote %s for app %s in cluster %s",
                    index,
                    relative,
                    target.app_name,
                    target.cluster_id,
                )
            else:
                target.files.append(relative)

        logger.info(
            f"Staged {len(item.resources)} resource(s) for app {target.app_name}"
            f" in cluster {target.cluster_id}"
        )

    def publish(self, output_root: Path, staged: list[StagedTarget]) -> list[PublishedTarget]:
        published: list[PublishedTarget] = []
        for target in staged:
            try:
                final_dir = secure_join(output_root, f"{target.cluster_id}/{target.app_name}")
                remove_tree(final_dir)
                move_dir(target.directory, final_dir)
            except (OSError, PathEscapeError) as exc:
                raise PublishError(
                    _describe(exc), cluster_id=target.cluster_id, app_name=target.app_name
                ) from exc

            logger.info(
                f"Published {len(target.files)} file(s) to {target.cluster_id}/{target.app_name}"
            )
            published.append(
                PublishedTarget(
                    target.cluster_id, target.app_name, final_dir, tuple(target.files)
                )
            )
        return published
