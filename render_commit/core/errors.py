"""Exception hierarchy for the render-and-commit step."""

from __future__ import annotations


class RenderCommitError(Exception):
    """Base class for every failure the step reports to the pipeline."""


class ConfigurationError(RenderCommitError):
    """Raised when the step configuration is invalid."""

    def __init__(self, problems: list[str]) -> None:
        self.problems = list(problems)
        super().__init__("; ".join(self.problems) or "invalid configuration")


class TransportError(RenderCommitError):
    """Raised when the render service cannot be reached."""


class UpstreamStatusError(RenderCommitError):
    """Raised when the render service answers with a non-2xx status."""

    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(f"render service returned status {status_code}")


class UpstreamBodyError(RenderCommitError):
    """Raised when the render service response body cannot be used."""


class ResponseTooLargeError(UpstreamBodyError):
    """Raised when the response body exceeds the configured size cap."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(f"response body exceeds limit of {limit} bytes")


class MalformedResponseError(UpstreamBodyError):
    """Raised when the response body is not a valid render result."""


class PathEscapeError(RenderCommitError):
    """Raised when a path would resolve outside its root directory."""


class StagingError(RenderCommitError):
    """Raised when a rendered resource cannot be staged.

    Without ``cluster_id``/``app_name`` the failure concerns the output root
    or the staging directory itself rather than a single target.
    """

    def __init__(
        self,
        message: str,
        *,
        cluster_id: str | None = None,
        app_name: str | None = None,
        index: int | None = None,
    ) -> None:
        self.cluster_id = cluster_id
        self.app_name = app_name
        self.index = index
        if cluster_id is None or app_name is None:
            location = "output directory"
        elif index is None:
            location = f"app {app_name!r} in cluster {cluster_id!r}"
        else:
            location = f"resource {index} for app {app_name!r} in cluster {cluster_id!r}"
        super().__init__(f"error staging {location}: {message}")


class PublishError(RenderCommitError):
    """Raised when a staged target directory cannot be moved into place."""

    def __init__(self, message: str, *, cluster_id: str, app_name: str) -> None:
        self.cluster_id = cluster_id
        self.app_name = app_name
        super().__init__(
            f"error moving manifests for app {app_name!r} in cluster {cluster_id!r}: {message}"
        )
