"""Models, settings and errors shared across the package."""

from .errors import (
    ConfigurationError,
    MalformedResponseError,
    PathEscapeError,
    PublishError,
    RenderCommitError,
    ResponseTooLargeError,
    StagingError,
    TransportError,
    UpstreamBodyError,
    UpstreamStatusError,
)
from .models import (
    Deployment,
    Header,
    RenderRequest,
    RenderResult,
    RendererConfig,
    ResourceDescriptor,
    StepResult,
    StepStatus,
    TargetResources,
)
from .settings import Settings

__all__ = [
    "ConfigurationError",
    "Deployment",
    "Header",
    "MalformedResponseError",
    "PathEscapeError",
    "PublishError",
    "RenderCommitError",
    "RenderRequest",
    "RenderResult",
    "RendererConfig",
    "ResourceDescriptor",
    "ResponseTooLargeError",
    "Settings",
    "StagingError",
    "StepResult",
    "StepStatus",
    "TargetResources",
    "TransportError",
    "UpstreamBodyError",
    "UpstreamStatusError",
]
