"""Domain models for the render service protocol and step configuration."""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterator
from urllib.parse import urlsplit

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    JsonValue,
    RootModel,
    field_validator,
    model_validator,
)

from .durations import DURATION_PATTERN, parse_duration


def _check_segment(value: str) -> str:
    if value in {".", ".."} or "/" in value or "\\" in value:
        raise ValueError("must be a single path segment")
    return value


class Deployment(BaseModel):
    """A deployment target: the cluster and application to render for."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid", frozen=True)

    cluster_id: str = Field(..., alias="clusterId", min_length=1)
    app_name: str = Field(..., alias="appName", min_length=1)

    @field_validator("cluster_id", "app_name")
    @classmethod
    def _single_segment(cls, value: str) -> str:
        return _check_segment(value)


class Header(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(..., min_length=1)
    value: str = ""


class RendererConfig(BaseModel):
    """Step configuration supplied by the pipeline engine."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    url: str = Field(..., min_length=1, description="Render service endpoint")
    repo_url: str = Field(..., alias="repoURL", min_length=1)
    commit: str = Field(..., min_length=1)
    deployments: list[Deployment] = Field(..., min_length=1)
    out_path: str | None = Field(
        default=None, alias="outPath", description="Output sub-path of the work dir"
    )
    timeout: str | None = Field(default=None, pattern=DURATION_PATTERN)
    insecure_skip_tls_verify: bool = Field(default=False, alias="insecureSkipTLSVerify")
    headers: list[Header] = Field(default_factory=list)

    @field_validator("url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        parts = urlsplit(value)
        if parts.scheme not in {"http", "https"} or not parts.netloc:
            raise ValueError("must be an absolute http or https URL")
        return value

    @field_validator("timeout")
    @classmethod
    def _check_timeout(cls, value: str | None) -> str | None:
        if value is not None and parse_duration(value) <= 0:
            raise ValueError("must be greater than zero")
        return value


class RenderRequest(BaseModel):
    """Request body sent to the render service. Immutable once built."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    repo_url: str = Field(..., alias="repoURL")
    commit: str
    deployments: tuple[Deployment, ...]

    @classmethod
    def from_config(cls, config: RendererConfig) -> RenderRequest:
        return cls(
            repo_url=config.repo_url,
            commit=config.commit,
            deployments=tuple(config.deployments),
        )

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class ResourceDescriptor(BaseModel):
    """Identity of one rendered resource plus its opaque manifest body."""

    model_config = ConfigDict(frozen=True)

    group: str = ""
    version: str = ""
    kind: str
    name: str = ""
    namespace: str | None = None
    manifest: JsonValue = None

    @model_validator(mode="before")
    @classmethod
    def _from_raw_object(cls, data: Any) -> Any:
        # Older service revisions return bare Kubernetes objects.
        if not isinstance(data, dict) or "manifest" in data or "apiVersion" not in data:
            return data
        group, _, version = str(data.get("apiVersion") or "").rpartition("/")
        metadata = data.get("metadata")
        if not isinstance(metadata, dict):
            metadata = {}
        return {
            "group": group,
            "version": version,
            "kind": data.get("kind"),
            "name": metadata.get("name"),
            "namespace": metadata.get("namespace"),
            "manifest": data,
        }

    @field_validator("group", "version", "name", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class TargetResources(BaseModel):
    """Resources rendered for a single deployment target."""

    model_config = ConfigDict(populate_by_name=True)

    cluster_id: str = Field(
        ...,
        validation_alias=AliasChoices("clusterId", "cluster_id"),
        serialization_alias="clusterId",
    )
    app_name: str = Field(
        ...,
        validation_alias=AliasChoices("appName", "app_name"),
        serialization_alias="appName",
    )
    resources: list[ResourceDescriptor] = Field(default_factory=list)

    @field_validator("resources", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class RenderResult(RootModel[list[TargetResources]]):
    """Ordered render output, one entry per deployment target."""

    def __iter__(self) -> Iterator[TargetResources]:  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)


class StepStatus(str, Enum):
    SUCCEEDED = "Succeeded"
    ERRORED = "Errored"


class StepResult(BaseModel):
    """Outcome reported back to the pipeline engine."""

    status: StepStatus
    message: str | None = Field(default=None, description="Failure cause when errored")
    output_dir: str | None = Field(
        default=None, description="Output directory relative to the work dir"
    )
    files: list[str] = Field(
        default_factory=list, description="Written files relative to the output dir"
    )

    @property
    def succeeded(self) -> bool:
        return self.status is StepStatus.SUCCEEDED
