"""Tests for deterministic manifest file names."""

from __future__ import annotations

import pytest

from render_commit.core.models import ResourceDescriptor
from render_commit.fs.naming import derive_filename, filename_for


@pytest.mark.parametrize(
    ("group", "kind", "name", "namespace", "index", "expected"),
    [
        ("apps", "Deployment", "frontend", "default", 0, "apps.deployment-frontend-default.yaml"),
        ("", "Service", "frontend-svc", "default", 1, "service-frontend-svc-default.yaml"),
        ("", "Namespace", "test-namespace", "", 0, "namespace-test-namespace.yaml"),
        ("", "Namespace", "test-namespace", None, 0, "namespace-test-namespace.yaml"),
        ("", "ConfigMap", "", "default", 2, "configmap-resource-2-default.yaml"),
        ("", "ConfigMap", "", None, 2, "configmap-resource-2.yaml"),
        (
            "argoproj.io",
            "Application",
            "my-app",
            "argocd",
            0,
            "argoproj.io.application-my-app-argocd.yaml",
        ),
        ("Networking.K8S.io", "Ingress", "Web", "default", 0, "networking.k8s.io.ingress-Web-default.yaml"),
    ],
)
def test_derive_filename(
    group: str, kind: str, name: str, namespace: str | None, index: int, expected: str
) -> None:
    """Type tokens are lowercased; name and namespace are kept verbatim."""

    assert derive_filename(group, kind, name, namespace, index) == expected


def test_derive_filename_ignores_index_when_named() -> None:
    """Named resources map to the same file whatever their position."""

    names = {derive_filename("apps", "Deployment", "api", "prod", i) for i in range(5)}
    assert names == {"apps.deployment-api-prod.yaml"}


def test_filename_for_uses_descriptor_identity() -> None:
    resource = ResourceDescriptor(
        group="batch", version="v1", kind="CronJob", name="", namespace="jobs", manifest={}
    )
    assert filename_for(resource, 4) == "batch.cronjob-resource-4-jobs.yaml"
