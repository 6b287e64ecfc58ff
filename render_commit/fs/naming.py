"""Deterministic file names for rendered resources."""

from __future__ import annotations

from ..core.models import ResourceDescriptor

MANIFEST_SUFFIX = ".yaml"
SEPARATOR = "-"


def derive_filename(
    group: str, kind: str, name: str, namespace: str | None, index: int
) -> str:
    """Build the relative file name for a resource.

    The name is ``[<group>.]<kind>-<name>[-<namespace>].yaml`` with group and
    kind lowercased; a resource without a name is called ``resource-<index>``.

    >>> derive_filename("apps", "Deployment", "frontend", "default", 0)
    'apps.deployment-frontend-default.yaml'
    >>> derive_filename("", "ConfigMap", "", "default", 2)
    'configmap-resource-2-default.yaml'
    """
    type_token = kind.lower()
    if group:
        type_token = f"{group.lower()}.{type_token}"

    tokens = [type_token, name or f"resource-{index}"]
    if namespace:
        tokens.append(namespace)

    return SEPARATOR.join(tokens) + MANIFEST_SUFFIX


def filename_for(resource: ResourceDescriptor, index: int) -> str:
    return derive_filename(
        resource.group, resource.kind, resource.name, resource.namespace, index
    )
