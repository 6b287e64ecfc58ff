"""render-commit - remote manifest rendering for promotion pipelines.

Calls a render service for a set of deployment targets and commits the
returned Kubernetes manifests to a working directory.
"""

__version__ = "0.1.0"

# Configure logging for library use
import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

from .step.runner import ManifestRenderStep, StepRunner

__all__ = ["ManifestRenderStep", "StepRunner", "__version__"]
