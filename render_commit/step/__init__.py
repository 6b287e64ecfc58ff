from .runner import ManifestRenderStep, StepRunner

__all__ = ["ManifestRenderStep", "StepRunner"]
