"""Filesystem side of the step: path confinement, naming and staged writes."""

from .naming import derive_filename
from .paths import secure_join
from .staging import PublishedTarget, StagedWriter

__all__ = ["PublishedTarget", "StagedWriter", "derive_filename", "secure_join"]
