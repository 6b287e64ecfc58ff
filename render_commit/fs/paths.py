"""Confinement of caller-supplied relative paths to a root directory."""

from __future__ import annotations

import os
from pathlib import Path, PurePath

from ..core.errors import PathEscapeError


def clean_parts(unsafe: str | PurePath) -> list[str]:
    """Normalize ``unsafe`` into path segments that cannot climb above a root.

    Both ``/`` and ``\\`` separate segments, ``.`` and empty segments are
    dropped, and a ``..`` that would leave the root is discarded.

    Args:
        unsafe: Relative (or absolute) path supplied by a caller

    Returns:
        Remaining segments, in order
    """
    parts: list[str] = []
    for segment in str(unsafe).replace("\\", "/").split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            if parts:
                parts.pop()
            continue
        parts.append(segment)
    return parts


def secure_join(root: Path, unsafe: str | PurePath) -> Path:
    """Resolve ``unsafe`` beneath ``root``, clamping any escape attempt.

    ``"../../../safe-dir"`` resolves to ``root / "safe-dir"`` and an absolute
    path is treated as relative to ``root``. The lexical result is always a
    descendant of ``root`` (or ``root`` itself).

    Args:
        root: Directory the result must stay within
        unsafe: Path to resolve

    Returns:
        Absolute path under ``root``

    Raises:
        PathEscapeError: If existing symlinks would redirect the path outside
            ``root``
    """
    root = Path(os.path.abspath(root))
    target = root.joinpath(*clean_parts(unsafe))
    resolved_root = root.resolve()
    if not target.resolve().is_relative_to(resolved_root):
        raise PathEscapeError(f"path {str(unsafe)!r} escapes its root directory")
    return target


def relative_display(path: Path, root: Path) -> str:
    """Render ``path`` relative to ``root`` for user-facing messages."""
    try:
        return Path(path).relative_to(root).as_posix()
    except ValueError:
        return Path(path).name
