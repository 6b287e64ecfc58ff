"""File I/O operations for manifest output."""

from __future__ import annotations

import errno
import logging
import os
import shutil
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


def ensure_parent(path: Path) -> None:
    """Ensure parent directories exist for the given path.

    Args:
        path: Path whose parent directories should be created
    """
    path.parent.mkdir(parents=True, exist_ok=True)


def dump_manifest(manifest: Any) -> str:
    """Serialize a manifest body as a block-style YAML document."""
    return yaml.safe_dump(
        manifest,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )


def write_manifest(path: Path, manifest: Any, mode: int = 0o644) -> None:
    """Write ``manifest`` to ``path`` as YAML, replacing any existing file.

    Args:
        path: Destination file path
        manifest: Structured document to serialize
        mode: File permissions (octal)
    """
    text = dump_manifest(manifest)
    ensure_parent(path)
    with path.open("w", encoding="utf-8") as handle:
        handle.write(text)
    os.chmod(path, mode)


def remove_tree(path: Path) -> None:
    """Remove ``path`` whether it is a directory, a file or a symlink."""
    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.exists():
        shutil.rmtree(path)


def move_dir(src: Path, dest: Path) -> None:
    """Move ``src`` to ``dest`` with a rename, copying across volumes.

    ``dest`` must not exist. When the rename fails because the two paths live
    on different filesystems, the tree is copied and ``src`` deleted.

    Args:
        src: Directory to move
        dest: New location of the directory
    """
    ensure_parent(dest)
    try:
        os.rename(src, dest)
    except OSError as exc:
        if exc.errno != errno.EXDEV:
            raise
        logger.debug(f"Cross-device move of {src.name}, copying instead")
        shutil.copytree(src, dest, symlinks=True)
        shutil.rmtree(src)
