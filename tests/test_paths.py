"""Tests for confinement of relative paths under a root directory."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from render_commit.core.errors import PathEscapeError
from render_commit.fs.paths import clean_parts, relative_display, secure_join


@pytest.mark.parametrize(
    ("unsafe", "expected"),
    [
        ("manifests", ["manifests"]),
        ("a/./b//c", ["a", "b", "c"]),
        ("a/../b", ["b"]),
        ("../../../x", ["x"]),
        ("/etc/passwd", ["etc", "passwd"]),
        ("a\\..\\..\\b", ["b"]),
        ("", []),
        ("..", []),
    ],
)
def test_clean_parts_never_climbs_above_root(unsafe: str, expected: list[str]) -> None:
    """Escaping segments are dropped rather than applied above the root."""

    assert clean_parts(unsafe) == expected


def test_secure_join_clamps_traversal(tmp_path: Path) -> None:
    """``../../../x`` resolves to a directory named ``x`` inside the root."""

    result = secure_join(tmp_path, "../../../x")

    assert result == tmp_path / "x"
    assert result.is_relative_to(tmp_path)


def test_secure_join_empty_path_is_root(tmp_path: Path) -> None:
    assert secure_join(tmp_path, "") == tmp_path


def test_secure_join_treats_absolute_paths_as_relative(tmp_path: Path) -> None:
    assert secure_join(tmp_path, "/abs/file.yaml") == tmp_path / "abs" / "file.yaml"


@pytest.mark.parametrize(
    "unsafe",
    ["../escape", "a/../../escape", "./../../..", "x/y/../../../../z", "/../../etc"],
)
def test_secure_join_results_stay_contained(tmp_path: Path, unsafe: str) -> None:
    """No input containing ``..`` produces a path outside the root."""

    root = tmp_path / "root"
    root.mkdir()

    assert secure_join(root, unsafe).is_relative_to(root)


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_secure_join_rejects_symlink_escape(tmp_path: Path) -> None:
    """A symlink inside the root cannot redirect writes outside of it."""

    root = tmp_path / "root"
    outside = tmp_path / "outside"
    root.mkdir()
    outside.mkdir()
    (root / "link").symlink_to(outside, target_is_directory=True)

    with pytest.raises(PathEscapeError, match="escapes"):
        secure_join(root, "link/file.yaml")


def test_relative_display_hides_absolute_prefix(tmp_path: Path) -> None:
    assert relative_display(tmp_path / "a" / "b.yaml", tmp_path) == "a/b.yaml"
    assert relative_display(tmp_path, tmp_path) == "."
    assert relative_display(Path("/elsewhere/c.yaml"), tmp_path) == "c.yaml"
