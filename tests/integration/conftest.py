"""Pytest configuration and fixtures for integration tests."""

import shutil
import subprocess
from pathlib import Path

import pytest


def _hg(*args: str, cwd: Path) -> str:
    result = subprocess.run(
        ["hg", "--config", "ui.username=srcfetch <test@example.com>", *args],
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout.strip()


@pytest.fixture
def hg_repo(tmp_path: Path) -> tuple[Path, dict[str, str]]:
    """Create a local Mercurial repository with two revisions.

    Returns:
        The repository path and a mapping of revision label to node id.
    """
    if shutil.which("hg") is None:
        pytest.skip("hg is not installed")

    repo = tmp_path / "upstream"
    repo.mkdir()
    _hg("init", cwd=repo)

    target = repo / "path" / "to" / "file"
    target.parent.mkdir(parents=True)

    nodes = {}
    for label in ("first", "second"):
        target.write_text(f"{label} revision\n")
        _hg("commit", "-A", "-m", label, cwd=repo)
        nodes[label] = _hg("log", "-r", ".", "--template", "{node}", cwd=repo)

    return repo, nodes
