"""Pytest configuration and fixtures."""

import pytest
from pathlib import Path

from srcfetch.core.cancel import CancellationToken
from srcfetch.core.config import Config
from srcfetch.sources.registry import reset_default_registry


@pytest.fixture(autouse=True)
def clean_default_registry():
    """Ensure every test starts without a cached default registry."""
    reset_default_registry()
    yield
    reset_default_registry()


@pytest.fixture
def token() -> CancellationToken:
    """Provide a fresh, unfired cancellation token."""
    return CancellationToken()


@pytest.fixture
def config() -> Config:
    """Provide a default configuration with a small copy buffer."""
    config = Config()
    config.copy.buffer_size = 4
    return config


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """Create a small source directory tree for retrieval tests."""
    root = tmp_path / "work" / "modules" / "foo"
    (root / "sub").mkdir(parents=True)
    (root / "main.tf").write_text("resource {}\n")
    (root / "sub" / "vars.tf").write_text("variable {}\n")
    return root
