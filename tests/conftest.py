"""Pytest configuration and fixtures for confined-claude tests.

Ensures the confined_claude package is importable without installation and
provides a throwaway home directory so no test touches the real one.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Add src directory to path for development testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


@pytest.fixture
def fake_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME at an empty directory and clear CLAUDE_CONFIG_DIR."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("CLAUDE_CONFIG_DIR", raising=False)
    return home


@pytest.fixture
def project_dir(fake_home: Path) -> Path:
    """A project directory inside the fake home."""
    project = fake_home / "code" / "MyApp 2.0"
    project.mkdir(parents=True)
    return project.resolve()
