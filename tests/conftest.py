"""
Shared pytest fixtures for FreezeForge tests.

Fixture Organization
--------------------
- **project_root**: Temporary project following the conventional layout
- **build_config**: BuildConfig rooted at project_root
- **fake_runner**: CommandRunner stand-in that records every command and
  simulates venv/pip/PyInstaller side effects without spawning processes
- **darwin_arm64** / **linux_x64**: Fixed platform probers
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from freezeforge.core.config import BuildConfig
from freezeforge.core.platform import PlatformTag, normalize
from tests.fixtures.runners import FakeRunner


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Create a project with bridge/wizclaw.spec and bridge/requirements.txt."""
    root = tmp_path / "project"
    bridge = root / "bridge"
    bridge.mkdir(parents=True)
    (bridge / "wizclaw.spec").write_text("# -*- mode: python -*-\n")
    (bridge / "requirements.txt").write_text("httpx>=0.27\n")
    return root.resolve()


@pytest.fixture
def build_config(project_root: Path) -> BuildConfig:
    return BuildConfig(repo_root=project_root)


@pytest.fixture
def raw_artifact(project_root: Path) -> Path:
    """Where PyInstaller writes the default single-file binary."""
    return project_root / "dist" / "wizclaw"


@pytest.fixture
def fake_runner(raw_artifact: Path) -> FakeRunner:
    return FakeRunner(artifact_path=raw_artifact)


@pytest.fixture
def darwin_arm64() -> Callable[[], PlatformTag]:
    return lambda: normalize("Darwin", "arm64")


@pytest.fixture
def linux_x64() -> Callable[[], PlatformTag]:
    return lambda: normalize("Linux", "x86_64")


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host FREEZEFORGE_* variables out of every test."""
    for name in (
        "FREEZEFORGE_APP_NAME",
        "FREEZEFORGE_VENV_DIR",
        "FREEZEFORGE_DIST_DIR",
        "FREEZEFORGE_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
