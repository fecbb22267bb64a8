"""Isolated build environment (virtualenv) management."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from freezeforge.core.exceptions import SandboxError
from freezeforge.core.logging import get_logger
from freezeforge.core.runner import CommandRunner

logger = get_logger(__name__)


def sandbox_bin_dir(venv_dir: Path, windows: bool = False) -> Path:
    """Directory holding the sandbox's executables."""
    return venv_dir / ("Scripts" if windows else "bin")


def sandbox_executable(venv_dir: Path, name: str, windows: bool = False) -> Path:
    """Path of an executable installed inside the sandbox."""
    filename = f"{name}.exe" if windows else name
    return sandbox_bin_dir(venv_dir, windows) / filename


class SandboxBuilder:
    """Creates a virtualenv once and reuses it on later runs.

    An existing sandbox directory is never modified or recreated. Two
    builds racing on the same directory are not supported.
    """

    def __init__(
        self,
        runner: Optional[CommandRunner] = None,
        python_command: str = "python3",
        windows: bool = False,
    ) -> None:
        self.runner = runner or CommandRunner()
        self.python_command = python_command
        self.windows = windows

    def interpreter(self, path: Path) -> Path:
        return sandbox_executable(path, "python", self.windows)

    def ensure(self, path: Path) -> bool:
        """Create the sandbox unless it already exists.

        Args:
            path: Sandbox directory

        Returns:
            True if a new sandbox was created, False if an existing one is reused

        Raises:
            SandboxError: path is not a directory, or venv creation failed
        """
        if path.is_dir():
            if not self.interpreter(path).exists():
                logger.warning(
                    "Reused sandbox has no interpreter", path=str(path)
                )
            logger.info("Reusing existing venv", path=str(path))
            return False

        if path.exists():
            raise SandboxError(
                f"Sandbox path exists but is not a directory: {path}", str(path)
            )

        result = self.runner.run([self.python_command, "-m", "venv", str(path)])
        if not result.ok:
            raise SandboxError(
                f"Could not create virtual environment at {path} "
                f"(exit {result.returncode})",
                str(path),
            )

        logger.info("Created venv", path=str(path))
        return True
