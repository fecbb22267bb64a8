"""Dependency installation into the sandbox."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

from freezeforge.core.exceptions import DependencyInstallError
from freezeforge.core.logging import get_logger
from freezeforge.core.runner import CommandRunner

logger = get_logger(__name__)


class DependencyInstaller:
    """Installs the project manifest and the freezing toolchain with pip.

    Failures are not retried; a flaky network means rerunning the build.
    """

    def __init__(
        self,
        pip_executable: Path,
        runner: Optional[CommandRunner] = None,
        quiet: bool = True,
    ) -> None:
        self.pip_executable = pip_executable
        self.runner = runner or CommandRunner()
        self.quiet = quiet

    def _pip_install(self, args: Sequence[str]) -> None:
        command: List[str] = [str(self.pip_executable), "install"]
        if self.quiet:
            command.append("--quiet")
        command.extend(args)

        result = self.runner.run(command)
        if not result.ok:
            raise DependencyInstallError(command, result.returncode)

    def install(
        self,
        requirements_file: Optional[Path],
        extra_packages: Sequence[str],
    ) -> None:
        """Install the manifest (when present) and then the extra packages.

        Args:
            requirements_file: requirements.txt path; skipped if absent
            extra_packages: Always installed, e.g. pyinstaller and certifi

        Raises:
            DependencyInstallError: pip exited non-zero
        """
        if requirements_file is not None and requirements_file.is_file():
            logger.info("Installing requirements", file=str(requirements_file))
            self._pip_install(["-r", str(requirements_file)])
        else:
            logger.debug("No requirements manifest", file=str(requirements_file))

        if extra_packages:
            logger.info("Installing build tools", packages=" ".join(extra_packages))
            self._pip_install(list(extra_packages))
