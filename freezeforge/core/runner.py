"""
External command execution.

Every stage that talks to an outside tool (python3, pip, PyInstaller) goes
through a CommandRunner, so tests can substitute a fake that records calls
instead of spawning processes.

Commands always run with stdin closed: a tool that tries to prompt reads EOF
instead of blocking the build. Output is streamed to the terminal unless the
caller asks for it to be captured.
"""

from __future__ import annotations

import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from freezeforge.core.exceptions import format_command
from freezeforge.core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class CommandResult:
    """Outcome of one external command."""

    command: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner:
    """Runs external commands and resolves executables on PATH."""

    def __init__(self, env: Optional[Dict[str, str]] = None) -> None:
        """Initialize runner.

        Args:
            env: Extra environment variables for every command
        """
        self.env = env or {}

    def which(self, name: str) -> Optional[str]:
        """Resolve an executable on PATH.

        Args:
            name: Command name

        Returns:
            Absolute path, or None if not found
        """
        return shutil.which(name)

    def run(
        self,
        command: Sequence[str],
        cwd: Optional[Path] = None,
        capture: bool = False,
    ) -> CommandResult:
        """Run a command to completion.

        No timeout is applied; long installs and freezes block until done.

        Args:
            command: Argument vector
            cwd: Working directory
            capture: Capture stdout/stderr instead of streaming them

        Returns:
            CommandResult (non-zero exit codes are returned, not raised)
        """
        argv = [str(part) for part in command]
        logger.debug("Running command", command=format_command(argv), cwd=cwd)

        env = {**os.environ, **self.env} if self.env else None
        try:
            completed = subprocess.run(
                argv,
                cwd=str(cwd) if cwd else None,
                stdin=subprocess.DEVNULL,
                capture_output=capture,
                text=True,
                env=env,
                check=False,
            )
        except FileNotFoundError:
            logger.error("Executable not found", executable=argv[0])
            return CommandResult(command=argv, returncode=127)

        logger.debug("Command finished", returncode=completed.returncode)
        return CommandResult(
            command=argv,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
