"""Preflight checks for required external tools.

Runs before any stage that touches the filesystem, so a missing tool costs
nothing but the error message.
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional

from freezeforge.core.config import ToolRequirement
from freezeforge.core.exceptions import ToolNotFoundError
from freezeforge.core.logging import get_logger
from freezeforge.core.runner import CommandRunner

logger = get_logger(__name__)


class PreflightValidator:
    """Confirms that required executables resolve on PATH."""

    def __init__(self, runner: Optional[CommandRunner] = None) -> None:
        self.runner = runner or CommandRunner()

    def require(self, tool_name: str, help_url: Optional[str] = None) -> str:
        """Resolve one required tool.

        Args:
            tool_name: Executable name
            help_url: Where to get it, shown when missing

        Returns:
            Absolute path of the executable

        Raises:
            ToolNotFoundError: Tool is not on PATH
        """
        path = self.runner.which(tool_name)
        if path is None:
            logger.debug("Required tool missing", tool=tool_name)
            raise ToolNotFoundError(tool_name, help_url)

        logger.debug("Found tool", tool=tool_name, path=path)
        return path

    def check_all(self, requirements: Iterable[ToolRequirement]) -> Dict[str, str]:
        """Resolve every required tool, stopping at the first missing one.

        Returns:
            Mapping of tool name to resolved path
        """
        return {req.name: self.require(req.name, req.help_url) for req in requirements}

    def interpreter_version(self, python_command: str) -> Optional[str]:
        """Report the interpreter version string, e.g. "Python 3.12.4"."""
        result = self.runner.run([python_command, "--version"], capture=True)
        if not result.ok:
            return None
        # Older interpreters print the version on stderr
        return (result.stdout or result.stderr).strip() or None
