"""
Centralized Exception Hierarchy for FreezeForge.

All exceptions inherit from FreezeForgeError. Each one carries:
- error_code: Unique identifier (e.g., "FF-TOOL-001")
- why_it_happened: Explanation of the root cause
- how_to_fix: Actionable steps to resolve the issue
- stage: The pipeline stage that raised it
- exit_code: Per-category process exit status (used only when the CLI is
  asked for distinct exit codes; otherwise every failure exits with 1)

Exception Hierarchy
-------------------
    FreezeForgeError (base)
    ├── ConfigValidationError
    ├── ToolNotFoundError
    ├── SandboxError
    ├── DependencyInstallError
    ├── SpecNotFoundError
    ├── PackagingError
    ├── ArtifactMissingError
    └── ArtifactTagError

None of these are retried. The pipeline stops at the first one raised.
"""

import shlex
from typing import List, Optional, Sequence

from freezeforge.core.types import BuildStage

GENERIC_EXIT_CODE = 1


def format_command(command: Sequence[str]) -> str:
    """Render an argument vector as a single copy-pasteable line."""
    return " ".join(shlex.quote(str(part)) for part in command)


class FreezeForgeError(Exception):
    """
    Base exception for all FreezeForge errors.

    Example
    -------
        try:
            pipeline.run()
        except FreezeForgeError as e:
            logger.error(f"Build failed: {e}")
            print(f"Fix: {e.how_to_fix}")
    """

    error_code: str = "FF-ERR-000"
    why_it_happened: str = "An unexpected error occurred"
    how_to_fix: List[str] = ["Check the error message for details"]
    stage: Optional[BuildStage] = None
    exit_code: int = GENERIC_EXIT_CODE

    def __init__(
        self,
        message: str,
        *,
        error_code: Optional[str] = None,
        why_it_happened: Optional[str] = None,
        how_to_fix: Optional[List[str]] = None,
    ) -> None:
        super().__init__(message)

        if error_code is not None:
            self.error_code = error_code
        if why_it_happened is not None:
            self.why_it_happened = why_it_happened
        if how_to_fix is not None:
            self.how_to_fix = how_to_fix


class ConfigValidationError(FreezeForgeError):
    """Raised when the build configuration is invalid."""

    error_code = "FF-CFG-001"
    why_it_happened = "The build configuration contains an invalid value"
    how_to_fix = [
        "Check freezeforge.yaml for typos",
        "Remove the offending key to fall back to the default",
    ]
    exit_code = 8


class ToolNotFoundError(FreezeForgeError):
    """
    Raised when a required executable is not resolvable on PATH.

    Example
    -------
        PreflightValidator().require("pip3", "https://pip.pypa.io/")
        # Raises: ToolNotFoundError("'pip3' not found in PATH.")
    """

    error_code = "FF-TOOL-001"
    why_it_happened = "A tool the build depends on is not installed or not on PATH"
    stage = BuildStage.PREFLIGHT
    exit_code = 2

    def __init__(self, tool_name: str, help_url: Optional[str] = None) -> None:
        self.tool_name = tool_name
        self.help_url = help_url
        fixes = [f"Install it from: {help_url}"] if help_url else []
        fixes.append(f"Verify with: command -v {tool_name}")
        super().__init__(f"'{tool_name}' not found in PATH.", how_to_fix=fixes)


class SandboxError(FreezeForgeError):
    """Raised when the isolated build environment cannot be created."""

    error_code = "FF-ENV-001"
    why_it_happened = "The virtual environment could not be created"
    how_to_fix = [
        "Check that the venv module is available (python3 -m venv --help)",
        "On Debian/Ubuntu install python3-venv",
        "Delete the sandbox directory and rerun",
    ]
    stage = BuildStage.SANDBOX
    exit_code = 7

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        self.path = path
        super().__init__(message)


class DependencyInstallError(FreezeForgeError):
    """Raised when pip exits non-zero inside the sandbox."""

    error_code = "FF-DEP-001"
    why_it_happened = (
        "pip could not install the requested packages (network failure or "
        "version conflict)"
    )
    how_to_fix = [
        "Check your internet connection and rerun the build",
        "Review the pip output above for version conflicts",
        "Pin compatible versions in the requirements file",
    ]
    stage = BuildStage.INSTALL
    exit_code = 3

    def __init__(self, command: Sequence[str], returncode: int) -> None:
        self.command = list(command)
        self.returncode = returncode
        super().__init__(
            f"Dependency installation failed (exit {returncode}): "
            f"{format_command(command)}"
        )


class SpecNotFoundError(FreezeForgeError):
    """Raised when the PyInstaller spec file does not exist."""

    error_code = "FF-SPEC-001"
    why_it_happened = "PyInstaller needs a .spec file describing what to freeze"
    stage = BuildStage.PACKAGE
    exit_code = 4

    def __init__(self, spec_file: str, hint: Optional[str] = None) -> None:
        self.spec_file = spec_file
        fixes = [hint] if hint else []
        fixes.append("Generate one with: pyi-makespec <entry-script>")
        super().__init__(f"Spec file not found at {spec_file}", how_to_fix=fixes)


class PackagingError(FreezeForgeError):
    """Raised when the freezing tool exits non-zero."""

    error_code = "FF-PKG-001"
    why_it_happened = "PyInstaller reported an error while freezing the application"
    how_to_fix = [
        "Check the PyInstaller output above for errors",
        "Add missing modules to hiddenimports in the spec file",
    ]
    stage = BuildStage.PACKAGE
    exit_code = 5

    def __init__(self, command: Sequence[str], returncode: int) -> None:
        self.command = list(command)
        self.returncode = returncode
        super().__init__(
            f"PyInstaller failed (exit {returncode}): {format_command(command)}"
        )


class ArtifactMissingError(FreezeForgeError):
    """
    Raised when the freezing tool succeeded but the expected binary is absent.

    Usually means the spec file names a different output or builds a
    one-dir bundle instead of a single file.
    """

    error_code = "FF-ART-001"
    why_it_happened = (
        "PyInstaller exited successfully but did not write the expected binary"
    )
    how_to_fix = [
        "Check the PyInstaller output above for errors",
        "Make sure the EXE name in the spec matches the application name",
        "Build a single-file executable (no COLLECT step)",
    ]
    stage = BuildStage.TAG
    exit_code = 6

    def __init__(self, raw_path: str) -> None:
        self.raw_path = raw_path
        super().__init__(f"Expected output not found at {raw_path}")


class ArtifactTagError(FreezeForgeError):
    """Raised when the tagged copy of the binary cannot be written."""

    error_code = "FF-ART-002"
    why_it_happened = "The raw binary could not be copied to its tagged name"
    how_to_fix = [
        "Check free disk space and write permission on the output directory",
        "Remove anything else occupying the tagged path and rerun",
    ]
    stage = BuildStage.TAG
    exit_code = 9

    def __init__(self, message: str, tagged_path: str) -> None:
        self.tagged_path = tagged_path
        super().__init__(message)
