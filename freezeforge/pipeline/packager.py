"""PyInstaller invocation."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence

from freezeforge.core.exceptions import PackagingError, SpecNotFoundError
from freezeforge.core.logging import get_logger
from freezeforge.core.runner import CommandRunner

logger = get_logger(__name__)

DEFAULT_PACKAGER_ARGS = ("--clean", "--noconfirm")


class PackagerInvoker:
    """Runs the freezing tool against a spec file.

    The tool's output is streamed straight to the terminal and never
    reinterpreted. stdin is closed, so the tool cannot stop to prompt.
    """

    def __init__(
        self,
        packager_executable: Path,
        repo_root: Path,
        raw_binary_path: Path,
        runner: Optional[CommandRunner] = None,
        packager_args: Sequence[str] = DEFAULT_PACKAGER_ARGS,
        spec_hint: Optional[str] = None,
    ) -> None:
        self.packager_executable = packager_executable
        self.repo_root = repo_root
        self.raw_binary_path = raw_binary_path
        self.runner = runner or CommandRunner()
        self.packager_args = list(packager_args)
        self.spec_hint = spec_hint

    def build_command(self, spec_file: Path) -> List[str]:
        return [str(self.packager_executable), *self.packager_args, str(spec_file)]

    def freeze(self, spec_file: Path) -> Path:
        """Freeze the application described by spec_file.

        Args:
            spec_file: PyInstaller .spec file

        Returns:
            Expected raw artifact path (existence is checked by the tagger)

        Raises:
            SpecNotFoundError: spec_file does not exist; the tool is not run
            PackagingError: the tool exited non-zero
        """
        if not spec_file.is_file():
            raise SpecNotFoundError(str(spec_file), self.spec_hint)

        command = self.build_command(spec_file)
        logger.info("Running packager", spec=str(spec_file))

        result = self.runner.run(command, cwd=self.repo_root)
        if not result.ok:
            raise PackagingError(command, result.returncode)

        return self.raw_binary_path
