"""Artifact tagging.

Copies the raw binary to its platform-tagged name. The naming convention
<base>-<os>-<arch> is relied on by release uploaders and installers, so it
must not change.
"""

from __future__ import annotations

import math
import os
import shutil
import stat
from pathlib import Path
from typing import Optional, Sequence

from freezeforge.core.exceptions import ArtifactMissingError, ArtifactTagError
from freezeforge.core.logging import get_logger
from freezeforge.core.platform import PlatformTag
from freezeforge.pipeline.result import PipelineResult

logger = get_logger(__name__)

SIZE_UNITS = ("B", "K", "M", "G", "T")
EXECUTABLE_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


def _round_up(value: float) -> float:
    """du -h precision: one decimal below 10, whole numbers above."""
    if value < 10:
        return math.ceil(value * 10) / 10
    return float(math.ceil(value))


def human_size(size_bytes: int) -> str:
    """Format a byte count the way ``du -h`` does (1024-based, rounded up).

    A value that rounds up to 1024 moves to the next unit.

    Examples:
        512 -> "512B", 1536 -> "1.5K", 52428800 -> "50M", 1048525 -> "1.0M"
    """
    if size_bytes < 1024:
        return f"{size_bytes}B"

    value = size_bytes / 1024
    for unit in SIZE_UNITS[1:]:
        rounded = _round_up(value)
        if rounded < 1024 or unit == SIZE_UNITS[-1]:
            break
        value /= 1024

    if rounded < 10:
        return f"{rounded:.1f}{unit}"
    return f"{int(rounded)}{unit}"


class ArtifactTagger:
    """Produces the tagged, executable copy of the raw artifact.

    The tagged path is computed once by BuildConfig.paths(); the tagger only
    writes to it.
    """

    def __init__(
        self,
        verify_args: Sequence[str] = ("version",),
        repo_root: Optional[Path] = None,
    ) -> None:
        """Initialize tagger.

        Args:
            verify_args: Arguments for the suggested smoke-test command
            repo_root: Base for the relative verification command path
        """
        self.verify_args = list(verify_args)
        self.repo_root = repo_root

    def verify_command(self, tagged_path: Path) -> str:
        """Copy-pasteable command that runs the tagged binary."""
        display = tagged_path
        if self.repo_root is not None:
            try:
                display = tagged_path.relative_to(self.repo_root)
            except ValueError:
                display = tagged_path
        prefix = "" if display.is_absolute() else f".{os.sep}"
        return " ".join([f"{prefix}{display}", *self.verify_args])

    def _write_copy(self, raw_path: Path, tagged_path: Path) -> None:
        if tagged_path.is_dir():
            raise ArtifactTagError(
                f"Tagged path is a directory: {tagged_path}", str(tagged_path)
            )
        try:
            tagged_path.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(raw_path, tagged_path)
            tagged_path.chmod(tagged_path.stat().st_mode | EXECUTABLE_BITS)
        except OSError as e:
            raise ArtifactTagError(
                f"Could not write {tagged_path}: {e}", str(tagged_path)
            ) from e

    def tag(
        self, raw_path: Path, tagged_path: Path, platform_tag: PlatformTag
    ) -> PipelineResult:
        """Copy raw_path to tagged_path and mark it executable.

        Args:
            raw_path: Binary written by the freezing tool
            tagged_path: Platform-tagged destination, e.g. dist/wizclaw-linux-x64
            platform_tag: Host platform

        Returns:
            Successful PipelineResult with path, size and verification command

        Raises:
            ArtifactMissingError: raw_path does not exist
            ArtifactTagError: tagged_path is a directory or cannot be written
        """
        if not raw_path.is_file():
            raise ArtifactMissingError(str(raw_path))

        self._write_copy(raw_path, tagged_path)

        size_bytes = tagged_path.stat().st_size
        logger.info("Tagged artifact", path=str(tagged_path), size=size_bytes)

        return PipelineResult(
            success=True,
            output_path=tagged_path,
            size_bytes=size_bytes,
            size_human=human_size(size_bytes),
            verify_command=self.verify_command(tagged_path),
            platform=str(platform_tag),
        )
