"""Tests for ArtifactTagger and size formatting."""

from __future__ import annotations

import errno
import os
import stat
from pathlib import Path
from unittest.mock import patch

import pytest

from freezeforge.core.exceptions import ArtifactMissingError, ArtifactTagError
from freezeforge.core.platform import normalize
from freezeforge.pipeline.tagger import ArtifactTagger, human_size


class TestHumanSize:
    @pytest.mark.parametrize(
        "size, expected",
        [
            (0, "0B"),
            (512, "512B"),
            (1023, "1023B"),
            (1024, "1.0K"),
            (1536, "1.5K"),
            (1025, "1.1K"),
            (20 * 1024, "20K"),
            (50 * 1024 * 1024, "50M"),
            (3 * 1024**3, "3.0G"),
        ],
    )
    def test_du_style(self, size: int, expected: str) -> None:
        assert human_size(size) == expected

    @pytest.mark.parametrize(
        "size, expected",
        [
            (1048525, "1.0M"),
            (1024 * 1024 - 1, "1.0M"),
            (1024**3 - 1, "1.0G"),
            (10 * 1024 - 1, "10K"),
        ],
    )
    def test_rounding_carries_to_next_unit(self, size: int, expected: str) -> None:
        """
        GIVEN a size just below a unit boundary
        WHEN it is formatted
        THEN rounding up moves to the next unit instead of printing 1024
        """
        assert human_size(size) == expected


class TestTag:
    @pytest.fixture
    def raw(self, tmp_path: Path) -> Path:
        dist = tmp_path / "dist"
        dist.mkdir()
        raw = dist / "wizclaw"
        raw.write_bytes(b"\0" * 1536)
        raw.chmod(0o644)
        return raw

    def test_copies_and_marks_executable(self, tmp_path: Path, raw: Path) -> None:
        """
        GIVEN a raw artifact at dist/wizclaw
        WHEN tag() is called for macOS arm64
        THEN dist/wizclaw-macos-arm64 exists, is executable, and is reported
        """
        tagged = tmp_path / "dist" / "wizclaw-macos-arm64"
        tagger = ArtifactTagger(repo_root=tmp_path)

        result = tagger.tag(raw, tagged, normalize("Darwin", "arm64"))

        assert result.success is True
        assert result.output_path == tagged
        assert tagged.read_bytes() == raw.read_bytes()
        assert tagged.stat().st_mode & stat.S_IXUSR
        assert result.size_bytes == 1536
        assert result.size_human == "1.5K"
        assert result.platform == "macos-arm64"
        assert result.verify_command == f".{os.sep}{Path('dist', 'wizclaw-macos-arm64')} version"

    def test_raw_artifact_is_kept(self, raw: Path) -> None:
        tagged = raw.parent / "wizclaw-linux-x64"

        ArtifactTagger().tag(raw, tagged, normalize("Linux", "x86_64"))

        assert raw.exists()
        assert tagged.exists()

    def test_overwrites_previous_tagged_copy(self, raw: Path) -> None:
        stale = raw.parent / "wizclaw-linux-x64"
        stale.write_bytes(b"old")

        ArtifactTagger().tag(raw, stale, normalize("Linux", "x86_64"))

        assert stale.stat().st_size == 1536

    def test_tagged_path_outside_repo(self, tmp_path: Path, raw: Path) -> None:
        tagged = tmp_path / "release" / "wizclaw-linux-arm64"

        result = ArtifactTagger().tag(raw, tagged, normalize("Linux", "aarch64"))

        assert result.output_path == tagged
        assert tagged.is_file()
        assert result.verify_command == f"{tagged} version"

    def test_missing_raw_artifact(self, tmp_path: Path) -> None:
        """
        GIVEN the packager produced nothing
        WHEN tag() is called
        THEN ArtifactMissingError is raised instead of a false success
        """
        missing = tmp_path / "dist" / "wizclaw"

        with pytest.raises(ArtifactMissingError) as exc_info:
            ArtifactTagger().tag(
                missing, tmp_path / "dist" / "wizclaw-linux-x64", normalize("Linux", "x86_64")
            )

        assert exc_info.value.raw_path == str(missing)
        assert not (tmp_path / "dist").exists()


class TestTagFailures:
    @pytest.fixture
    def raw(self, tmp_path: Path) -> Path:
        raw = tmp_path / "dist" / "wizclaw"
        raw.parent.mkdir()
        raw.write_bytes(b"\0" * 16)
        return raw

    def test_directory_at_tagged_path(self, raw: Path) -> None:
        """
        GIVEN a directory already occupies dist/wizclaw-linux-x64
        WHEN tag() is called
        THEN ArtifactTagError is raised and nothing is copied into the directory
        """
        tagged = raw.parent / "wizclaw-linux-x64"
        tagged.mkdir()

        with pytest.raises(ArtifactTagError) as exc_info:
            ArtifactTagger().tag(raw, tagged, normalize("Linux", "x86_64"))

        assert exc_info.value.tagged_path == str(tagged)
        assert list(tagged.iterdir()) == []

    def test_copy_failure_is_wrapped(self, raw: Path) -> None:
        """
        GIVEN the disk is full
        WHEN tag() copies the binary
        THEN the OSError surfaces as ArtifactTagError with the cause attached
        """
        tagged = raw.parent / "wizclaw-linux-x64"
        disk_full = OSError(errno.ENOSPC, "No space left on device")

        with patch("freezeforge.pipeline.tagger.shutil.copy2", side_effect=disk_full):
            with pytest.raises(ArtifactTagError) as exc_info:
                ArtifactTagger().tag(raw, tagged, normalize("Linux", "x86_64"))

        assert exc_info.value.__cause__ is disk_full
        assert "No space left on device" in str(exc_info.value)
