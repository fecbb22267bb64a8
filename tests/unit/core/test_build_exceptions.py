"""Tests for the FreezeForge exception hierarchy."""

from __future__ import annotations

import pytest

from freezeforge.core.exceptions import (
    GENERIC_EXIT_CODE,
    ArtifactMissingError,
    ArtifactTagError,
    ConfigValidationError,
    DependencyInstallError,
    FreezeForgeError,
    PackagingError,
    SandboxError,
    SpecNotFoundError,
    ToolNotFoundError,
    format_command,
)
from freezeforge.core.types import BuildStage

ALL_ERRORS = [
    ToolNotFoundError("pip3"),
    SandboxError("boom"),
    DependencyInstallError(["pip", "install", "x"], 1),
    SpecNotFoundError("bridge/app.spec"),
    PackagingError(["pyinstaller", "app.spec"], 1),
    ArtifactMissingError("dist/app"),
    ArtifactTagError("disk full", "dist/app-linux-x64"),
    ConfigValidationError("bad"),
]


class TestHierarchy:
    @pytest.mark.parametrize("error", ALL_ERRORS, ids=lambda e: type(e).__name__)
    def test_all_inherit_from_base(self, error: FreezeForgeError) -> None:
        assert isinstance(error, FreezeForgeError)
        assert error.error_code.startswith("FF-")
        assert error.how_to_fix

    def test_exit_codes_are_distinct_and_non_generic(self) -> None:
        codes = [e.exit_code for e in ALL_ERRORS]

        assert len(set(codes)) == len(codes)
        assert GENERIC_EXIT_CODE not in codes
        assert 0 not in codes

    @pytest.mark.parametrize(
        "error, stage",
        [
            (ToolNotFoundError("x"), BuildStage.PREFLIGHT),
            (SandboxError("x"), BuildStage.SANDBOX),
            (DependencyInstallError(["pip"], 2), BuildStage.INSTALL),
            (SpecNotFoundError("x"), BuildStage.PACKAGE),
            (PackagingError(["pyinstaller"], 2), BuildStage.PACKAGE),
            (ArtifactMissingError("x"), BuildStage.TAG),
            (ArtifactTagError("x", "y"), BuildStage.TAG),
        ],
    )
    def test_stage(self, error: FreezeForgeError, stage: BuildStage) -> None:
        assert error.stage is stage


class TestMessages:
    def test_tool_not_found_with_url(self) -> None:
        """
        GIVEN a missing tool with a help URL
        WHEN the error is created
        THEN the message names the tool and the fix includes the URL
        """
        error = ToolNotFoundError("python3", "https://www.python.org/downloads/")

        assert str(error) == "'python3' not found in PATH."
        assert error.how_to_fix[0] == "Install it from: https://www.python.org/downloads/"

    def test_tool_not_found_without_url(self) -> None:
        error = ToolNotFoundError("pip3")

        assert not any("Install it from" in fix for fix in error.how_to_fix)

    def test_spec_not_found_hint_comes_first(self) -> None:
        error = SpecNotFoundError(
            "/repo/bridge/wizclaw.spec",
            "Ensure bridge/wizclaw.spec exists in the repo root.",
        )

        assert str(error) == "Spec file not found at /repo/bridge/wizclaw.spec"
        assert error.how_to_fix[0] == "Ensure bridge/wizclaw.spec exists in the repo root."

    def test_packaging_error_includes_command(self) -> None:
        error = PackagingError(["pyinstaller", "--clean", "my app.spec"], 2)

        assert error.returncode == 2
        assert "pyinstaller --clean 'my app.spec'" in str(error)

    def test_instance_overrides_do_not_leak(self) -> None:
        FreezeForgeError("x", how_to_fix=["custom"])

        assert FreezeForgeError("y").how_to_fix == ["Check the error message for details"]


class TestHelpers:
    def test_format_command_quotes(self) -> None:
        assert format_command(["a", "b c"]) == "a 'b c'"
