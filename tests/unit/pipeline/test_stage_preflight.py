"""Tests for PreflightValidator."""

from __future__ import annotations

import pytest

from freezeforge.core.config import ToolRequirement
from freezeforge.core.exceptions import ToolNotFoundError
from freezeforge.pipeline.preflight import PreflightValidator
from tests.fixtures.runners import FakeRunner


class TestRequire:
    def test_present_tool_returns_path(self) -> None:
        validator = PreflightValidator(FakeRunner())

        assert validator.require("python3") == "/usr/bin/python3"

    def test_missing_tool_raises_with_url(self) -> None:
        """
        GIVEN pip3 is not on PATH
        WHEN require() is called with a help URL
        THEN ToolNotFoundError carries the tool name and URL
        """
        validator = PreflightValidator(FakeRunner(missing={"pip3"}))

        with pytest.raises(ToolNotFoundError) as exc_info:
            validator.require("pip3", "https://pip.pypa.io/en/stable/installation/")

        assert exc_info.value.tool_name == "pip3"
        assert exc_info.value.help_url == "https://pip.pypa.io/en/stable/installation/"


class TestCheckAll:
    def test_all_present(self) -> None:
        runner = FakeRunner()

        found = PreflightValidator(runner).check_all(
            [ToolRequirement("python3"), ToolRequirement("pip3")]
        )

        assert found == {"python3": "/usr/bin/python3", "pip3": "/usr/bin/pip3"}
        assert runner.calls == []

    def test_stops_at_first_missing(self) -> None:
        """
        GIVEN python3 is missing
        WHEN check_all() runs
        THEN pip3 is never looked up and nothing is executed
        """
        runner = FakeRunner(missing={"python3"})

        with pytest.raises(ToolNotFoundError):
            PreflightValidator(runner).check_all(
                [ToolRequirement("python3"), ToolRequirement("pip3")]
            )

        assert runner.which_calls == ["python3"]
        assert runner.calls == []


class TestInterpreterVersion:
    def test_reports_version(self) -> None:
        runner = FakeRunner(python_version="Python 3.12.4")

        assert PreflightValidator(runner).interpreter_version("python3") == "Python 3.12.4"

    def test_failure_returns_none(self) -> None:
        class BrokenRunner(FakeRunner):
            def run(self, command, cwd=None, capture=False):
                result = super().run(command, cwd, capture)
                result.returncode = 1
                return result

        assert PreflightValidator(BrokenRunner()).interpreter_version("python3") is None
