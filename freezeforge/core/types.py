"""Shared enumerations for the build pipeline."""

from __future__ import annotations

from enum import Enum


class BuildStage(str, Enum):
    """Pipeline stages, in execution order."""

    PROBE = "probe"
    PREFLIGHT = "preflight"
    SANDBOX = "sandbox"
    INSTALL = "install"
    PACKAGE = "package"
    TAG = "tag"


class PipelineState(str, Enum):
    """States of a single pipeline run.

    Runs move strictly forward through INIT..TAGGED. FAILED is terminal and
    reachable from every non-terminal state.
    """

    INIT = "init"
    PROBED = "probed"
    VALIDATED = "validated"
    SANDBOX_READY = "sandbox_ready"
    DEPS_INSTALLED = "deps_installed"
    PACKAGED = "packaged"
    TAGGED = "tagged"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (PipelineState.TAGGED, PipelineState.FAILED)


# State reached when each stage completes
STAGE_COMPLETES_TO = {
    BuildStage.PROBE: PipelineState.PROBED,
    BuildStage.PREFLIGHT: PipelineState.VALIDATED,
    BuildStage.SANDBOX: PipelineState.SANDBOX_READY,
    BuildStage.INSTALL: PipelineState.DEPS_INSTALLED,
    BuildStage.PACKAGE: PipelineState.PACKAGED,
    BuildStage.TAG: PipelineState.TAGGED,
}
