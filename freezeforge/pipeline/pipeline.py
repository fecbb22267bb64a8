"""
Build Pipeline orchestrator.

Runs the stages strictly in order:

    Init -> Probed -> Validated -> SandboxReady -> DepsInstalled
         -> Packaged -> Tagged

Any stage error moves the run to Failed(stage) and nothing after it runs.
No state is revisited, nothing is retried, and the first error is the only
error reported.

Collaborators (command runner, platform prober, reporter) are injected so
tests can drive the whole pipeline without spawning processes.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Callable, List, Optional

from freezeforge.core.config import BuildConfig, BuildPaths
from freezeforge.core.exceptions import FreezeForgeError, SandboxError
from freezeforge.core.logging import PipelineLogger, get_logger
from freezeforge.core.platform import PlatformTag, detect
from freezeforge.core.runner import CommandRunner
from freezeforge.core.types import STAGE_COMPLETES_TO, BuildStage, PipelineState
from freezeforge.pipeline.installer import DependencyInstaller
from freezeforge.pipeline.packager import PackagerInvoker
from freezeforge.pipeline.preflight import PreflightValidator
from freezeforge.pipeline.result import PipelineResult
from freezeforge.pipeline.sandbox import SandboxBuilder, sandbox_executable
from freezeforge.pipeline.tagger import ArtifactTagger

logger = get_logger(__name__)


class BuildReporter:
    """Receives human-facing progress events. The default prints nothing."""

    def banner(self, app_name: str, platform_tag: PlatformTag) -> None:
        pass

    def environment(
        self,
        python_version: Optional[str],
        platform_tag: PlatformTag,
        repo_root: Path,
    ) -> None:
        pass

    def stage(self, message: str) -> None:
        pass

    def detail(self, message: str) -> None:
        pass


class BuildPipeline:
    """Builds and tags a frozen binary for the current host."""

    def __init__(
        self,
        config: BuildConfig,
        runner: Optional[CommandRunner] = None,
        prober: Callable[[], PlatformTag] = detect,
        reporter: Optional[BuildReporter] = None,
    ) -> None:
        self.config = config
        self.runner = runner or CommandRunner()
        self.prober = prober
        self.reporter = reporter or BuildReporter()
        self.state = PipelineState.INIT
        self.states: List[PipelineState] = [PipelineState.INIT]
        self.platform_tag: Optional[PlatformTag] = None
        self.paths: Optional[BuildPaths] = None
        self._plog = PipelineLogger(config.app_name)

    def _advance(self, stage: BuildStage) -> None:
        self.state = STAGE_COMPLETES_TO[stage]
        self.states.append(self.state)

    def _fail(self) -> None:
        self.state = PipelineState.FAILED
        self.states.append(self.state)

    # -- stages ---------------------------------------------------------

    def probe(self) -> PlatformTag:
        """Detect the platform and derive every build path."""
        self.platform_tag = self.prober()
        self.paths = self.config.paths(self.platform_tag)
        self.reporter.banner(self.config.app_name, self.platform_tag)
        return self.platform_tag

    def preflight(self) -> None:
        """Fail fast if a required tool is missing."""
        validator = PreflightValidator(self.runner)
        validator.check_all(self.config.required_tools)
        version = validator.interpreter_version(self.config.python_command)
        self.reporter.environment(version, self.platform_tag, self.config.repo_root)

    def prepare_sandbox(self) -> bool:
        """Create or reuse the virtualenv."""
        venv_dir = self.paths.venv_dir
        self.reporter.stage(f"Creating virtual environment at {venv_dir}")
        builder = SandboxBuilder(
            self.runner, self.config.python_command, self.platform_tag.is_windows
        )
        created = builder.ensure(venv_dir)
        if not created:
            self.reporter.detail("Reusing existing venv.")
        return created

    def _sandbox_tool(self, name: str) -> Path:
        return sandbox_executable(
            self.paths.venv_dir, name, self.platform_tag.is_windows
        )

    def install_dependencies(self) -> None:
        """Install the manifest and freezing toolchain into the sandbox."""
        self.reporter.stage("Installing dependencies")
        installer = DependencyInstaller(
            self._sandbox_tool("pip"), self.runner, self.config.quiet_install
        )
        installer.install(self.paths.requirements_file, self.config.extra_packages)

    def package(self) -> Path:
        """Run the freezing tool and return the expected raw artifact."""
        self.reporter.stage("Running PyInstaller")
        try:
            relative_spec = self.paths.spec_file.relative_to(self.paths.repo_root)
            spec_hint = f"Ensure {relative_spec.as_posix()} exists in the repo root."
        except ValueError:
            spec_hint = f"Ensure {self.paths.spec_file} exists."

        invoker = PackagerInvoker(
            self._sandbox_tool(self.config.packager),
            self.paths.repo_root,
            self.paths.raw_binary_path,
            runner=self.runner,
            packager_args=self.config.packager_args,
            spec_hint=spec_hint,
        )
        return invoker.freeze(self.paths.spec_file)

    def tag(self, raw_path: Path) -> PipelineResult:
        """Copy the raw artifact to its platform-tagged name."""
        tagger = ArtifactTagger(
            verify_args=self.config.verify_args,
            repo_root=self.paths.repo_root,
        )
        return tagger.tag(raw_path, self.paths.tagged_binary_path, self.platform_tag)

    # -- orchestration --------------------------------------------------

    def run(self) -> PipelineResult:
        """Execute every stage in order.

        Returns:
            PipelineResult; failures are reported in the result, not raised
        """
        if self.state is not PipelineState.INIT:
            raise RuntimeError("A BuildPipeline instance can only run once")

        start_time = time.time()
        stage = BuildStage.PROBE
        try:
            self._plog.start_stage(stage.value)
            self.probe()
            self._advance(stage)

            stage = BuildStage.PREFLIGHT
            self._plog.start_stage(stage.value)
            self.preflight()
            self._advance(stage)

            stage = BuildStage.SANDBOX
            self._plog.start_stage(stage.value)
            try:
                self.prepare_sandbox()
            except OSError as e:
                raise SandboxError(str(e), str(self.paths.venv_dir)) from e
            self._advance(stage)

            stage = BuildStage.INSTALL
            self._plog.start_stage(stage.value)
            self.install_dependencies()
            self._advance(stage)

            stage = BuildStage.PACKAGE
            self._plog.start_stage(stage.value)
            raw_path = self.package()
            self._advance(stage)

            stage = BuildStage.TAG
            self._plog.start_stage(stage.value)
            result = self.tag(raw_path)
            self._advance(stage)

        except FreezeForgeError as e:
            self._fail()
            self._plog.finish(success=False, error=str(e))
            result = PipelineResult.failure(stage, e)
            result.platform = str(self.platform_tag) if self.platform_tag else None
            result.duration_seconds = time.time() - start_time
            result.states = list(self.states)
            return result

        self._plog.finish(success=True, output=str(result.output_path))
        result.duration_seconds = time.time() - start_time
        result.states = list(self.states)
        return result


def run_pipeline(
    config: BuildConfig,
    runner: Optional[CommandRunner] = None,
    prober: Callable[[], PlatformTag] = detect,
    reporter: Optional[BuildReporter] = None,
) -> PipelineResult:
    """Convenience wrapper: build a pipeline and run it once."""
    return BuildPipeline(config, runner, prober, reporter).run()
