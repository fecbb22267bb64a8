"""
Build-and-package pipeline stages.

    probe -> preflight -> sandbox -> install -> package -> tag

Each stage is a small class that talks to the outside world only through a
CommandRunner. BuildPipeline strings them together.
"""

from freezeforge.pipeline.installer import DependencyInstaller
from freezeforge.pipeline.packager import PackagerInvoker
from freezeforge.pipeline.pipeline import BuildPipeline, BuildReporter, run_pipeline
from freezeforge.pipeline.preflight import PreflightValidator
from freezeforge.pipeline.result import PipelineResult
from freezeforge.pipeline.sandbox import SandboxBuilder
from freezeforge.pipeline.tagger import ArtifactTagger, human_size

__all__ = [
    "ArtifactTagger",
    "BuildPipeline",
    "BuildReporter",
    "DependencyInstaller",
    "PackagerInvoker",
    "PipelineResult",
    "PreflightValidator",
    "SandboxBuilder",
    "human_size",
    "run_pipeline",
]
