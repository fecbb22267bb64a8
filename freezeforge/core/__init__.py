"""
Core infrastructure for FreezeForge.

Configuration, logging, exceptions, platform detection and command
execution. Nothing in core depends on the pipeline or CLI layers.
"""

from freezeforge.core.config import BuildConfig, BuildPaths, ToolRequirement, load_config
from freezeforge.core.exceptions import (
    ArtifactMissingError,
    ArtifactTagError,
    ConfigValidationError,
    DependencyInstallError,
    FreezeForgeError,
    PackagingError,
    SandboxError,
    SpecNotFoundError,
    ToolNotFoundError,
)
from freezeforge.core.platform import Arch, OSFamily, PlatformTag, detect, normalize
from freezeforge.core.runner import CommandResult, CommandRunner
from freezeforge.core.types import BuildStage, PipelineState

__all__ = [
    "Arch",
    "ArtifactMissingError",
    "ArtifactTagError",
    "BuildConfig",
    "BuildPaths",
    "BuildStage",
    "CommandResult",
    "CommandRunner",
    "ConfigValidationError",
    "DependencyInstallError",
    "FreezeForgeError",
    "OSFamily",
    "PackagingError",
    "PipelineState",
    "PlatformTag",
    "SandboxError",
    "SpecNotFoundError",
    "ToolNotFoundError",
    "ToolRequirement",
    "detect",
    "load_config",
    "normalize",
]
