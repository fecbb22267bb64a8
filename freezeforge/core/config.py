"""
Build configuration for FreezeForge.

The BuildConfig dataclass replaces ambient process state (working directory,
activated virtualenv, shell variables) with one explicit value that is
threaded through every pipeline stage.

Configuration Sources
---------------------
Precedence, highest first:

    1. CLI options (applied by the caller)
    2. Environment variables (FREEZEFORGE_APP_NAME, FREEZEFORGE_VENV_DIR,
       FREEZEFORGE_DIST_DIR)
    3. freezeforge.yaml / .freezeforge.yaml in the project root
    4. Defaults

Every field has a default, so a project following the conventional layout
needs no config file at all:

    <root>/bridge/<app>.spec          build specification
    <root>/bridge/requirements.txt    dependency manifest (optional)
    <root>/.venv-build                sandbox
    <root>/dist/<app>                 raw artifact
    <root>/dist/<app>-<os>-<arch>     tagged artifact

String values in the YAML file may reference environment variables with
${VAR_NAME} or ${VAR_NAME:default}.

Usage Example
-------------
    config = load_config(base_path=Path("."))
    paths = config.paths(detect())
    print(paths.tagged_binary_path)
"""

from __future__ import annotations

import os
import re
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from freezeforge.core.exceptions import ConfigValidationError
from freezeforge.core.logging import get_logger
from freezeforge.core.platform import PlatformTag

logger = get_logger(__name__)

CONFIG_FILENAMES = ("freezeforge.yaml", ".freezeforge.yaml")

_APP_NAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")
_ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::([^}]*))?\}")


@dataclass
class ToolRequirement:
    """An executable that must be on PATH before the build starts."""

    name: str
    help_url: Optional[str] = None

    @classmethod
    def from_value(cls, value: Any) -> ToolRequirement:
        """Accept either a bare tool name or a {name, help_url} mapping."""
        if isinstance(value, str):
            return cls(name=value)
        if isinstance(value, dict) and value.get("name"):
            return cls(name=str(value["name"]), help_url=value.get("help_url"))
        raise ConfigValidationError(f"Invalid required_tools entry: {value!r}")


def _default_tools() -> List[ToolRequirement]:
    return [
        ToolRequirement("python3", "https://www.python.org/downloads/"),
        ToolRequirement("pip3", "https://pip.pypa.io/en/stable/installation/"),
    ]


@dataclass(frozen=True)
class BuildPaths:
    """Every filesystem location a build touches. Derived, never mutated."""

    repo_root: Path
    bridge_dir: Path
    venv_dir: Path
    spec_file: Path
    requirements_file: Path
    dist_dir: Path
    raw_binary_path: Path
    tagged_binary_path: Path


@dataclass
class BuildConfig:
    """Configuration for a single build-and-package run.

    Attributes:
        app_name: Base name of the frozen binary
        repo_root: Project root; all relative paths resolve against it
        bridge_dir: Directory holding the spec file and requirements
        venv_dir: Sandbox location
        spec_file: Spec file path (default: <bridge_dir>/<app_name>.spec)
        requirements_file: Manifest path relative to bridge_dir
        dist_dir: Directory PyInstaller writes to
        python_command: Interpreter used to create the sandbox
        required_tools: Executables checked during preflight
        extra_packages: Always installed after the manifest
        packager: Freezing tool executable inside the sandbox
        packager_args: Flags passed before the spec file
        verify_args: Arguments for the suggested verification command
        quiet_install: Pass --quiet to pip
    """

    app_name: str = "wizclaw"
    repo_root: Path = field(default_factory=Path.cwd)
    bridge_dir: str = "bridge"
    venv_dir: str = ".venv-build"
    spec_file: Optional[str] = None
    requirements_file: str = "requirements.txt"
    dist_dir: str = "dist"
    python_command: str = "python3"
    required_tools: List[ToolRequirement] = field(default_factory=_default_tools)
    extra_packages: List[str] = field(
        default_factory=lambda: ["pyinstaller", "certifi"]
    )
    packager: str = "pyinstaller"
    packager_args: List[str] = field(
        default_factory=lambda: ["--clean", "--noconfirm"]
    )
    verify_args: List[str] = field(default_factory=lambda: ["version"])
    quiet_install: bool = True

    def __post_init__(self) -> None:
        """Validate configuration."""
        self.repo_root = Path(self.repo_root).expanduser().resolve()
        self.required_tools = [
            ToolRequirement.from_value(t) if not isinstance(t, ToolRequirement) else t
            for t in self.required_tools
        ]

        if not _APP_NAME_PATTERN.match(self.app_name or ""):
            raise ConfigValidationError(
                f"Invalid app_name: {self.app_name!r}",
                how_to_fix=["Use letters, digits, '.', '_' or '-' only"],
            )
        if "--noconfirm" not in self.packager_args and "-y" not in self.packager_args:
            # The packager must never wait on stdin
            self.packager_args = [*self.packager_args, "--noconfirm"]

    def _resolve(self, value: str, base: Optional[Path] = None) -> Path:
        path = Path(value).expanduser()
        if path.is_absolute():
            return path
        return (base or self.repo_root) / path

    def paths(self, platform_tag: PlatformTag) -> BuildPaths:
        """Derive every build location for the given platform."""
        bridge = self._resolve(self.bridge_dir)
        dist = self._resolve(self.dist_dir)
        spec = (
            self._resolve(self.spec_file)
            if self.spec_file
            else bridge / f"{self.app_name}.spec"
        )
        suffix = ".exe" if platform_tag.is_windows else ""
        tagged = f"{self.app_name}-{platform_tag.os_tag}-{platform_tag.arch_tag}"

        return BuildPaths(
            repo_root=self.repo_root,
            bridge_dir=bridge,
            venv_dir=self._resolve(self.venv_dir),
            spec_file=spec,
            requirements_file=self._resolve(self.requirements_file, bridge),
            dist_dir=dist,
            raw_binary_path=dist / f"{self.app_name}{suffix}",
            tagged_binary_path=dist / f"{tagged}{suffix}",
        )

    def to_dict(self) -> Dict[str, Any]:
        """Export as a YAML/JSON-friendly dictionary."""
        data = asdict(self)
        data["repo_root"] = str(self.repo_root)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base_path: Path) -> BuildConfig:
        """Create a config from parsed YAML, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning("Ignoring unknown config keys", keys=", ".join(unknown))

        kwargs = {k: v for k, v in data.items() if k in known}
        root = kwargs.pop("repo_root", None)
        kwargs["repo_root"] = base_path / root if root else base_path
        try:
            return cls(**kwargs)
        except TypeError as e:
            raise ConfigValidationError(f"Invalid configuration: {e}") from e


def expand_env_vars(value: Any) -> Any:
    """Recursively expand ${VAR} and ${VAR:default} in config values."""
    if isinstance(value, str):

        def replace_env_var(match: re.Match) -> str:
            default_value = match.group(2) if match.group(2) is not None else ""
            return os.environ.get(match.group(1), default_value)

        return _ENV_VAR_PATTERN.sub(replace_env_var, value)
    if isinstance(value, dict):
        return {k: expand_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [expand_env_vars(item) for item in value]
    return value


def _apply_env_overrides(config: BuildConfig) -> BuildConfig:
    """Environment variables take precedence over config file values."""
    app_name = os.environ.get("FREEZEFORGE_APP_NAME")
    if app_name:
        if not _APP_NAME_PATTERN.match(app_name):
            raise ConfigValidationError(
                f"Invalid FREEZEFORGE_APP_NAME: {app_name!r}"
            )
        config.app_name = app_name

    venv_dir = os.environ.get("FREEZEFORGE_VENV_DIR")
    if venv_dir:
        config.venv_dir = venv_dir

    dist_dir = os.environ.get("FREEZEFORGE_DIST_DIR")
    if dist_dir:
        config.dist_dir = dist_dir

    return config


def find_config_file(base_path: Path) -> Optional[Path]:
    """Return the first config file present in base_path, if any."""
    for filename in CONFIG_FILENAMES:
        candidate = base_path / filename
        if candidate.is_file():
            return candidate
    return None


def load_config(
    config_path: Optional[Path] = None, base_path: Optional[Path] = None
) -> BuildConfig:
    """
    Load build configuration.

    Args:
        config_path: Explicit config file. Must exist when given.
        base_path: Project root. Defaults to the current directory.

    Returns:
        BuildConfig with file values and environment overrides applied.

    Raises:
        ConfigValidationError: File missing, unreadable, or invalid.
    """
    base_path = (base_path or Path.cwd()).expanduser().resolve()

    if config_path is None:
        config_path = find_config_file(base_path)
    elif not config_path.is_file():
        raise ConfigValidationError(f"Config file not found: {config_path}")

    if config_path is None:
        logger.debug("No config file found, using defaults", root=str(base_path))
        return _apply_env_overrides(BuildConfig(repo_root=base_path))

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Could not parse {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigValidationError(
            f"{config_path} must contain a mapping at the top level"
        )

    logger.info("Loaded config", path=str(config_path))
    config = BuildConfig.from_dict(expand_env_vars(data), base_path)
    return _apply_env_overrides(config)
