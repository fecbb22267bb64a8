"""
Host platform detection and normalization.

Maps the raw values reported by the operating system onto the canonical
tags used in artifact names:

    darwin  -> macos        x86_64  -> x64
    linux   -> linux        aarch64 -> arm64
                            arm64   -> arm64

Anything else is carried through unchanged (OS lower-cased, arch verbatim)
so the pipeline still produces a usable name on hosts outside the table.
"""

from __future__ import annotations

import platform
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from freezeforge.core.logging import get_logger

logger = get_logger(__name__)


class OSFamily(str, Enum):
    """Canonical operating system families."""

    MACOS = "macos"
    LINUX = "linux"
    OTHER = "other"


class Arch(str, Enum):
    """Canonical CPU architectures."""

    X64 = "x64"
    ARM64 = "arm64"
    OTHER = "other"


OS_ALIASES: Dict[str, OSFamily] = {
    "darwin": OSFamily.MACOS,
    "linux": OSFamily.LINUX,
}

ARCH_ALIASES: Dict[str, Arch] = {
    "x86_64": Arch.X64,
    "aarch64": Arch.ARM64,
    "arm64": Arch.ARM64,
}


@dataclass(frozen=True)
class PlatformTag:
    """Normalized host platform.

    Attributes:
        os: Canonical OS family
        arch: Canonical CPU architecture
        raw_os: Lower-cased OS name as reported by the host
        raw_arch: Machine name as reported by the host
    """

    os: OSFamily
    arch: Arch
    raw_os: str = ""
    raw_arch: str = ""

    @property
    def os_tag(self) -> str:
        """OS component of the artifact name."""
        if self.os is OSFamily.OTHER:
            return self.raw_os
        return self.os.value

    @property
    def arch_tag(self) -> str:
        """Architecture component of the artifact name."""
        if self.arch is Arch.OTHER:
            return self.raw_arch
        return self.arch.value

    @property
    def is_supported(self) -> bool:
        return self.os is not OSFamily.OTHER and self.arch is not Arch.OTHER

    @property
    def is_windows(self) -> bool:
        return self.raw_os.startswith("windows")

    def __str__(self) -> str:
        return f"{self.os_tag}-{self.arch_tag}"


def normalize_os(os_name: str) -> Tuple[OSFamily, str]:
    """Map a raw OS name to its family, returning the lower-cased raw name too."""
    lowered = os_name.strip().lower()
    return OS_ALIASES.get(lowered, OSFamily.OTHER), lowered


def normalize_arch(machine: str) -> Tuple[Arch, str]:
    """Map a raw machine name to its architecture, returning the raw name too."""
    raw = machine.strip()
    return ARCH_ALIASES.get(raw, Arch.OTHER), raw


def normalize(os_name: str, machine: str) -> PlatformTag:
    """Build a PlatformTag from raw host values.

    Pure function: the same inputs always produce the same tag.

    Args:
        os_name: Value of ``uname -s`` / ``platform.system()``
        machine: Value of ``uname -m`` / ``platform.machine()``

    Returns:
        Normalized PlatformTag
    """
    os_family, raw_os = normalize_os(os_name)
    arch, raw_arch = normalize_arch(machine)
    return PlatformTag(os=os_family, arch=arch, raw_os=raw_os, raw_arch=raw_arch)


def detect(
    system: Optional[str] = None, machine: Optional[str] = None
) -> PlatformTag:
    """
    Detect the current host platform.

    Args:
        system: Override for platform.system() (testing)
        machine: Override for platform.machine() (testing)

    Returns:
        PlatformTag for the host
    """
    tag = normalize(
        system if system is not None else platform.system(),
        machine if machine is not None else platform.machine(),
    )
    if not tag.is_supported:
        logger.warning(
            "Unrecognized platform, using raw values",
            os=tag.os_tag,
            arch=tag.arch_tag,
        )
    logger.debug("Detected platform", platform=str(tag))
    return tag
