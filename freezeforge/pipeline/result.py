"""Pipeline outcome."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from freezeforge.core.exceptions import GENERIC_EXIT_CODE, FreezeForgeError
from freezeforge.core.types import BuildStage, PipelineState


@dataclass
class PipelineResult:
    """Result of one build-and-package run.

    The tagged artifact path is the only externally meaningful output;
    everything else is for reporting.
    """

    success: bool
    output_path: Optional[Path] = None
    size_bytes: Optional[int] = None
    failure_stage: Optional[BuildStage] = None
    size_human: Optional[str] = None
    verify_command: Optional[str] = None
    platform: Optional[str] = None
    error: Optional[FreezeForgeError] = None
    duration_seconds: float = 0.0
    states: List[PipelineState] = field(default_factory=list)

    @property
    def final_state(self) -> Optional[PipelineState]:
        return self.states[-1] if self.states else None

    @property
    def error_message(self) -> Optional[str]:
        return str(self.error) if self.error else None

    def exit_code(self, distinct: bool = False) -> int:
        """Process exit status for this result.

        Args:
            distinct: Use the per-category code of the error instead of 1
        """
        if self.success:
            return 0
        if distinct and self.error is not None:
            return self.error.exit_code
        return GENERIC_EXIT_CODE

    @classmethod
    def failure(
        cls, stage: Optional[BuildStage], error: FreezeForgeError
    ) -> PipelineResult:
        return cls(success=False, failure_stage=stage, error=error)

    def to_dict(self) -> Dict[str, Any]:
        """Export as dictionary for JSON serialization."""
        return {
            "success": self.success,
            "output_path": str(self.output_path) if self.output_path else None,
            "size_bytes": self.size_bytes,
            "size_human": self.size_human,
            "platform": self.platform,
            "verify_command": self.verify_command,
            "failure_stage": self.failure_stage.value if self.failure_stage else None,
            "error": self.error_message,
            "error_code": self.error.error_code if self.error else None,
            "duration_seconds": round(self.duration_seconds, 2),
            "states": [s.value for s in self.states],
        }
