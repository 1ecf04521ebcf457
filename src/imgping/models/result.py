"""Per-image pipeline states and run results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from imgping.utils import display_path


class PipelineState(str, Enum):
    DISCOVERED = "discovered"
    ENCODED = "encoded"
    RESPONDED = "responded"
    LOGGED = "logged"
    FAILED = "failed"


@dataclass(slots=True)
class PipelineResult:
    path: str = ""
    state: PipelineState = PipelineState.DISCOVERED
    # Last state reached before the failure, if any
    failed_at: PipelineState | None = None
    error: str | None = None
    elapsed: float = 0.0
    payload_bytes: int = 0

    @property
    def ok(self) -> bool:
        return self.state is PipelineState.LOGGED

    def to_dict(self) -> dict[str, object]:
        return {
            "path": display_path(self.path),
            "state": self.state.value,
            "failed_at": self.failed_at.value if self.failed_at else None,
            "error": self.error,
            "elapsed": round(self.elapsed, 4),
            "payload_bytes": self.payload_bytes,
        }


@dataclass(slots=True)
class RunSummary:
    output_path: str = ""
    discovered: int = 0
    results: list[PipelineResult] = field(default_factory=list)

    @property
    def logged(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if r.state is PipelineState.FAILED)

    @property
    def failed_paths(self) -> list[str]:
        return [r.path for r in self.results if r.state is PipelineState.FAILED]

    @property
    def payload_bytes(self) -> int:
        return sum(r.payload_bytes for r in self.results)

    def to_dict(self) -> dict[str, object]:
        return {
            "output_path": self.output_path,
            "discovered": self.discovered,
            "logged": self.logged,
            "failed": self.failed,
            "results": [r.to_dict() for r in self.results],
        }
