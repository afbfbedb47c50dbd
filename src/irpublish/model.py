# model.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional


OPERATING_SYSTEMS = ("windows", "linux", "darwin")
ARCHITECTURES = ("amd64", "arm64", "i386")


@dataclass(frozen=True)
class Target:
    """A single (operating system, architecture) pair to generate IR for."""
    os: str
    arch: str

    def __post_init__(self) -> None:
        if self.os not in OPERATING_SYSTEMS:
            raise ValueError(f"Unknown operating system: {self.os!r}")
        if self.arch not in ARCHITECTURES:
            raise ValueError(f"Unknown architecture: {self.arch!r}")

    @property
    def label(self) -> str:
        return f"{self.os}-{self.arch}"

    def artifact_name(self, ext: str) -> str:
        return f"{self.label}{ext}"

    def __str__(self) -> str:
        return self.label


@dataclass
class StageResult:
    """
    Outcome of one pipeline stage.

    status is "ok" or "failed"; error is set only for failed stages.
    """
    stage: str
    status: str
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"


@dataclass
class ReleaseReport:
    """Everything a caller needs to know about one run."""
    commit: Optional[str] = None
    results: Dict[str, str] = field(default_factory=dict)
    error: Optional[Exception] = None
    artifacts: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None and all(v == "ok" for v in self.results.values())
