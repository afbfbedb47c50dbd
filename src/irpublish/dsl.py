# src/irpublish/dsl.py
from __future__ import annotations

from typing import Iterable, Optional, Tuple

from .model import Target


# ---------------------------------------------------------------------
# Target helpers
# ---------------------------------------------------------------------

def target(os: str, arch: str) -> Target:
    """Create a build target."""
    return Target(os=os, arch=arch)


def parse_target(label: str) -> Target:
    """Parse an "os-arch" label, e.g. "linux-amd64"."""
    os_name, sep, arch = label.strip().partition("-")
    if not sep or not os_name or not arch:
        raise ValueError(f"Target label must look like 'os-arch', got: {label!r}")
    return Target(os=os_name, arch=arch)


def targets(*labels: str) -> Tuple[Target, ...]:
    """
    Build an ordered matrix from labels.

    Example:
        targets("linux-amd64", "darwin-arm64")
    """
    out = tuple(parse_target(label) for label in labels)
    _check_unique(out)
    return out


# ---------------------------------------------------------------------
# Matrix
# ---------------------------------------------------------------------

class Matrix:
    """
    Minimal matrix expander.

    Expands operating systems x architectures, os-major, keeping the order
    the values were given in.

    Example:
        matrix(["linux", "darwin"], ["amd64", "arm64"]).targets(
            exclude=["darwin-amd64"]
        )
    """
    def __init__(self, oses: Iterable[str], archs: Iterable[str]):
        self.oses = list(oses)
        self.archs = list(archs)

    def targets(self, exclude: Optional[Iterable[str]] = None) -> Tuple[Target, ...]:
        skip = set(exclude or [])
        out = tuple(
            Target(os=o, arch=a)
            for o in self.oses
            for a in self.archs
            if f"{o}-{a}" not in skip
        )
        _check_unique(out)
        return out


def matrix(oses: Iterable[str], archs: Iterable[str]) -> Matrix:
    return Matrix(oses, archs)


def _check_unique(items: Tuple[Target, ...]) -> None:
    seen = set()
    for t in items:
        if t in seen:
            raise ValueError(f"Duplicate target: {t.label}")
        seen.add(t)


DEFAULT_MATRIX: Tuple[Target, ...] = matrix(
    ["windows", "linux", "darwin"],
    ["amd64", "arm64", "i386"],
).targets(exclude=["darwin-i386"])
