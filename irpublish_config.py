# irpublish_config.py
# Release config for the Jule IR: every supported target except darwin-i386.
from __future__ import annotations

from irpublish import ReleaseConfig, matrix


def config():
    return ReleaseConfig(
        targets=matrix(
            ["windows", "linux", "darwin"],
            ["amd64", "arm64", "i386"],
        ).targets(exclude=["darwin-i386"]),
        compiler="julec",
        package="src/julec",
        dest_url="https://github.com/julelang/julec-ir",
    )
