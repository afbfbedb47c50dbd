# pipeline.py
from __future__ import annotations

import os
from pathlib import Path
from typing import List

from .config import ReleaseConfig
from .model import Target
from .rewrite import rewrite_includes
from .runner import CommandRunner, ReleaseError
from .ui.console import get_console


def compile_command(config: ReleaseConfig, t: Target) -> list[str]:
    """`<compiler> -t --target <os>-<arch> <package>`"""
    return [config.compiler, "-t", "--target", t.label, config.package]


def _generate_one(runner: CommandRunner, config: ReleaseConfig, t: Target) -> Path:
    runner.run_or_abort(compile_command(config, t))

    generated = config.staging_path / config.generated_name
    staged = config.staged_artifact(t)
    if not generated.exists():
        raise ReleaseError(
            kind="filesystem",
            message=f"compiler did not produce {generated}",
            details={"target": t.label},
        )
    try:
        os.replace(generated, staged)
    except OSError as e:
        raise ReleaseError(
            kind="filesystem",
            message=f"could not rename {generated} to {staged}",
            details={"target": t.label, "error": e},
        ) from e

    count = rewrite_includes(staged, config.include_marker)
    get_console().print_debug(f"{staged}: rewrote {count} include(s)")
    return staged


def generate(runner: CommandRunner, config: ReleaseConfig) -> List[Path]:
    """
    Generate, rename and rewrite one artifact per target, in matrix order.

    Stops at the first failure; targets after it are not attempted.

    Returns:
        Staged artifact paths, in matrix order.
    """
    console = get_console()
    config.staging_path.mkdir(parents=True, exist_ok=True)

    staged: List[Path] = []
    for t in config.targets:
        console.print_target(t.label)
        staged.append(_generate_one(runner, config, t))
    return staged
