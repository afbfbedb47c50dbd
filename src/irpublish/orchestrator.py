# orchestrator.py
from __future__ import annotations

import shutil
from typing import Any, Callable, Optional, Tuple

from . import pipeline, publish
from .config import DEFAULT_CONFIG, ReleaseConfig
from .git_facts.git import head_sha
from .model import ReleaseReport, StageResult
from .runner import CommandRunner, ReleaseError, default_runner
from .ui.console import get_console

# local repo ---> rev-parse ---> julec x targets ---> julec-ir ---> push

STAGES = (
    "capture-commit",
    "generate",
    "acquire",
    "populate",
    "stamp",
    "publish",
    "cleanup",
)


def _run_stage(name: str, fn: Callable[[], Any]) -> Tuple[StageResult, Any]:
    """
    Run one stage, turning release and filesystem errors into a result.

    Anything else is a bug and propagates.
    """
    get_console().print_stage(name)
    try:
        value = fn()
    except ReleaseError as e:
        if e.stage is None:
            e.stage = name
        return StageResult(stage=name, status="failed", error=e), None
    except OSError as e:
        err = ReleaseError(kind="filesystem", message=str(e), stage=name)
        err.__cause__ = e
        return StageResult(stage=name, status="failed", error=err), None
    return StageResult(stage=name, status="ok"), value


def cleanup(config: ReleaseConfig) -> None:
    """
    Remove the staging tree and the destination clone.

    Missing directories are fine; any other OSError fails the stage.
    """
    for path in (config.staging_path, config.dest_path):
        try:
            shutil.rmtree(path)
        except FileNotFoundError:
            pass


def run_release(
    config: ReleaseConfig = DEFAULT_CONFIG,
    runner: Optional[CommandRunner] = None,
    *,
    dry_run: bool = False,
) -> ReleaseReport:
    """
    Run the whole release, stopping at the first failed stage.

    A failed stage leaves the filesystem as it was at the failure; cleanup
    only happens after a successful publish.

    dry_run stops after generation and keeps the staged artifacts.
    """
    runner = runner or default_runner()
    console = get_console()
    report = ReleaseReport()

    def step(name: str, fn: Callable[[], Any]) -> Tuple[bool, Any]:
        result, value = _run_stage(name, fn)
        report.results[result.stage] = result.status
        if not result.ok:
            report.error = result.error
        return result.ok, value

    ok, commit = step("capture-commit", lambda: head_sha(runner))
    if not ok:
        return report
    report.commit = commit
    console.print_run_started(
        repository=config.dest_url,
        commit=commit,
        target_count=len(config.targets),
    )

    ok, staged = step("generate", lambda: pipeline.generate(runner, config))
    if not ok:
        return report
    report.artifacts = [str(p) for p in staged]
    if dry_run:
        return report

    ok, dest = step("acquire", lambda: publish.acquire(runner, config))
    if not ok:
        return report

    ok, moved = step("populate", lambda: publish.populate(config, dest))
    if not ok:
        return report
    report.artifacts = [str(p) for p in moved]

    ok, _ = step("stamp", lambda: publish.stamp(config, dest, commit))
    if not ok:
        return report

    ok, _ = step("publish", lambda: publish.commit_and_push(runner, config, dest, commit))
    if not ok:
        return report

    step("cleanup", lambda: cleanup(config))
    return report
