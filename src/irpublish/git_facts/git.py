# git.py
# Small, focused wrapper around the Git CLI.
# Every git invocation of the release goes through here, and every one of
# them goes through a CommandRunner so tests can record the sequence.

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..runner import CommandRunner


def head_sha(runner: CommandRunner, cwd: Optional[str | Path] = None) -> str:
    """
    Return the full SHA hash of the current HEAD commit.

    The release reads this exactly once, before any artifact is generated,
    so the artifacts, the README stamp and the commit message all name the
    same source revision.
    """
    # `git rev-parse HEAD` resolves HEAD to its commit hash
    return runner.capture(["git", "rev-parse", "HEAD"], cwd=cwd)


def shallow_clone(runner: CommandRunner, url: str, depth: int = 1) -> None:
    """
    Clone `url` into the current working directory with a truncated history.

    Raises CommandFailure if git exits non-zero.
    """
    runner.run_or_abort(["git", "clone", "--depth", str(depth), url])


def add_all(runner: CommandRunner) -> int:
    # stage everything, including deletions of the old source tree
    return runner.run_tolerant(["git", "add", "."])


def commit_all(runner: CommandRunner, message: str) -> int:
    """
    Commit every tracked change.

    A non-zero status (usually "nothing to commit") is tolerated.
    """
    return runner.run_tolerant(["git", "commit", "-am", message])


def push(runner: CommandRunner) -> int:
    return runner.run_tolerant(["git", "push"])
