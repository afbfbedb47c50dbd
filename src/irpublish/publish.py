# publish.py
from __future__ import annotations

import os
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List

from .config import ReleaseConfig
from .git_facts import git
from .rewrite import format_stamp, stamp_version
from .runner import CommandRunner, ReleaseError
from .ui.console import get_console


def _fs_error(message: str, e: OSError) -> ReleaseError:
    return ReleaseError(kind="filesystem", message=message, details={"error": e})


@contextmanager
def working_directory(path: str | Path) -> Iterator[Path]:
    """
    chdir into `path` for the duration of the block, then chdir back.

    Both directions raise ReleaseError(kind="chdir") on failure.
    """
    original_cwd = os.getcwd()
    try:
        os.chdir(path)
    except OSError as e:
        raise ReleaseError(
            kind="chdir",
            message=f"could not enter {path}",
            details={"error": e},
        ) from e

    try:
        yield Path(path)
    finally:
        try:
            os.chdir(original_cwd)
        except OSError as e:
            raise ReleaseError(
                kind="chdir",
                message=f"could not return to {original_cwd}",
                details={"error": e},
            ) from e


def acquire(runner: CommandRunner, config: ReleaseConfig) -> Path:
    """Shallow-clone the destination repo and empty its source tree."""
    git.shallow_clone(runner, config.dest_url)

    dest = config.dest_path
    src = dest / config.dest_src
    try:
        shutil.rmtree(src)
    except FileNotFoundError:
        pass
    except OSError as e:
        raise _fs_error(f"could not remove {src}", e) from e

    try:
        src.mkdir(parents=True)
    except OSError as e:
        raise _fs_error(f"could not create {src}", e) from e
    return dest


def populate(config: ReleaseConfig, dest: Path) -> List[Path]:
    """Move every staged artifact, in matrix order, into dest's source tree."""
    console = get_console()
    src = dest / config.dest_src
    moved: List[Path] = []

    for t in config.targets:
        staged = config.staged_artifact(t)
        target_path = src / staged.name
        if not staged.exists():
            raise ReleaseError(
                kind="filesystem",
                message=f"staged artifact missing: {staged}",
                details={"target": t.label},
            )
        try:
            shutil.move(str(staged), str(target_path))
        except OSError as e:
            raise _fs_error(f"could not move {staged} to {target_path}", e) from e
        console.print_debug(f"{staged} -> {target_path}")
        moved.append(target_path)

    return moved


def stamp(config: ReleaseConfig, dest: Path, commit: str) -> None:
    readme = dest / config.readme
    line = format_stamp(config.stamp_prefix, commit, config.commit_url)
    try:
        stamp_version(readme, config.stamp_prefix, line)
    except OSError as e:
        raise _fs_error(f"could not update {readme}", e) from e
    get_console().print_info(line)


def commit_and_push(
    runner: CommandRunner,
    config: ReleaseConfig,
    dest: Path,
    commit: str,
) -> None:
    """
    Stage, commit and push inside the destination repo.

    The git calls themselves are tolerant; only the directory changes abort.
    """
    with working_directory(dest):
        git.add_all(runner)
        git.commit_all(runner, config.message_for(commit))
        git.push(runner)
