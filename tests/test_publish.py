from __future__ import annotations

import os

import pytest

from irpublish.pipeline import generate
from irpublish.publish import acquire, commit_and_push, populate, stamp, working_directory
from irpublish.rewrite import format_stamp
from irpublish.runner import CommandFailure, ReleaseError

from conftest import COMMIT, FakeRunner


def test_acquire_clones_and_empties_source_tree(workspace, runner, two_targets):
    dest = acquire(runner, two_targets)

    assert runner.calls[0] == [
        "git", "clone", "--depth", "1", "https://github.com/julelang/julec-ir",
    ]
    assert dest == two_targets.dest_path
    assert (workspace / "julec-ir" / "src").is_dir()
    assert list((workspace / "julec-ir" / "src").iterdir()) == []


def test_acquire_clone_failure(workspace, two_targets):
    runner = FakeRunner(fail_when=lambda argv: argv[:2] == ["git", "clone"])
    with pytest.raises(CommandFailure):
        acquire(runner, two_targets)
    assert not (workspace / "julec-ir").exists()


def test_populate_moves_staged_artifacts(workspace, runner, two_targets):
    generate(runner, two_targets)
    dest = acquire(runner, two_targets)

    moved = populate(two_targets, dest)

    assert [p.name for p in moved] == ["linux-amd64.cpp", "darwin-arm64.cpp"]
    assert sorted(p.name for p in (dest / "src").iterdir()) == [
        "darwin-arm64.cpp",
        "linux-amd64.cpp",
    ]
    assert list((workspace / "dist").iterdir()) == []


def test_populate_with_missing_artifact(workspace, runner, two_targets):
    dest = acquire(runner, two_targets)
    with pytest.raises(ReleaseError) as exc:
        populate(two_targets, dest)
    assert exc.value.details["target"] == "linux-amd64"


def test_stamp_writes_commit_into_readme(workspace, runner, two_targets):
    dest = acquire(runner, two_targets)

    stamp(two_targets, dest, COMMIT)

    text = (dest / "README.md").read_text()
    expected = format_stamp(two_targets.stamp_prefix, COMMIT, two_targets.commit_url)
    assert expected in text.splitlines()


def test_commit_and_push_runs_inside_destination(workspace, runner, two_targets):
    dest = acquire(runner, two_targets)
    runner.calls.clear()
    runner.cwds.clear()

    commit_and_push(runner, two_targets, dest, COMMIT)

    assert runner.calls == [
        ["git", "add", "."],
        ["git", "commit", "-am", f"update IR to julelang/jule@{COMMIT}"],
        ["git", "push"],
    ]
    assert all(cwd == workspace / "julec-ir" for cwd in runner.cwds)
    assert os.getcwd() == str(workspace)


def test_commit_and_push_tolerates_git_failures(workspace, two_targets):
    runner = FakeRunner(fail_when=lambda argv: argv[:2] in (["git", "commit"], ["git", "push"]))
    dest = acquire(runner, two_targets)

    commit_and_push(runner, two_targets, dest, COMMIT)

    assert runner.calls[-1] == ["git", "push"]
    assert os.getcwd() == str(workspace)


def test_working_directory_missing(workspace):
    with pytest.raises(ReleaseError) as exc:
        with working_directory(workspace / "nope"):
            pass
    assert exc.value.kind == "chdir"
    assert os.getcwd() == str(workspace)


def test_working_directory_restored_on_error(workspace):
    (workspace / "inner").mkdir()
    with pytest.raises(RuntimeError):
        with working_directory("inner"):
            assert os.getcwd() == str(workspace / "inner")
            raise RuntimeError("boom")
    assert os.getcwd() == str(workspace)
