"""
Test fixtures for irpublish.

Provides a recording CommandRunner that stands in for julec and git, plus
sample generated IR and destination README content.
"""
from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Callable, List, Optional

import pytest

from irpublish.config import ReleaseConfig
from irpublish.dsl import targets
from irpublish.runner import CommandFailure, CommandRunner


COMMIT = "0123456789abcdef0123456789abcdef01234567"
OLD_COMMIT = "fedcba9876543210fedcba9876543210fedcba98"


# ---------------------------------------------------------------------
# Sample julec output (what `julec -t` leaves in dist/ir.cpp)
# ---------------------------------------------------------------------

GENERATED_IR = textwrap.dedent("""\
    // Auto generated by JuleC.
    // JuleC version: jule0.1.0

    #include <stdint.h>
    #include "/root/jule/api/jule.hpp"
    #include "/root/jule/api/std/os.hpp"

    #include <string.h>
    #include "/root/jule/std/sys/sys.hpp"
    static jule::Int counter = 0;

    #include "/root/jule/api/late.hpp"
    int main(void) { return 0; }
""")

README = textwrap.dedent(f"""\
    # julec-ir

    C++ IR of the Jule compiler for every supported platform.

    IR version: [{OLD_COMMIT[:10]}](https://github.com/julelang/jule/commit/{OLD_COMMIT})

    ## Building
    IR version: [not-this-one]
""")


class FakeRunner(CommandRunner):
    """
    Records every command instead of running it.

    - `julec ...` writes GENERATED_IR to <cwd>/dist/ir.cpp
    - `git clone ...` creates <cwd>/julec-ir with a README and an old src/
    - `git rev-parse HEAD` returns COMMIT
    - commands for which `fail_when(argv)` is true exit with status 1
    """

    def __init__(
        self,
        *,
        fail_when: Optional[Callable[[List[str]], bool]] = None,
        ir: str = GENERATED_IR,
        readme: str = README,
    ):
        self.calls: List[List[str]] = []
        self.cwds: List[Path] = []
        self.fail_when = fail_when
        self.ir = ir
        self.readme = readme

    def run(self, argv, *, cwd=None) -> int:
        argv = list(argv)
        here = Path(cwd) if cwd is not None else Path.cwd()
        self.calls.append(argv)
        self.cwds.append(here)

        if self.fail_when and self.fail_when(argv):
            return 1

        if argv[0] == "julec":
            dist = here / "dist"
            dist.mkdir(exist_ok=True)
            (dist / "ir.cpp").write_text(self.ir)
        elif argv[:2] == ["git", "clone"]:
            repo = here / argv[-1].rstrip("/").split("/")[-1]
            (repo / "src").mkdir(parents=True)
            (repo / "src" / "stale.cpp").write_text("old\n")
            (repo / "README.md").write_text(self.readme)
        return 0

    def capture(self, argv, *, cwd=None) -> str:
        argv = list(argv)
        self.calls.append(argv)
        self.cwds.append(Path(cwd) if cwd is not None else Path.cwd())
        if self.fail_when and self.fail_when(argv):
            raise CommandFailure(argv, 128)
        if argv == ["git", "rev-parse", "HEAD"]:
            return COMMIT
        return ""

    def commands(self, program: str) -> List[List[str]]:
        return [c for c in self.calls if c[0] == program]


@pytest.fixture
def workspace(tmp_path, monkeypatch) -> Path:
    """Run each test from an empty directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def two_targets() -> ReleaseConfig:
    return ReleaseConfig(targets=targets("linux-amd64", "darwin-arm64"))


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()
