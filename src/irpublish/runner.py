# runner.py
from __future__ import annotations

import shlex
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

from .ui.console import get_console


# ----------------------------------------------------------------------
# Errors
# ----------------------------------------------------------------------

@dataclass
class ReleaseError(Exception):
    """
    Structured release error with enough context for:
      - clean CLI output
      - telling the failing stage apart without a traceback
    """
    kind: str
    message: str
    stage: str | None = None
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        lines = [f"{self.kind}: {self.message}"]
        if self.stage:
            lines.append(f"stage={self.stage}")
        for k, v in self.details.items():
            lines.append(f"{k}={v}")
        return "\n".join(lines)


class CommandFailure(ReleaseError):
    def __init__(self, argv: Sequence[str], exit_code: int, hint: str | None = None):
        self.argv = list(argv)
        self.exit_code = exit_code
        self.hint = hint
        details = {"cmd": shlex.join(self.argv), "exit_code": exit_code}
        if hint:
            details["hint"] = hint
        super().__init__(
            kind="command",
            message=f"'{self.argv[0]}' exited with status {exit_code}",
            details=details,
        )


class RewriteError(ReleaseError):
    def __init__(self, message: str, **details):
        super().__init__(kind="rewrite", message=message, details=details)


class StampError(ReleaseError):
    def __init__(self, message: str, **details):
        super().__init__(kind="stamp", message=message, details=details)


TOOL_HINTS = {
    "julec": "Install the Jule compiler or fix PATH (julec).",
    "git": "Install Git or fix PATH.",
}

# exit status a shell reports for a command it cannot find
EXIT_NOT_FOUND = 127


# ----------------------------------------------------------------------
# Execution primitives
# ----------------------------------------------------------------------

class CommandRunner:
    """
    The only place that starts processes.

    Commands inherit the environment and, unless cwd is given, the current
    working directory. Output is not captured (except by capture()) and
    nothing times out.
    """

    def run(self, argv: Sequence[str], *, cwd: str | Path | None = None) -> int:
        argv = list(argv)
        get_console().print_command(shlex.join(argv))
        try:
            proc = subprocess.run(argv, cwd=None if cwd is None else str(cwd))
        except FileNotFoundError:
            # report a missing executable the way a shell would
            get_console().print_debug(f"executable not found: {argv[0]}")
            return EXIT_NOT_FOUND
        return proc.returncode

    def run_or_abort(self, argv: Sequence[str], *, cwd: str | Path | None = None) -> None:
        code = self.run(argv, cwd=cwd)
        if code != 0:
            raise CommandFailure(argv, code, hint=TOOL_HINTS.get(argv[0]))

    def run_tolerant(self, argv: Sequence[str], *, cwd: str | Path | None = None) -> int:
        """Run a command whose failure is acceptable (e.g. nothing to commit)."""
        code = self.run(argv, cwd=cwd)
        if code != 0:
            get_console().print_warning(
                f"'{shlex.join(list(argv))}' exited with status {code}, continuing"
            )
        return code

    def capture(self, argv: Sequence[str], *, cwd: str | Path | None = None) -> str:
        argv = list(argv)
        get_console().print_debug(f"$ {shlex.join(argv)}")
        try:
            proc = subprocess.run(
                argv,
                cwd=None if cwd is None else str(cwd),
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as e:
            raise CommandFailure(argv, EXIT_NOT_FOUND, hint=TOOL_HINTS.get(argv[0])) from e
        if proc.returncode != 0:
            raise CommandFailure(argv, proc.returncode, hint=TOOL_HINTS.get(argv[0]))
        return proc.stdout.strip()


_default_runner: Optional[CommandRunner] = None


def default_runner() -> CommandRunner:
    global _default_runner
    if _default_runner is None:
        _default_runner = CommandRunner()
    return _default_runner
